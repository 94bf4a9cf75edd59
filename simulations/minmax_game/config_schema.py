"""Config schema for the minmax_game simulation plugin."""

REQUIRED_PARAMS = {
    "canvas_width": int,
    "canvas_height": int,
}

DEFAULTS = {
    "canvas_width": 800,
    "canvas_height": 600,
    "resolution": 5,
    "defense_strength": 5,
    "attack_strength": 5,
    "animation_speed": 5,
    "contour_levels": 15,
    "gradient_spacing": 20,
    "smoothing_iterations": 1,
    "smoothing_temperature": 0.2,
    "landscape_noise": 0.08,
    "landscape_jitter": 0.02,
    "defender_start_x": 0.3,
    "defender_start_y": 0.7,
    "adversary_start_x": 0.7,
    "adversary_start_y": 0.3,
    "position_history_limit": 50,
    "loss_history_limit": 100,
}

OPTIONAL_PARAMS = {
    "resolution": int,
    "defense_strength": int,
    "attack_strength": int,
    "animation_speed": int,
    "contour_levels": int,
    "gradient_spacing": int,
    "smoothing_iterations": int,
    "smoothing_temperature": float,
    "landscape_noise": float,
    "landscape_jitter": float,
    "defender_start_x": float,
    "defender_start_y": float,
    "adversary_start_x": float,
    "adversary_start_y": float,
    "position_history_limit": int,
    "loss_history_limit": int,
}

PARAM_RANGES = {
    "canvas_width": (1, None),
    "canvas_height": (1, None),
    "resolution": (1, None),
    "defense_strength": (1, 10),
    "attack_strength": (1, 10),
    "animation_speed": (1, 60),
    "contour_levels": (1, None),
    "gradient_spacing": (1, None),
    "smoothing_iterations": (0, None),
    "smoothing_temperature": (1e-6, None),
    "landscape_noise": (0.0, None),
    "landscape_jitter": (0.0, None),
    "defender_start_x": (0.0, 1.0),
    "defender_start_y": (0.0, 1.0),
    "adversary_start_x": (0.0, 1.0),
    "adversary_start_y": (0.0, 1.0),
    "position_history_limit": (1, None),
    "loss_history_limit": (1, None),
}
