"""Plot utilities for min-max game render frames."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
from matplotlib.collections import LineCollection  # noqa: E402

from core.render_state import RenderState  # noqa: E402
from simulations.minmax_game.colors import color_for  # noqa: E402

DEFENDER_COLOR = "#4287f5"
ADVERSARY_COLOR = "#f54242"


def landscape_image(grid: np.ndarray) -> np.ndarray:
    """Map every cell through ``color_for`` into an RGB float image."""
    rows, cols = grid.shape
    image = np.empty((rows, cols, 3), dtype=float)
    for row in range(rows):
        for col in range(cols):
            image[row, col] = color_for(float(grid[row, col]))
    return image / 255.0


def _contour_segments(contours: tuple) -> list[list[tuple[float, float]]]:
    segments: list[list[tuple[float, float]]] = []
    for contour in contours:
        points = contour.points
        for index in range(0, len(points) - 1, 2):
            segments.append([points[index], points[index + 1]])
    return segments


def plot_render_state(state: RenderState, output_path: str | Path) -> Path:
    """Render the landscape, overlays, trajectories and loss curves to an image file."""
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    environment = state.environment
    defender = state.agent("defender")
    adversary = state.agent("adversary")

    fig, (ax_map, ax_loss) = plt.subplots(
        1, 2, figsize=(12, 5), gridspec_kw={"width_ratios": [3, 2]}
    )
    try:
        if environment.scalar_field is not None:
            ax_map.imshow(landscape_image(np.asarray(environment.scalar_field)), origin="upper")

        segments = _contour_segments(environment.overlays.get("contours", ()))
        if segments:
            ax_map.add_collection(LineCollection(segments, colors="white", linewidths=0.4, alpha=0.4))

        vectors = environment.overlays.get("gradient_field", ())
        if vectors:
            ax_map.quiver(
                [v.x for v in vectors],
                [v.y for v in vectors],
                [v.dx / v.magnitude for v in vectors],
                [v.dy / v.magnitude for v in vectors],
                angles="xy",
                color="white",
                alpha=0.5,
            )

        for agent, color in ((defender, DEFENDER_COLOR), (adversary, ADVERSARY_COLOR)):
            if len(agent.trail) > 1:
                xs, ys = zip(*agent.trail)
                ax_map.plot(xs, ys, color=color, linewidth=1.5, alpha=0.7)
            ax_map.scatter([agent.position[0]], [agent.position[1]], color=color, s=60, label=agent.id)
        ax_map.plot(
            [defender.position[0], adversary.position[0]],
            [defender.position[1], adversary.position[1]],
            linestyle="--",
            color="white",
            linewidth=0.8,
        )
        ax_map.set_xlim(0, environment.bounds[0] - 1)
        ax_map.set_ylim(environment.bounds[1] - 1, 0)
        ax_map.set_title(f"Iteration {state.step_index}")
        ax_map.legend(loc="upper right")

        ax_loss.plot(defender.loss_history, color=DEFENDER_COLOR, label="defender loss")
        ax_loss.plot(adversary.loss_history, color=ADVERSARY_COLOR, label="adversary loss")
        ax_loss.set_ylim(0.0, 1.0)
        ax_loss.set_xlabel("recent updates")
        ax_loss.set_ylabel("loss")
        ax_loss.legend()

        fig.tight_layout()
        fig.savefig(output)
    finally:
        plt.close(fig)

    return output
