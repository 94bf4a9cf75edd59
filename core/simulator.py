"""Core simulator that orchestrates plugins without simulation-specific logic."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any

from core.config_loader import load_config
from core.deterministic_rng import DeterministicRNG
from core.plugin_registry import get_simulation_class

LOGGER = logging.getLogger(__name__)


class SimulatorRuntimeError(RuntimeError):
    """Raised when a simulation plugin fails during execution."""


class Simulator:
    """Plugin-driven simulator runtime."""

    def __init__(self, config_path: str | Path, strict: bool = True) -> None:
        config = load_config(config_path, strict=strict)
        self.config = config

        self.simulation_name = str(config["simulation"])
        self.simulation_config = dict(config["simulation_config"])
        self.run_config = dict(config["run_config"])
        self.logging_config = dict(config["logging_config"])

        self.seed = int(config["seed"])
        self.rng = DeterministicRNG(self.seed)
        self.step_index = 0
        self._log_interval = max(1, int(self.logging_config.get("log_interval", 1)))

        simulation_class = get_simulation_class(self.simulation_name)
        try:
            self.sim = simulation_class(params=self.simulation_config, noise=self.rng.noise("simulation"))
        except Exception as exc:
            raise SimulatorRuntimeError(
                f"Failed to initialize simulation plugin '{self.simulation_name}': {exc}"
            ) from exc

        self._render_adapter = None
        try:
            adapter_module = importlib.import_module(
                f"simulations.{self.simulation_name}.renderer_adapter"
            )
            self._render_adapter = getattr(adapter_module, "build_render_state", None)
        except ImportError:
            LOGGER.debug("No render adapter for simulation '%s'", self.simulation_name)

    def __enter__(self) -> Simulator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def reset(self) -> None:
        """Initialize plugin state and rewind the step counter."""
        self.step_index = 0
        try:
            self.sim.reset()
        except Exception as exc:
            raise SimulatorRuntimeError(
                f"Simulation plugin '{self.simulation_name}' failed during reset: {exc}"
            ) from exc
        LOGGER.info(
            "Reset simulation '%s' (experiment=%s, seed=%d)",
            self.simulation_name,
            self.logging_config.get("experiment_name", ""),
            self.seed,
        )

    def step(self) -> dict[str, float]:
        """Advance the plugin one tick and return its metrics."""
        try:
            self.sim.step()
            metrics = self.sim.get_metrics()
        except Exception as exc:
            raise SimulatorRuntimeError(
                f"Simulation plugin '{self.simulation_name}' crashed at step {self.step_index + 1}: {exc}"
            ) from exc
        self.step_index += 1
        if self.step_index % self._log_interval == 0:
            LOGGER.debug("step=%d metrics=%s", self.step_index, metrics)
        return metrics

    def run(self, steps: int | None = None) -> list[dict[str, float]]:
        """Reset, then run the plugin for a fixed number of steps and collect metrics."""
        total = int(self.run_config.get("steps", 0)) if steps is None else int(steps)
        self.reset()
        metrics = [self.step() for _ in range(total)]
        LOGGER.info("Finished %d step(s) of '%s'", total, self.simulation_name)
        return metrics

    def regenerate(self, width: int, height: int) -> None:
        """Ask the plugin to rebuild its world for a new canvas size."""
        regenerate = getattr(self.sim, "regenerate", None)
        if not callable(regenerate):
            raise SimulatorRuntimeError(
                f"Simulation plugin '{self.simulation_name}' does not support regeneration."
            )
        try:
            regenerate(width, height)
        except Exception as exc:
            raise SimulatorRuntimeError(
                f"Simulation plugin '{self.simulation_name}' failed during regenerate: {exc}"
            ) from exc
        self.step_index = 0
        LOGGER.info("Regenerated '%s' for canvas %dx%d", self.simulation_name, width, height)

    def render_state(self) -> Any:
        """Return the adapter's render frame, or the plugin's raw render dict."""
        if self._render_adapter is not None:
            return self._render_adapter(self)
        return self.sim.get_render_state()

    def close(self) -> None:
        try:
            self.sim.close()
        except Exception as exc:
            raise SimulatorRuntimeError(
                f"Simulation plugin '{self.simulation_name}' failed during close: {exc}"
            ) from exc
