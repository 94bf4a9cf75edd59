"""Background plugin simulation session driven by a frame-rate gate."""

from __future__ import annotations

import dataclasses
import logging
import threading
import time
from pathlib import Path
from typing import Any, Callable

from core.frame_gate import FrameGate
from core.simulator import Simulator, SimulatorRuntimeError

LOGGER = logging.getLogger(__name__)

SessionCallback = Callable[[dict[str, Any]], None]


@dataclasses.dataclass
class PluginSessionControlState:
    """Mutable thread-safe control state for a plugin-backed live session."""

    stop_event: threading.Event
    pause_event: threading.Event
    step_event: threading.Event
    step_ack_event: threading.Event
    frame_interval: float = 1.0 / 60.0
    pending_resize: tuple[int, int] | None = None
    pending_strengths: tuple[int, int] | None = None


@dataclasses.dataclass(frozen=True)
class SessionSnapshot:
    """Everything a reader needs from one accepted step, published atomically."""

    step: int
    metrics: dict[str, float]
    state: Any


class LivePluginSession:
    """Runs simulator steps in a background thread, gated by animation speed.

    The worker polls at ``frame_interval`` like an animation loop; each frame
    is offered to a ``FrameGate`` and only accepted frames advance the
    simulation. Resizes and strength changes requested from other threads are
    applied by the worker between steps or on its next poll while paused, and
    each result is swapped in as a single ``SessionSnapshot`` under a lock.
    Failures to build or reset the simulator are reported as an ``error``
    event followed by a failed ``complete`` event.
    """

    def __init__(
        self,
        config_path: str | Path,
        on_update: SessionCallback,
        steps: int | None = None,
        speed: float | None = None,
        on_complete: SessionCallback | None = None,
    ) -> None:
        self.config_path = str(config_path)
        self.steps = None if steps is None else max(1, int(steps))
        self.on_update = on_update
        self.on_complete = on_complete
        self._speed = speed
        self._gate: FrameGate | None = None
        self._thread: threading.Thread | None = None
        self._snapshot_lock = threading.Lock()
        self._control_lock = threading.Lock()
        self._snapshot: SessionSnapshot | None = None
        self._state = PluginSessionControlState(
            stop_event=threading.Event(),
            pause_event=threading.Event(),
            step_event=threading.Event(),
            step_ack_event=threading.Event(),
        )

    def start(self) -> None:
        """Start session in a background daemon thread."""
        if self._thread and self._thread.is_alive():
            return
        self._state.stop_event.clear()
        self._state.pause_event.clear()
        self._state.step_event.clear()
        self._state.step_ack_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Request session stop."""
        self._state.stop_event.set()
        self._state.pause_event.clear()
        self._state.step_event.set()
        self._state.step_ack_event.set()

    def pause(self) -> None:
        """Pause step execution."""
        self._state.pause_event.set()

    def resume(self) -> None:
        """Resume step execution."""
        self._state.pause_event.clear()
        self._state.step_event.set()

    def set_speed(self, speed: float) -> None:
        """Change target steps per second."""
        if speed <= 0:
            raise ValueError(f"Speed must be positive, got {speed}.")
        with self._control_lock:
            self._speed = float(speed)
            if self._gate is not None:
                self._gate.set_speed(speed)

    def set_strengths(self, defense_strength: int, attack_strength: int) -> None:
        """Queue a strength change for the worker; it also lands while paused."""
        if defense_strength < 1 or attack_strength < 1:
            raise ValueError(
                f"Strengths must be >= 1, got defense={defense_strength} attack={attack_strength}."
            )
        with self._control_lock:
            self._state.pending_strengths = (int(defense_strength), int(attack_strength))

    def resize(self, width: int, height: int) -> None:
        """Queue a landscape regeneration; a `reset` event follows once it is applied."""
        with self._control_lock:
            self._state.pending_resize = (int(width), int(height))

    def step_once(self, timeout: float = 2.0) -> bool:
        """Advance exactly one step while paused and wait for ack."""
        self._state.pause_event.set()
        self._state.step_ack_event.clear()
        self._state.step_event.set()
        return bool(self._state.step_ack_event.wait(timeout=max(0.01, float(timeout))))

    def join(self, timeout: float | None = None) -> None:
        """Join worker thread for deterministic tests/shutdown."""
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)

    def latest(self) -> SessionSnapshot | None:
        """Return the most recently published snapshot."""
        with self._snapshot_lock:
            return self._snapshot

    def _run(self) -> None:
        simulator: Simulator | None = None
        stopped_on_error = False
        try:
            try:
                simulator = Simulator(self.config_path)
                speed = self._speed
                if speed is None:
                    speed = float(simulator.simulation_config.get("animation_speed", 5))
                with self._control_lock:
                    self._gate = FrameGate(speed)
                simulator.reset()
            except Exception as exc:
                LOGGER.exception("Live session failed to start from %s", self.config_path)
                self._safe_emit({"event": "error", "step": 0, "message": str(exc)})
                stopped_on_error = True
            else:
                self._publish(simulator, event="reset")
                stopped_on_error = self._loop(simulator)

            self._complete(
                {
                    "event": "complete",
                    "stopped": self._state.stop_event.is_set(),
                    "failed": stopped_on_error,
                    "steps": 0 if simulator is None else simulator.step_index,
                }
            )
        finally:
            if simulator is not None:
                simulator.close()

    def _loop(self, simulator: Simulator) -> bool:
        """Step until done or stopped; return True when a step failed."""
        self._gate.restart()
        while not self._state.stop_event.is_set():
            if self.steps is not None and simulator.step_index >= self.steps:
                break

            step_mode = False
            if self._state.pause_event.is_set():
                # Resizes and strength changes still land while paused.
                self._apply_pending(simulator)
                if not self._state.step_event.wait(timeout=self._state.frame_interval):
                    continue
                self._state.step_event.clear()
                if self._state.stop_event.is_set():
                    break
                step_mode = self._state.pause_event.is_set()
                if not step_mode:
                    self._gate.restart()
                    continue
            elif not self._gate.ready():
                time.sleep(self._state.frame_interval)
                continue

            try:
                self._apply_pending(simulator)
                simulator.step()
            except Exception as exc:
                LOGGER.exception("Live session step %d failed", simulator.step_index + 1)
                self._safe_emit(
                    {"event": "error", "step": simulator.step_index + 1, "message": str(exc)}
                )
                return True

            self._publish(simulator)
            if step_mode:
                self._state.step_ack_event.set()
        return False

    def _complete(self, completion: dict[str, Any]) -> None:
        if self.on_complete is not None:
            try:
                self.on_complete(completion)
            except Exception:
                LOGGER.exception("on_complete callback failed")
        else:
            self._safe_emit(completion)

    def _apply_pending(self, simulator: Simulator) -> None:
        with self._control_lock:
            strengths = self._state.pending_strengths
            resize = self._state.pending_resize
            self._state.pending_strengths = None
            self._state.pending_resize = None

        if strengths is not None:
            set_strengths = getattr(simulator.sim, "set_strengths", None)
            if callable(set_strengths):
                set_strengths(*strengths)
        if resize is not None:
            try:
                simulator.regenerate(*resize)
            except SimulatorRuntimeError as exc:
                # The previous landscape stays in place until a valid size arrives.
                LOGGER.warning("Rejected resize to %dx%d: %s", resize[0], resize[1], exc)
                self._safe_emit({"event": "error", "step": simulator.step_index, "message": str(exc)})
            else:
                self._publish(simulator, event="reset")

    def _publish(self, simulator: Simulator, event: str = "step") -> None:
        metrics = simulator.sim.get_metrics()
        snapshot = SessionSnapshot(
            step=simulator.step_index,
            metrics=dict(metrics),
            state=getattr(simulator.sim, "state", None),
        )
        with self._snapshot_lock:
            self._snapshot = snapshot
        self._safe_emit({"event": event, "step": snapshot.step, "metrics": snapshot.metrics})

    def _safe_emit(self, payload: dict[str, Any]) -> None:
        try:
            self.on_update(payload)
        except Exception:
            LOGGER.exception("on_update callback failed for %s event", payload.get("event"))
