"""Command-line entry points for running and plotting simulations."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys

# Allow `python cli/main.py ...` execution from IDEs by adding repo root to sys.path.
if __package__ in {None, ""}:
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

from core.config_loader import configure_logging
from core.simulator import Simulator
from visualization.plotting import plot_render_state

DEFAULT_CONFIG = "configs/minmax_game.yaml"
STRENGTH_RANGE = range(1, 11)


def _apply_overrides(simulator: Simulator, args: argparse.Namespace) -> None:
    set_strengths = getattr(simulator.sim, "set_strengths", None)
    if callable(set_strengths) and (args.defense is not None or args.attack is not None):
        defense = args.defense if args.defense is not None else simulator.sim.defense_strength
        attack = args.attack if args.attack is not None else simulator.sim.attack_strength
        set_strengths(defense, attack)


def run_cli(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="minmax")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Run headless and print final metrics as JSON.")
    plot_cmd = sub.add_parser("plot", help="Run headless and save a snapshot image.")
    for cmd in (run_cmd, plot_cmd):
        cmd.add_argument("--config", default=DEFAULT_CONFIG)
        cmd.add_argument("--steps", type=int, default=None)
        cmd.add_argument("--defense", type=int, choices=STRENGTH_RANGE, metavar="1-10", default=None)
        cmd.add_argument("--attack", type=int, choices=STRENGTH_RANGE, metavar="1-10", default=None)
    plot_cmd.add_argument("--out", default="artifacts/minmax.png")

    args = parser.parse_args(argv)

    with Simulator(args.config) as simulator:
        configure_logging(simulator.logging_config)
        steps = int(simulator.run_config["steps"]) if args.steps is None else int(args.steps)
        simulator.reset()
        _apply_overrides(simulator, args)
        metrics = [simulator.step() for _ in range(steps)]
        final = metrics[-1] if metrics else simulator.sim.get_metrics()

        if args.command == "run":
            print(json.dumps(final, sort_keys=True))
            return 0

        path = plot_render_state(simulator.render_state(), args.out)
        print(path)
        return 0


if __name__ == "__main__":
    raise SystemExit(run_cli())
