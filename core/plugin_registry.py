"""Dynamic simulation plugin discovery and lookup."""

from __future__ import annotations

import importlib
import logging
import pkgutil
from typing import Type

from simulations.base_simulation import Simulation
import simulations

LOGGER = logging.getLogger(__name__)

_DISCOVERED: dict[str, Type[Simulation]] | None = None


class SimulationPluginNotFoundError(LookupError):
    """Raised when requested simulation plugin cannot be resolved."""


def discover_simulations(refresh: bool = False) -> dict[str, Type[Simulation]]:
    """Discover simulation plugins from ``simulations/<name>/sim.py`` modules."""
    global _DISCOVERED
    if _DISCOVERED is not None and not refresh:
        return dict(_DISCOVERED)

    discovered: dict[str, Type[Simulation]] = {}
    for module_info in pkgutil.iter_modules(simulations.__path__):
        if not module_info.ispkg or module_info.name.startswith("_"):
            continue

        module_name = f"simulations.{module_info.name}.sim"
        try:
            plugin_module = importlib.import_module(module_name)
        except ImportError as exc:
            LOGGER.warning("Skipping simulation package %s: %s", module_info.name, exc)
            continue

        sim_name = getattr(plugin_module, "SIMULATION_NAME", None)
        sim_class = getattr(plugin_module, "SimulationClass", None)
        if isinstance(sim_name, str) and isinstance(sim_class, type) and issubclass(sim_class, Simulation):
            discovered[sim_name] = sim_class
        else:
            LOGGER.debug("Module %s does not export a simulation plugin", module_name)

    _DISCOVERED = discovered
    return dict(discovered)


def get_simulation_class(name: str) -> Type[Simulation]:
    """Return simulation class by name or raise descriptive error."""
    discovered = discover_simulations()
    if name in discovered:
        return discovered[name]

    available = ", ".join(sorted(discovered.keys())) or "<none>"
    raise SimulationPluginNotFoundError(
        f"Simulation plugin '{name}' not found. Available simulations: {available}"
    )
