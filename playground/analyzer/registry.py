"""Heuristic registry - discovers and loads all vulnerability heuristics."""

from __future__ import annotations

import importlib
import logging
import pkgutil
from typing import Type

from playground.analyzer.base_heuristic import BaseHeuristic

logger = logging.getLogger(__name__)


class HeuristicRegistry:
    """Registry for all vulnerability heuristics.

    Discovers heuristics from the `heuristics` package and provides
    methods to list and instantiate them in ID order.
    """

    def __init__(self) -> None:
        self._heuristics: dict[str, Type[BaseHeuristic]] = {}
        self._loaded = False

    def discover(self) -> None:
        """Auto-discover all heuristic classes from the heuristics package."""
        if self._loaded:
            return

        import playground.analyzer.heuristics as heuristics_pkg

        for _finder, module_name, _is_pkg in pkgutil.walk_packages(
            heuristics_pkg.__path__,
            prefix=heuristics_pkg.__name__ + ".",
        ):
            try:
                module = importlib.import_module(module_name)
            except ImportError as e:
                logger.warning("Failed to load heuristic module %s: %s", module_name, e)
                continue
            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if (
                    isinstance(attr, type)
                    and issubclass(attr, BaseHeuristic)
                    and attr is not BaseHeuristic
                    and attr.HEURISTIC_ID  # Must have an ID
                ):
                    self._heuristics[attr.HEURISTIC_ID] = attr

        self._loaded = True

    def get_all(self) -> list[Type[BaseHeuristic]]:
        """Return all registered heuristic classes, ordered by ID."""
        self.discover()
        return [self._heuristics[k] for k in sorted(self._heuristics)]

    def instantiate_all(self) -> list[BaseHeuristic]:
        return [cls() for cls in self.get_all()]


# Global registry singleton
registry = HeuristicRegistry()
