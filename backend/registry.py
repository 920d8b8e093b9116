"""Component registry - name -> ComponentInfo, populated at startup."""

from __future__ import annotations

import logging
from collections.abc import Callable

from engine.reactive.component import ComponentInfo
from engine.reactive.viewmodel import ViewModel

logger = logging.getLogger(__name__)


class ComponentRegistry:
    """
    Holds every component the host can update.

    Registration happens before requests are served; request handlers only
    read from it.
    """

    def __init__(self) -> None:
        self._components: dict[str, ComponentInfo] = {}

    def register(self, view_model: type[ViewModel], name: str | None = None) -> ComponentInfo:
        info = ComponentInfo.from_view_model(view_model, name)
        if info.name in self._components:
            raise ValueError(f"Component `{info.name}` is already registered")
        self._components[info.name] = info
        logger.info("registry: %s with %d action(s)", info.name, len(info.actions))
        return info

    def component(self, name: str | None = None) -> Callable[[type[ViewModel]], type[ViewModel]]:
        """Class decorator form of register()."""

        def decorate(view_model: type[ViewModel]) -> type[ViewModel]:
            self.register(view_model, name)
            return view_model

        return decorate

    def get(self, name: str) -> ComponentInfo | None:
        return self._components.get(name)

    def names(self) -> list[str]:
        return sorted(self._components)


# Global registry instance
registry = ComponentRegistry()
