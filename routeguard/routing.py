from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol

from routeguard.errors import RouteNotFoundError
from routeguard.models import CurrentRoute, RouteDescriptor


class Router(Protocol):
    """
    Minimal view of the host router. Implementations wrap whatever routing the host
    application uses.
    """

    @property
    def routes(self) -> Mapping[str, RouteDescriptor]:
        """Route template -> descriptor."""

    @property
    def current(self) -> CurrentRoute:
        """The active route template and its bound parameters."""


class Navigator(Protocol):
    """Location/history operations, used only to redirect on denial."""

    def path(self) -> str:
        """Current location path, e.g. `/item/3`."""

    def set_path(self, path: str) -> None:
        """Navigate to `path`."""

    def replace(self) -> None:
        """Make the last navigation replace the current history entry."""


class StaticRouter:
    """In-memory router for hosts without their own routing layer (and for tests)."""

    def __init__(self, routes: Optional[List[RouteDescriptor]] = None) -> None:
        self._routes: Dict[str, RouteDescriptor] = {}
        self._current = CurrentRoute()
        for r in routes or []:
            self.add(r)

    @property
    def routes(self) -> Mapping[str, RouteDescriptor]:
        return self._routes

    @property
    def current(self) -> CurrentRoute:
        return self._current

    def add(self, route: RouteDescriptor) -> RouteDescriptor:
        self._routes[route.path] = route
        return route

    def navigate(self, path: str, params: Optional[Dict[str, Any]] = None) -> None:
        if path not in self._routes:
            raise ValueError(f"Not a route: {path}")
        self._current = CurrentRoute(path=path, params=dict(params or {}))


class MemoryNavigator:
    """In-memory navigator keeping a simple history list."""

    def __init__(self, path: str = "/") -> None:
        self.history: List[str] = [path]

    def path(self) -> str:
        return self.history[-1]

    def set_path(self, path: str) -> None:
        self.history.append(path)

    def replace(self) -> None:
        # Collapse the last navigation onto the entry it came from.
        if len(self.history) >= 2:
            last = self.history.pop()
            self.history[-1] = last


def route_exists(router: Router, route_path: Optional[str]) -> bool:
    return route_path is not None and route_path in router.routes


def get_route(router: Router, route_path: Optional[str]) -> RouteDescriptor:
    if not route_exists(router, route_path):
        raise RouteNotFoundError(route_path)
    return router.routes[route_path]  # type: ignore[index]


def current_route_path(router: Router) -> Optional[str]:
    """Current route template, like `/path/:id` (not `/path/3`)."""
    return router.current.path
