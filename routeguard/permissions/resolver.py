from __future__ import annotations

import logging
from typing import Any, Optional

from routeguard.errors import RetrievalError
from routeguard.models import PermissionsValue
from routeguard.permissions.transport import PermissionsTransport
from routeguard.routing import Router, current_route_path, get_route
from routeguard.state import SecurityState
from routeguard.util import trace

logger = logging.getLogger(__name__)


class PermissionResolver:
    """
    Finds the permissions for a route.

    A route's `permissions` is either a static document (already resolved) or a
    source identifier string. Source identifiers are served from the state's cache
    when possible; `resolve()` fetches and caches on a miss.
    """

    def __init__(self, router: Router, state: SecurityState, transport: PermissionsTransport) -> None:
        self.router = router
        self.state = state
        self.transport = transport

    def _route_path(self, route_path: Optional[str]) -> Optional[str]:
        return route_path or current_route_path(self.router)

    def permissions_for_route(self, route_path: Optional[str] = None) -> Optional[PermissionsValue]:
        """
        Raw permissions for a route: its own, or the default permissions when the route
        declares none. May be a source identifier (URL) rather than a document.
        """
        route = get_route(self.router, self._route_path(route_path))
        if not route.has_permissions:
            trace(logger, self.state, "Using default permissions.")
            return self.state.default_permissions
        return route.permissions

    def resolve_sync(self, route_path: Optional[str] = None) -> Optional[Any]:
        """
        Permissions without suspending: static documents as-is, source identifiers from
        the cache. Returns None on a cache miss.
        """
        route_path = self._route_path(route_path)
        raw = self.permissions_for_route(route_path)
        if isinstance(raw, str):
            permissions = self.state.cache.get(raw)
            if raw in self.state.cache:
                trace(logger, self.state, "Getting permissions from the cache for route: %s", route_path)
            else:
                trace(logger, self.state, "Could not find cached permissions for route: %s", route_path)
            return permissions
        trace(logger, self.state, "Getting permissions from an object for route: %s", route_path)
        return raw

    async def resolve(self, route_path: Optional[str] = None) -> Any:
        """Permissions for a route, fetching (and caching) a source identifier on a miss."""
        route_path = self._route_path(route_path)
        raw = self.permissions_for_route(route_path)
        if isinstance(raw, str) and raw not in self.state.cache:
            trace(logger, self.state, "Retrieving permissions from a URL for route: %s", route_path)
            return await self.retrieve(raw)
        return self.resolve_sync(route_path)

    async def retrieve(self, url: str) -> Any:
        """Fetch a permissions document and cache it; failures are never cached."""
        try:
            permissions = await self.transport.get(url)
        except RetrievalError as e:
            logger.warning("[routeguard] %s", e)
            raise
        except Exception as e:
            logger.warning("[routeguard] Failed to retrieve permissions from: %s (%s)", url, type(e).__name__)
            raise RetrievalError(url, f"{type(e).__name__}: {e}") from e

        trace(logger, self.state, "Permissions returned from: %s", url)
        self.state.cache.put(url, permissions)
        return permissions

    def set_permissions(self, permissions: Optional[PermissionsValue], route_path: Optional[str] = None) -> None:
        route = get_route(self.router, self._route_path(route_path))
        trace(logger, self.state, "Manually set permissions on: %s", route.path)
        route.permissions = permissions
