from __future__ import annotations

import logging
from typing import Optional

from routeguard.authz.engine import AuthorizationEngine
from routeguard.errors import AccessDeniedError, RetrievalError
from routeguard.permissions.resolver import PermissionResolver
from routeguard.routing import Navigator, Router, current_route_path, get_route
from routeguard.state import SecurityState
from routeguard.util import trace

logger = logging.getLogger(__name__)


class NavigationGate:
    """
    Pre-navigation check: load the route's permissions, decide, redirect on denial.

    The location path (e.g. `/item/3`) is the query; the route template (e.g.
    `/item/:id`) selects the permissions. A failed fetch is treated as "no
    permissions", so overrides or the default access policy decide.
    """

    def __init__(
        self,
        router: Router,
        navigator: Navigator,
        state: SecurityState,
        resolver: PermissionResolver,
        engine: AuthorizationEngine,
    ) -> None:
        self.router = router
        self.navigator = navigator
        self.state = state
        self.resolver = resolver
        self.engine = engine

    async def authorize_or_redirect(self) -> bool:
        """
        Return True when the current navigation is authorized.

        Raises AccessDeniedError after redirecting to the route's denied route.
        """
        current_path = self.navigator.path()
        route_path = current_route_path(self.router)

        # Pre-load permissions so the decision sees a warm cache.
        try:
            await self.resolver.resolve(route_path)
        except RetrievalError:
            trace(logger, self.state, "No permissions, authorizing by default.")

        if self.engine.is_authorized(current_path, route_path):
            trace(logger, self.state, "Authorized.")
            return True

        trace(logger, self.state, "Rejected.")
        target = self.redirect(route_path)
        raise AccessDeniedError(target)

    def redirect(self, route_path: Optional[str] = None) -> str:
        target = self.get_access_denied_route_for(route_path)
        self.navigator.set_path(target)
        # Replace history so the browser back button skips the denied page.
        self.navigator.replace()
        return target

    def get_access_denied_route_for(self, route_path: Optional[str] = None) -> str:
        route = get_route(self.router, route_path or current_route_path(self.router))
        if route.denied_route:
            trace(logger, self.state, "Found an access denied route to: %s", route.denied_route)
            return route.denied_route
        return self.state.denied_route

    def set_access_denied_route_for(self, denied_route: str, route_path: Optional[str] = None) -> None:
        route = get_route(self.router, route_path or current_route_path(self.router))
        route.denied_route = denied_route
