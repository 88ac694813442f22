from __future__ import annotations

import logging
from typing import Any, Optional

from routeguard.authz.engine import AuthorizationEngine
from routeguard.authz.gate import NavigationGate
from routeguard.authz.matcher import find_in
from routeguard.config import SecurityConfig, load_security_config
from routeguard.models import AuthorizationFn, PermissionsValue, RouteDescriptor
from routeguard.permissions.resolver import PermissionResolver
from routeguard.permissions.transport import PermissionsTransport, RequestsTransport
from routeguard.routing import Navigator, Router, current_route_path, get_route, route_exists
from routeguard.state import SecurityState
from routeguard.util import trace

logger = logging.getLogger(__name__)


class Security:
    """
    Public surface for controllers/UI code.

    Two major use cases:
    1. limiting access to a route, from the router's pre-navigation hook:

        await security.authorize_or_redirect()

    2. changing UI behavior:

        show_edit_button = security.is_authorized(f"PUT/resource/{item_id}")
        # route permissions like {"PUT": {"resource": [1, 2, 3]}}

    This makes the UI security-aware; it does not replace backend authorization.
    """

    def __init__(
        self,
        router: Router,
        navigator: Navigator,
        transport: PermissionsTransport,
        *,
        state: Optional[SecurityState] = None,
    ) -> None:
        self.router = router
        self.navigator = navigator
        self.state = state if state is not None else SecurityState()
        self.resolver = PermissionResolver(router, self.state, transport)
        self.engine = AuthorizationEngine(router, self.state, self.resolver)
        self.gate = NavigationGate(router, navigator, self.state, self.resolver, self.engine)

    @classmethod
    def from_env(
        cls,
        router: Router,
        navigator: Navigator,
        *,
        cfg: Optional[SecurityConfig] = None,
    ) -> "Security":
        cfg = cfg or load_security_config()
        transport = RequestsTransport(timeout=cfg.http_timeout_seconds)
        return cls(router, navigator, transport, state=SecurityState.from_config(cfg))

    # Navigation

    async def authorize_or_redirect(self) -> bool:
        return await self.gate.authorize_or_redirect()

    def get_access_denied_route_for(self, route_path: Optional[str] = None) -> str:
        return self.gate.get_access_denied_route_for(route_path)

    def set_access_denied_route_for(self, denied_route: str, route_path: Optional[str] = None) -> None:
        self.gate.set_access_denied_route_for(denied_route, route_path)

    # Decisions

    def is_authorized(self, query: Any = None, route_path: Optional[str] = None) -> bool:
        return self.engine.is_authorized(query, route_path)

    def find_in(self, query: str, document: Any, delimiter: str = "/") -> bool:
        return find_in(query, document, delimiter)

    def set_custom_authorization(self, fn: Optional[AuthorizationFn]) -> None:
        self.engine.set_custom_authorization(fn)

    def set_default_access(self, allow: bool) -> None:
        self.engine.set_default_access(allow)

    def get_default_access(self) -> bool:
        return self.engine.get_default_access()

    # Permissions

    async def get_permissions(self, route_path: Optional[str] = None) -> Any:
        """Permissions for a route (current route by default), fetching on a cache miss."""
        return await self.resolver.resolve(route_path)

    def get_permissions_sync(self, route_path: Optional[str] = None) -> Optional[Any]:
        """Permissions without fetching; None when a URL's permissions are not cached yet."""
        return self.resolver.resolve_sync(route_path)

    def get_permissions_from_route(self, route_path: Optional[str] = None) -> Optional[PermissionsValue]:
        return self.resolver.permissions_for_route(route_path)

    def set_permissions(self, permissions: Optional[PermissionsValue], route_path: Optional[str] = None) -> None:
        self.resolver.set_permissions(permissions, route_path)

    def set_default_permissions(self, permissions: Optional[PermissionsValue]) -> None:
        trace(
            logger,
            self.state,
            "Manually set default permissions; these will be overridden by any specified route permissions.",
        )
        self.state.default_permissions = permissions

    def clear_permissions_cache(self) -> None:
        """
        Drop every retrieved document; the next `get_permissions()` call for a URL
        re-retrieves it. Static route permissions are unaffected.
        """
        self.state.cache.clear()

    # Routes

    def route_exists(self, route_path: Optional[str]) -> bool:
        return route_exists(self.router, route_path)

    def get_route(self, route_path: Optional[str] = None) -> RouteDescriptor:
        return get_route(self.router, route_path or current_route_path(self.router))

    def get_current_route_path(self) -> Optional[str]:
        return current_route_path(self.router)

    # Debugging

    def turn_on_debugging(self) -> None:
        self.state.debug = True

    def turn_off_debugging(self) -> None:
        self.state.debug = False
