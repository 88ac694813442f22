from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from routeguard.authz.matcher import find_in, is_sequence
from routeguard.errors import MisconfiguredOverrideError
from routeguard.models import AuthorizationFn
from routeguard.permissions.resolver import PermissionResolver
from routeguard.routing import Router, current_route_path, get_route
from routeguard.state import SecurityState
from routeguard.util import trace

logger = logging.getLogger(__name__)


class AuthorizationEngine:
    """
    Decides whether a query is authorized against a route's permissions.

    Priority (first applicable wins):
    1. the route's own `custom_authorization` callable;
    2. the global custom authorization callable;
    3. string query + sequence permissions: membership, e.g. `/page/2` in `["/page/2", ...]`;
    4. string query: hierarchical lookup, e.g. `GET/page/1` in `{"GET": {"page": [1]}}`;
    5. callable query: called like an override (it receives itself as the query);
    6. the default access policy.

    Only static or already-cached permissions are consulted; this never fetches.
    """

    def __init__(self, router: Router, state: SecurityState, resolver: PermissionResolver) -> None:
        self.router = router
        self.state = state
        self.resolver = resolver

    def is_authorized(self, query: Any = None, route_path: Optional[str] = None) -> bool:
        route_path = route_path or current_route_path(self.router)
        route = get_route(self.router, route_path)
        route_params = self.router.current.params
        permissions = self.resolver.resolve_sync(route_path)
        # Falsy scalars (e.g. an empty text body) count as no permissions.
        if not permissions and not isinstance(permissions, Mapping) and not is_sequence(permissions):
            permissions = {}

        if self.has_custom_route_authorization(route_path):
            trace(logger, self.state, "Authorizing with a custom route function.")
            method = self.get_custom_route_authorization(route_path)
            return bool(method(query, permissions, route, route_params))
        if self.has_custom_authorization():
            trace(logger, self.state, "Authorizing with a custom function.")
            method = self.get_custom_authorization()
            return bool(method(query, permissions, route, route_params))
        if isinstance(query, str) and is_sequence(permissions):
            trace(logger, self.state, "Default authorization: looking for a route in a permissions array.")
            return query in permissions
        if isinstance(query, str):
            trace(logger, self.state, "Looking for the given query in a permissions object.")
            return find_in(query, permissions)
        if callable(query):
            trace(logger, self.state, "Authorizing with the given query function.")
            return bool(query(query, permissions, route, route_params))

        trace(logger, self.state, "No authorization method found; using default access.")
        return self.state.default_access

    # Global override

    def set_custom_authorization(self, fn: Optional[AuthorizationFn]) -> None:
        self.state.custom_authorization = fn

    def has_custom_authorization(self) -> bool:
        return callable(self.state.custom_authorization)

    def get_custom_authorization(self) -> AuthorizationFn:
        if not self.has_custom_authorization():
            raise MisconfiguredOverrideError(
                "Custom authorization is not a function; use set_custom_authorization(your_authorization_function)"
            )
        return self.state.custom_authorization  # type: ignore[return-value]

    # Per-route override

    def has_custom_route_authorization(self, route_path: Optional[str] = None) -> bool:
        route = get_route(self.router, route_path or current_route_path(self.router))
        return callable(route.custom_authorization)

    def get_custom_route_authorization(self, route_path: Optional[str] = None) -> AuthorizationFn:
        route_path = route_path or current_route_path(self.router)
        if not self.has_custom_route_authorization(route_path):
            raise MisconfiguredOverrideError(
                f"The 'custom_authorization' property is not set to a function on: {route_path}"
            )
        return get_route(self.router, route_path).custom_authorization  # type: ignore[return-value]

    # Default access

    def set_default_access(self, allow: bool) -> None:
        self.state.default_access = bool(allow)

    def get_default_access(self) -> bool:
        return self.state.default_access
