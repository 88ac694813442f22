from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from routeguard.config import DEFAULT_DENIED_ROUTE, SecurityConfig
from routeguard.models import AuthorizationFn, PermissionsValue
from routeguard.permissions.cache import PermissionCache


@dataclass
class SecurityState:
    """
    Process-wide mutable engine state.

    One instance is shared by reference between the resolver, the decision engine
    and the gate, so a setter call is visible to every subsequent decision.
    """

    default_permissions: Optional[PermissionsValue] = None
    default_access: bool = False
    custom_authorization: Optional[AuthorizationFn] = None
    denied_route: str = DEFAULT_DENIED_ROUTE
    debug: bool = False
    cache: PermissionCache = field(default_factory=PermissionCache)

    @classmethod
    def from_config(cls, cfg: SecurityConfig) -> "SecurityState":
        return cls(
            default_permissions=cfg.default_permissions_url,
            default_access=cfg.default_access,
            denied_route=cfg.denied_route,
            debug=cfg.debug,
        )
