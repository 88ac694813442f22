from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

DEFAULT_DENIED_ROUTE = "/forbidden"


@dataclass(frozen=True)
class SecurityConfig:
    # Decision used when no query, override or structural match applies.
    default_access: bool = False

    # Redirect target for routes without their own `denied_route`.
    denied_route: str = DEFAULT_DENIED_ROUTE

    # Source identifier (URL) used as default permissions, if any.
    default_permissions_url: Optional[str] = None

    # Emit engine trace messages.
    debug: bool = False

    # HTTP transport
    http_timeout_seconds: float = 10.0


def _env_bool(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "y", "on")


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _denied_route(raw: str) -> str:
    p = (raw or "").strip()
    # Only app-relative paths; `//host` would leave the app.
    if not p.startswith("/") or p.startswith("//"):
        return DEFAULT_DENIED_ROUTE
    return p


@lru_cache(maxsize=1)
def load_security_config() -> SecurityConfig:
    """
    Load engine configuration from environment variables.

    Recommended vars:
    - ROUTEGUARD_DEFAULT_ACCESS=0
    - ROUTEGUARD_DENIED_ROUTE=/forbidden
    - ROUTEGUARD_DEFAULT_PERMISSIONS_URL=https://api.example.com/me/permissions
    - ROUTEGUARD_DEBUG=1
    - ROUTEGUARD_HTTP_TIMEOUT_SECONDS=10
    """
    return SecurityConfig(
        default_access=_env_bool("ROUTEGUARD_DEFAULT_ACCESS", False),
        denied_route=_denied_route(os.getenv("ROUTEGUARD_DENIED_ROUTE", "")),
        default_permissions_url=(os.getenv("ROUTEGUARD_DEFAULT_PERMISSIONS_URL", "") or "").strip() or None,
        debug=_env_bool("ROUTEGUARD_DEBUG", False),
        http_timeout_seconds=max(1.0, min(_env_float("ROUTEGUARD_HTTP_TIMEOUT_SECONDS", 10.0), 120.0)),
    )
