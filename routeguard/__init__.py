"""
UI-side route authorization.

Design goals:
- Make the UI security-aware without pretending to be a security boundary
  (the backend still enforces real authorization).
- Synchronous decisions from static or cached permissions; a single async
  fetch when a route's permissions live behind a URL.
- Host-agnostic: the router, navigator and HTTP transport are plain interfaces.
"""

from routeguard.errors import (
    AccessDeniedError,
    MisconfiguredOverrideError,
    RetrievalError,
    RouteGuardError,
    RouteNotFoundError,
)
from routeguard.models import CurrentRoute, RouteDescriptor
from routeguard.security import Security

__all__ = [
    "AccessDeniedError",
    "CurrentRoute",
    "MisconfiguredOverrideError",
    "RetrievalError",
    "RouteDescriptor",
    "RouteGuardError",
    "RouteNotFoundError",
    "Security",
]
