from __future__ import annotations

from typing import Optional


class RouteGuardError(Exception):
    """Base class for all routeguard errors."""


class RouteNotFoundError(RouteGuardError, KeyError):
    def __init__(self, route_path: Optional[str]) -> None:
        self.route_path = route_path
        super().__init__(f"Could not find route: {route_path}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return str(self.args[0])


class RetrievalError(RouteGuardError):
    """
    Remote permissions could not be retrieved.

    Raised to direct callers of `get_permissions()`; the navigation gate absorbs it
    and decides as if no permissions were available.
    """

    def __init__(self, source: str, detail: str = "", *, status_code: Optional[int] = None) -> None:
        self.source = source
        self.detail = detail
        self.status_code = status_code
        msg = f"Failed to retrieve permissions from: {source}"
        if status_code is not None:
            msg += f" (status={status_code})"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class MisconfiguredOverrideError(RouteGuardError):
    """An override getter was called but no override callable is set."""


class AccessDeniedError(RouteGuardError):
    """
    Outcome of a denied navigation.

    The redirect has already been issued when this is raised; `redirect_to` records
    where the navigator was sent.
    """

    authorized = False

    def __init__(self, redirect_to: str) -> None:
        self.redirect_to = redirect_to
        super().__init__(f"Access denied; redirected to {redirect_to}")
