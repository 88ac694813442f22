from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union

# A permissions document is free-form: nested mappings/sequences/scalars, or a
# sequence of route identifiers. A string in its place is a source identifier.
PermissionsDocument = Union[Mapping[str, Any], Sequence[Any]]
PermissionsValue = Union[PermissionsDocument, str]

# (query, permissions, route, route_params) -> truthy/falsy
AuthorizationFn = Callable[[Any, Any, "RouteDescriptor", Mapping[str, Any]], Any]


@dataclass
class RouteDescriptor:
    """A route as declared by the host router."""

    path: str  # template, e.g. /item/:id
    permissions: Optional[PermissionsValue] = None  # static document or source URL
    custom_authorization: Optional[AuthorizationFn] = None
    denied_route: Optional[str] = None

    @property
    def has_permissions(self) -> bool:
        # Empty collections count as explicitly configured; only None/"" are absent.
        return self.permissions is not None and self.permissions != ""


@dataclass
class CurrentRoute:
    """The active route template plus its bound parameters."""

    path: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)
