"""
Pytest config.

Local imports like `import routeguard` rely on the repo root being on sys.path; when the
package isn't installed (or a global `pytest` entrypoint is used) that doesn't happen
reliably during collection, so we pin it here.

Fixtures mirror a small host app: a handful of routes, an in-memory navigator and a
fake transport that records every URL it is asked for.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List

import pytest


def _ensure_repo_root_on_syspath() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


_ensure_repo_root_on_syspath()

from routeguard.config import load_security_config  # noqa: E402
from routeguard.errors import RetrievalError  # noqa: E402
from routeguard.models import RouteDescriptor  # noqa: E402
from routeguard.routing import MemoryNavigator, StaticRouter  # noqa: E402
from routeguard.security import Security  # noqa: E402

ROLES_URL = "http://example.com/my-roles"


class FakeTransport:
    """Serves canned documents per URL; anything else fails like a 404."""

    def __init__(self, responses: Dict[str, Any] | None = None) -> None:
        self.responses: Dict[str, Any] = dict(responses or {})
        self.calls: List[str] = []

    async def get(self, url: str) -> Any:
        self.calls.append(url)
        if url not in self.responses:
            raise RetrievalError(url, "Not Found", status_code=404)
        return self.responses[url]


def _override_auth(query, permissions, route, route_params):  # type: ignore[no-untyped-def]
    return query == 1


def build_router() -> StaticRouter:
    router = StaticRouter(
        [
            RouteDescriptor("/", permissions={"canView": ["..."], "canEdit": [1, 2, 3]}),
            RouteDescriptor("/no-permissions"),
            RouteDescriptor("/route-default-auth", permissions=["/route-default-auth"]),
            RouteDescriptor("/grab-from-url", permissions=ROLES_URL),
            RouteDescriptor("/override-auth", permissions=[1, 2, 3], custom_authorization=_override_auth),
            RouteDescriptor("/test-custom-redirect", permissions={}, denied_route="/a-different-access-denied"),
            RouteDescriptor("/set-permissions-on-route"),
            RouteDescriptor("/item/:id", permissions=["/item/3", "/item/4"]),
        ]
    )
    router.navigate("/")
    return router


@pytest.fixture(autouse=True)
def _fresh_security_config() -> Iterator[None]:
    load_security_config.cache_clear()
    yield
    load_security_config.cache_clear()


@pytest.fixture
def router() -> StaticRouter:
    return build_router()


@pytest.fixture
def navigator() -> MemoryNavigator:
    return MemoryNavigator("/")


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport({ROLES_URL: "..."})


@pytest.fixture
def security(router: StaticRouter, navigator: MemoryNavigator, transport: FakeTransport) -> Security:
    return Security(router, navigator, transport)


@pytest.fixture
def go(router: StaticRouter, navigator: MemoryNavigator):  # type: ignore[no-untyped-def]
    """Switch the current route (template) and location (concrete path)."""

    def _go(route_path: str, location: str | None = None, **params: Any) -> None:
        router.navigate(route_path, params)
        navigator.set_path(location or route_path)

    return _go
