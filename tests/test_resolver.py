from __future__ import annotations

import asyncio

import pytest

from routeguard.errors import RetrievalError, RouteNotFoundError
from routeguard.permissions.resolver import PermissionResolver
from routeguard.state import SecurityState

ROLES_URL = "http://example.com/my-roles"


@pytest.fixture
def state() -> SecurityState:
    return SecurityState()


@pytest.fixture
def resolver(router, state, transport) -> PermissionResolver:  # type: ignore[no-untyped-def]
    return PermissionResolver(router, state, transport)


def test_permissions_for_route_static_default_and_unknown(resolver, state) -> None:
    assert resolver.permissions_for_route("/") == {"canView": ["..."], "canEdit": [1, 2, 3]}
    assert resolver.permissions_for_route("/no-permissions") is None
    # Empty mappings are explicit permissions, not "absent".
    assert resolver.permissions_for_route("/test-custom-redirect") == {}

    state.default_permissions = ["/a"]
    assert resolver.permissions_for_route("/no-permissions") == ["/a"]
    assert resolver.permissions_for_route("/") == {"canView": ["..."], "canEdit": [1, 2, 3]}

    with pytest.raises(RouteNotFoundError, match="/non-existent-route"):
        resolver.permissions_for_route("/non-existent-route")


def test_permissions_for_route_defaults_to_current_route(resolver, router) -> None:
    router.navigate("/route-default-auth")
    assert resolver.permissions_for_route() == ["/route-default-auth"]


def test_resolve_sync_misses_then_hits_cache(resolver, state) -> None:
    assert resolver.resolve_sync("/grab-from-url") is None
    state.cache.put(ROLES_URL, {"GET": ["x"]})
    assert resolver.resolve_sync("/grab-from-url") == {"GET": ["x"]}


def test_resolve_fetches_and_caches(resolver, state, transport) -> None:
    transport.responses[ROLES_URL] = "RESPONSE 1"
    assert asyncio.run(resolver.resolve("/grab-from-url")) == "RESPONSE 1"
    assert state.cache.get(ROLES_URL) == "RESPONSE 1"

    # Server changes its answer; the cache keeps serving the first one.
    transport.responses[ROLES_URL] = "RESPONSE 2"
    assert asyncio.run(resolver.resolve("/grab-from-url")) == "RESPONSE 1"
    assert transport.calls == [ROLES_URL]


def test_resolve_static_value_never_touches_transport(resolver, transport) -> None:
    assert asyncio.run(resolver.resolve("/")) == {"canView": ["..."], "canEdit": [1, 2, 3]}
    assert asyncio.run(resolver.resolve("/no-permissions")) is None
    assert transport.calls == []


def test_resolve_failure_raises_and_is_not_cached(resolver, state, transport) -> None:
    transport.responses.clear()
    with pytest.raises(RetrievalError) as ei:
        asyncio.run(resolver.resolve("/grab-from-url"))
    assert ei.value.source == ROLES_URL
    assert ei.value.status_code == 404
    assert ROLES_URL not in state.cache


def test_resolve_wraps_unexpected_transport_errors(router, state) -> None:
    class _BrokenTransport:
        async def get(self, url):  # type: ignore[no-untyped-def]
            raise ConnectionResetError("peer went away")

    resolver = PermissionResolver(router, state, _BrokenTransport())
    with pytest.raises(RetrievalError, match="ConnectionResetError"):
        asyncio.run(resolver.resolve("/grab-from-url"))


def test_resolve_uses_default_url_permissions(resolver, state, transport) -> None:
    state.default_permissions = ROLES_URL
    assert resolver.resolve_sync("/no-permissions") is None
    assert asyncio.run(resolver.resolve("/no-permissions")) == "..."
    assert resolver.resolve_sync("/no-permissions") == "..."


def test_set_permissions_writes_route(resolver, router) -> None:
    resolver.set_permissions({"GET": ["x"]}, "/set-permissions-on-route")
    assert router.routes["/set-permissions-on-route"].permissions == {"GET": ["x"]}
    with pytest.raises(RouteNotFoundError):
        resolver.set_permissions({}, "/nope")


def test_clear_during_inflight_fetch_does_not_cancel_it(router, state) -> None:
    async def _run() -> None:
        release = asyncio.Event()

        class _SlowTransport:
            async def get(self, url):  # type: ignore[no-untyped-def]
                await release.wait()
                return {"late": True}

        resolver = PermissionResolver(router, state, _SlowTransport())
        task = asyncio.create_task(resolver.resolve("/grab-from-url"))
        await asyncio.sleep(0)  # fetch is now in flight
        state.cache.clear()
        release.set()
        assert await task == {"late": True}

    asyncio.run(_run())
    assert state.cache.get(ROLES_URL) == {"late": True}


def test_overlapping_first_fetches_both_run(router, state) -> None:
    calls = []

    class _YieldingTransport:
        async def get(self, url):  # type: ignore[no-untyped-def]
            calls.append(url)
            await asyncio.sleep(0)
            return f"RESPONSE {len(calls)}"

    resolver = PermissionResolver(router, state, _YieldingTransport())

    async def _run():  # type: ignore[no-untyped-def]
        return await asyncio.gather(resolver.resolve("/grab-from-url"), resolver.resolve("/grab-from-url"))

    results = asyncio.run(_run())
    assert calls == [ROLES_URL, ROLES_URL]
    assert results == ["RESPONSE 2", "RESPONSE 2"]
    assert state.cache.get(ROLES_URL) == "RESPONSE 2"
