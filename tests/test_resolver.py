"""Tests for priority resolution across stores and scopes."""

import pytest

from mcpconfig.config.resolver import ConfigResolver
from mcpconfig.core.scope import Scope
from mcpconfig.storage.secrets import SecretStore
from mcpconfig.storage.values import ValueStore

SERVER_NAME = "test-server"


@pytest.fixture
def values(project_root):
    return ValueStore(SERVER_NAME, project_root)


@pytest.fixture
def secrets(project_root):
    return SecretStore(SERVER_NAME, project_root)


@pytest.fixture
def resolver(values, secrets):
    return ConfigResolver(values, secrets)


class TestResolve:
    """Tests for ConfigResolver.resolve."""

    @pytest.mark.asyncio
    async def test_priority_order(self, resolver, values, secrets):
        await values.set("api.token", "global-config", Scope.GLOBAL)
        resolved = await resolver.resolve("api.token")
        assert (resolved.value, resolved.source) == ("global-config", "global config")

        await secrets.set("api.token", "global-secret", Scope.GLOBAL)
        resolved = await resolver.resolve("api.token")
        assert (resolved.value, resolved.source) == ("global-secret", "global secret")

        await values.set("api.token", "local-config", Scope.LOCAL)
        resolved = await resolver.resolve("api.token")
        assert (resolved.value, resolved.source) == ("local-config", "local config")

        await secrets.set("api.token", "local-secret", Scope.LOCAL)
        resolved = await resolver.resolve("api.token")
        assert (resolved.value, resolved.source) == ("local-secret", "local secret")
        assert resolved.path == secrets.path(Scope.LOCAL)

    @pytest.mark.asyncio
    async def test_missing_key(self, resolver):
        assert await resolver.resolve("nothing.here") is None

    @pytest.mark.asyncio
    async def test_null_value_is_found(self, resolver, values):
        await values.set("feature.flag", None)

        resolved = await resolver.resolve("feature.flag")
        assert resolved is not None
        assert resolved.value is None
        assert resolved.source == "local config"

    @pytest.mark.asyncio
    async def test_falsy_values_are_found(self, resolver, values):
        await values.set("debug", False)
        await values.set("retries", 0, Scope.GLOBAL)

        assert (await resolver.resolve("debug")).value is False
        assert (await resolver.resolve("retries")).value == 0


class TestResolveAll:
    """Tests for ConfigResolver.resolve_all."""

    @pytest.mark.asyncio
    async def test_no_duplicate_keys(self, resolver, values, secrets):
        await values.set("server.port", 3000, Scope.LOCAL)
        await values.set("server.port", 80, Scope.GLOBAL)
        await secrets.set("api.secret", "local", Scope.LOCAL)
        await secrets.set("api.secret", "global", Scope.GLOBAL)
        await values.set("log.level", "info", Scope.GLOBAL)

        results = await resolver.resolve_all()

        keys = [r.key for r in results]
        assert len(keys) == len(set(keys))
        by_key = {r.key: r for r in results}
        assert by_key["server.port"].value == 3000
        assert by_key["api.secret"].value == "local"
        assert by_key["log.level"].source == "global config"

    @pytest.mark.asyncio
    async def test_order_follows_priority(self, resolver, values, secrets):
        await values.set("b.value", 1, Scope.GLOBAL)
        await secrets.set("a.secret", "x", Scope.LOCAL)

        assert [r.key for r in await resolver.resolve_all()] == ["a.secret", "b.value"]

    @pytest.mark.asyncio
    async def test_empty(self, resolver):
        assert await resolver.resolve_all() == []
