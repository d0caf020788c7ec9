"""Tests for the client registry and its schema upgrades."""

import json

import pytest

from mcpconfig.config.settings import get_settings
from mcpconfig.core.errors import ClientError, ConfigurationError, StorageError, ValidationError
from mcpconfig.core.scope import Scope
from mcpconfig.distribution.defaults import DEFAULT_CLIENTS, DEFAULT_SENSITIVE_PATTERNS
from mcpconfig.distribution.models import ClientDescriptor, ConfigFormat, PathKind
from mcpconfig.distribution.registry import ClientRegistry, upgrade_registry


def _write(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))


class TestDefaults:
    """Tests for first-run behaviour."""

    @pytest.mark.asyncio
    async def test_missing_file_creates_defaults(self, registry, registry_path):
        clients = await registry.get_available_clients()

        assert [c.id for c in clients] == list(DEFAULT_CLIENTS)
        saved = json.loads(registry_path.read_text())
        assert saved["schemaVersion"] == 2
        assert saved["sensitivePatterns"] == DEFAULT_SENSITIVE_PATTERNS
        assert set(DEFAULT_CLIENTS) <= set(saved)

    @pytest.mark.asyncio
    async def test_default_location(self, home, project_root):
        registry = ClientRegistry(project_root=project_root)
        await registry.load()

        assert registry.path == home / ".config" / "mcpconfig" / "client-mappings.json"
        assert registry.path.exists()

    @pytest.mark.asyncio
    async def test_location_from_settings(self, tmp_path, monkeypatch, project_root):
        custom = tmp_path / "custom" / "registry.json"
        monkeypatch.setenv("MCPCONFIG_REGISTRY_PATH", str(custom))
        get_settings.cache_clear()

        registry = ClientRegistry(project_root=project_root)
        await registry.load()
        assert custom.exists()

    @pytest.mark.asyncio
    async def test_bundled_descriptors(self, registry):
        vscode = await registry.get_client_config("vscode")
        cursor = await registry.get_client_config("cursor")

        assert vscode.config_key == "servers"
        assert vscode.config_format == ConfigFormat.STRUCTURED
        assert vscode.env_format == "${env:${VAR}}"
        assert cursor.auto_load_env is True

    @pytest.mark.asyncio
    async def test_unknown_client_config_is_none(self, registry):
        assert await registry.get_client_config("ghost") is None

    @pytest.mark.asyncio
    async def test_load_is_cached(self, registry, registry_path):
        await registry.load()
        registry_path.unlink()

        assert await registry.get_client_config("vscode") is not None
        assert not registry_path.exists()


class TestClientPaths:
    """Tests for get_client_path."""

    @pytest.mark.asyncio
    async def test_global_claude_code_path(self, registry, home):
        path = await registry.get_client_path("claude-code", Scope.GLOBAL)
        assert path == home / ".claude.json"

    @pytest.mark.asyncio
    async def test_local_path_is_project_relative(self, registry, project_root):
        path = await registry.get_client_path("vscode", Scope.LOCAL)
        assert path == project_root / ".vscode" / "mcp.json"

    @pytest.mark.asyncio
    async def test_server_name_placeholder(self, registry, home):
        path = await registry.get_client_path("vscode", Scope.GLOBAL, PathKind.SECRETS)
        assert path == home / ".config" / "mcpconfig" / "test-server" / ".env"

    @pytest.mark.asyncio
    async def test_unknown_client_raises_client_error(self, registry):
        with pytest.raises(ClientError) as exc_info:
            await registry.get_client_path("ghost")
        assert exc_info.value.client_ids == ["ghost"]
        assert "ghost" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_missing_platform_raises_configuration_error(self, registry):
        await registry.add_client(
            "mac-only",
            {"name": "Mac Only", "global": {"config-path": {"darwin": "${HOME}/x.json"}}},
        )

        with pytest.raises(ConfigurationError) as exc_info:
            await registry.get_client_path("mac-only")
        assert exc_info.value.client_id == "mac-only"
        assert exc_info.value.platform == "linux"

    @pytest.mark.asyncio
    async def test_unknown_placeholder_kept_verbatim(self, registry, project_root, monkeypatch):
        monkeypatch.delenv("UNSET_DIR", raising=False)
        await registry.add_client(
            "odd", {"name": "Odd", "global": {"config-path": {"linux": "${UNSET_DIR}/mcp.json"}}}
        )

        path = await registry.get_client_path("odd")
        assert path == project_root / "${UNSET_DIR}" / "mcp.json"


class TestAddClient:
    """Tests for add_client."""

    @pytest.mark.asyncio
    async def test_add_client_persists(self, registry, registry_path, project_root):
        descriptor = ClientDescriptor(
            id="ignored",
            name="Windsurf",
            paths={Scope.GLOBAL: {PathKind.CONFIG: {"linux": "${HOME}/.windsurf/mcp.json"}}},
        )
        await registry.add_client("windsurf", descriptor)

        saved = json.loads(registry_path.read_text())
        assert saved["windsurf"]["name"] == "Windsurf"
        assert saved["windsurf"]["global"]["config-path"]["linux"] == "${HOME}/.windsurf/mcp.json"

        reloaded = ClientRegistry(path=registry_path, project_root=project_root)
        assert (await reloaded.get_client_config("windsurf")).id == "windsurf"

    @pytest.mark.asyncio
    async def test_unknown_config_format_is_rejected(self, registry, registry_path):
        """A dict descriptor with an unsupported configFormat raises ValidationError and is not saved."""
        await registry.load()
        before = registry_path.read_text() if registry_path.exists() else None

        with pytest.raises(ValidationError) as exc_info:
            await registry.add_client("bad", {"name": "Bad", "configFormat": "yaml"})

        assert exc_info.value.field == "configFormat"
        assert exc_info.value.value == "yaml"
        assert "bad" not in [client.id for client in await registry.get_available_clients()]
        after = registry_path.read_text() if registry_path.exists() else None
        assert after == before


class TestMigration:
    """Tests for loading registry files written by earlier releases."""

    @pytest.mark.asyncio
    async def test_legacy_scope_keyed_file(self, registry, registry_path, home):
        _write(
            registry_path,
            {
                "global-paths": {
                    "vscode": {
                        "name": "VS Code",
                        "configKey": "servers",
                        "config-path": {"linux": "${HOME}/.config/Code/User/mcp.json"},
                    }
                },
                "local-paths": {
                    "vscode": {"config-path": {"linux": ".vscode/mcp.json"}},
                },
            },
        )

        descriptor = await registry.get_client_config("vscode")
        assert descriptor.name == "VS Code"
        assert descriptor.config_key == "servers"
        assert await registry.get_client_path("vscode") == home / ".config/Code/User/mcp.json"

        saved = json.loads(registry_path.read_text())
        assert saved["schemaVersion"] == 2
        assert "global-paths" not in saved
        assert saved["vscode"]["local"]["config-path"]["linux"] == ".vscode/mcp.json"
        assert saved["sensitivePatterns"] == DEFAULT_SENSITIVE_PATTERNS

    @pytest.mark.asyncio
    async def test_clients_paths_file(self, registry, registry_path, home):
        _write(
            registry_path,
            {
                "clients": {
                    "claude-code": {
                        "name": "Claude Code",
                        "paths": {"linux": "${HOME}/.claude.json"},
                    }
                },
                "sensitivePatterns": ["password"],
            },
        )

        assert await registry.get_client_path("claude-code") == home / ".claude.json"
        assert await registry.get_sensitive_patterns() == ["password"]

    @pytest.mark.asyncio
    async def test_untagged_client_first_file(self, registry, registry_path):
        _write(registry_path, {"cursor": DEFAULT_CLIENTS["cursor"]})

        clients = await registry.get_available_clients()
        assert [c.id for c in clients] == ["cursor"]
        assert json.loads(registry_path.read_text())["schemaVersion"] == 2

    def test_upgrade_is_noop_for_current_version(self):
        data = {"schemaVersion": 2, "x": {"name": "X"}, "sensitivePatterns": []}
        assert upgrade_registry(data) is data

    def test_upgrade_empty_legacy_file_uses_defaults(self):
        upgraded = upgrade_registry({})
        assert upgraded["schemaVersion"] == 2
        assert set(DEFAULT_CLIENTS) <= set(upgraded)


class TestMalformedRegistry:
    """Tests for registry files that cannot be used."""

    @pytest.mark.asyncio
    async def test_invalid_json(self, registry, registry_path):
        registry_path.parent.mkdir(parents=True)
        registry_path.write_text("{")

        with pytest.raises(StorageError):
            await registry.load()

    @pytest.mark.asyncio
    async def test_invalid_schema_version(self, registry, registry_path):
        _write(registry_path, {"schemaVersion": "two"})

        with pytest.raises(StorageError):
            await registry.load()

    @pytest.mark.asyncio
    async def test_invalid_config_format(self, registry, registry_path):
        _write(registry_path, {"schemaVersion": 2, "x": {"name": "X", "configFormat": "yaml"}})

        with pytest.raises(StorageError):
            await registry.load()

    @pytest.mark.asyncio
    async def test_newer_schema_is_still_read(self, registry, registry_path):
        _write(registry_path, {"schemaVersion": 3, "x": {"name": "X"}, "sensitivePatterns": []})

        clients = await registry.get_available_clients()
        assert [c.id for c in clients] == ["x"]
