"""Tests for .gitignore maintenance."""

from unittest.mock import patch

import pytest

from mcpconfig.core.scope import Scope
from mcpconfig.storage.gitignore import GitignoreManager


@pytest.fixture
def manager(project_root):
    return GitignoreManager(project_root, project_root / ".mcpconfig" / ".env")


class TestGitignoreManager:
    """Tests for GitignoreManager.ensure."""

    @pytest.mark.asyncio
    async def test_creates_gitignore(self, manager, project_root):
        await manager.ensure()

        content = (project_root / ".gitignore").read_text()
        assert content == "# mcpconfig sensitive configuration\n.mcpconfig/.env\n"

    @pytest.mark.asyncio
    async def test_appends_to_existing_file(self, manager, project_root):
        (project_root / ".gitignore").write_text("node_modules/")

        await manager.ensure()

        lines = (project_root / ".gitignore").read_text().splitlines()
        assert lines[0] == "node_modules/"
        assert lines[-1] == ".mcpconfig/.env"

    @pytest.mark.asyncio
    async def test_is_idempotent(self, manager, project_root):
        await manager.ensure()
        await manager.ensure()

        content = (project_root / ".gitignore").read_text()
        assert content.count(".mcpconfig/.env") == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("existing", [".env", "**/.env", ".mcpconfig/", "/.mcpconfig/.env"])
    async def test_existing_pattern_is_respected(self, manager, project_root, existing):
        (project_root / ".gitignore").write_text(f"{existing}\n")

        await manager.ensure()

        assert (project_root / ".gitignore").read_text() == f"{existing}\n"

    @pytest.mark.asyncio
    async def test_global_scope_is_skipped(self, manager, project_root):
        await manager.ensure(Scope.GLOBAL)
        assert not (project_root / ".gitignore").exists()

    @pytest.mark.asyncio
    async def test_failures_are_swallowed(self, manager, project_root):
        with patch.object(GitignoreManager, "_ensure_sync", side_effect=PermissionError("denied")):
            await manager.ensure()

        assert not (project_root / ".gitignore").exists()
