"""Keeps the local secrets file out of version control."""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog

from mcpconfig.config.settings import APP_NAME
from mcpconfig.core.scope import Scope

logger = structlog.get_logger()


class GitignoreManager:
    """Adds the local secrets file to the project's ``.gitignore``.

    Best-effort: failures are logged and never raised.
    """

    def __init__(self, project_root: Path, secrets_path: Path):
        self.project_root = project_root
        self.secrets_path = secrets_path

    @property
    def gitignore_path(self) -> Path:
        return self.project_root / ".gitignore"

    def _entry(self) -> str:
        try:
            return self.secrets_path.relative_to(self.project_root).as_posix()
        except ValueError:
            return self.secrets_path.name

    def _covered(self, lines: list[str], entry: str) -> bool:
        patterns = {entry, f"/{entry}", ".env", "**/.env", self.secrets_path.name}
        parent = Path(entry).parent.as_posix()
        if parent != ".":
            patterns.update({f"{parent}/", f"/{parent}/", parent, f"/{parent}"})
        return any(line.strip() in patterns for line in lines)

    def _ensure_sync(self) -> bool:
        entry = self._entry()
        path = self.gitignore_path
        content = path.read_text(encoding="utf-8") if path.exists() else ""
        lines = content.splitlines()
        if self._covered(lines, entry):
            return False

        addition = f"# {APP_NAME} sensitive configuration\n{entry}\n"
        if content and not content.endswith("\n"):
            content += "\n"
        if content:
            content += "\n"
        path.write_text(content + addition, encoding="utf-8")
        return True

    async def ensure(self, scope: Scope = Scope.LOCAL) -> None:
        # Global secrets live outside the project
        if scope == Scope.GLOBAL:
            return
        try:
            added = await asyncio.to_thread(self._ensure_sync)
        except Exception as e:
            logger.debug("gitignore_update_failed", path=str(self.gitignore_path), error=str(e))
            return
        if added:
            logger.info("gitignore_updated", path=str(self.gitignore_path))
