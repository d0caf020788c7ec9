"""
CLI commands for configuration management and distribution.

Commands:
    mcpconfig config set KEY VALUE   - Set a value (secrets are detected by key name)
    mcpconfig config get KEY         - Show the effective value of a key
    mcpconfig config list            - Show every key with its source
    mcpconfig config delete KEY      - Remove a key from one scope
    mcpconfig clients                - List registered MCP clients
    mcpconfig distribute             - Push configuration into client files
    mcpconfig load-env               - Print secrets as shell exports

Human-readable output goes to stderr. Only ``config get`` and ``load-env``
write to stdout, so both can be used in shell pipelines.
"""

from __future__ import annotations

import asyncio
import json
import shlex
from pathlib import Path
from typing import Any

from mcpconfig.cli import ux
from mcpconfig.config.manager import ConfigManager
from mcpconfig.core.errors import main_with_error_handling
from mcpconfig.core.scope import Scope

MASK = "****"


def parse_value(raw: str, as_string: bool = False) -> Any:
    """Interpret a command-line value as JSON when possible.

    ``3000`` becomes an int, ``true`` a bool, ``{"a": 1}`` an object; anything
    that is not valid JSON is kept as text.
    """
    if as_string:
        return raw
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _display(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _manager(project_root: str | None) -> ConfigManager:
    return ConfigManager(project_root=Path(project_root) if project_root else None)


@main_with_error_handling()
def config_set_command(
    key: str,
    value: str,
    scope: str = "local",
    as_string: bool = False,
    project_root: str | None = None,
) -> int:
    """Set a configuration value."""
    manager = _manager(project_root)
    sensitive = asyncio.run(manager.set(key, parse_value(value, as_string), Scope(scope)))

    store = "secrets" if sensitive else "config"
    ux.success(f"Set {key} in {scope} {store}")
    return 0


@main_with_error_handling()
def config_get_command(
    key: str,
    show_source: bool = False,
    project_root: str | None = None,
) -> int:
    """Print the effective value of a key to stdout."""
    manager = _manager(project_root)
    resolved = asyncio.run(manager.get(key))
    if resolved is None:
        ux.warning(f"{key} is not set")
        return 1

    print(_display(resolved.value))
    if show_source:
        ux.print_key_value({"source": resolved.source, "path": str(resolved.path)})
    return 0


@main_with_error_handling()
def config_list_command(reveal_secrets: bool = False, project_root: str | None = None) -> int:
    """Show every key with its effective value and source."""
    manager = _manager(project_root)
    values = asyncio.run(manager.get_all())
    if not values:
        ux.info(f"No configuration stored for {manager.server_name}")
        return 0

    rows = []
    for resolved in values:
        secret = resolved.source.endswith("secret")
        shown = MASK if secret and not reveal_secrets else _display(resolved.value)
        rows.append([resolved.key, shown, resolved.source])
    ux.print_table(f"Configuration: {manager.server_name}", ["Key", "Value", "Source"], rows)
    return 0


@main_with_error_handling()
def config_delete_command(
    key: str,
    scope: str = "local",
    yes: bool = False,
    project_root: str | None = None,
) -> int:
    """Remove a key from both stores of one scope."""
    if not yes and ux.is_interactive():
        if not ux.confirm(f"Delete {key} from {scope} configuration?"):
            ux.info("Aborted")
            return 0

    manager = _manager(project_root)
    removed = asyncio.run(manager.delete(key, Scope(scope)))
    if removed:
        ux.success(f"Deleted {key} from {scope} configuration")
    else:
        ux.warning(f"{key} was not set in {scope} configuration")
    return 0


@main_with_error_handling()
def clients_command(project_root: str | None = None) -> int:
    """List the MCP clients known to the registry."""
    manager = _manager(project_root)
    clients = asyncio.run(manager.get_available_clients())

    rows = [
        [client.id, client.name, "yes" if client.auto_load_env else "no"] for client in clients
    ]
    ux.print_table("MCP clients", ["ID", "Name", "Loads .env"], rows)
    return 0


@main_with_error_handling()
def distribute_command(client_ids: list[str] | None = None, project_root: str | None = None) -> int:
    """Write the current configuration into client files."""
    manager = _manager(project_root)
    if client_ids:
        outcomes = asyncio.run(manager.distribute_to_clients(client_ids))
    else:
        outcomes = asyncio.run(manager.distribute())

    if not outcomes:
        ux.warning("No installed clients found")
        return 0
    for outcome in outcomes:
        ux.success(f"{outcome.client_id}: {outcome.path}")
    return 0


@main_with_error_handling()
def load_env_command(scope: str = "local", project_root: str | None = None) -> int:
    """Print secrets as ``export NAME=value`` lines for ``eval``."""
    manager = _manager(project_root)
    env = asyncio.run(manager.load_environment(Scope(scope)))
    for name, value in env.items():
        print(f"export {name}={shlex.quote(value)}")
    ux.info(f"Loaded {len(env)} variable(s) from {scope} secrets")
    return 0
