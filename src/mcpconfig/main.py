"""mcpconfig command-line entry point."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from mcpconfig import __version__
from mcpconfig.config.settings import get_settings
from mcpconfig.core.scope import Scope
from mcpconfig.logging import configure_logging

SCOPES = [str(scope) for scope in Scope]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcpconfig", description="Manage and distribute MCP server configuration"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--project-root", help="Project directory holding local configuration (default: cwd)"
    )
    subparsers = parser.add_subparsers(dest="command")

    # config
    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_subparsers = config_parser.add_subparsers(dest="config_command")

    config_set_parser = config_subparsers.add_parser("set", help="Set a configuration value")
    config_set_parser.add_argument("key", help="Dot-separated key (e.g., server.port)")
    config_set_parser.add_argument("value", help="Value; parsed as JSON when possible")
    config_set_parser.add_argument("--scope", choices=SCOPES, default="local")
    config_set_parser.add_argument(
        "--string", dest="as_string", action="store_true", help="Store the value as text"
    )

    config_get_parser = config_subparsers.add_parser("get", help="Show the value of a key")
    config_get_parser.add_argument("key", help="Dot-separated key")
    config_get_parser.add_argument(
        "--source", dest="show_source", action="store_true", help="Show where the value came from"
    )

    config_list_parser = config_subparsers.add_parser("list", help="List all configuration")
    config_list_parser.add_argument(
        "--reveal-secrets", action="store_true", help="Show secret values instead of ****"
    )

    config_delete_parser = config_subparsers.add_parser("delete", help="Delete a key")
    config_delete_parser.add_argument("key", help="Dot-separated key")
    config_delete_parser.add_argument("--scope", choices=SCOPES, default="local")
    config_delete_parser.add_argument("-y", "--yes", action="store_true", help="Do not ask")

    # clients
    subparsers.add_parser("clients", help="List registered MCP clients")

    # distribute
    distribute_parser = subparsers.add_parser(
        "distribute", help="Write configuration into MCP client files"
    )
    distribute_parser.add_argument(
        "--client",
        dest="client_ids",
        action="append",
        help="Only this client (repeatable); unknown ids fail before anything is written",
    )

    # load-env
    load_env_parser = subparsers.add_parser(
        "load-env", help="Print secrets as shell exports (eval \"$(mcpconfig load-env)\")"
    )
    load_env_parser.add_argument("--scope", choices=SCOPES, default="local")

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(get_settings().log_level.upper())
    project_root = args.project_root

    if args.command == "config":
        from mcpconfig.config.cli import (
            config_delete_command,
            config_get_command,
            config_list_command,
            config_set_command,
        )

        if args.config_command == "set":
            sys.exit(
                config_set_command(
                    args.key,
                    args.value,
                    scope=args.scope,
                    as_string=args.as_string,
                    project_root=project_root,
                )
            )
        if args.config_command == "get":
            sys.exit(
                config_get_command(args.key, show_source=args.show_source, project_root=project_root)
            )
        if args.config_command == "list":
            sys.exit(
                config_list_command(reveal_secrets=args.reveal_secrets, project_root=project_root)
            )
        if args.config_command == "delete":
            sys.exit(
                config_delete_command(
                    args.key, scope=args.scope, yes=args.yes, project_root=project_root
                )
            )
        parser.parse_args(["config", "--help"])
        return

    if args.command == "clients":
        from mcpconfig.config.cli import clients_command

        sys.exit(clients_command(project_root=project_root))

    if args.command == "distribute":
        from mcpconfig.config.cli import distribute_command

        sys.exit(distribute_command(client_ids=args.client_ids, project_root=project_root))

    if args.command == "load-env":
        from mcpconfig.config.cli import load_env_command

        sys.exit(load_env_command(scope=args.scope, project_root=project_root))

    parser.print_help()


if __name__ == "__main__":
    main()
