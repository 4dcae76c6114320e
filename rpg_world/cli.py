from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import orjson
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table
from rich.tree import Tree

from rpg_world.config import load_config
from rpg_world.config.loader import masked_env_snapshot
from rpg_world.config.schema import AppConfigRoot
from rpg_world.domain.errors import WorldError
from rpg_world.domain.models import Location
from rpg_world.storage import build_store
from rpg_world.tools import ToolRegistry
from rpg_world.utils.logging import setup_logging
from rpg_world.world import WorldService

console = Console()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rpg-world")
    parser.add_argument("--config", type=Path, default=None, help="Path to custom config YAML")
    parser.add_argument("--profile", type=str, default=None, help="Config profile name")
    parser.add_argument("--data-dir", type=Path, default=None, help="Override data directory")
    parser.add_argument("--backend", choices=["json", "sqlite"], default=None, help="Override storage backend")
    parser.add_argument("--store-path", type=Path, default=None, help="Override world file/database path")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("config", help="Validate and print effective config")
    subparsers.add_parser("tools", help="List the available world tools")

    call_parser = subparsers.add_parser("call", help="Call one world tool")
    call_parser.add_argument("tool", type=str, help="Tool name, e.g. create_location")
    call_parser.add_argument("--args", type=str, default="{}", help="Tool arguments as a JSON object")

    subparsers.add_parser("tree", help="Render the location tree")
    subparsers.add_parser("check", help="Report references to deleted locations or characters")

    return parser


def _build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.data_dir:
        overrides["app"] = {"data_dir": str(args.data_dir)}

    if args.backend:
        overrides["storage"] = {"backend": args.backend}
    return overrides


def _apply_store_path(config: AppConfigRoot, store_path: Path | None) -> None:
    if store_path is None:
        return
    resolved = store_path.expanduser().resolve()
    if config.storage.backend == "sqlite":
        config.storage.sqlite_path = resolved
    else:
        config.storage.json_path = resolved


def _parse_tool_args(raw: str) -> dict[str, Any]:
    try:
        payload = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ValueError(f"--args is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError("--args must be a JSON object")
    return payload


def _print_config(config: AppConfigRoot) -> None:
    console.print(Panel(Pretty(config.model_dump(mode="json")), title="Effective Config"))
    console.print(Panel(Pretty(masked_env_snapshot()), title="Env Snapshot"))


def _print_tools(registry: ToolRegistry) -> None:
    table = Table(title="World Tools", show_header=True, header_style="bold")
    table.add_column("Tool")
    table.add_column("Description")
    for tool in registry.list_tools():
        table.add_row(tool["name"], tool["description"])
    console.print(table)


def _render_tree(root: Location) -> Tree:
    def _label(node: Location) -> str:
        return f"[bold]{node.name}[/bold] [dim](id={node.id})[/dim]"

    def _attach(branch: Tree, node: Location) -> None:
        for child in node.children:
            _attach(branch.add(_label(child)), child)

    tree = Tree(_label(root))
    _attach(tree, root)
    return tree


def _print_dangling(service: WorldService) -> None:
    dangling = service.dangling_references()
    if not dangling:
        console.print(Panel("No dangling references.", title="Integrity"))
        return
    table = Table(title="Dangling References", show_header=True, header_style="bold")
    table.add_column("Entity")
    table.add_column("ID")
    table.add_column("Field")
    table.add_column("Missing ID")
    for ref in dangling:
        table.add_row(ref.entity, str(ref.entity_id), ref.attribute, str(ref.missing_id))
    console.print(table)


def run(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    config = load_config(
        config_path=args.config,
        profile=args.profile,
        overrides=_build_overrides(args),
    )
    _apply_store_path(config, args.store_path)

    setup_logging(config.app.log_level)
    logger.debug("Loaded configuration")

    if args.command == "config":
        _print_config(config)
        return 0

    try:
        service = WorldService(build_store(config.storage))
    except WorldError as exc:
        console.print(Panel(exc.message, title=exc.kind.value, style="red"))
        return 1
    registry = ToolRegistry(service, config)

    if args.command == "tools":
        _print_tools(registry)
        return 0

    if args.command == "call":
        try:
            tool_args = _parse_tool_args(args.args)
        except ValueError as exc:
            parser.error(str(exc))
        result = registry.call(args.tool, tool_args)
        if result.is_error:
            kind = result.kind.value if result.kind else "Error"
            console.print(Panel(result.text, title=kind, style="red"))
            return 1
        console.print(result.text, markup=False, highlight=False)
        return 0

    if args.command == "tree":
        if service.state.root is None:
            console.print(Panel("No world exists yet.", title="Tree"))
            return 1
        console.print(_render_tree(service.state.root))
        return 0

    if args.command == "check":
        _print_dangling(service)
        return 0

    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
