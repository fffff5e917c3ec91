"""
cli.py - command line entry point
Commands:
- serve: run the language server (stdio, or TCP with --tcp)
- lookup: show every expansion reachable from a prefix
- complete: resolve completions for a line, cursor at the end
- config: show or change the settings file
Uses Rich for tables and error output.
"""

import argparse
import sys
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from abbrev_completer import __version__
from abbrev_completer.core.keymap import Keymap, KeymapError, load_keymap
from abbrev_completer.core.resolver import resolve_completions, utf16_len
from abbrev_completer.utils.config_manager import (
    DEFAULT_CONFIG_PATH,
    LOG_LEVELS,
    Config,
    ConfigError,
)
from abbrev_completer.utils.logger_utils import setup_logging, time_block

# stdout for results, stderr for problems
console = Console()
err_console = Console(stderr=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="abbrev-completer",
        description="Backslash abbreviation completion language server.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="settings JSON file")
    parser.add_argument("--keymap", help="keymap JSON file (overrides settings)")
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, help="logging threshold"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the language server")
    serve.add_argument("--tcp", action="store_true", help="listen on TCP instead of stdio")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=2087)

    lookup = sub.add_parser("lookup", help="list expansions for a prefix")
    lookup.add_argument("prefix")

    complete = sub.add_parser("complete", help="complete a line with the cursor at its end")
    complete.add_argument("line")

    cfg = sub.add_parser("config", help="show or change settings")
    cfg_sub = cfg.add_subparsers(dest="action", required=True)
    cfg_sub.add_parser("show")
    cfg_set = cfg_sub.add_parser("set")
    cfg_set.add_argument("key")
    cfg_set.add_argument("value")
    return parser


def _keymap(args, cfg: Config) -> Keymap:
    path = args.keymap or cfg["keymap_path"]
    with time_block(f"keymap load ({path})"):
        return load_keymap(path, marker=cfg["marker"])


# COMMANDS -----------------------------------------------------------------
def cmd_serve(args, cfg: Config) -> int:
    setup_logging(cfg["log_path"], args.log_level or cfg["log_level"])
    keymap = _keymap(args, cfg)

    # imported late: pulls in pygls, not needed for the offline commands
    from abbrev_completer.server import start

    start(keymap, cfg["trigger"], tcp=(args.host, args.port) if args.tcp else None)
    return 0


def cmd_lookup(args, cfg: Config) -> int:
    keymap = _keymap(args, cfg)
    results = keymap.lookup(args.prefix)
    if not results:
        console.print("[dim](no expansions)[/dim]")
        return 0

    table = Table(title=Text(f"{cfg['trigger']}{args.prefix}"), box=box.SIMPLE, show_edge=False)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Expansion", style="bold")
    table.add_column("Codepoints", style="dim")
    for i, s in enumerate(results, 1):
        table.add_row(str(i), Text(s), " ".join(f"U+{ord(ch):04X}" for ch in s))
    console.print(table)
    return 0


def cmd_complete(args, cfg: Config) -> int:
    keymap = _keymap(args, cfg)
    line = args.line
    candidates = resolve_completions(keymap, line, 0, utf16_len(line), cfg["trigger"])
    if not candidates:
        console.print("[dim](no suggestions)[/dim]")
        return 0

    table = Table(title="Completions", box=box.SIMPLE, show_edge=False)
    table.add_column("Label", style="bold")
    table.add_column("Insert", style="green")
    table.add_column("Span", justify="right", style="magenta")
    for c in candidates:
        span = c.replacement_span
        table.add_row(Text(c.display_label), Text(c.replacement_text), f"{span.start}-{span.end}")
    console.print(table)
    return 0


def cmd_config(args, cfg: Config) -> int:
    if args.action == "set":
        cfg.set(args.key, args.value)
        shown = escape(repr(cfg[args.key]))
        console.print(f"[green]saved[/green] {escape(args.key)} -> {shown} ({escape(cfg.path)})")
        return 0

    table = Table(title=Text(cfg.path), box=box.SIMPLE, show_edge=False)
    table.add_column("Option", style="cyan")
    table.add_column("Value")
    for k, v in cfg.show():
        table.add_row(k, Text(repr(v)))
    console.print(table)
    return 0


COMMANDS = {
    "serve": cmd_serve,
    "lookup": cmd_lookup,
    "complete": cmd_complete,
    "config": cmd_config,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = Config(args.config)
        if args.command != "serve":
            setup_logging(None, args.log_level or "WARNING")
        return COMMANDS[args.command](args, cfg)
    except (KeymapError, ConfigError) as e:
        err_console.print(f"[bold red]error:[/bold red] {escape(str(e))}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
