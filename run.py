"""undercroft CLI entry point.

Provides subcommands for generating a dungeon in the terminal and for
running the JSON API server. Accepts configuration via flags and environment
variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import just_fix_windows_console
from dotenv import load_dotenv

from undercroft import __version__

just_fix_windows_console()

# Disable colors if output is not a real terminal (e.g., during pytest capture)
try:
    _COLOR_ENABLED = sys.stdout.isatty()
except (AttributeError, ValueError):  # pragma: no cover - environment dependent
    _COLOR_ENABLED = False


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    undercroft dungeon generator

    Generate a seeded single-floor dungeon in the terminal, or run the JSON API
    server. Generation settings can come from CLI flags or UNDERCROFT_DUNGEON_*
    environment variables. If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                         Bind address for the web server (default: 127.0.0.1)
          PORT                         Port for the web server (default: 5000)
          UNDERCROFT_DUNGEON_<FIELD>   Any DungeonConfig field, e.g. UNDERCROFT_DUNGEON_ROOM_COUNT=12
          UNDERCROFT_LOG_LEVEL         debug | info | warn | error (default: info)
          UNDERCROFT_LOG_JSON          1 to emit JSON log records

        Examples:
          # Print a dungeon for seed 42
          python run.py generate --seed 42

          # Smaller map, wider corridors, machine readable output
          python run.py generate --seed 7 --width 40 --height 30 --corridor-width 2 --json

          # Run the API server on a custom port
          python run.py server --port 8080

          # Load variables from .env then run the server
          python run.py --env-file .env server

          # Only warnings and errors on stderr
          python run.py --log-level warn generate --seed 42
        """
    )

    parser = argparse.ArgumentParser(
        prog="undercroft",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=("debug", "info", "warn", "error"),
        default=None,
        help="Minimum log level (overrides UNDERCROFT_LOG_LEVEL)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"undercroft {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate a dungeon and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate one dungeon and print an ASCII map plus generation metrics",
    )
    gen_parser.add_argument("--seed", type=int, default=None, help="Seed (0 or omitted: random)")
    gen_parser.add_argument("--width", type=int, default=None, help="Grid width in cells")
    gen_parser.add_argument("--height", type=int, default=None, help="Grid height in cells")
    gen_parser.add_argument(
        "--rooms", dest="room_count", type=int, default=None, help="Target room count (0: use attempt budget)"
    )
    gen_parser.add_argument(
        "--corridor-width", dest="corridor_width", type=int, default=None, help="Corridor width in cells"
    )
    gen_parser.add_argument(
        "--extra-policy",
        dest="extra_policy",
        choices=("probability", "ratio", "long_random"),
        default=None,
        help="How loop-forming extra edges are chosen",
    )
    gen_parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Print the dungeon as JSON instead of an ASCII map",
    )
    gen_parser.set_defaults(command="generate")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the JSON API web server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask development server exposing /api/dungeon",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 127.0.0.1)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # If no subcommand provided, default to generate
    if len(argv) == 0:
        argv = ["generate"]

    return parser.parse_args(argv)


def _label(text: str, width: int = 12) -> str:
    # Pad before colouring; escape codes would otherwise count toward the width.
    padded = f"{text:<{width}}"
    return f"{Fore.YELLOW}{padded}{Style.RESET_ALL}" if _COLOR_ENABLED else padded


def _value(val) -> str:
    return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)


def _divider() -> str:
    return (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40


def run_generate(args) -> int:
    from undercroft.dungeon import DungeonConfig, generate_dungeon, to_ascii

    overrides = {
        k: getattr(args, k)
        for k in ("seed", "width", "height", "room_count", "corridor_width", "extra_policy")
        if getattr(args, k, None) is not None
    }
    try:
        config = DungeonConfig.from_env(**overrides)
    except ValueError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2
    dungeon = generate_dungeon(config)

    if getattr(args, "as_json", False):
        print(json.dumps(dungeon.to_dict()))
        return 0

    print(to_ascii(dungeon.grid))
    m = dungeon.metrics
    lines = [
        _divider(),
        f"  {_label('Seed:')} {_value(dungeon.seed)}",
        f"  {_label('Size:')} {_value(f'{dungeon.width}x{dungeon.height}')}",
        f"  {_label('Rooms:')} {_value(m['rooms_placed'])} / {m['rooms_target'] or '-'}",
        f"  {_label('Edges:')} {_value(m['tree_edges'])} tree + {m['extra_edges']} extra ({m['candidate_source']})",
        f"  {_label('Fallbacks:')} {_value(m['fallback_paths'])}",
        f"  {_label('Bridges:')} {_value(m['forced_bridges'])}",
        f"  {_label('Runtime:')} {_value(str(m['runtime_ms']) + ' ms')}",
        _divider(),
    ]
    print("\n".join(lines))
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()
    if getattr(args, "log_level", None):
        from undercroft import logging_utils

        logging_utils.set_level(args.log_level)

    mode = (getattr(args, "command", None) or "generate").lower()
    if mode == "generate":
        return run_generate(args)

    host = getattr(args, "host", None) or os.getenv("HOST", "127.0.0.1")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoint only after environment is ready
    from undercroft import server

    title = (
        f"{Fore.CYAN}{Style.BRIGHT}undercroft API Server{Style.RESET_ALL}"
        if _COLOR_ENABLED
        else "undercroft API Server"
    )
    lines = [
        _divider(),
        f"  {title}",
        _divider(),
        f"  {_label('Mode:')} {_value(mode.upper())}",
        f"  {_label('Host:')} {_value(host)}",
        f"  {_label('Port:')} {_value(port)}",
        f"  {_label('Version:')} {_value(__version__)}",
        _divider(),
        "",
    ]
    print("\n".join(lines))

    from undercroft.logging_utils import log

    log.info(event="startup", mode=mode, host=host, port=port)
    server.start_server(host=host, port=port, debug=bool(getattr(args, "debug", False)))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
