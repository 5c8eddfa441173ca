#!/usr/bin/env python3
"""
Command-line entry point for the Mathematica MCP server.

Serve over stdio (what MCP clients launch):
    wolfram-bridge

Check the environment instead of serving:
    wolfram-bridge --check
"""

import argparse
import logging
import sys
from importlib import metadata
from typing import List, Optional

from fastmcp.utilities.logging import configure_logging

from . import __version__
from .config import BridgeConfig
from .engine import WolframScriptEngine
from .server import BridgeServer

logger = logging.getLogger(__name__)

# ANSI colors
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
RESET = "\033[0m"
BOLD = "\033[1m"

REQUIRED_PACKAGES = ["fastmcp", "mcp", "wolframclient"]


def check_mark(ok: bool) -> str:
    return f"{GREEN}✓{RESET}" if ok else f"{RED}✗{RESET}"


def check_python_package(name: str) -> tuple[bool, str]:
    """Check if a distribution is installed and report its version."""
    try:
        return True, metadata.version(name)
    except metadata.PackageNotFoundError:
        return False, "not installed"


def check_environment(config: BridgeConfig, out=None) -> bool:
    """
    Print an environment report; returns True when wolframscript is reachable.

    Reports go to stderr by default, stdout belongs to the MCP transport.
    """
    out = out or sys.stderr

    print(f"\n{BOLD}Wolfram Bridge Environment Check{RESET}", file=out)
    print("=" * 40, file=out)

    py_version = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    py_ok = sys.version_info >= (3, 10)
    print(f"\n{BOLD}Python{RESET}", file=out)
    print(f"  {check_mark(py_ok)} Python {py_version} {'(need >= 3.10)' if not py_ok else ''}",
          file=out)

    print(f"\n{BOLD}Required Python Packages{RESET}", file=out)
    for pkg in REQUIRED_PACKAGES:
        ok, version = check_python_package(pkg)
        print(f"  {check_mark(ok)} {pkg}: {version}", file=out)

    print(f"\n{BOLD}Wolfram Language{RESET}", file=out)
    engine_ok = WolframScriptEngine(config).is_available()
    if engine_ok:
        print(f"  {check_mark(True)} wolframscript reachable: {config.wolframscript_path}",
              file=out)
    else:
        print(f"  {check_mark(False)} wolframscript not reachable: {config.wolframscript_path}",
              file=out)
        print("      Install Mathematica or the free Wolfram Engine and put", file=out)
        print("      wolframscript on PATH (or set WOLFRAMSCRIPT_PATH).", file=out)

    print(f"\n{'=' * 40}", file=out)
    status = f"{GREEN}Ready{RESET}" if engine_ok else f"{YELLOW}Not ready{RESET}"
    print(f"{BOLD}Status:{RESET} {status}\n", file=out)
    return engine_ok


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wolfram-bridge",
        description="MCP server that executes Mathematica code via wolframscript",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('--check', action='store_true',
                        help='Check the environment and exit')
    parser.add_argument('--wolframscript', metavar='PATH',
                        help='Path to wolframscript (default: $WOLFRAMSCRIPT_PATH or PATH lookup)')
    parser.add_argument('--timeout', type=float,
                        help='Seconds before a call is killed, 0 for no limit')
    parser.add_argument('--availability-ttl', type=float,
                        help='Seconds to reuse a reachability check result')
    parser.add_argument('--log-level',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Logging level (written to stderr)')
    return parser


def config_from_args(args: argparse.Namespace) -> BridgeConfig:
    config = BridgeConfig()
    if args.wolframscript:
        config.wolframscript_path = args.wolframscript
    if args.timeout is not None:
        config.timeout = args.timeout
    if args.availability_ttl is not None:
        config.availability_ttl = args.availability_ttl
    if args.log_level:
        config.log_level = args.log_level
    return config


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    configure_logging(level=config.log_level, logger=logging.getLogger("wolfram_bridge"))

    if args.check:
        return 0 if check_environment(config) else 1

    server = BridgeServer(config)
    try:
        server.start()
    except Exception:
        logger.exception("Server error")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
