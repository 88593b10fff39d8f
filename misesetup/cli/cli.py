#!/usr/bin/env python3

import argparse
import sys
from typing import List, Optional

from colorama import Fore, Style

from .. import __version__
from ..core.context import ActionContext
from ..core.manager import MiseManager
from ..core.operations import run_action, save_mise_cache


def parse_args(argv: Optional[List[str]] = None):
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(
        prog="mise-setup",
        description=f"mise-setup v{__version__} - Install mise in a CI job and export its environment",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Inputs are read from INPUT_<NAME> environment variables, e.g.\n"
            "INPUT_VERSION=2024.5.0 INPUT_INSTALL=false mise-setup run"
        ),
    )
    parser.add_argument(
        "--version", action="store_true", help="Show the version and exit"
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=["run", "save"],
        default="run",
        help="run: install mise and export its environment (default); "
        "save: store the mise data directory in the cache (post step)",
    )
    return parser.parse_args(argv)


def run_cli(argv: Optional[List[str]] = None) -> None:
    """Run the command-line interface"""
    args = parse_args(argv)

    if args.version:
        print(f"mise-setup v{__version__}")
        return

    context = ActionContext()
    if args.command == "save":
        save_mise_cache(context)
    else:
        run_action(context, MiseManager(context))

    if context.failed:
        print(f"{Fore.RED}❌ mise-setup {args.command} failed{Style.RESET_ALL}")
        sys.exit(context.exit_code)


if __name__ == "__main__":
    run_cli()
