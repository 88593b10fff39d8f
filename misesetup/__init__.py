#!/usr/bin/env python3

"""
mise-setup - Install mise in a CI job
Features:
- Downloads the mise binary for the runner's platform
- Restores and saves the mise data directory keyed on config file contents
- Optionally writes .tool-versions / .mise.toml and runs `mise install`
- Exports the environment reported by `mise env --json`
"""

__version__ = "0.1.0"

from .core.context import ActionContext
from .core.manager import MiseManager, ExecOutput
from .core.operations import run_action, save_mise_cache
from .cli.cli import run_cli
