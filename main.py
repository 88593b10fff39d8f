#!/usr/bin/env python3

"""
mise-setup - Install mise in a CI job, cache its data directory and export
its environment

Usage:
  mise-setup [run|save] [options]

Commands:
  run              Write config files, restore the cache, install mise,
                   run `mise install` and export `mise env --json` (default)
  save             Save the mise data directory to the cache (post step)

Options:
  --version        Show the version and exit
  --help           Show this help message

Inputs are read from INPUT_<NAME> environment variables:
  version, cache, cache_save, cache_key_prefix, experimental, install,
  install_dir, tool_versions, mise_toml

The mise binary is downloaded over HTTPS with requests and marked
executable in-process, so curl and chmod do not need to be installed.

The cache store lives in ~/.cache/mise-setup unless MISE_SETUP_CACHE_DIR
is set.
"""

from misesetup import run_cli

if __name__ == "__main__":
    run_cli()
