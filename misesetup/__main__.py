from .cli.cli import run_cli

run_cli()
