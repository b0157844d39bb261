# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Main CLI for wire-evolve."""

import logging
import os
import sys
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from .config import find_config_path, load_config
from .commands.check import check
from .commands.inspect import inspect_chain
from .commands.update_config import update_config
from .commands.upgrade import upgrade

console = Console()


@click.group(context_settings={'help_option_names': ['-h', '--help']})
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=True),
    help='Path to configuration file'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Show detailed debug output'
)
@click.pass_context
def cli(ctx, config: Optional[str], debug: bool):
    """Inspect, check and upgrade versioned wire data."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    ctx.obj['config_path'] = find_config_path(config)

    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)]
        )

    # Targets are imported from the project being worked on
    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())

    # update-config reads the raw file itself
    if ctx.invoked_subcommand == 'update-config':
        ctx.obj['config'] = None
        return

    if ctx.obj['config_path'] is None:
        ctx.obj['config'] = None
        return
    try:
        ctx.obj['config'] = load_config(str(ctx.obj['config_path']))
    except Exception as e:
        console.print(f"[red]Error loading config {ctx.obj['config_path']}: {e}[/red]")
        sys.exit(1)


# Register commands
cli.add_command(inspect_chain)
cli.add_command(check)
cli.add_command(upgrade)
cli.add_command(update_config)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
