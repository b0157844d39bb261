# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

import sys
from typing import Tuple

import click
from rich.console import Console

from ..config import resolve_chain
from ..errors import ChainDefinitionError

console = Console()


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.argument('targets', nargs=-1)
@click.pass_context
def check(ctx, targets: Tuple[str, ...]):
    """
    Check that chains are complete.

    Imports every TARGET (all configured targets by default), which runs the
    definition-time validation of its chain. Exits with status 1 if any chain
    is missing a conversion or is otherwise invalid. Meant for CI.
    """
    config = ctx.obj.get('config')
    if not targets:
        if config is None or not config.targets:
            console.print("[red]Error: No targets given and none configured[/red]")
            sys.exit(1)
        targets = tuple(config.get_target_names())

    failures = 0
    for target in targets:
        try:
            chain = resolve_chain(target, config)
        except (ChainDefinitionError, ImportError, ValueError) as e:
            console.print(f"[red]✗ {target}: {e}[/red]")
            failures += 1
            continue
        console.print(
            f"[green]✓ {target}[/green] [dim]{chain.name}: {len(chain)} version(s), "
            f"current {chain.current_tag}, {chain.mode}[/dim]"
        )

    if failures:
        console.print(f"\n[red]{failures} of {len(targets)} chain(s) failed[/red]")
        sys.exit(1)
    console.print(f"\n[green]All {len(targets)} chain(s) are complete[/green]")
