# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

import click
from rich.console import Console
from rich.table import Table

from ..errors import type_name
from . import load_chain

console = Console()


@click.command('inspect', context_settings={'help_option_names': ['-h', '--help']})
@click.argument('target')
@click.pass_context
def inspect_chain(ctx, target: str):
    """
    Show the versions and conversions of a chain.

    TARGET is a configured target name or a 'package.module:ATTRIBUTE' path
    naming a chain or a domain type bound to one.

    Examples:

      wire-evolve inspect user

      wire-evolve inspect myapp.models:USER_VERSIONS
    """
    chain = load_chain(ctx, target)

    table = Table(title=f"{chain.name} ({chain.mode})")
    table.add_column("Version", style="cyan", justify="right")
    table.add_column("Tag", style="green")
    table.add_column("Type", style="yellow")
    table.add_column("Converts to", style="magenta")
    table.add_column("Conversion", style="blue")
    table.add_column("Fallible")

    for entry, edge in zip(chain.entries, chain.edges):
        table.add_row(
            str(entry.ordinal),
            entry.tag,
            type_name(entry.type_id),
            type_name(edge.target),
            edge.name,
            "yes" if edge.fallible else "no"
        )

    console.print(table)
    console.print(f"Domain type:  [yellow]{type_name(chain.domain_type)}[/yellow]")
    console.print(f"Current tag:  [green]{chain.current_tag}[/green] (field [dim]{chain.tag_field}[/dim])")
    console.print(f"Projection:   {chain.projection.name}")
    console.print(f"Transparent:  {'yes' if chain.transparent else 'no'}")
