# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Command line subcommands."""

import sys

from rich.console import Console

from ..chain import Chain
from ..config import resolve_chain
from ..errors import ChainDefinitionError

console = Console()


def load_chain(ctx, target: str) -> Chain:
    """Resolve a target for a command, exiting with an error message on failure."""
    config = ctx.obj.get('config') if ctx.obj else None
    try:
        return resolve_chain(target, config)
    except ChainDefinitionError as e:
        console.print(f"[red]Invalid chain {target}: {e}[/red]")
    except (ImportError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
    sys.exit(1)
