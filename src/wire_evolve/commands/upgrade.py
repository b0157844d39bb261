# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console

from ..codecs import get_codec
from ..errors import DecodeError
from . import load_chain

console = Console()


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.argument('target')
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--codec',
    type=click.Choice(['json', 'toml'], case_sensitive=False),
    help='Wire format of the files (default: configured codec, else the chain\'s own)'
)
@click.option('--dry-run', is_flag=True, help='Show what would be upgraded without making changes')
@click.pass_context
def upgrade(ctx, target: str, files: Tuple[str, ...], codec: Optional[str], dry_run: bool):
    """
    Rewrite stored documents at the current version of a chain.

    Every FILE is decoded, migrated to the domain type and written back as
    the latest version. Files already at the latest version are left as they
    are.

    Examples:

      wire-evolve upgrade user data/users/*.json

      wire-evolve upgrade myapp.models:User settings.toml --codec toml --dry-run
    """
    chain = load_chain(ctx, target)
    config = ctx.obj.get('config')

    if codec:
        indent = config.indent if config is not None else None
        wire_codec = get_codec(codec, indent=indent) if codec.lower() == "json" else get_codec(codec)
    elif config is not None:
        wire_codec = config.get_codec()
    else:
        wire_codec = chain.codec

    upgraded = 0
    failures = 0
    for file_name in files:
        path = Path(file_name)
        try:
            document = wire_codec.loads(path.read_bytes())
            rep = chain.decode_document(document)
        except DecodeError as e:
            console.print(f"[red]✗ {path}: {e}[/red]")
            failures += 1
            continue
        except Exception as e:
            console.print(f"[red]✗ {path}: could not parse file: {e}[/red]")
            failures += 1
            continue

        if rep.is_current():
            console.print(f"[dim]• {path}: already at v{rep.tag}[/dim]")
            continue

        try:
            latest = chain.upgrade(rep)
        except Exception as e:
            console.print(f"[red]✗ {path}: migration from v{rep.tag} failed: {e}[/red]")
            failures += 1
            continue

        if dry_run:
            console.print(f"[yellow]• {path}: would upgrade v{rep.tag} → v{latest.tag}[/yellow]")
        else:
            text = wire_codec.dumps(chain.encode_document(latest))
            if not text.endswith("\n"):
                text += "\n"
            path.write_text(text, encoding='utf-8')
            console.print(f"[green]✓ {path}: upgraded v{rep.tag} → v{latest.tag}[/green]")
        upgraded += 1

    if dry_run:
        console.print("\n[yellow]Dry-run mode: No changes made[/yellow]")
    console.print(f"{upgraded} file(s) {'to upgrade' if dry_run else 'upgraded'}, {failures} failed")
    if failures:
        sys.exit(1)
