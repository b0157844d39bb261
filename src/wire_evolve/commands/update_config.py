# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

import sys
import click
from rich.console import Console

console = Console()


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.option(
    '--dry-run',
    is_flag=True,
    help='Show what would be upgraded without making changes'
)
@click.option('-y', '--assume-yes', is_flag=True, help='Assume "yes" for confirmation prompts')
@click.pass_context
def update_config(ctx, dry_run: bool, assume_yes: bool):
    """Update configuration file to the latest version.

    This command upgrades your wire_evolve.toml configuration file to the
    latest format version, applying any necessary migrations.
    """
    from ..config import CONFIG_VERSIONS
    from ..errors import UnknownVersionError
    from ..migrations import get_changes_description

    config_path = ctx.obj.get('config_path')
    if not config_path:
        console.print("[red]Error: No configuration file found[/red]")
        console.print("Please specify a config file with --config or create wire_evolve.toml")
        sys.exit(1)

    console.print(f"[blue]Checking configuration file: {config_path}[/blue]\n")

    try:
        data = CONFIG_VERSIONS.codec.loads(config_path.read_bytes())
    except Exception as e:
        console.print(f"[red]Error reading config file: {e}[/red]")
        sys.exit(1)

    current_version = data.setdefault(CONFIG_VERSIONS.tag_field, "1")
    target_version = CONFIG_VERSIONS.current_tag
    try:
        CONFIG_VERSIONS.entry_for_tag(current_version)
    except UnknownVersionError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    console.print(f"Current version: [yellow]{current_version}[/yellow]")
    console.print(f"Target version:  [green]{target_version}[/green]\n")

    if CONFIG_VERSIONS.is_current(current_version):
        console.print("[green]✓ Configuration is already up to date![/green]")
        return

    console.print("[blue]Changes:[/blue]")
    console.print(get_changes_description(str(current_version), target_version))
    console.print()

    if dry_run:
        console.print("[yellow]Dry-run mode: No changes made[/yellow]")
        return

    if not assume_yes:
        if not click.confirm(f"Upgrade config from v{current_version} to v{target_version}?"):
            console.print("[yellow]Upgrade cancelled[/yellow]")
            return

    try:
        console.print("[blue]Upgrading configuration...[/blue]")
        config = CONFIG_VERSIONS.load_document(data)
        config_path.write_text(config.encode(), encoding='utf-8')

        console.print(f"[green]✓ Configuration upgraded to v{target_version}![/green]")
        console.print(f"[green]✓ Saved to {config_path}[/green]")

    except Exception as e:
        console.print(f"[red]Error during upgrade: {e}[/red]")
        sys.exit(1)
