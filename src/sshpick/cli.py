"""CLI commands."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
    from sshpick.config import Config
    from sshpick.models import CopyIdOptions, SshKey

app = typer.Typer(
    name="sshpick",
    help="Pick which SSH keys to install with ssh-copy-id.",
    no_args_is_help=True,
)
console = Console(highlight=False)
err_console = Console(stderr=True)

EXIT_CANCELLED = 130


def _get_config() -> Config:
    """Lazy import and load config."""
    from sshpick.config import Config

    return Config.load()


def _setup_logging(verbose: bool) -> None:
    if not verbose:
        return
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _error(message: str) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}")


def _load_keys(cfg: Config, local: bool, ssh_dir: Path | None) -> list[SshKey]:
    """Keys from the agent, or from the ssh directory with --local."""
    from sshpick.errors import KeySourceError
    from sshpick.keys import agent_keys, local_keys

    try:
        if local:
            return local_keys(ssh_dir or cfg.ssh_path)
        return agent_keys()
    except KeySourceError as e:
        _error(str(e))
        raise typer.Exit(1)


@app.command()
def copy(
    target: Annotated[str, typer.Argument(help="Host to install keys on, as host or user@host")],
    force: Annotated[bool, typer.Option("-f", "--force", help="Pass -f to ssh-copy-id")] = False,
    dry_run: Annotated[
        bool, typer.Option("-n", "--dry-run", help="Pass -n to ssh-copy-id")
    ] = False,
    sftp: Annotated[bool, typer.Option("-s", "--sftp", help="Pass -s to ssh-copy-id")] = False,
    port: Annotated[int | None, typer.Option("-p", "--port", help="SSH port")] = None,
    ssh_option: Annotated[
        list[str] | None,
        typer.Option("-o", "--ssh-option", help="ssh -o option (repeatable)"),
    ] = None,
    local: Annotated[
        bool, typer.Option("--local", help="Read keys from the ssh directory, not the agent")
    ] = False,
    ssh_dir: Annotated[Path | None, typer.Option("--ssh-dir", help="Directory for --local")] = None,
    max_: Annotated[int | None, typer.Option("--max", help="Most keys to allow")] = None,
    legend: Annotated[
        bool | None, typer.Option("--legend/--no-legend", help="Show key bindings")
    ] = None,
    all_: Annotated[bool, typer.Option("-a", "--all", help="Start with every key ticked")] = False,
    run: Annotated[
        bool, typer.Option("--run", help="Run the commands instead of printing")
    ] = False,
    yes: Annotated[bool, typer.Option("-y", "--yes", help="Don't ask before --run")] = False,
    verbose: Annotated[bool, typer.Option("-v", "--verbose", help="Debug logging")] = False,
):
    """Select keys interactively and print (or run) ssh-copy-id for each."""
    from sshpick.commands import build_command, format_command, key_file_names, selected_keys
    from sshpick.errors import (
        InvalidInputError,
        SelectionCancelledError,
        UnsupportedTerminalError,
    )
    from sshpick.models import CopyIdOptions
    from sshpick.ui.rich_menu import RichTerminalMenu

    _setup_logging(verbose)
    cfg = _get_config()

    keys = _load_keys(cfg, local, ssh_dir)
    if not keys:
        console.print("[yellow]No keys found[/yellow]")
        raise typer.Exit(1)

    ui = RichTerminalMenu(
        console=console,
        show_help=cfg.show_help if legend is None else legend,
        max_selected=cfg.max_selected if max_ is None else max_,
        query_timeout=cfg.cursor_query_timeout,
    )

    try:
        selection = ui.multi_select(
            [key.label for key in keys],
            [all_] * len(keys),
            title="Please select the ssh keys to be used:",
        )
    except SelectionCancelledError:
        console.print("[dim]Cancelled[/dim]")
        raise typer.Exit(EXIT_CANCELLED)
    except (InvalidInputError, UnsupportedTerminalError) as e:
        _error(str(e))
        raise typer.Exit(1)

    chosen = selected_keys(keys, selection)
    if not chosen:
        console.print("[yellow]No keys selected[/yellow]")
        raise typer.Exit(0)

    opts = CopyIdOptions(
        target=target,
        force=force,
        dry_run=dry_run,
        sftp=sftp,
        port=port,
        ssh_options=list(ssh_option or []),
    )
    program = cfg.copy_id_command

    if not run:
        for key, name in zip(chosen, key_file_names(chosen)):
            key_file = key.source or Path(name)
            console.print(escape(key.public_line), soft_wrap=True)
            command = format_command(build_command(key_file, opts, program))
            console.print(escape(command), soft_wrap=True)
        return

    if cfg.confirm_before_run and not yes:
        if not ui.confirm(f"Install {len(chosen)} key(s) on {target}?"):
            console.print("[dim]Cancelled[/dim]")
            raise typer.Exit(0)

    code = _run_copy(chosen, opts, program)
    if code != 0:
        raise typer.Exit(code)


def _run_copy(keys: list[SshKey], opts: CopyIdOptions, program: str) -> int:
    """Run one command per key. Returns the first non-zero exit code, else 0."""
    from sshpick.commands import build_command, run_command, write_key_files
    from sshpick.errors import CommandError

    first_failure = 0
    with tempfile.TemporaryDirectory(prefix="sshpick-") as tmp:
        for key, path in zip(keys, write_key_files(keys, Path(tmp))):
            console.print(f"[cyan]→[/cyan] {escape(key.label)}")
            try:
                code = run_command(build_command(path, opts, program))
            except CommandError as e:
                _error(str(e))
                return 1
            if code == 0:
                console.print(f"[green]✓[/green] Installed {escape(key.label)}")
            else:
                console.print(f"[red]✗[/red] {escape(key.label)} (exit {code})")
                first_failure = first_failure or code
    return first_failure


@app.command(name="keys")
def list_keys(
    local: Annotated[
        bool, typer.Option("--local", help="Read keys from the ssh directory, not the agent")
    ] = False,
    ssh_dir: Annotated[Path | None, typer.Option("--ssh-dir", help="Directory for --local")] = None,
    fingerprint_names: Annotated[
        bool,
        typer.Option("--fingerprint-names", help="Name local keys the way ssh-keygen -l does"),
    ] = False,
    verbose: Annotated[bool, typer.Option("-v", "--verbose", help="Debug logging")] = False,
):
    """List the key names that would be offered."""
    from sshpick.keys import key_fingerprint_name

    _setup_logging(verbose)
    cfg = _get_config()
    keys = _load_keys(cfg, local, ssh_dir)

    if not keys:
        console.print("[dim]No keys found[/dim]")
        return

    console.print("List of ssh key names:")
    for key in keys:
        name = key.label
        if fingerprint_names and key.source is not None:
            name = key_fingerprint_name(key.source) or name
        console.print(f" - {escape(name)}")


config_app = typer.Typer(name="config", help="Show or change settings.")
app.add_typer(config_app, name="config")


@config_app.callback(invoke_without_command=True)
def show_config(ctx: typer.Context):
    """Show effective settings."""
    from rich.table import Table

    if ctx.invoked_subcommand is not None:
        return

    cfg = _get_config()
    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_column("Description", style="dim")
    for name, desc, value in cfg.get_settings():
        table.add_row(name, escape(str(value)), desc)
    console.print(table)
    console.print(f"[dim]Config file: {escape(str(cfg.config_dir / 'config.json'))}[/dim]")


@config_app.command(name="set")
def set_config(
    key: Annotated[str, typer.Argument(help="Setting name, as listed by sshpick config")],
    value: Annotated[str, typer.Argument(help="New value")],
):
    """Change a setting and save it to the config file."""
    from sshpick.config import Config

    if key not in Config.DEFAULTS:
        _error(f"unknown setting: {key}")
        raise typer.Exit(1)
    try:
        parsed = Config.parse_value(key, value)
    except ValueError:
        _error(f"invalid value for {key}: {value}")
        raise typer.Exit(1)

    _get_config().set(key, parsed)
    console.print(f"[green]Saved:[/green] {key} = {escape(str(parsed))}")


if __name__ == "__main__":
    app()
