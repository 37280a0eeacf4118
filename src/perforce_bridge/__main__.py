"""CLI entry point for perforce-bridge."""

import sys
from functools import wraps
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from perforce_bridge import __version__
from perforce_bridge.agents.local import LocalFileOperationsExecuter, LocalProcessExecuter
from perforce_bridge.config.settings import Settings
from perforce_bridge.p4.exceptions import PerforceBridgeError
from perforce_bridge.p4.runner import join_arguments
from perforce_bridge.utils.progress import log_error, log_info, log_success
from perforce_bridge.vcs.perforce import PerforceProvider

console = Console(stderr=True)
# Tables go to stdout so they can be piped
table_console = Console()


def create_provider(settings: Settings, overrides: dict) -> PerforceProvider:
    """Build a provider that works against the local machine."""
    config = settings.connection_config(**overrides)
    return PerforceProvider(config, LocalFileOperationsExecuter(), LocalProcessExecuter())


def handle_errors(func):
    """Report perforce-bridge errors and exit with status 1."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PerforceBridgeError as e:
            log_error(str(e).rstrip())
            sys.exit(1)
    return wrapper


@click.group()
@click.option('--user', 'user_name', type=str, help='Perforce user name (default: P4USER)')
@click.option('--password', type=str, help='Perforce password (default: P4PASSWD)')
@click.option('--client', 'client_name', type=str, help='Client workspace name (default: P4CLIENT)')
@click.option('--server', 'server_name', type=str, help='Server address (default: P4PORT)')
@click.option('--exe-path', type=str, help='Path to the p4 executable (default: p4)')
@click.option('--force-sync/--no-force-sync', 'use_force_sync', default=None, help='Pass -f to p4 sync')
@click.option('--debug', is_flag=True, help='Log p4 command lines and capture raw output')
@click.option('--data-dir', type=click.Path(path_type=Path), help='Base directory for debug captures (default: ~/.perforce-bridge)')
@click.version_option(version=__version__)
@click.pass_context
def main(
    ctx,
    user_name: Optional[str],
    password: Optional[str],
    client_name: Optional[str],
    server_name: Optional[str],
    exe_path: Optional[str],
    use_force_sync: Optional[bool],
    debug: bool,
    data_dir: Optional[Path],
) -> None:
    """perforce-bridge - browse, label and mirror Perforce depots.

    Connection settings default to the standard P4USER, P4PASSWD, P4CLIENT
    and P4PORT environment variables (or P4BRIDGE_* / .env).
    """
    from perforce_bridge.utils.debug import DebugLogger

    settings_kwargs = {}
    if data_dir is not None:
        settings_kwargs['data_dir'] = data_dir.expanduser().resolve()
    settings = Settings(**settings_kwargs)

    ctx.ensure_object(dict)
    ctx.obj['settings'] = settings
    ctx.obj['overrides'] = {
        'user_name': user_name,
        'password': password,
        'client_name': client_name,
        'server_name': server_name,
        'exe_path': exe_path,
        'use_force_sync': use_force_sync,
    }

    if debug or settings.debug:
        DebugLogger.configure(enabled=True, log_dir=settings.debug_log_dir)


def _provider(ctx) -> PerforceProvider:
    return create_provider(ctx.obj['settings'], ctx.obj['overrides'])


@main.command(name="get-latest")
@click.argument("source_path", type=str)
@click.argument("target_path", type=click.Path(file_okay=False, path_type=Path))
@click.pass_context
@handle_errors
def get_latest(ctx, source_path: str, target_path: Path) -> None:
    """Sync SOURCE_PATH (e.g. depot/proj) and mirror it into TARGET_PATH.

    The contents of TARGET_PATH are replaced.
    """
    _provider(ctx).get_latest(source_path, str(target_path))
    log_success(f"Copied //{source_path.strip('/')}/... to {target_path}")


@main.command(name="get-labeled")
@click.argument("label", type=str)
@click.argument("source_path", type=str)
@click.argument("target_path", type=click.Path(file_okay=False, path_type=Path))
@click.pass_context
@handle_errors
def get_labeled(ctx, label: str, source_path: str, target_path: Path) -> None:
    """Sync SOURCE_PATH at LABEL and mirror it into TARGET_PATH."""
    _provider(ctx).get_labeled(label, source_path, str(target_path))
    log_success(f"Copied //{source_path.strip('/')}/...@{label} to {target_path}")


@main.command()
@click.argument("label", type=str)
@click.argument("source_path", type=str)
@click.pass_context
@handle_errors
def label(ctx, label: str, source_path: str) -> None:
    """Tag every file under SOURCE_PATH with LABEL."""
    _provider(ctx).apply_label(label, source_path)
    log_success(f"Applied label {label} to //{source_path.strip('/')}/...")


@main.command()
@click.argument("path", type=str, required=False, default="")
@click.pass_context
@handle_errors
def browse(ctx, path: str) -> None:
    """List the directories and files under PATH (depots when omitted)."""
    entry = _provider(ctx).get_directory_entry_info(path)

    table = Table(title=f"//{entry.path}" if entry.path else "Depots")
    table.add_column("Type", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Path")

    for directory in entry.subdirectories or []:
        table.add_row("dir", directory.name, directory.path)
    for file in entry.files or []:
        table.add_row("file", file.name, file.path)

    table_console.print(table)


@main.command()
@click.argument("file_path", type=str)
@click.pass_context
@handle_errors
def cat(ctx, file_path: str) -> None:
    """Sync FILE_PATH and write its contents to stdout."""
    data = _provider(ctx).get_file_contents(file_path)
    stdout = click.get_binary_stream("stdout")
    stdout.write(data)
    stdout.flush()


@main.command()
@click.pass_context
@handle_errors
def validate(ctx) -> None:
    """Check that the server can be reached with the current settings."""
    _provider(ctx).validate_connection()
    log_success("Connection OK")


@main.command()
@click.pass_context
def commands(ctx) -> None:
    """List the p4 commands available to `exec`."""
    provider = _provider(ctx)

    table = Table(title="p4 commands")
    table.add_column("Command", style="cyan")
    table.add_column("Description")

    for command in provider.get_available_commands():
        table.add_row(command.name, command.description)

    table_console.print(table)


@main.command(name="help")
@click.argument("command_name", type=str)
@click.pass_context
@handle_errors
def help_(ctx, command_name: str) -> None:
    """Show p4 help for COMMAND_NAME."""
    text = _provider(ctx).get_client_command_help(command_name)
    if text is None:
        log_error(f"No help available for '{command_name}'")
        sys.exit(1)
    click.echo(text.rstrip())


@main.command(name="exec", context_settings={"ignore_unknown_options": True})
@click.argument("command_name", type=str)
@click.argument("arguments", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
@handle_errors
def exec_(ctx, command_name: str, arguments: tuple[str, ...]) -> None:
    """Run p4 COMMAND_NAME with ARGUMENTS, logging its output.

    Examples:

        \b
        $ perforce-bridge exec changes -m 5 //depot/...
    """
    _provider(ctx).execute_client_command(command_name, join_arguments(arguments))


@main.command()
@click.pass_context
def preview(ctx) -> None:
    """Show the connection options passed to p4 (password masked)."""
    provider = _provider(ctx)
    log_info(f"{provider.config.exe_path} {provider.get_client_command_preview()}<command> [args...]")


if __name__ == "__main__":
    main()
