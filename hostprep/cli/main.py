"""
hostprep CLI - plan and apply host configuration records.

Commands:
    hostprep plan <config>        - Show what would change
    hostprep apply <config>       - Apply configuration
    hostprep fetch <source>       - Download configuration artifacts
    hostprep bootstrap <source>   - Download, then apply
    hostprep validate <config>    - Load and validate only
    hostprep version              - Show version
"""

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Tuple

import click
import paramiko

from hostprep.accessor import HostnameAccessor
from hostprep.bootstrap import Bootstrapper
from hostprep.config import ConfigurationRecord, load_record
from hostprep.core import Platform, ApplyStatus
from hostprep.core.applier import DesiredStateApplier
from hostprep.errors import AccessorError, HostprepError, PreflightError
from hostprep.logging import reset_logging, setup_logging
from hostprep.preflight import check_connectivity, check_privileges
from hostprep.report import DEFAULT_LOG_DIR, Reporter, RunLog
from hostprep.transport import LocalTransport, SSHTransport, Transport

DEFAULT_WORK_DIR = Path.home() / ".hostprep" / "work"


def ssh_options(func):
    """Shared SSH target options."""
    func = click.option('--sudo', is_flag=True, help='Use sudo for remote commands')(func)
    func = click.option('--port', default=22, help='SSH port (default: 22)')(func)
    func = click.option('--key', help='SSH private key file')(func)
    func = click.option('--user', help='SSH username')(func)
    func = click.option('--host', help='Remote host for SSH')(func)
    return func


@click.group(invoke_without_command=True)
@click.option('--log-level', default='INFO', envvar='HOSTPREP_LOG_LEVEL',
              help='Console log level (default: INFO)')
@click.option('--log-dir', type=click.Path(file_okay=False), envvar='HOSTPREP_LOG_DIR',
              default=str(DEFAULT_LOG_DIR), show_default=True,
              help='Directory for run log files')
@click.pass_context
def cli(ctx, log_level: str, log_dir: str):
    """hostprep - idempotent host preparation."""
    # Modules configure logging at import; apply the requested level now
    reset_logging()
    setup_logging(level=log_level)
    ctx.ensure_object(dict)
    ctx.obj['log_dir'] = log_dir

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument('config_file', type=click.Path(exists=True, dir_okay=False))
@ssh_options
def plan(config_file: str, host: Optional[str], user: Optional[str],
         key: Optional[str], port: int, sudo: bool):
    """
    Show what would change without applying.

    Example:
        hostprep plan lab.yaml
        hostprep plan lab.yaml --host 10.0.0.5 --user admin
    """
    record = _load_or_exit(config_file)
    target = host or "localhost"
    click.echo(f"Planning {config_file} on {target}...\n")

    with _accessor(host, user, key, port, sudo) as accessor:
        try:
            result = DesiredStateApplier().plan(record, accessor)
        except HostprepError as e:
            click.secho(f"Error during planning: {e}", fg="red")
            sys.exit(1)

    if not result.has_changes():
        click.secho("No changes needed.", fg="green")
        return

    for change in result.changes:
        click.echo(f"  {click.style('~', fg='yellow')} {change.field}")
        click.echo(f"      reason: {result.reason}")
        click.echo(f"      {change.from_value} → {change.to_value}")

    click.echo(f"\nRun 'hostprep apply {config_file}' to apply this change.")


@cli.command()
@click.argument('config_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation')
@click.option('--skip-preflight', is_flag=True, help='Skip the privilege check')
@ssh_options
@click.pass_context
def apply(ctx, config_file: str, yes: bool, skip_preflight: bool, host: Optional[str],
          user: Optional[str], key: Optional[str], port: int, sudo: bool):
    """
    Apply a configuration record.

    Example:
        hostprep apply lab.yaml
        hostprep apply lab.yaml --yes
        hostprep apply lab.yaml --host 10.0.0.5 --user admin --sudo
    """
    record = _load_or_exit(config_file)
    _run_apply(ctx.obj['log_dir'], record, yes, skip_preflight, host, user, key, port, sudo)


@cli.command()
@click.argument('source')
@click.option('--extra', '-e', multiple=True, help='Companion file to fetch (repeatable)')
@click.option('--work-dir', type=click.Path(file_okay=False), default=str(DEFAULT_WORK_DIR),
              show_default=True, help='Directory that receives fetched files')
def fetch(source: str, extra: Tuple[str, ...], work_dir: str):
    """
    Download a configuration file (and companions) into the work directory.

    Example:
        hostprep fetch https://example.com/lab/config.yaml -e https://example.com/lab/notes.txt
    """
    _check_sources_or_exit((source,) + extra)
    boot = Bootstrapper(work_dir)

    try:
        for item in (source,) + extra:
            path = boot.fetch(item)
            click.echo(f"  + {path}")
    except HostprepError as e:
        click.secho(f"Fetch failed: {e}", fg="red")
        sys.exit(1)

    click.secho(f"\nFetched {1 + len(extra)} file(s) into {boot.work_dir}", fg="green")


@cli.command()
@click.argument('source')
@click.option('--extra', '-e', multiple=True, help='Companion file to fetch (repeatable)')
@click.option('--work-dir', type=click.Path(file_okay=False), default=str(DEFAULT_WORK_DIR),
              show_default=True, help='Directory that receives fetched files')
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation')
@click.option('--skip-preflight', is_flag=True, help='Skip the privilege check')
@click.pass_context
def bootstrap(ctx, source: str, extra: Tuple[str, ...], work_dir: str, yes: bool,
              skip_preflight: bool):
    """
    Fetch a configuration record and apply it to this machine.

    Example:
        hostprep bootstrap https://example.com/lab/config.yaml --yes
    """
    _check_sources_or_exit((source,) + extra)

    try:
        record = Bootstrapper(work_dir).bootstrap(source, extra)
    except HostprepError as e:
        click.secho(f"Bootstrap failed: {e}", fg="red")
        sys.exit(1)

    _run_apply(ctx.obj['log_dir'], record, yes, skip_preflight, None, None, None, 22, False)


@cli.command()
@click.argument('config_file', type=click.Path(exists=True, dir_okay=False))
def validate(config_file: str):
    """Load a configuration file and check the record."""
    record = _load_or_exit(config_file)

    try:
        record.validate()
    except HostprepError as e:
        click.secho(f"Invalid configuration: {e}", fg="red")
        sys.exit(1)

    click.secho(f"{config_file}: ComputerName={record.computer_name} OK", fg="green")
    reserved = record.reserved_fields()
    if reserved:
        click.echo(f"  Reserved fields present but not applied: {', '.join(sorted(reserved))}")


@cli.command()
def version():
    """Show hostprep version."""
    from hostprep import __version__
    click.echo(f"hostprep version {__version__}")


@cli.command()
def platform_info():
    """Show detected platform information."""
    plat = Platform.detect()
    click.echo("Platform Information:")
    click.echo(f"  System:  {plat.system}")
    click.echo(f"  Distro:  {plat.distro}")
    click.echo(f"  Version: {plat.version}")
    click.echo(f"  Arch:    {plat.arch}")


def _run_apply(log_dir: str, record: ConfigurationRecord, yes: bool, skip_preflight: bool,
               host: Optional[str], user: Optional[str], key: Optional[str],
               port: int, sudo: bool) -> None:
    """Plan, confirm, apply and report against one target."""
    reporter = Reporter()

    with RunLog(log_dir) as run_log:
        click.echo(f"Log file: {run_log.path}\n")

        try:
            record.validate()
        except HostprepError as e:
            reporter.logger.error("Invalid configuration: %s", e)
            click.secho(f"Invalid configuration: {e}", fg="red")
            sys.exit(1)

        if host is None and not skip_preflight:
            try:
                check_privileges()
            except PreflightError as e:
                click.secho(str(e), fg="red")
                sys.exit(1)

        applier = DesiredStateApplier()

        with _accessor(host, user, key, port, sudo) as accessor:
            try:
                planned = applier.plan(record, accessor)
            except HostprepError as e:
                click.secho(f"Error during planning: {e}", fg="red")
                sys.exit(1)

            reporter.report_plan(planned)

            if planned.has_changes() and not yes:
                if not click.confirm("Proceed with apply?"):
                    click.echo("Aborted.")
                    return

            result = applier.apply(record, accessor)

        reporter.report(result)

    if result.status == ApplyStatus.FAILED:
        sys.exit(1)


@contextmanager
def _accessor(host: Optional[str], user: Optional[str], key: Optional[str],
              port: int, sudo: bool) -> Iterator[HostnameAccessor]:
    """Open a HostnameAccessor on localhost or over SSH."""
    transport: Transport
    if host:
        click.echo(f"Connecting to {user or 'current_user'}@{host}:{port}...")
        try:
            transport = SSHTransport(host=host, port=port, user=user, key_file=key, sudo=sudo)
        except (paramiko.SSHException, OSError) as e:
            click.secho(f"SSH connection failed: {e}", fg="red")
            sys.exit(1)
    else:
        transport = LocalTransport()

    with HostnameAccessor(transport) as accessor:
        try:
            yield accessor
        except AccessorError as e:
            click.secho(f"Accessor error: {e}", fg="red")
            sys.exit(1)


def _load_or_exit(config_file: str) -> ConfigurationRecord:
    try:
        return load_record(config_file)
    except HostprepError as e:
        click.secho(f"Error loading config: {e}", fg="red")
        sys.exit(1)


def _check_sources_or_exit(sources: Tuple[str, ...]) -> None:
    for source in sources:
        if source.lower().startswith("https://"):
            try:
                check_connectivity(source)
            except PreflightError as e:
                click.secho(str(e), fg="red")
                sys.exit(1)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
