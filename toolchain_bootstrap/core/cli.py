"""
Unified CLI entrypoint for the Toolchain Bootstrap Tool
Uses click for modular subcommands
"""
import click

from toolchain_bootstrap.core.errors import BootstrapError
from toolchain_bootstrap.core.logging import LoggingManager
from toolchain_bootstrap.modules.env_sourcing import EnvSourcer
from toolchain_bootstrap.modules.installer_fetch import InstallerFetcher
from toolchain_bootstrap.modules.workflow import BootstrapWorkflow
from toolchain_bootstrap.scripts.config_parsing import BootstrapConfig


@click.group()
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), default=None,
              help='YAML, INI or JSON config file')
@click.option('--log-level', default=None, help='Log level (DEBUG, INFO, WARNING, ERROR)')
@click.option('--log-file', default=None, type=click.Path(dir_okay=False), help='Also write logs to this file')
@click.pass_context
def cli(ctx, config_path, log_level, log_file):
    """Toolchain bootstrap CLI group."""
    try:
        config = BootstrapConfig.load(config_path).override(log_level=log_level, log_file=log_file)
    except BootstrapError as e:
        raise click.ClickException(e.message)
    logger = LoggingManager(config.log_level, config.log_file)
    logger.setup()
    ctx.obj = {'config': config, 'logger': logger}


def _configure(ctx, **overrides):
    """Apply command options on top of the group config; invalid values become usage errors."""
    try:
        return ctx.obj['config'].override(**overrides)
    except BootstrapError as e:
        raise click.ClickException(e.message)


@cli.command()
@click.option('--url', default=None, help='Installer URL (https only)')
@click.option('--env-file', default=None, help='Environment file to source after installing')
@click.option('--interpreter', default=None, help='Interpreter the installer is piped into')
@click.option('--installer-arg', 'installer_args', multiple=True, help='Argument passed to the installer')
@click.option('--sha256', default=None, help='Expected SHA-256 of the installer')
@click.option('--timeout', type=float, default=None, help='HTTP timeout in seconds')
@click.option('--strict/--no-strict', default=None, help='Stop at the first failing step')
@click.option('--report', 'report_path', default=None, help='Write a JSON report to this path')
@click.pass_context
def run(ctx, url, env_file, interpreter, installer_args, sha256, timeout, strict, report_path):
    """Install the toolchain and source its environment file."""
    config = _configure(
        ctx, url=url, env_file=env_file, interpreter=interpreter, installer_args=installer_args,
        sha256=sha256, timeout=timeout, strict=strict, report_path=report_path,
    )
    workflow = BootstrapWorkflow(config, ctx.obj['logger'])
    error = None
    try:
        report = workflow.run()
    except BootstrapError as e:
        error = e
        report = workflow.report
    click.echo(workflow.render_table())
    if config.report_path:
        workflow.write_report(config.report_path)
    if error is not None:
        click.secho(f"Error: {error.message}", fg='red', err=True)
    ctx.exit(report.exit_status)


@cli.command()
@click.option('--url', default=None, help='Installer URL (https only)')
@click.option('--interpreter', default=None, help='Interpreter the installer is piped into')
@click.option('--installer-arg', 'installer_args', multiple=True, help='Argument passed to the installer')
@click.option('--sha256', default=None, help='Expected SHA-256 of the installer')
@click.pass_context
def install(ctx, url, interpreter, installer_args, sha256):
    """Fetch the installer and run it, without sourcing anything."""
    config = _configure(ctx, url=url, interpreter=interpreter,
                        installer_args=installer_args, sha256=sha256)
    fetcher = InstallerFetcher(config.interpreter, config.timeout, ctx.obj['logger'])
    result = fetcher.fetch_and_execute(config.url, config.installer_args, config.sha256)
    if not result.ok:
        click.secho(f"Error: {result.detail}", fg='red', err=True)
    ctx.exit(result.returncode)


@cli.command()
@click.argument('env_file', required=False)
@click.option('--interpreter', default=None, help='Interpreter used to evaluate the file')
@click.pass_context
def source(ctx, env_file, interpreter):
    """Source ENV_FILE and print the resulting exports, for use with eval."""
    config = _configure(ctx, env_file=env_file, interpreter=interpreter)
    sourcer = EnvSourcer(config.interpreter, ctx.obj['logger'])
    try:
        sourced = sourcer.source(config.env_path)
    except BootstrapError as e:
        click.secho(f"Error: {e.message}", fg='red', err=True)
        ctx.exit(e.returncode)
    exports = sourcer.render_exports(sourced)
    if exports:
        click.echo(exports)


if __name__ == '__main__':
    cli()
