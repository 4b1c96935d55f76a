"""
Patchrunner CLI - install and configure Joomla! Patch Tester through the administrator UI.
"""
import sys
import logging
from typing import Optional, Tuple

import click
from rich.logging import RichHandler

from . import PatchRunnerCLI, console, print_outcome_table, print_step_list
from ..automation.patchtester import build_steps
from ..core.config import WorkflowConfig, ENGINES

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True)]
)
logger = logging.getLogger("patchrunner")


@click.group(invoke_without_command=True)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Enable debug output",
    show_default=True
)
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Patchrunner - scripted Joomla administrator setup for CI."""
    ctx.obj = PatchRunnerCLI(debug=debug)

    # If no command is provided, show help
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
def steps() -> None:
    """List the workflow steps and the configuration each one needs."""
    print_step_list(build_steps())


@cli.command()
@click.option("--base-url", envvar="JOOMLA_BASE_URL", default="http://localhost/", show_default=True,
              help="Site root URL")
@click.option("--username", envvar="JOOMLA_ADMIN_USERNAME", default="ci-admin", show_default=True,
              help="Administrator user name")
@click.option("--password", envvar="JOOMLA_ADMIN_PASSWORD", default=None,
              help="Administrator password")
@click.option("--patchtester-url", envvar="PATCHTESTER_URL", default=None,
              help="Download URL of the Patch Tester package")
@click.option("--token", envvar="GITHUB_TOKEN", default=None, help="GitHub access token")
@click.option("--engine", type=click.Choice(ENGINES), default="playwright", show_default=True)
@click.option("--no-headless", is_flag=True, default=False, help="Run browser with a visible window")
@click.option("--user-data-dir", type=str, default=None, help="Browser user data dir for persistent sessions")
@click.option("--timeout", "timeout_ms", type=click.IntRange(min=1), default=4000, show_default=True,
              help="Default per-action timeout in milliseconds")
@click.option("--sync-timeout-factor", type=click.IntRange(min=1), default=10, show_default=True,
              help="Data sync deadline as a multiple of --timeout")
@click.option("--poll-interval", "poll_interval_ms", type=click.IntRange(min=1), default=250, show_default=True,
              help="Milliseconds between completion checks")
@click.option("--stop-on-failure", is_flag=True, default=False, help="Skip remaining steps after a failure")
@click.option("--step", "only", multiple=True, help="Run only this step (can be used multiple times)")
@click.option("--log-file", type=click.Path(dir_okay=False, writable=True), default=None,
              help="Also write log lines, including suppressed page errors, to this file")
@click.pass_obj
def run(
    cli: PatchRunnerCLI,
    base_url: str,
    username: str,
    password: Optional[str],
    patchtester_url: Optional[str],
    token: Optional[str],
    engine: str,
    no_headless: bool,
    user_data_dir: Optional[str],
    timeout_ms: int,
    sync_timeout_factor: int,
    poll_interval_ms: int,
    stop_on_failure: bool,
    only: Tuple[str, ...],
    log_file: Optional[str],
) -> None:
    """Install Patch Tester, set the GitHub token and fetch pull request data."""
    if log_file:
        handler = logging.FileHandler(log_file)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logging.getLogger().addHandler(handler)

    try:
        config = WorkflowConfig(
            base_url=base_url,
            admin_username=username,
            admin_password=password or "",
            default_timeout_ms=timeout_ms,
            sync_timeout_factor=sync_timeout_factor,
            poll_interval_ms=poll_interval_ms,
            continue_on_step_failure=not stop_on_failure,
            headless=not no_headless,
            engine=engine,
            user_data_dir=user_data_dir,
        )
    except ValueError as e:
        raise click.BadParameter(str(e))

    result = cli.run_workflow(config, {"patchtester_url": patchtester_url, "token": token}, only=only)
    print_outcome_table(result.outcomes)

    faults = sum(len(o.suppressed) for o in result.outcomes)
    if faults:
        console.print(f"[yellow]![/] {faults} page error(s) were ignored, see the log for details")
    if not result.ok:
        console.print("[red]✗[/] Workflow failed")
        sys.exit(1)
    console.print("[green]✓[/] Workflow completed")


def main() -> None:
    """Entry point for the patchrunner CLI."""
    try:
        cli()
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        logger.debug("Unhandled error", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
