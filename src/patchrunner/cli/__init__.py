"""
Patchrunner CLI helpers: engine setup, workflow execution and result output.
"""
from typing import Optional, List, Mapping, Sequence
import logging

import click
from rich.console import Console
from rich.table import Table

from ..core.config import WorkflowConfig
from ..automation.engine import AutomationEngine
from ..automation.environment import Environment
from ..automation.patchtester import build_steps
from ..automation.runner import WorkflowRunner, select_steps
from ..automation.sites.joomla import JoomlaAdmin
from ..automation.steps import Step
from ..automation.types import RunResult, StepOutcome, StepStatus

logger = logging.getLogger(__name__)

# Create console for rich output
console = Console()

STATUS_STYLES = {
    StepStatus.SUCCESS: "green",
    StepStatus.FAILED: "red",
    StepStatus.SKIPPED: "yellow",
}


def create_engine(name: str, default_timeout_ms: int) -> AutomationEngine:
    """Instantiate the named browser engine."""
    if name == "playwright":
        from ..automation.playwright_engine import PlaywrightEngine
        return PlaywrightEngine(default_timeout_ms=default_timeout_ms)
    from ..automation.selenium_engine import SeleniumEngine, SELENIUM_AVAILABLE
    if not SELENIUM_AVAILABLE:
        raise click.ClickException("Selenium not installed. Install extra: pip install .[automation-selenium]")
    return SeleniumEngine(default_timeout_ms=default_timeout_ms)


class PatchRunnerCLI:
    """Shared state for patchrunner commands."""

    def __init__(self, debug: bool = False):
        self.debug = debug
        if debug:
            logging.getLogger().setLevel(logging.DEBUG)
            logger.debug("Debug mode enabled")

    def run_workflow(
        self,
        config: WorkflowConfig,
        values: Mapping[str, Optional[str]],
        only: Optional[Sequence[str]] = None,
    ) -> RunResult:
        """Start a browser, run the selected steps and stop the browser."""
        try:
            steps = select_steps(build_steps(), only)
        except ValueError as e:
            raise click.UsageError(str(e))

        engine = create_engine(config.engine, config.default_timeout_ms)
        engine.start(headless=config.headless, user_data_dir=config.user_data_dir)
        try:
            runner = WorkflowRunner(engine, JoomlaAdmin(engine, config), config, Environment(values))
            return runner.run(steps)
        finally:
            engine.stop()


def print_step_list(steps: List[Step]) -> None:
    """Print the declared steps and the configuration they need."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=3)
    table.add_column("Step")
    table.add_column("Requires")
    table.add_column("Waits for", style="dim")
    table.add_column("Description")

    for i, step in enumerate(steps, start=1):
        table.add_row(
            str(i),
            step.name,
            ", ".join(step.requires) or "-",
            step.completion.description if step.completion else "-",
            step.description,
        )

    console.print(table)


def print_outcome_table(outcomes: List[StepOutcome]) -> None:
    """Print a table of step outcomes."""
    if not outcomes:
        console.print("[yellow]No steps were run.[/]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Step")
    table.add_column("Status")
    table.add_column("Failed at", style="dim")
    table.add_column("Page faults", justify="right")
    table.add_column("Duration", style="dim", justify="right")
    table.add_column("Message")

    for outcome in outcomes:
        style = STATUS_STYLES.get(outcome.status, "white")
        table.add_row(
            outcome.name,
            f"[{style}]{outcome.status.value}[/]",
            outcome.failed_at.value if outcome.failed_at else "",
            str(len(outcome.suppressed)),
            f"{outcome.duration_s:.1f}s" if outcome.started_at else "",
            outcome.message,
        )

    console.print(table)
