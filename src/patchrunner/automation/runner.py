import logging
import time
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence

from ..core.config import WorkflowConfig
from .engine import AutomationEngine
from .environment import Environment
from .errors import SuppressedTargetFault, WorkflowError
from .faults import FaultSuppressor
from .polling import wait_until
from .sites.base_site import AdminSite
from .steps import Step, StepContext
from .types import RunResult, StepOutcome, StepState, StepStatus

logger = logging.getLogger("patchrunner")


def select_steps(steps: Sequence[Step], names: Optional[Iterable[str]] = None) -> List[Step]:
    """Keep only the named steps, in declaration order."""
    if not names:
        return list(steps)
    wanted = set(names)
    unknown = wanted - {s.name for s in steps}
    if unknown:
        raise ValueError(f"Unknown step(s): {', '.join(sorted(unknown))}")
    return [s for s in steps if s.name in wanted]


class WorkflowRunner:
    """Runs steps one after another against a single browser session.

    Each step checks its own configuration, logs in again and runs inside its
    own page-fault scope, so a failed step leaves the next one runnable.
    """

    def __init__(
        self,
        engine: AutomationEngine,
        site: AdminSite,
        config: WorkflowConfig,
        environment: Environment,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.engine = engine
        self.site = site
        self.config = config
        self.environment = environment
        self.suppressor = FaultSuppressor(engine)
        self._clock = clock
        self._sleep = sleep

    def run(self, steps: Sequence[Step]) -> RunResult:
        result = RunResult()
        failed: Optional[StepOutcome] = None
        for step in steps:
            if failed is not None and not self.config.continue_on_step_failure:
                result.outcomes.append(StepOutcome(
                    name=step.name,
                    status=StepStatus.SKIPPED,
                    message=f"Skipped after '{failed.name}' failed",
                ))
                continue
            outcome = self.run_step(step)
            result.outcomes.append(outcome)
            if not outcome.ok and failed is None:
                failed = outcome
        return result

    def run_step(self, step: Step) -> StepOutcome:
        outcome = StepOutcome(name=step.name, status=StepStatus.FAILED, started_at=datetime.now())
        phase = StepState.PRECONDITION_CHECKED
        faults: List[SuppressedTargetFault] = []
        logger.info("Step '%s' started", step.name)
        try:
            with self.suppressor.scope(step.name) as faults:
                values = {key: self.environment.require(key) for key in step.requires}
                outcome.state = phase

                phase = StepState.AUTHENTICATED
                self.site.ensure_authenticated()
                outcome.state = phase

                phase = StepState.ACTION_EXECUTED
                ctx = StepContext(engine=self.engine, site=self.site, config=self.config, values=values)
                step.action(ctx)
                outcome.state = phase

                if step.completion is not None:
                    phase = StepState.POLLING
                    outcome.state = phase
                    self._await_completion(step, ctx)

                outcome.state = StepState.SUCCEEDED
                outcome.status = StepStatus.SUCCESS
                outcome.message = "ok"
        except WorkflowError as e:
            self._fail(outcome, phase, e.kind, str(e))
        except Exception as e:
            logger.debug("Step '%s' raised", step.name, exc_info=True)
            self._fail(outcome, phase, "error", f"{e.__class__.__name__}: {e}")
        outcome.suppressed = list(faults)
        outcome.finished_at = datetime.now()
        if outcome.ok:
            logger.info("Step '%s' succeeded in %.1fs", step.name, outcome.duration_s)
        return outcome

    def _await_completion(self, step: Step, ctx: StepContext) -> None:
        check = step.completion
        factor = check.timeout_factor or self.config.sync_timeout_factor
        timeout_ms = self.config.default_timeout_ms * factor
        logger.info("Waiting up to %dms for %s", timeout_ms, check.description)
        wait_until(
            lambda: check.predicate(ctx),
            timeout_ms=timeout_ms,
            description=check.description,
            interval_ms=self.config.poll_interval_ms,
            clock=self._clock,
            sleep=self._sleep,
        )

    @staticmethod
    def _fail(outcome: StepOutcome, phase: StepState, kind: str, message: str) -> None:
        outcome.status = StepStatus.FAILED
        outcome.state = StepState.FAILED
        outcome.failed_at = phase
        outcome.error_kind = kind
        outcome.error = message
        outcome.message = message
        logger.error("Step '%s' failed (%s): %s", outcome.name, phase.value, message)
