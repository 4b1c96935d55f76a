import pytest

from patchrunner.automation.environment import Environment
from patchrunner.automation.errors import UIInteractionError
from patchrunner.automation.runner import WorkflowRunner, select_steps
from patchrunner.automation.steps import CompletionCheck, Step
from patchrunner.automation.types import StepState, StepStatus
from patchrunner.core.config import WorkflowConfig

from .fakes import FakeEngine, FakeSite


def make_runner(engine, site, config, clock, values=None):
    return WorkflowRunner(engine, site, config, Environment(values or {}), clock=clock, sleep=clock.sleep)


def noop(ctx):
    pass


def test_missing_configuration_fails_before_login(engine, site, config, clock):
    step = Step(name="install", action=lambda ctx: ctx.engine.goto("x"), requires=("patchtester_url",))

    outcome = make_runner(engine, site, config, clock).run_step(step)

    assert outcome.status == StepStatus.FAILED
    assert outcome.failed_at == StepState.PRECONDITION_CHECKED
    assert outcome.error_kind == "missing_configuration"
    assert outcome.error == "Patch Tester download URL is missing as environment variable 'patchtester_url'."
    assert site.logins == 0
    assert engine.calls == []


def test_steps_run_in_order_and_each_logs_in(engine, site, config, clock):
    order = []
    steps = [Step(name=n, action=lambda ctx, n=n: order.append(n)) for n in ("a", "b", "c")]

    result = make_runner(engine, site, config, clock).run(steps)

    assert result.ok
    assert order == ["a", "b", "c"]
    assert site.logins == 3


def test_failed_login_does_not_block_next_step(engine, config, clock):
    site = FakeSite(engine, auth_failures=1)
    steps = [Step(name="first", action=noop), Step(name="second", action=noop)]

    result = make_runner(engine, site, config, clock).run(steps)

    first, second = result.outcomes
    assert first.failed_at == StepState.AUTHENTICATED
    assert first.error_kind == "authentication"
    assert second.ok
    assert site.logins == 2
    assert not result.ok


def test_action_error_fails_step_with_message(engine, site, config, clock):
    engine.failing.add("#missing")
    step = Step(name="click", action=lambda ctx: ctx.engine.click("#missing"))

    outcome = make_runner(engine, site, config, clock).run_step(step)

    assert outcome.failed_at == StepState.ACTION_EXECUTED
    assert outcome.error_kind == "ui_interaction"
    assert outcome.error == "click #missing failed"


def test_unexpected_exception_is_recorded(engine, site, config, clock):
    def broken(ctx):
        raise KeyError("token")

    outcome = make_runner(engine, site, config, clock).run_step(Step(name="broken", action=broken))

    assert outcome.status == StepStatus.FAILED
    assert outcome.error_kind == "error"
    assert outcome.error.startswith("KeyError")


def test_completion_deadline_is_factor_of_default_timeout(engine, site, clock):
    config = WorkflowConfig(default_timeout_ms=4000, sync_timeout_factor=10)
    check = CompletionCheck(description="rows > 1", predicate=lambda ctx: False)

    outcome = make_runner(engine, site, config, clock).run_step(
        Step(name="sync", action=noop, completion=check))

    assert outcome.failed_at == StepState.POLLING
    assert outcome.error_kind == "completion_timeout"
    assert clock.now == pytest.approx(40.0)


def test_completion_check_can_override_factor(engine, site, config, clock):
    check = CompletionCheck(description="never", predicate=lambda ctx: False, timeout_factor=2)

    make_runner(engine, site, config, clock).run_step(Step(name="sync", action=noop, completion=check))

    assert clock.now == pytest.approx(8.0)


def test_completion_success_before_deadline(engine, site, config, clock):
    check = CompletionCheck(description="after 3s", predicate=lambda ctx: clock.now >= 3.0)

    outcome = make_runner(engine, site, config, clock).run_step(
        Step(name="sync", action=noop, completion=check))

    assert outcome.ok
    assert outcome.state == StepState.SUCCEEDED
    assert clock.now == pytest.approx(3.0)


def test_page_error_does_not_change_successful_outcome(engine, site, config, clock):
    def noisy(ctx):
        ctx.engine.emit_page_error("ReferenceError: Joomla is not defined")

    outcome = make_runner(engine, site, config, clock).run_step(Step(name="noisy", action=noisy))

    assert outcome.ok
    assert [f.message for f in outcome.suppressed] == ["ReferenceError: Joomla is not defined"]
    assert engine.listener_count == 0


def test_page_error_is_kept_on_failed_step(engine, site, config, clock):
    def noisy_then_fail(ctx):
        ctx.engine.emit_page_error("boom")
        raise UIInteractionError("Click on #x failed")

    outcome = make_runner(engine, site, config, clock).run_step(Step(name="s", action=noisy_then_fail))

    assert outcome.error == "Click on #x failed"
    assert len(outcome.suppressed) == 1


def test_stop_on_failure_skips_remaining_steps(engine, config, clock):
    config.continue_on_step_failure = False
    site = FakeSite(engine, auth_failures=1)
    steps = [Step(name="first", action=noop), Step(name="second", action=noop)]

    result = make_runner(engine, site, config, clock).run(steps)

    assert [o.status for o in result.outcomes] == [StepStatus.FAILED, StepStatus.SKIPPED]
    assert result.outcome("second").message == "Skipped after 'first' failed"
    assert site.logins == 1


def test_required_values_reach_the_action(engine, site, config, clock):
    seen = {}
    step = Step(name="s", action=lambda ctx: seen.update(ctx.values), requires=("token",))

    make_runner(engine, site, config, clock, {"token": " abc123 "}).run_step(step)

    assert seen == {"token": "abc123"}


def test_select_steps_keeps_declaration_order():
    steps = [Step(name=n, action=noop) for n in ("a", "b", "c")]

    assert [s.name for s in select_steps(steps, ["c", "a"])] == ["a", "c"]
    assert select_steps(steps, None) == steps


def test_select_steps_rejects_unknown_names():
    with pytest.raises(ValueError, match="Unknown step"):
        select_steps([Step(name="a", action=noop)], ["z"])


class NoBrowserEngine(FakeEngine):
    def add_page_error_listener(self, listener) -> None:
        raise UIInteractionError("Browser is not running")


def test_fault_scope_error_fails_only_that_step(site, config, clock):
    engine = NoBrowserEngine()
    steps = [Step(name="first", action=noop), Step(name="second", action=noop)]

    result = make_runner(engine, site, config, clock).run(steps)

    assert [o.status for o in result.outcomes] == [StepStatus.FAILED, StepStatus.FAILED]
    assert all(o.error == "Browser is not running" for o in result.outcomes)
    assert result.outcomes[0].suppressed == []
    assert site.logins == 0
