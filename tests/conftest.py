import pytest

from patchrunner.automation.sites.joomla import (
    LOGIN_SUBMIT, LOGIN_USERNAME, PAGE_TITLE, SUCCESS_ALERT, TOOLBAR_BUTTONS,
)
from patchrunner.automation.patchtester import SYNC_BUTTON, RESULT_ROWS
from patchrunner.core.config import WorkflowConfig

from .fakes import FakeClock, FakeEngine, FakeSite


@pytest.fixture
def config():
    return WorkflowConfig(base_url="http://joomla.test", admin_password="secret")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def site(engine):
    return FakeSite(engine)


@pytest.fixture
def joomla_engine():
    """A fake Joomla: logged out, install succeeds, sync fills the table."""
    eng = FakeEngine()
    eng.present.update({LOGIN_USERNAME, PAGE_TITLE, SUCCESS_ALERT, TOOLBAR_BUTTONS["save & close"]})
    eng.counts[RESULT_ROWS] = 1

    def logged_in(e):
        e.present.discard(LOGIN_USERNAME)

    def synced(e):
        e.counts[RESULT_ROWS] = 6

    eng.after[LOGIN_SUBMIT] = logged_in
    eng.after[SYNC_BUTTON] = synced
    return eng


@pytest.fixture
def values():
    return {"patchtester_url": "https://example.test/pkg.zip", "token": "abc123"}
