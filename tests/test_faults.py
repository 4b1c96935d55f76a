import logging

import pytest

from patchrunner.automation.errors import UIInteractionError
from patchrunner.automation.faults import FaultSuppressor

from .fakes import FakeEngine


def test_page_errors_are_recorded_and_logged(caplog):
    engine = FakeEngine()
    engine.url = "http://joomla.test/administrator/"
    suppressor = FaultSuppressor(engine)

    with caplog.at_level(logging.WARNING, logger="patchrunner.faults"):
        with suppressor.scope("fetch data") as faults:
            engine.emit_page_error("TypeError: Cannot read properties of null")

    assert len(faults) == 1
    assert faults[0].message == "TypeError: Cannot read properties of null"
    assert faults[0].origin == "step 'fetch data' at http://joomla.test/administrator/"
    assert "ERROR uncaught:exception err: TypeError" in caplog.text


def test_listener_removed_when_scope_exits():
    engine = FakeEngine()
    suppressor = FaultSuppressor(engine)

    with suppressor.scope("one") as faults:
        assert engine.listener_count == 1
    engine.emit_page_error("late error")

    assert engine.listener_count == 0
    assert faults == []


def test_engine_errors_pass_through():
    engine = FakeEngine()
    suppressor = FaultSuppressor(engine)

    with pytest.raises(UIInteractionError):
        with suppressor.scope("one"):
            raise UIInteractionError("Click on #missing failed")

    assert engine.listener_count == 0
