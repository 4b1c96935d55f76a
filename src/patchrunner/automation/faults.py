"""Per-step boundary for runtime errors thrown by the target page itself.

The admin pages under automation throw unrelated client-side errors. Those
arrive through the engine's page-error channel and are logged and recorded,
never raised. Errors from engine operations are ordinary exceptions and are
not touched by this boundary.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, List

from .engine import AutomationEngine
from .errors import SuppressedTargetFault

logger = logging.getLogger("patchrunner.faults")


class FaultSuppressor:
    def __init__(self, engine: AutomationEngine):
        self.engine = engine

    @contextmanager
    def scope(self, step_name: str) -> Iterator[List[SuppressedTargetFault]]:
        recorded: List[SuppressedTargetFault] = []

        def on_page_error(message: str, url: str) -> None:
            fault = SuppressedTargetFault(message, f"step '{step_name}' at {url}")
            logger.warning("ERROR uncaught:exception err: %s", message)
            logger.warning("ERROR uncaught:exception origin: %s", fault.origin)
            recorded.append(fault)

        self.engine.add_page_error_listener(on_page_error)
        try:
            yield recorded
        finally:
            self.engine.remove_page_error_listener(on_page_error)
