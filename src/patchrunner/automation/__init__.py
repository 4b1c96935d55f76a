"""Automation layer for scripted Joomla administrator workflows.

This package provides the engine protocol with Playwright/Selenium
implementations, the step runner with its precondition, fault and polling
helpers, and the Patch Tester setup workflow.
"""

from .types import RunResult, StepOutcome, StepState, StepStatus
from .engine import AutomationEngine
from .environment import Environment
from .errors import (
    WorkflowError,
    MissingConfigurationError,
    AuthenticationError,
    UIInteractionError,
    CompletionTimeoutError,
    SuppressedTargetFault,
)
from .faults import FaultSuppressor
from .polling import wait_until
from .runner import WorkflowRunner, select_steps
from .steps import Step, StepContext, CompletionCheck

__all__ = [
    'AutomationEngine',
    'AuthenticationError',
    'CompletionCheck',
    'CompletionTimeoutError',
    'Environment',
    'FaultSuppressor',
    'MissingConfigurationError',
    'RunResult',
    'Step',
    'StepContext',
    'StepOutcome',
    'StepState',
    'StepStatus',
    'SuppressedTargetFault',
    'UIInteractionError',
    'WorkflowError',
    'WorkflowRunner',
    'select_steps',
    'wait_until',
]
