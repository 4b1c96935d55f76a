"""Core settings shared by the automation layer and the CLI."""

from .config import WorkflowConfig, ENGINES

__all__ = [
    'WorkflowConfig',
    'ENGINES',
]
