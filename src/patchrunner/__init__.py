# Avoid importing browser engines at top-level to prevent side effects
__all__ = ["WorkflowConfig", "WorkflowRunner"]

def __getattr__(name):
    if name == "WorkflowConfig":
        from .core.config import WorkflowConfig
        return WorkflowConfig
    if name == "WorkflowRunner":
        from .automation.runner import WorkflowRunner
        return WorkflowRunner
    raise AttributeError(name)
