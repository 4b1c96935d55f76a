from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple, Dict

from ..core.config import WorkflowConfig
from .engine import AutomationEngine
from .sites.base_site import AdminSite


@dataclass
class StepContext:
    """What a step action gets to work with."""
    engine: AutomationEngine
    site: AdminSite
    config: WorkflowConfig
    values: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CompletionCheck:
    """Predicate over live page state awaited after a step's action."""
    description: str
    predicate: Callable[[StepContext], bool]
    # Deadline is this many default action timeouts.
    timeout_factor: Optional[int] = None


@dataclass(frozen=True)
class Step:
    name: str
    action: Callable[[StepContext], None]
    requires: Tuple[str, ...] = ()
    completion: Optional[CompletionCheck] = None
    description: str = ""
