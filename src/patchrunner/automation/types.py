from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List
from datetime import datetime

from .errors import SuppressedTargetFault


class StepStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


class StepState(str, Enum):
    PENDING = "pending"
    PRECONDITION_CHECKED = "precondition_checked"
    AUTHENTICATED = "authenticated"
    ACTION_EXECUTED = "action_executed"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class StepOutcome:
    name: str
    status: StepStatus
    state: StepState = StepState.PENDING
    message: str = ""
    error: Optional[str] = None
    error_kind: Optional[str] = None
    failed_at: Optional[StepState] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    suppressed: List[SuppressedTargetFault] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == StepStatus.SUCCESS

    @property
    def duration_s(self) -> float:
        if not self.started_at or not self.finished_at:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()


@dataclass
class RunResult:
    outcomes: List[StepOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(o.ok for o in self.outcomes)

    def outcome(self, name: str) -> StepOutcome:
        for o in self.outcomes:
            if o.name == name:
                return o
        raise KeyError(name)
