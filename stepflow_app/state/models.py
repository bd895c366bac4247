"""
Flow engine data models.

This module defines the immutable values passed between the flow engine,
the screen presenter and the persistence gateway: action keys chosen on
interactive screens, the persisted progress record, the persistence
failure sentinel, and the stage/event vocabulary of the transition table.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class ActionKey(str, Enum):
    """User choices on interactive screens."""
    FORWARD = "move forward a step in the flow"
    BACK = "go back one step in the flow"             # Reserved, no screen emits it
    DELETE = "delete a progress"


class StageId(str, Enum):
    """Nodes of the flow graph."""
    MASTER = "master"
    FIRST_TIME = "first_time"
    CONTINUATION = "continuation"
    ABORT = "abort"
    RESTART = "restart"                              # Terminal, has no handler


TERMINAL_STAGES = frozenset({StageId.RESTART})


class FlowEvent(str, Enum):
    """Events reported by a stage when it finishes."""
    RECORD_ABSENT = "record_absent"
    RECORD_PRESENT = "record_present"
    PERSISTENCE_FAILED = "persistence_failed"
    INTRO_COMPLETED = "intro_completed"
    AFTER_MAIN_SHOWN = "after_main_shown"
    MAIN_REDISPLAYED = "main_redisplayed"
    PROGRESS_DELETED = "progress_deleted"
    ERROR_ACKNOWLEDGED = "error_acknowledged"


class PersistencePolicy(str, Enum):
    """How stages other than master treat a failed storage call."""
    BEST_EFFORT = "best_effort"                      # Log and carry on
    STRICT = "strict"                                # Route to abort


class ExitDirective(str, Enum):
    """What the host should do once the engine stops."""
    RESTART = "restart"
    HALTED = "halted"


@dataclass(frozen=True)
class FlowOutcome:
    """Result of an interactive screen."""
    key: ActionKey


@dataclass(frozen=True)
class ProgressRecord:
    """Persisted marker that the user has completed the flow before."""
    payload: Any

    @classmethod
    def create(cls, completed_at: Optional[datetime] = None) -> 'ProgressRecord':
        """Build the default completion record."""
        completed_at = completed_at or datetime.now(timezone.utc)
        return cls(payload={
            "completed": True,
            "completed_at": completed_at.isoformat()
        })


@dataclass(frozen=True)
class PersistenceFailure:
    """Sentinel returned by the gateway when the storage backend is unusable."""
    message: str

    def __str__(self) -> str:
        return self.message


PERSISTENCE_FAILURE = PersistenceFailure(
    "Couldn't access the progress store. Please check your settings and try again."
)


@dataclass(frozen=True)
class StageResult:
    """Event reported by a finished stage, plus its payload."""
    event: FlowEvent
    payload: Any = None


@dataclass(frozen=True)
class StageTransition:
    """One step of the trampoline."""
    source: StageId
    target: StageId
    event: FlowEvent
    payload: Any = None


@dataclass(frozen=True)
class FlowExit:
    """Value returned by FlowEngine.run when the engine stops."""
    directive: ExitDirective
    reason: Optional[str] = None
    transitions: tuple[StageTransition, ...] = field(default_factory=tuple)  # Most recent steps
    transition_count: int = 0
