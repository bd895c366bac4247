"""
Stage transition table and branching combinator.

The flow graph is a static table from (stage, event) to the next stage.
Stage handlers only report events; choosing the successor is a pure
lookup here, so the engine can drive the cycles in the graph (the
continuation self-loop, delete routing back to master) from a flat loop.
"""

from typing import Any, Awaitable, Callable, Mapping, Optional

from ..errors import BranchMappingError, StageTransitionError
from .models import ActionKey, FlowEvent, FlowOutcome, StageId, StageResult

Stage = Callable[..., Awaitable[StageResult]]
OutcomeSource = Callable[[], Awaitable[FlowOutcome]]
Branch = Callable[[], Awaitable[StageResult]]

TRANSITIONS: Mapping[tuple[StageId, FlowEvent], StageId] = {
    (StageId.MASTER, FlowEvent.RECORD_ABSENT): StageId.FIRST_TIME,
    (StageId.MASTER, FlowEvent.RECORD_PRESENT): StageId.CONTINUATION,
    (StageId.MASTER, FlowEvent.PERSISTENCE_FAILED): StageId.ABORT,
    (StageId.FIRST_TIME, FlowEvent.INTRO_COMPLETED): StageId.CONTINUATION,
    (StageId.FIRST_TIME, FlowEvent.PERSISTENCE_FAILED): StageId.ABORT,
    (StageId.CONTINUATION, FlowEvent.AFTER_MAIN_SHOWN): StageId.CONTINUATION,
    (StageId.CONTINUATION, FlowEvent.MAIN_REDISPLAYED): StageId.CONTINUATION,
    (StageId.CONTINUATION, FlowEvent.PROGRESS_DELETED): StageId.MASTER,
    (StageId.CONTINUATION, FlowEvent.PERSISTENCE_FAILED): StageId.ABORT,
    (StageId.ABORT, FlowEvent.ERROR_ACKNOWLEDGED): StageId.RESTART,
}


def resolve_transition(stage: StageId, event: FlowEvent) -> StageId:
    """
    Return the stage that follows `stage` when it reports `event`.

    Raises:
        StageTransitionError: the table has no edge for the pair
    """
    try:
        return TRANSITIONS[(stage, event)]
    except KeyError:
        raise StageTransitionError(
            f"No transition from {stage.value} on {event.value}",
            current_stage=stage.value,
            attempted_event=event.value
        ) from None


def branch_off(
    source: OutcomeSource,
    branches: Mapping[ActionKey, Branch],
    default: Optional[Branch] = None
) -> Stage:
    """
    Build a stage that awaits `source` and dispatches on the chosen key.

    Args:
        source: Coroutine function producing the FlowOutcome to branch on
        branches: Branch to run for each ActionKey
        default: Branch for keys missing from `branches`

    Returns:
        Stage coroutine function resolving with the chosen branch's result

    Raises:
        BranchMappingError: `branches` does not cover every ActionKey and
            no default was given
    """
    missing = [key for key in ActionKey if key not in branches]
    if missing and default is None:
        raise BranchMappingError(
            "Branch map must cover every action key or supply a default",
            missing_keys=[key.name for key in missing]
        )

    table = dict(branches)

    async def stage(payload: Any = None) -> StageResult:
        outcome = await source()
        branch = table.get(outcome.key, default)
        return await branch()

    return stage
