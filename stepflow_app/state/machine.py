"""
Core flow engine.

Each stage is a coroutine that shows screens, calls the progress gateway
and reports a FlowEvent. The engine resolves the next stage from the
transition table and runs it from a flat trampoline loop, so the
continuation self-loop never grows the call stack. Screens that pair with
a storage call are joined with asyncio.gather: both must finish before
the stage reports.
"""

import asyncio
from collections import deque
from typing import Any, Optional

from ..logging.config import get_stage_logger, log_stage_transition
from ..persistence.progress_store import ProgressGateway
from ..screens.base import ScreenPresenter
from ..screens.catalog import ScreenCatalog
from .models import (
    TERMINAL_STAGES,
    ActionKey,
    ExitDirective,
    FlowEvent,
    FlowExit,
    FlowOutcome,
    PersistenceFailure,
    PersistencePolicy,
    StageId,
    StageResult,
    StageTransition,
)
from .transitions import Stage, branch_off, resolve_transition


class FlowEngine:
    """Drives the presentation flow one stage at a time."""

    def __init__(
        self,
        presenter: ScreenPresenter,
        gateway: ProgressGateway,
        catalog: Optional[ScreenCatalog] = None,
        policy: PersistencePolicy = PersistencePolicy.BEST_EFFORT,
        history_size: int = 50
    ) -> None:
        self.presenter = presenter
        self.gateway = gateway
        self.catalog = catalog or ScreenCatalog()
        self.policy = policy
        self.history_size = history_size
        self.logger = get_stage_logger(__name__)

        self.continuation: Stage = branch_off(
            self._show_main,
            {
                ActionKey.FORWARD: self._show_after_main,
                ActionKey.DELETE: self._delete_progress,
            },
            default=self._redisplay_main
        )

        self.stages: dict[StageId, Stage] = {
            StageId.MASTER: self.master,
            StageId.FIRST_TIME: self.first_time,
            StageId.CONTINUATION: self.continuation,
            StageId.ABORT: self.abort,
        }

    # Stages

    async def master(self, payload: Any = None) -> StageResult:
        """Load progress while the loading screen runs, then dispatch on it."""
        _, progress = await asyncio.gather(
            self.presenter.show_status(self.catalog.loading),
            self.gateway.load()
        )

        if progress is None:
            return StageResult(FlowEvent.RECORD_ABSENT)
        if isinstance(progress, PersistenceFailure):
            return StageResult(FlowEvent.PERSISTENCE_FAILED, payload=progress)
        return StageResult(FlowEvent.RECORD_PRESENT)

    async def first_time(self, payload: Any = None) -> StageResult:
        """Run the introduction, then save progress while the saving screen runs."""
        for screen in self.catalog.intro:
            await self.presenter.show_message(screen)

        _, failure = await asyncio.gather(
            self.presenter.show_status(self.catalog.saving),
            self.gateway.save()
        )

        return self._after_persistence(
            StageId.FIRST_TIME, "save", failure, StageResult(FlowEvent.INTRO_COMPLETED)
        )

    async def abort(self, payload: Any = None) -> StageResult:
        """Show the failure message; the engine stops once it is acknowledged."""
        await self.presenter.show_message(self.catalog.error(str(payload)))
        return StageResult(FlowEvent.ERROR_ACKNOWLEDGED, payload=payload)

    # Continuation branches

    async def _show_main(self) -> FlowOutcome:
        return await self.presenter.show_message(self.catalog.main)

    async def _show_after_main(self) -> StageResult:
        await self.presenter.show_message(self.catalog.after_main)
        return StageResult(FlowEvent.AFTER_MAIN_SHOWN)

    async def _delete_progress(self) -> StageResult:
        _, failure = await asyncio.gather(
            self.presenter.show_status(self.catalog.deleting),
            self.gateway.delete()
        )

        return self._after_persistence(
            StageId.CONTINUATION, "delete", failure, StageResult(FlowEvent.PROGRESS_DELETED)
        )

    async def _redisplay_main(self) -> StageResult:
        # Keys without a branch (BACK) show the main screen again
        return StageResult(FlowEvent.MAIN_REDISPLAYED)

    def _after_persistence(
        self,
        stage: StageId,
        operation: str,
        failure: Optional[PersistenceFailure],
        success: StageResult
    ) -> StageResult:
        """Apply the persistence policy to a save or delete outside master."""
        if failure is None:
            return success

        if self.policy is PersistencePolicy.STRICT:
            self.logger.error(
                "Persistence failed, aborting flow",
                stage=stage.value,
                operation=operation,
                policy=self.policy.value
            )
            return StageResult(FlowEvent.PERSISTENCE_FAILED, payload=failure)

        self.logger.warning(
            "Persistence failed, continuing",
            stage=stage.value,
            operation=operation,
            policy=self.policy.value
        )
        return success

    # Trampoline

    async def step(self, stage: StageId, payload: Any = None) -> StageTransition:
        """Run one stage and resolve its successor."""
        handler = self.stages[stage]
        result = await handler(payload)
        target = resolve_transition(stage, result.event)

        log_stage_transition(
            self.logger,
            from_stage=stage.value,
            to_stage=target.value,
            trigger=result.event.value,
            context={"payload": str(result.payload)} if result.payload is not None else None
        )

        return StageTransition(
            source=stage,
            target=target,
            event=result.event,
            payload=result.payload
        )

    async def run(
        self,
        start: StageId = StageId.MASTER,
        max_transitions: Optional[int] = None
    ) -> FlowExit:
        """
        Run stages until a terminal stage is reached.

        Args:
            start: Stage to enter first
            max_transitions: Stop with HALTED after this many steps

        Returns:
            FlowExit with RESTART after an abort, HALTED when the
            transition budget runs out
        """
        history: deque[StageTransition] = deque(maxlen=self.history_size)
        stage, payload = start, None
        count = 0

        self.logger.info("Flow started", stage=start.value)

        while stage not in TERMINAL_STAGES:
            if max_transitions is not None and count >= max_transitions:
                self.logger.info("Flow halted", stage=stage.value, transitions=count)
                return FlowExit(
                    directive=ExitDirective.HALTED,
                    transitions=tuple(history),
                    transition_count=count
                )

            transition = await self.step(stage, payload)
            history.append(transition)
            count += 1
            stage, payload = transition.target, transition.payload

        reason = str(payload) if payload is not None else None
        self.logger.warning("Flow requested restart", reason=reason, transitions=count)
        return FlowExit(
            directive=ExitDirective.RESTART,
            reason=reason,
            transitions=tuple(history),
            transition_count=count
        )
