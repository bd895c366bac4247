"""Pytest configuration and shared fixtures."""

import io
from typing import Callable, Iterable, Optional

import pytest

from stepflow_app.config.defaults import TimingParams
from stepflow_app.persistence.backends import InMemoryBackend, KeyValueBackend
from stepflow_app.persistence.progress_store import ProgressGateway
from stepflow_app.screens.base import MessageScreen, ScreenContainer, ScreenPresenter, StatusScreen
from stepflow_app.state.machine import FlowEngine
from stepflow_app.state.models import ActionKey, PersistencePolicy

ZERO_TIMING = TimingParams(status_duration_ms=0, transition_ms=0, persistence_delay_ms=0)


class ScriptedPresenter(ScreenPresenter):
    """
    Presenter that records every screen and answers from a script.

    Single-button screens are pressed automatically. Screens with several
    buttons consume the next scripted key; an empty script raises EOFError,
    the same way the console presenter stops at end of input.
    """

    def __init__(self, container: Optional[ScreenContainer] = None,
                 timing: Optional[TimingParams] = None,
                 choices: Iterable[ActionKey] = ()):
        super().__init__(container or ScreenContainer(io.StringIO()), timing=timing or ZERO_TIMING)
        self.choices = list(choices)
        self.shown: list[str] = []
        self.messages: list[MessageScreen] = []

    def render_status(self, screen: StatusScreen) -> str:
        self.shown.append(screen.name)
        return screen.text

    def render_message(self, screen: MessageScreen) -> str:
        self.shown.append(screen.name)
        self.messages.append(screen)
        return "\n".join((screen.title,) + screen.paragraphs)

    async def wait_for_choice(self, screen: MessageScreen) -> ActionKey:
        if len(screen.buttons) == 1:
            return screen.buttons[0].key
        if not self.choices:
            raise EOFError("Script exhausted")
        return self.choices.pop(0)


class FailingBackend(KeyValueBackend):
    """Backend that raises on every call and counts the attempts."""

    def __init__(self):
        self.calls: list[str] = []

    def get(self, key):
        self.calls.append("get")
        raise OSError("storage disabled")

    def set(self, key, value):
        self.calls.append("set")
        raise OSError("storage disabled")

    def remove(self, key):
        self.calls.append("remove")
        raise OSError("storage disabled")

    def health_check(self) -> bool:
        return False


class RecordingBackend(InMemoryBackend):
    """In-memory backend that records each call."""

    def __init__(self, initial=None, fail_on: Iterable[str] = ()):
        super().__init__(initial)
        self.calls: list[str] = []
        self.fail_on = set(fail_on)

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise OSError(f"{operation} failed")

    def get(self, key):
        self._record("get")
        return super().get(key)

    def set(self, key, value):
        self._record("set")
        super().set(key, value)

    def remove(self, key):
        self._record("remove")
        super().remove(key)


@pytest.fixture
def zero_timing() -> TimingParams:
    """Timing with every delay disabled."""
    return ZERO_TIMING


@pytest.fixture
def scripted_presenter() -> Callable[..., ScriptedPresenter]:
    """Factory for scripted presenters."""
    def factory(*choices: ActionKey) -> ScriptedPresenter:
        return ScriptedPresenter(choices=choices)
    return factory


@pytest.fixture
def failing_backend() -> FailingBackend:
    return FailingBackend()


@pytest.fixture
def recording_backend() -> Callable[..., RecordingBackend]:
    """Factory for recording backends."""
    def factory(initial=None, fail_on: Iterable[str] = ()) -> RecordingBackend:
        return RecordingBackend(initial, fail_on=fail_on)
    return factory


@pytest.fixture
def stored_progress() -> dict:
    """Backend contents for a returning user."""
    return {"userProgress": '{"completed": true, "completed_at": "2024-01-01T00:00:00+00:00"}'}


@pytest.fixture
def make_engine() -> Callable[..., FlowEngine]:
    """Build a flow engine over a presenter and backend with zero delays."""
    def factory(presenter: ScreenPresenter, backend: KeyValueBackend,
                policy: PersistencePolicy = PersistencePolicy.BEST_EFFORT) -> FlowEngine:
        gateway = ProgressGateway(backend, delay_ms=0)
        return FlowEngine(presenter, gateway, policy=policy)
    return factory


class TracingPresenter(ScriptedPresenter):
    """Scripted presenter that records when status screens start and end."""

    def __init__(self, events: list, status_ms: int, choices: Iterable[ActionKey] = ()):
        super().__init__(
            timing=TimingParams(status_duration_ms=status_ms, transition_ms=0, persistence_delay_ms=0),
            choices=choices
        )
        self.events = events

    async def show_status(self, screen: StatusScreen) -> None:
        self.events.append(f"{screen.name}:start")
        await super().show_status(screen)
        self.events.append(f"{screen.name}:end")


class TracingGateway(ProgressGateway):
    """Gateway that records when each storage call starts and ends."""

    def __init__(self, backend: KeyValueBackend, events: list, delay_ms: int):
        super().__init__(backend, delay_ms=delay_ms)
        self.events = events

    async def _traced(self, operation: str, call):
        self.events.append(f"{operation}:start")
        result = await call
        self.events.append(f"{operation}:end")
        return result

    async def load(self):
        return await self._traced("load", super().load())

    async def save(self, record=None):
        return await self._traced("save", super().save(record))

    async def delete(self):
        return await self._traced("delete", super().delete())


@pytest.fixture
def make_traced_engine() -> Callable[..., tuple]:
    """Build an engine whose status screens and storage calls log start/end events."""
    def factory(backend: KeyValueBackend, *choices: ActionKey,
                status_ms: int = 50, delay_ms: int = 50) -> tuple:
        events: list = []
        presenter = TracingPresenter(events, status_ms, choices)
        engine = FlowEngine(presenter, TracingGateway(backend, events, delay_ms))
        return engine, events
    return factory
