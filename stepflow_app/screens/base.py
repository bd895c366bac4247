"""Base classes for screen presenters."""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, TextIO

import structlog

from ..config.defaults import TimingParams
from ..state.models import ActionKey, FlowOutcome


@dataclass(frozen=True)
class Button:
    """Button on an interactive screen."""
    text: str
    key: ActionKey = ActionKey.FORWARD
    kind: str = ""


@dataclass(frozen=True)
class MessageScreen:
    """Interactive screen resolved by a button press."""
    name: str
    title: str
    paragraphs: tuple[str, ...] = ()
    buttons: tuple[Button, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.buttons:
            raise ValueError(f"Message screen {self.name!r} needs at least one button")


@dataclass(frozen=True)
class StatusScreen:
    """Time-gated feedback screen."""
    name: str
    text: str
    kind: str = ""


class ScreenContainer:
    """
    Mount point the presenter renders into.

    Every render replaces the whole content. Input is read line by line
    from the paired input stream.
    """

    def __init__(self, output: TextIO, input: Optional[TextIO] = None,
                 clear_sequence: str = ""):
        self.output = output
        self.input = input
        self.clear_sequence = clear_sequence
        self.content = ""

    def replace(self, content: str) -> None:
        """Replace the container content wholesale."""
        self.content = content
        self.output.write(self.clear_sequence + content + "\n")
        self.output.flush()

    def append(self, text: str) -> None:
        """Write a line below the current content (prompts, hints)."""
        self.content += "\n" + text
        self.output.write(text + "\n")
        self.output.flush()

    def read_line(self) -> str:
        """Read one line of user input; raise EOFError at end of input."""
        if self.input is None:
            raise EOFError("Container has no input stream")
        line = self.input.readline()
        if not line:
            raise EOFError("End of input")
        return line.rstrip("\r\n")


class ScreenPresenter(ABC):
    """
    Base class for screen presenters.

    A presenter is bound to one container for its whole life. Status
    screens resolve after the configured display time; message screens
    resolve once, with the key of the button the user picked.
    """

    def __init__(self, container: ScreenContainer, timing: Optional[TimingParams] = None):
        self._container = container
        self.timing = timing or TimingParams()
        self.logger = structlog.get_logger(f"screens.{self.__class__.__name__}")

    @property
    def container(self) -> ScreenContainer:
        return self._container

    @classmethod
    def builder(cls) -> "PresenterBuilder":
        return PresenterBuilder(cls)

    @abstractmethod
    def render_status(self, screen: StatusScreen) -> str:
        """Render a status screen to container content."""
        pass

    @abstractmethod
    def render_message(self, screen: MessageScreen) -> str:
        """Render an interactive screen to container content."""
        pass

    @abstractmethod
    async def wait_for_choice(self, screen: MessageScreen) -> ActionKey:
        """Wait until the user activates one of the screen's buttons."""
        pass

    async def show_status(self, screen: StatusScreen) -> None:
        """Render a status screen and resolve after its display duration."""
        self._container.replace(self.render_status(screen))
        self.logger.debug("Status screen shown", screen=screen.name)
        await asyncio.sleep(self.timing.status_duration_ms / 1000)

    async def show_message(self, screen: MessageScreen) -> FlowOutcome:
        """Render an interactive screen and resolve with the chosen key."""
        self._container.replace(self.render_message(screen))
        self.logger.debug("Message screen shown", screen=screen.name)

        key = await self.wait_for_choice(screen)
        await asyncio.sleep(self.timing.transition_ms / 1000)

        self.logger.debug("Message screen submitted", screen=screen.name, key=key.name)
        return FlowOutcome(key=key)


class PresenterBuilder:
    """Builds a presenter once its container has been mounted."""

    def __init__(self, presenter_cls: type):
        self.presenter_cls = presenter_cls
        self._container: Optional[ScreenContainer] = None
        self._timing: Optional[TimingParams] = None

    def mount(self, container: ScreenContainer) -> "PresenterBuilder":
        """Set the mount point. A builder mounts exactly once."""
        if self._container is not None:
            raise RuntimeError("Presenter container is already mounted")
        self._container = container
        return self

    def with_timing(self, timing: TimingParams) -> "PresenterBuilder":
        self._timing = timing
        return self

    def build(self) -> ScreenPresenter:
        if self._container is None:
            raise RuntimeError("Mount a container before building the presenter")
        return self.presenter_cls(self._container, timing=self._timing)
