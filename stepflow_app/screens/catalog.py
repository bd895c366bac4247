"""Fixed screen content for the presentation flow."""

from dataclasses import dataclass, field

from ..state.models import ActionKey
from .base import Button, MessageScreen, StatusScreen

NEXT = Button(text="Next")


def _default_intro() -> tuple[MessageScreen, ...]:
    return (
        MessageScreen(
            name="intro1",
            title="Hello there",
            paragraphs=("There are a few things I want to tell you.",),
            buttons=(NEXT,),
        ),
        MessageScreen(
            name="intro2",
            title="Why this matters",
            paragraphs=("It is simple, and it is worth saying out loud.",),
            buttons=(NEXT,),
        ),
        MessageScreen(
            name="intro3",
            title="Every moment, everywhere",
            paragraphs=("Whether travelling, studying or working, it stays on my mind.",),
            buttons=(NEXT,),
        ),
        MessageScreen(
            name="intro4",
            title="The truth",
            paragraphs=(
                "Some things are only felt from one side, and that is fine.",
                "Live well, and we will meet again in time.",
            ),
            buttons=(Button(text="Finish ..."),),
        ),
    )


@dataclass(frozen=True)
class ScreenCatalog:
    """Every screen the flow engine can show."""

    loading: StatusScreen = StatusScreen(name="loading", text="loading", kind="loading")
    saving: StatusScreen = StatusScreen(name="saving", text="saving", kind="saving")
    deleting: StatusScreen = StatusScreen(name="deleting", text="deleting", kind="deleting")
    intro: tuple[MessageScreen, ...] = field(default_factory=_default_intro)
    main: MessageScreen = MessageScreen(
        name="main",
        title="What I wanted to say",
        paragraphs=(
            "Right or wrong no longer matters once the choice is made.",
        ),
        buttons=(
            Button(text="Delete and start over", key=ActionKey.DELETE, kind="danger"),
            Button(text="Next", key=ActionKey.FORWARD, kind="neutral"),
        ),
    )
    after_main: MessageScreen = MessageScreen(
        name="after_main",
        title="A photo",
        paragraphs=("[photo]",),
        buttons=(Button(text="Back", kind="different"),),
    )

    def error(self, message: str) -> MessageScreen:
        """Error screen carrying the failure message."""
        return MessageScreen(
            name="error",
            title="Error",
            paragraphs=(message,),
            buttons=(Button(text="Refresh", kind="absurd"),),
        )
