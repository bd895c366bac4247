"""
Screen presenter module.

Renders status and interactive screens into a mounted container and
resolves with the user's choice.
"""

from .base import Button, MessageScreen, PresenterBuilder, ScreenContainer, ScreenPresenter, StatusScreen
from .catalog import ScreenCatalog
from .console import ConsolePresenter

__all__ = [
    "Button",
    "MessageScreen",
    "StatusScreen",
    "ScreenContainer",
    "ScreenPresenter",
    "PresenterBuilder",
    "ScreenCatalog",
    "ConsolePresenter",
]
