"""Console screen presenter."""

import asyncio

from ..state.models import ActionKey
from .base import MessageScreen, ScreenPresenter, StatusScreen


class ConsolePresenter(ScreenPresenter):
    """Renders screens as text and reads button choices line by line."""

    def render_status(self, screen: StatusScreen) -> str:
        """Render a status screen."""
        marker = f"[{screen.kind}] " if screen.kind else ""
        return f"{marker}{screen.text} ..."

    def render_message(self, screen: MessageScreen) -> str:
        """Render a message screen with numbered buttons."""
        lines = [screen.title, "=" * len(screen.title), ""]
        for paragraph in screen.paragraphs:
            lines.append(paragraph)
            lines.append("")

        for index, button in enumerate(screen.buttons, start=1):
            suffix = f" ({button.kind})" if button.kind else ""
            lines.append(f"  [{index}] {button.text}{suffix}")

        return "\n".join(lines)

    async def wait_for_choice(self, screen: MessageScreen) -> ActionKey:
        """Prompt until the input names one of the buttons."""
        while True:
            self.container.append("> ")
            line = await asyncio.to_thread(self.container.read_line)

            key = self.parse_choice(screen, line)
            if key is not None:
                return key

            self.logger.debug("Unrecognised choice", screen=screen.name, choice=line)
            self.container.append(
                f"Please choose 1-{len(screen.buttons)} or type a button label."
            )

    @staticmethod
    def parse_choice(screen: MessageScreen, line: str):
        """
        Map one line of input to a button key.

        Accepts the button number, the button label (case-insensitive), or
        an empty line when the screen has a single button.
        """
        choice = line.strip()

        if not choice:
            if len(screen.buttons) == 1:
                return screen.buttons[0].key
            return None

        if choice.isdigit():
            index = int(choice) - 1
            if 0 <= index < len(screen.buttons):
                return screen.buttons[index].key
            return None

        for button in screen.buttons:
            if button.text.lower() == choice.lower():
                return button.key

        return None
