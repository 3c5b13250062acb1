"""Human-readable status output and interactive confirmation."""

import sys
from typing import Callable, Iterable, Optional, TextIO

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.prompt import Confirm


# Rich style names used for status lines
RED = "red"
GREEN = "green"
YELLOW = "bold yellow"
BLUE = "blue"

CHECK_MARK = "✓"

# Prompt text in, yes/no out
ConfirmFunc = Callable[[str], bool]


class Console:
    """
    Status printer on top of a rich console bound to one output stream.

    ``line`` and ``indented`` print plain text; ``markup`` prints text that
    already carries rich markup, such as the result of ``paint``.
    """

    def __init__(self, stream: Optional[TextIO] = None, use_color: bool = True, force_terminal: Optional[bool] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.use_color = use_color
        self.rich = RichConsole(
            file=self.stream,
            color_system="auto" if use_color else None,
            no_color=not use_color,
            force_terminal=force_terminal,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )

    def paint(self, text: str, style: str) -> str:
        """Markup for text in a style; the text itself is never parsed as markup."""
        return f"[{style}]{escape(text)}[/]"

    def markup(self, text: str = "") -> None:
        self.rich.print(text)

    def line(self, text: str = "") -> None:
        self.rich.print(escape(text))

    def blank(self) -> None:
        self.rich.print()

    def heading(self, text: str, style: str = BLUE) -> None:
        self.markup(self.paint(text, style))

    def info(self, label: str, value: str = "") -> None:
        """Print a blue label followed by a plain value."""
        if value:
            self.markup(f"{self.paint(label, BLUE)} {escape(value)}")
        else:
            self.markup(self.paint(label, BLUE))

    def success(self, text: str, style: Optional[str] = None) -> None:
        body = self.paint(text, style) if style else escape(text)
        self.markup(f"{self.paint(CHECK_MARK, GREEN)} {body}")

    def warning(self, text: str) -> None:
        self.markup(self.paint(text, YELLOW))

    def error(self, text: str) -> None:
        self.markup(self.paint(text, RED))

    def indented(self, lines: Iterable[str], prefix: str = "  ") -> None:
        for entry in lines:
            self.line(f"{prefix}{entry}")


def is_affirmative(answer: Optional[str]) -> bool:
    """Only an answer starting with y or Y counts as yes."""
    if not answer:
        return False
    return answer.strip()[:1] in ("y", "Y")


class YesNoConfirm(Confirm):
    """Confirm prompt where anything not starting with y means no."""

    prompt_suffix = " "

    def process_response(self, value: str) -> bool:
        return is_affirmative(value)


def make_stdin_confirm(console: Console, input_stream: Optional[TextIO] = None) -> ConfirmFunc:
    """
    Create a confirmation function asking on ``console``.

    The prompt is suffixed with ``(y/N)``; an empty answer or EOF means no.
    Answers are read from ``input_stream`` when given, else from the terminal.
    """
    def confirm(prompt: str) -> bool:
        try:
            return YesNoConfirm.ask(
                f"{escape(prompt)} (y/N)",
                console=console.rich,
                default=False,
                show_default=False,
                show_choices=False,
                stream=input_stream,
            )
        except EOFError:
            console.blank()
            return False

    return confirm
