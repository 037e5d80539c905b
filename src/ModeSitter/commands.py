from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, NamedTuple

from .actions import Action, EchoAction
from .modes import ModeProperties

if TYPE_CHECKING:
    from .session import BufferSession

logger = logging.getLogger(__name__)


class CommandContext(NamedTuple):
    session: BufferSession
    cursor: int  # 0-indexed char offset
    line: int  # 1-based


CommandFunc = Callable[[CommandContext], Action]


class Command(NamedTuple):
    name: str
    func: CommandFunc
    description: str = ""


class CommandRegistry:
    def __init__(self):
        self._commands: dict[str, Command] = {}

    def register(self, name: str, func: CommandFunc, description: str = "") -> Command:
        command = Command(name, func, description)
        self._commands[name] = command
        return command

    def has_command(self, name: str) -> bool:
        return name in self._commands

    def get(self, name: str) -> Command:
        return self._commands[name]

    def names(self) -> list[str]:
        return sorted(self._commands)

    def run(self, name: str, context: CommandContext) -> Action:
        """Run a command by name

        Never raises. An unknown command or one that fails produces an
        EchoAction carrying the error for the host to show.
        """
        command = self._commands.get(name)
        if command is None:
            return EchoAction(f"Unknown command: {name}")
        try:
            return command.func(context)
        except Exception as e:
            logger.exception("Command %s failed", name)
            return EchoAction(f"{name} failed: {e}")

    def reset(self):
        self._commands.clear()


COMMANDS = CommandRegistry()


def _indent_line(ctx: CommandContext) -> Action:
    return ctx.session.indent_line(ctx.line)


def _newline_and_indent(ctx: CommandContext) -> Action:
    return ctx.session.newline_and_indent(ctx.cursor)


def _highlight(ctx: CommandContext) -> Action:
    count = ctx.session.rehighlight()
    return EchoAction(f"Highlighted {count} spans")


def register_language_commands(prefix: str, show_gutter: bool = True) -> ModeProperties:
    """Register the indent, newline and highlight commands of a language

    Args:
        prefix: The language name, eg "julia" gives "julia-indent-line"

    Returns:
        Mode properties naming the registered commands
    """
    indent = f"{prefix}-indent-line"
    newline = f"{prefix}-newline-and-indent"
    highlight = f"highlight-{prefix}"
    COMMANDS.register(indent, _indent_line, f"Indent the current line as {prefix}")
    COMMANDS.register(newline, _newline_and_indent, f"Insert a newline and indent as {prefix}")
    COMMANDS.register(highlight, _highlight, f"Re-highlight the buffer as {prefix}")
    return ModeProperties(
        show_gutter=show_gutter,
        indent_command=indent,
        newline_command=newline,
        highlight_command=highlight,
    )
