"""Interactive prompt_toolkit shell for the archiver."""

import os
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory

from cli.commands import dispatch_command
from cli.constants import (
    COMMANDS,
    HELP_TEXT,
    LOGO,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.parser import ParseError, parse_command


class ExitRepl(Exception):
    """Raised by the 'exit' builtin to leave the loop."""


def clear_screen() -> None:
    os.system("cls" if sys.platform == "win32" else "clear")


def show_welcome() -> None:
    print(LOGO)
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


def _builtin_exit() -> None:
    raise ExitRepl()


def _builtin_help() -> None:
    print(HELP_TEXT)


def _builtin_clear() -> None:
    clear_screen()
    show_welcome()


# Commands handled by the shell itself; everything else goes to the archiver.
BUILTINS = {
    "exit": _builtin_exit,
    "help": _builtin_help,
    "clear": _builtin_clear,
}


def execute_line(line: str) -> None:
    """
    Run one line of input: a builtin, or a parsed archiver command.

    Raises:
        ExitRepl: On 'exit'
    """
    line = line.strip()
    if not line:
        return

    builtin = BUILTINS.get(line)
    if builtin is not None:
        builtin()
        return

    try:
        cmd_obj = parse_command(line)
    except ParseError as e:
        print(f"Error: {e}")
        return
    print(dispatch_command(cmd_obj))


def repl_loop() -> None:
    """Start interactive REPL with prompt_toolkit."""
    session: PromptSession = PromptSession(
        completer=WordCompleter(COMMANDS, ignore_case=True),
        history=InMemoryHistory(),
        style=STYLE,
    )

    _builtin_clear()

    while True:
        try:
            execute_line(session.prompt([("class:prompt", PROMPT_TEXT)]))
        except KeyboardInterrupt:
            continue
        except (ExitRepl, EOFError):
            print("Goodbye!")
            break
