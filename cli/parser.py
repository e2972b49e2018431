"""Command parser for CLI input."""

import shlex

from common.cid import is_valid_cid
from cli.models import AddCommand, CommandRequest, FindCommand, PinCommand


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of Add/Pin/Find)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]

    if command_name == "add":
        return _parse_add(tokens[1:])
    elif command_name == "pin":
        return _parse_pin(tokens[1:])
    elif command_name == "find":
        return _parse_find(tokens[1:])
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _parse_add(args: list[str]) -> AddCommand:
    """Parse 'add <path> [content-type]' command."""
    if not args or len(args) > 2:
        raise ParseError("add requires a file path and an optional content type")

    content_type = args[1] if len(args) == 2 else None
    if content_type is not None and "/" not in content_type:
        raise ParseError(f"Invalid content type: {content_type} (expected e.g. image/png)")

    return AddCommand(file_path=args[0], content_type=content_type)


def _parse_pin(args: list[str]) -> PinCommand:
    """Parse 'pin <cid> [<cid> ...]' command."""
    if not args:
        raise ParseError("pin requires at least one CID")

    invalid = [arg for arg in args if not is_valid_cid(arg)]
    if invalid:
        raise ParseError(f"Invalid CID: {', '.join(invalid)}")

    return PinCommand(content_ids=tuple(args))


def _parse_find(args: list[str]) -> FindCommand:
    """Parse 'find <cid>' command."""
    if len(args) != 1:
        raise ParseError("find requires exactly 1 argument: <cid>")

    if not is_valid_cid(args[0]):
        raise ParseError(f"Invalid CID: {args[0]}")

    return FindCommand(content_id=args[0])
