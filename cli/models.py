"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class AddCommand:
    """Add a local file to IPFS and archive it."""

    file_path: str
    content_type: str | None = None
    command: Literal["add"] = "add"


@dataclass(frozen=True)
class PinCommand:
    """Archive existing IPFS files by CID."""

    content_ids: tuple[str, ...]
    command: Literal["pin"] = "pin"


@dataclass(frozen=True)
class FindCommand:
    """Look up an archived copy by CID."""

    content_id: str
    command: Literal["find"] = "find"


CommandRequest = AddCommand | PinCommand | FindCommand
