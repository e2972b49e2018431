"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from cli.archiver_client import ArchiverClient
from cli.config import Config
from cli.models import AddCommand, CommandRequest, FindCommand, PinCommand

logger = get_logger(__name__)


_client: Optional[ArchiverClient] = None


def get_client() -> ArchiverClient:
    """
    Get or create global ArchiverClient instance.

    Returns:
        ArchiverClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new ArchiverClient instance")
        config = Config(Path.home() / '.permafy' / 'config.json')
        _client = ArchiverClient(config)
    return _client


def handle_add(cmd: AddCommand, client: Optional[ArchiverClient] = None) -> str:
    """
    Handle 'add' command.

    Args:
        cmd: AddCommand with file path and optional content type
        client: Optional ArchiverClient for dependency injection (testing)

    Returns:
        Result message
    """
    if client is None:
        client = get_client()
    return client.add_file(cmd.file_path, cmd.content_type)


def handle_pin(cmd: PinCommand, client: Optional[ArchiverClient] = None) -> str:
    """Handle 'pin' command."""
    if client is None:
        client = get_client()
    return client.pin(list(cmd.content_ids))


def handle_find(cmd: FindCommand, client: Optional[ArchiverClient] = None) -> str:
    """Handle 'find' command."""
    if client is None:
        client = get_client()
    return client.find(cmd.content_id)


def dispatch_command(cmd_obj: CommandRequest, client: Optional[ArchiverClient] = None) -> str:
    """Dispatch parsed command to appropriate handler."""
    if isinstance(cmd_obj, AddCommand):
        return handle_add(cmd_obj, client)
    elif isinstance(cmd_obj, PinCommand):
        return handle_pin(cmd_obj, client)
    elif isinstance(cmd_obj, FindCommand):
        return handle_find(cmd_obj, client)
    else:
        return f"Unknown command type: {type(cmd_obj)}"
