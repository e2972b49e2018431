"""Pydantic schemas for the archiver API."""

from archiver.schemas.archives import (
    ArchiveResultResponse,
    BatchArchiveRequest,
    BatchArchiveResponse,
    ExistingArchiveResponse,
)
from archiver.schemas.common import ErrorResponse

__all__ = [
    "ArchiveResultResponse",
    "BatchArchiveRequest",
    "BatchArchiveResponse",
    "ExistingArchiveResponse",
    "ErrorResponse",
]
