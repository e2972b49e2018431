"""Pydantic schemas for archive endpoints."""

from typing import List, Optional
from pydantic import BaseModel

from common.types import ArchiveResult, ArchiveSuccess


class ArchiveResultResponse(BaseModel):
    """Outcome of archiving one file."""
    ok: bool
    content_id: Optional[str] = None
    ledger_tx_id: Optional[str] = None
    already_existed: bool = False
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: ArchiveResult) -> "ArchiveResultResponse":
        if isinstance(result, ArchiveSuccess):
            return cls(
                ok=True,
                content_id=result.content_id,
                ledger_tx_id=result.ledger_tx_id,
                already_existed=result.already_existed,
            )
        return cls(ok=False, error=result.message)


class BatchArchiveRequest(BaseModel):
    """Request model for archiving many existing CIDs."""
    content_ids: List[str]


class BatchArchiveResponse(BaseModel):
    """Response model for bulk archival, one result per requested CID."""
    results: List[ArchiveResultResponse]
    archived_count: int
    failed_count: int


class ExistingArchiveResponse(BaseModel):
    """Response model for an archive lookup."""
    content_id: str
    ledger_tx_id: str
