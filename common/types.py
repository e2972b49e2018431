"""Shared data type definitions (FetchedContent, ArchiveSuccess, ArchiveFailure, etc.)."""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class FileTypeInfo:
    """
    Mime type sniffed from file content. Advisory only.
    """
    mime_type: str


@dataclass(frozen=True)
class FetchedContent:
    """
    Bytes fetched from IPFS together with their detected file type.
    """
    data: bytes
    file_type: Optional[FileTypeInfo] = None

    @property
    def mime_type(self) -> Optional[str]:
        return self.file_type.mime_type if self.file_type else None


@dataclass(frozen=True)
class StoredObject:
    """
    One entry of an IPFS add response.
    """
    identifier: str
    size: int


@dataclass(frozen=True)
class SubmissionStatus:
    """
    Response of the Arweave gateway to a transaction submission.
    """
    status_code: int
    status_text: str

    @property
    def accepted(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class ArchiveSuccess:
    """
    File is stored on Arweave and reachable on IPFS.

    already_existed is set when a byte-identical copy was found on Arweave
    and no new transaction was written.
    """
    content_id: str
    ledger_tx_id: str
    already_existed: bool = False

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ArchiveFailure:
    """
    Archival did not happen. message is human readable.
    """
    message: str

    @property
    def ok(self) -> bool:
        return False


ArchiveResult = Union[ArchiveSuccess, ArchiveFailure]
