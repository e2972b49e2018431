"""Service layer for archival logic."""

from archiver.services.archive_service import ArchiveService
from archiver.services.content_fetcher import ContentFetcher
from archiver.services.dedup_service import DeduplicationResolver

__all__ = [
    "ArchiveService",
    "ContentFetcher",
    "DeduplicationResolver",
]
