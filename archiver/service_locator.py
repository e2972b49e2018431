"""Service locator for the process-wide archive service."""

from typing import Optional

from archiver.services.archive_service import ArchiveService

_archive_service: Optional[ArchiveService] = None


def set_archive_service(service: Optional[ArchiveService]):
    """Set global archive service instance"""
    global _archive_service
    _archive_service = service


def get_archive_service() -> ArchiveService:
    """Get global archive service instance"""
    if _archive_service is None:
        raise RuntimeError("Archive service has not been initialized")
    return _archive_service
