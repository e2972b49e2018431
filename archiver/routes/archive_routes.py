"""Archive operation API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from common.cid import parse_cid
from common.constants import MAX_FILE_SIZE_BYTES, MAX_FILE_SIZE_TEXT
from archiver.exceptions import ArchiveNotFoundError, FileTooLargeError, InvalidContentIdError
from archiver.schemas.archives import (
    ArchiveResultResponse,
    BatchArchiveRequest,
    BatchArchiveResponse,
    ExistingArchiveResponse,
)
from archiver.service_locator import get_archive_service
from archiver.services.archive_service import ArchiveService

router = APIRouter(prefix="/archives", tags=["Archives"])

GENERIC_CONTENT_TYPE = "application/octet-stream"


@router.post("", response_model=ArchiveResultResponse, status_code=status.HTTP_201_CREATED)
async def archive_upload(
    file: UploadFile = File(...),
    content_type: Optional[str] = Form(None),
    service: ArchiveService = Depends(get_archive_service),
):
    """
    Add a new file to IPFS and archive it on Arweave.

    Parameters:
        - file: File to archive (multipart/form-data)
        - content_type: Optional mime type; defaults to the part's content type

    Raises:
        - 413: File larger than the archival limit
        - 502: Arweave rejected the transaction
        - 503: IPFS unavailable
    """
    # One byte past the limit is enough to know the upload is too large.
    file_content = await file.read(MAX_FILE_SIZE_BYTES + 1)
    if len(file_content) > MAX_FILE_SIZE_BYTES:
        raise FileTooLargeError(f"File is too large, maximum size is: {MAX_FILE_SIZE_TEXT}")

    if not content_type and file.content_type and file.content_type != GENERIC_CONTENT_TYPE:
        content_type = file.content_type

    result = await service.archive_new_bytes(file_content, content_type)
    return ArchiveResultResponse.from_result(result)


@router.post("/batch", response_model=BatchArchiveResponse)
async def archive_batch(
    request: BatchArchiveRequest,
    service: ArchiveService = Depends(get_archive_service),
):
    """
    Archive many existing IPFS files.

    Every CID must be valid or nothing is attempted (400). Individual
    failures are reported per item with ok=false.
    """
    results = await service.archive_many_existing(request.content_ids)
    responses = [ArchiveResultResponse.from_result(result) for result in results]
    archived = sum(1 for response in responses if response.ok)

    return BatchArchiveResponse(
        results=responses,
        archived_count=archived,
        failed_count=len(responses) - archived,
    )


@router.post("/{content_id}", response_model=ArchiveResultResponse)
async def archive_existing(
    content_id: str,
    service: ArchiveService = Depends(get_archive_service),
):
    """
    Archive an existing IPFS file by CID.

    Returns ok=false with an error message when the file cannot be found
    on IPFS or is too large.

    Raises:
        - 400: Invalid CID
    """
    if parse_cid(content_id) is None:
        raise InvalidContentIdError(f"Invalid CID: {content_id}")

    result = await service.archive_existing(content_id)
    return ArchiveResultResponse.from_result(result)


@router.get("/{content_id}", response_model=ExistingArchiveResponse)
async def find_archive(
    content_id: str,
    service: ArchiveService = Depends(get_archive_service),
):
    """
    Look up a verified Arweave copy of an IPFS file.

    Raises:
        - 400: Invalid CID
        - 404: No verified copy on Arweave
    """
    ledger_tx_id = await service.find_existing(content_id)
    if not ledger_tx_id:
        raise ArchiveNotFoundError(f"No verified Arweave copy of {content_id}")

    return ExistingArchiveResponse(content_id=content_id, ledger_tx_id=ledger_tx_id)
