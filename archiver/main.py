"""Entry point for the archiver service."""

import time
import uuid

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from common.logging_config import setup_logging
from archiver import config
from archiver.arweave_client import ArweaveClient
from archiver.arweave_transaction import Wallet
from archiver.exceptions import (
    ArchiveNotFoundError,
    ArchiverException,
    ContentNotFoundError,
    FileTooLargeError,
    InvalidContentIdError,
    LedgerError,
    LedgerSubmissionError,
    PeerStorageUnavailableError,
)
from archiver.ipfs_client import IpfsClient
from archiver.routes.archive_routes import router as archive_router
from archiver.schemas.common import ErrorResponse
from archiver.service_locator import get_archive_service, set_archive_service
from archiver.services.archive_service import ArchiveService

logger = setup_logging('archiver')

app = FastAPI(
    title="Permafy Archiver",
    description="Archives IPFS content permanently on Arweave",
    version="1.0.0"
)


def build_archive_service() -> ArchiveService:
    """
    Build the archive service from environment configuration.

    Raises:
        ConfigurationError: If the wallet is missing or malformed
    """
    wallet = Wallet.from_jwk(config.load_wallet_jwk())
    logger.info(f"Loaded Arweave wallet {wallet.address}")

    return ArchiveService(
        ipfs_client=IpfsClient(config.ipfs_base_url()),
        arweave_client=ArweaveClient(config.arweave_base_url()),
        wallet=wallet,
        batch_size=config.BATCH_SIZE,
        batch_delay_seconds=config.BATCH_DELAY_SECONDS,
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
    )

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


@app.on_event("startup")
async def startup_event():
    """
    Load the wallet and build the network clients.
    """
    logger.info("Archiver service starting up...")
    set_archive_service(build_archive_service())
    logger.info(f"IPFS API: {config.ipfs_base_url()}, Arweave gateway: {config.arweave_base_url()}")


@app.on_event("shutdown")
async def shutdown_event():
    """
    Close network clients on application shutdown.
    """
    logger.info("Archiver service shutting down...")
    try:
        service = get_archive_service()
    except RuntimeError:
        return

    await service.ipfs_client.close()
    await service.arweave_client.close()
    set_archive_service(None)
    logger.info("Network clients closed")


def _error_response(request: Request, exc: Exception, status_code: int, code: str) -> JSONResponse:
    request_id = getattr(request.state, 'request_id', 'unknown')
    if status_code >= 500:
        logger.error(
            f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=True
        )
    else:
        logger.warning(
            f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}"
        )
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=str(exc), code=code).model_dump()
    )


@app.exception_handler(InvalidContentIdError)
async def invalid_content_id_handler(request: Request, exc: InvalidContentIdError):
    return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "INVALID_CONTENT_ID")


@app.exception_handler(FileTooLargeError)
async def file_too_large_handler(request: Request, exc: FileTooLargeError):
    return _error_response(request, exc, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "FILE_TOO_LARGE")


@app.exception_handler(ArchiveNotFoundError)
async def archive_not_found_handler(request: Request, exc: ArchiveNotFoundError):
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "ARCHIVE_NOT_FOUND")


@app.exception_handler(ContentNotFoundError)
async def content_not_found_handler(request: Request, exc: ContentNotFoundError):
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "CONTENT_NOT_FOUND")


@app.exception_handler(PeerStorageUnavailableError)
async def peer_storage_unavailable_handler(request: Request, exc: PeerStorageUnavailableError):
    return _error_response(request, exc, status.HTTP_503_SERVICE_UNAVAILABLE, "PEER_STORAGE_UNAVAILABLE")


@app.exception_handler(LedgerSubmissionError)
async def ledger_submission_handler(request: Request, exc: LedgerSubmissionError):
    return _error_response(request, exc, status.HTTP_502_BAD_GATEWAY, "LEDGER_SUBMISSION_FAILED")


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    return _error_response(request, exc, status.HTTP_502_BAD_GATEWAY, "LEDGER_UNAVAILABLE")


@app.exception_handler(ArchiverException)
async def archiver_exception_handler(request: Request, exc: ArchiverException):
    return _error_response(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR")


app.include_router(archive_router)


@app.get("/")
async def root():
    """
    Root endpoint for health check.
    """
    return {"message": "Permafy Archiver API", "status": "running"}


@app.get("/health")
async def health_check():
    """
    Health check endpoint for Docker healthcheck.
    Returns 200 if service is alive.
    """
    return {"status": "healthy", "service": "archiver"}


@app.get("/ready")
async def ready_check():
    """
    Readiness check endpoint.
    Verifies IPFS and Arweave connectivity.
    """
    try:
        service = get_archive_service()
    except RuntimeError as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"ready": False, "ipfs": f"error: {e}", "arweave": f"error: {e}"}
        )

    ipfs_status = "ok" if await service.ipfs_client.ping() else "error: unreachable"
    arweave_status = "ok" if await service.arweave_client.ping() else "error: unreachable"

    ready = ipfs_status == "ok" and arweave_status == "ok"
    status_code = status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code=status_code,
        content={
            "ready": ready,
            "ipfs": ipfs_status,
            "arweave": arweave_status
        }
    )


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "archiver.main:app",
        host=config.ARCHIVER_HOST,
        port=config.ARCHIVER_PORT,
    )


if __name__ == "__main__":
    main()
