"""Archive service: puts IPFS content on Arweave, single and in bulk."""

import asyncio
import logging
from typing import List, Optional, Sequence

from common.cid import parse_cid
from common.constants import (
    CONTENT_TYPE_TAG_NAME,
    IPFS_TAG_NAME,
    MAX_FILE_SIZE_BYTES,
    MAX_FILE_SIZE_TEXT,
)
from common.types import ArchiveFailure, ArchiveResult, ArchiveSuccess
from archiver import config
from archiver.arweave_client import ArweaveClient
from archiver.arweave_transaction import Wallet
from archiver.exceptions import (
    InvalidContentIdError,
    LedgerSubmissionError,
    UnexpectedStoreResponseError,
)
from archiver.ipfs_client import IpfsClient
from archiver.services.content_fetcher import ContentFetcher
from archiver.services.dedup_service import DeduplicationResolver

logger = logging.getLogger(__name__)


class ArchiveService:
    def __init__(
        self,
        ipfs_client: IpfsClient,
        arweave_client: ArweaveClient,
        wallet: Wallet,
        resolver: Optional[DeduplicationResolver] = None,
        fetcher: Optional[ContentFetcher] = None,
        max_file_size: int = MAX_FILE_SIZE_BYTES,
        batch_size: int = config.BATCH_SIZE,
        batch_delay_seconds: float = config.BATCH_DELAY_SECONDS,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")

        self.ipfs_client = ipfs_client
        self.arweave_client = arweave_client
        self.wallet = wallet
        self.fetcher = fetcher or ContentFetcher(ipfs_client)
        self.resolver = resolver or DeduplicationResolver(arweave_client, self.fetcher)
        self.max_file_size = max_file_size
        self.batch_size = batch_size
        self.batch_delay_seconds = batch_delay_seconds

    async def archive_new_bytes(self, data: bytes, content_type: Optional[str] = None) -> ArchiveResult:
        """
        Add new file to IPFS and store it on Arweave.

        No dedup lookup is made for fresh uploads.

        Args:
            data: File bytes
            content_type: Optional mime type for the Content-Type tag

        Returns:
            ArchiveSuccess

        Raises:
            UnexpectedStoreResponseError: If IPFS returns an invalid CID
            LedgerSubmissionError: If Arweave rejects the transaction
        """
        stored = await self.ipfs_client.add(data)
        content_id = stored[0].identifier if stored else ""

        if parse_cid(content_id) is None:
            raise UnexpectedStoreResponseError(f"Unexpected response putting file to IPFS: {content_id!r}")

        return await self._write_to_ledger(content_id, data, content_type)

    async def archive_existing(self, content_id: str) -> ArchiveResult:
        """
        Store an existing IPFS file on Arweave unless a verified copy is already there.

        Args:
            content_id: A valid CID

        Returns:
            ArchiveSuccess (already_existed=True when nothing was written),
            or ArchiveFailure if the file is missing or too large
        """
        content = await self.fetcher.fetch(content_id)
        if content is None:
            return ArchiveFailure(f"Unable to find {content_id} on IPFS Network")

        if len(content.data) > self.max_file_size:
            logger.info(f"Rejecting {content_id}: {len(content.data)} bytes exceeds limit")
            return ArchiveFailure(f"File is too large, maximum size is: {MAX_FILE_SIZE_TEXT}")

        existing = await self.resolver.find_existing(content_id)
        if existing:
            return ArchiveSuccess(content_id=content_id, ledger_tx_id=existing, already_existed=True)

        return await self._write_to_ledger(content_id, content.data, content.mime_type)

    async def archive_many_existing(self, content_ids: Sequence[str]) -> List[ArchiveResult]:
        """
        Archive many existing IPFS files in batches.

        Every CID is validated before any network call. After that, each
        item either succeeds or becomes an ArchiveFailure on its own.

        Args:
            content_ids: Valid CIDs

        Returns:
            One result per input, in input order

        Raises:
            InvalidContentIdError: If any CID is malformed
        """
        content_ids = list(content_ids)
        for content_id in content_ids:
            if parse_cid(content_id) is None:
                raise InvalidContentIdError(f"Invalid CID: {content_id}")

        results: List[ArchiveResult] = []
        for start in range(0, len(content_ids), self.batch_size):
            if start:
                await asyncio.sleep(self.batch_delay_seconds)
            batch = content_ids[start:start + self.batch_size]
            results.extend(await asyncio.gather(*(self._archive_existing_soft(cid) for cid in batch)))

        archived = sum(1 for result in results if result.ok)
        logger.info(f"Bulk archive finished: {archived}/{len(results)} succeeded")
        return results

    async def find_existing(self, content_id: str) -> Optional[str]:
        """
        Look up a verified Arweave copy of content_id.

        Raises:
            InvalidContentIdError: If the CID is malformed
        """
        if parse_cid(content_id) is None:
            raise InvalidContentIdError(f"Invalid CID: {content_id}")
        return await self.resolver.find_existing(content_id)

    async def _archive_existing_soft(self, content_id: str) -> ArchiveResult:
        try:
            return await self.archive_existing(content_id)
        except Exception as e:
            logger.error(f"Archiving {content_id} failed: {e}", exc_info=True)
            return ArchiveFailure(str(e) or type(e).__name__)

    async def _write_to_ledger(
        self,
        content_id: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> ArchiveSuccess:
        """
        Add a file to Arweave. It should already be on IPFS.

        Raises:
            LedgerSubmissionError: If the gateway answers outside 2xx
        """
        tx = await self.arweave_client.create_transaction(data, self.wallet)

        if content_type:
            tx.add_tag(CONTENT_TYPE_TAG_NAME, content_type)
        tx.add_tag(IPFS_TAG_NAME, content_id)

        self.arweave_client.sign(tx, self.wallet)
        status = await self.arweave_client.submit(tx)

        if not status.accepted:
            raise LedgerSubmissionError(
                f"Error posting file to Arweave: {status.status_code} - {status.status_text}"
            )

        logger.info(f"Archived {content_id} to Arweave as {tx.id}")
        return ArchiveSuccess(content_id=content_id, ledger_tx_id=tx.id)
