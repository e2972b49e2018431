"""Finds byte-identical copies of IPFS content already archived on Arweave."""

import asyncio
import logging
from typing import List, Optional

from common.checksum import compute_checksum, verify_checksum
from common.constants import IPFS_TAG_NAME, MAX_DEDUP_CANDIDATES
from archiver.arweave_client import ArweaveClient
from archiver.exceptions import LedgerError
from archiver.services.content_fetcher import ContentFetcher

logger = logging.getLogger(__name__)


class DeduplicationResolver:
    """
    Looks up Arweave transactions tagged with a CID and verifies their data.

    May return a false negative (caller archives a duplicate, which only
    costs storage). Never returns a transaction whose data differs from
    the IPFS content.
    """

    def __init__(
        self,
        arweave_client: ArweaveClient,
        fetcher: ContentFetcher,
        max_candidates: int = MAX_DEDUP_CANDIDATES,
    ):
        self.arweave_client = arweave_client
        self.fetcher = fetcher
        self.max_candidates = max_candidates

    async def find_existing(self, content_id: str) -> Optional[str]:
        """
        Search Arweave for a verified copy of content_id.

        Args:
            content_id: A valid CID

        Returns:
            Arweave transaction id of the oldest matching copy, or None
        """
        tx_ids = await self.arweave_client.query_by_tag(IPFS_TAG_NAME, content_id)
        if not tx_ids:
            return None

        # Fetched once, awaited by every candidate check.
        source = asyncio.ensure_future(self.fetcher.fetch(content_id))

        candidates = list(reversed(tx_ids))[:self.max_candidates]
        logger.info(f"Checking a maximum of {len(candidates)} from {len(tx_ids)} transaction(s) for {content_id}")

        try:
            return await self._first_verified(content_id, candidates, source)
        finally:
            if not source.done():
                source.cancel()

    async def _first_verified(self, content_id: str, candidates: List[str], source: asyncio.Future) -> Optional[str]:
        source_digest = None

        for tx_id in candidates:
            try:
                ledger_data, content = await asyncio.gather(
                    self.arweave_client.fetch_transaction_data(tx_id),
                    source,
                )
            except LedgerError as e:
                # A copy the gateway cannot serve yet is not a match.
                logger.warning(f"Skipping {tx_id} for {content_id}: {e}")
                continue

            if content is None:
                # IPFS data unavailable: report not found so the caller writes again.
                logger.warning(f"Unable to compare {tx_id}: IPFS data for {content_id} unavailable")
                return None

            if source_digest is None:
                source_digest = compute_checksum(content.data)

            if verify_checksum(ledger_data, source_digest):
                logger.info(f"Found file already on Arweave with matching data, {tx_id}")
                return tx_id

            logger.warning(
                f"Data mismatch, IPFS and Arweave data for the same CID don't match, {tx_id} - {content_id} "
                f"(arweave sha256={compute_checksum(ledger_data)} size={len(ledger_data)}, "
                f"ipfs sha256={source_digest} size={len(content.data)})"
            )

        logger.info(f"Unable to find {content_id} already on Arweave")
        return None
