"""HTTP client for the Arweave gateway: tag queries, data fetch and transaction posting."""

import logging
from typing import List, Optional

import httpx

from common.constants import HTTP_TIMEOUT_SECONDS
from common.types import SubmissionStatus
from archiver.arweave_transaction import DraftTransaction, Wallet
from archiver.exceptions import LedgerError, LedgerSubmissionError

logger = logging.getLogger(__name__)

# Gateway caps a page at 100 results; newest transactions come first.
TAG_QUERY_PAGE_SIZE = 100

TAG_QUERY = """
query ($name: String!, $value: String!, $first: Int!, $after: String) {
  transactions(tags: [{name: $name, values: [$value]}], first: $first, after: $after) {
    pageInfo { hasNextPage }
    edges { cursor node { id } }
  }
}
"""


class ArweaveClient:
    """
    Async client for an Arweave gateway.
    Handles connection management and the calls the archiver needs.
    """

    def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None):
        """
        Initialize client with lazy connection.

        Args:
            base_url: Gateway URL (e.g., "https://arweave.net:443")
            client: Optional preconfigured httpx client (testing)
        """
        self._base_url = base_url
        self._client = client

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._base_url, timeout=HTTP_TIMEOUT_SECONDS)
            logger.info(f"Created Arweave HTTP client for {self._base_url}")
        return self._client

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        client = self._ensure_client()
        try:
            return await client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            raise LedgerError(f"Arweave gateway unavailable: {type(e).__name__}: {e}")

    async def query_by_tag(self, tag_name: str, tag_value: str) -> List[str]:
        """
        Find transactions carrying an exact tag.

        Follows the pagination cursor until the gateway reports no further
        pages, so the tail of the list is the oldest transaction.

        Args:
            tag_name: Tag name (e.g., "IPFS-Add")
            tag_value: Tag value to match

        Returns:
            Every matching transaction id, newest first

        Raises:
            LedgerError: If the gateway is unreachable or the query fails
        """
        tx_ids: List[str] = []
        cursor: Optional[str] = None

        while True:
            transactions = await self._query_tag_page(tag_name, tag_value, cursor)
            edges = transactions.get("edges") or []
            tx_ids.extend(edge["node"]["id"] for edge in edges)

            has_next = (transactions.get("pageInfo") or {}).get("hasNextPage")
            if not has_next or not edges or not edges[-1].get("cursor"):
                break
            cursor = edges[-1]["cursor"]

        logger.debug(f"Tag query {tag_name}={tag_value} returned {len(tx_ids)} transaction(s)")
        return tx_ids

    async def _query_tag_page(self, tag_name: str, tag_value: str, cursor: Optional[str]) -> dict:
        response = await self._request(
            "POST",
            "/graphql",
            json={
                "query": TAG_QUERY,
                "variables": {
                    "name": tag_name,
                    "value": tag_value,
                    "first": TAG_QUERY_PAGE_SIZE,
                    "after": cursor,
                },
            },
        )
        if response.status_code != 200:
            raise LedgerError(f"Arweave tag query failed: {response.status_code} - {response.reason_phrase}")

        payload = response.json()
        if payload.get("errors"):
            raise LedgerError(f"Arweave tag query failed: {payload['errors'][0].get('message', 'unknown error')}")

        return (payload.get("data") or {}).get("transactions") or {}

    async def fetch_transaction_data(self, tx_id: str) -> bytes:
        """
        Download the raw data of a transaction.

        Raises:
            LedgerError: If the data cannot be retrieved
        """
        response = await self._request("GET", f"/{tx_id}")
        if response.status_code != 200:
            raise LedgerError(f"Unable to fetch data for {tx_id}: {response.status_code} - {response.reason_phrase}")
        return response.content

    async def create_transaction(self, data: bytes, wallet: Wallet) -> DraftTransaction:
        """
        Build an unsigned data transaction owned by wallet.

        Fetches the current anchor and the reward for the payload size.
        """
        anchor = await self._request("GET", "/tx_anchor")
        if anchor.status_code != 200:
            raise LedgerError(f"Unable to fetch transaction anchor: {anchor.status_code} - {anchor.reason_phrase}")

        price = await self._request("GET", f"/price/{len(data)}")
        if price.status_code != 200:
            raise LedgerError(f"Unable to fetch price: {price.status_code} - {price.reason_phrase}")

        return DraftTransaction(
            owner=wallet.owner,
            last_tx=anchor.text.strip(),
            reward=price.text.strip(),
            data=data,
        )

    def sign(self, tx: DraftTransaction, wallet: Wallet) -> None:
        tx.sign(wallet)

    async def submit(self, tx: DraftTransaction) -> SubmissionStatus:
        """
        Post a signed transaction.

        Returns:
            Gateway status; acceptance is for the caller to judge

        Raises:
            LedgerSubmissionError: If the draft has not been signed
        """
        if not tx.is_signed:
            raise LedgerSubmissionError("Refusing to post an unsigned transaction")

        response = await self._request("POST", "/tx", json=tx.to_json())
        logger.info(f"Posted transaction {tx.id}: status={response.status_code}")
        return SubmissionStatus(status_code=response.status_code, status_text=response.reason_phrase)

    async def ping(self) -> bool:
        """
        Check if the gateway is available.

        Returns:
            True if gateway responds, False otherwise
        """
        try:
            response = await self._request("GET", "/info")
            return response.status_code == 200
        except LedgerError as e:
            logger.warning(f"Arweave ping failed: {e}")
            return False
