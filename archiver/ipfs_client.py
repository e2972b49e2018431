"""HTTP client for the IPFS RPC API (cat and add)."""

import json
import logging
from typing import List, Optional

import httpx

from common.constants import HTTP_TIMEOUT_SECONDS, IPFS_CAT_TIMEOUT_SECONDS
from common.types import StoredObject
from archiver.exceptions import (
    ContentNotFoundError,
    PeerStorageError,
    PeerStorageUnavailableError,
)

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Extract the IPFS error message from a failed response."""
    try:
        return response.json().get("Message", response.text)
    except ValueError:
        return response.text or response.reason_phrase


class IpfsClient:
    """
    Async client for an IPFS node or pinning service RPC endpoint.
    """

    def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None):
        """
        Initialize client with lazy connection.

        Args:
            base_url: RPC URL (e.g., "https://ipfs.infura.io:5001")
            client: Optional preconfigured httpx client (testing)
        """
        self._base_url = base_url
        self._client = client

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._base_url, timeout=HTTP_TIMEOUT_SECONDS)
            logger.info(f"Created IPFS HTTP client for {self._base_url}")
        return self._client

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def cat(self, identifier: str, timeout: float = IPFS_CAT_TIMEOUT_SECONDS) -> bytes:
        """
        Retrieve file content by CID.

        Args:
            identifier: CID or IPFS path
            timeout: Seconds to wait for the network to produce the content

        Returns:
            File bytes

        Raises:
            ContentNotFoundError: If IPFS refuses or cannot resolve the content
            PeerStorageUnavailableError: If the API is unreachable or times out
        """
        client = self._ensure_client()
        try:
            response = await client.post("/api/v0/cat", params={"arg": identifier}, timeout=timeout)
        except httpx.TimeoutException:
            raise PeerStorageUnavailableError(f"Timed out after {timeout}s fetching {identifier} from IPFS")
        except httpx.TransportError as e:
            raise PeerStorageUnavailableError(f"IPFS API unavailable: {type(e).__name__}: {e}")

        if response.status_code != 200:
            raise ContentNotFoundError(
                f"IPFS cat {identifier} failed: {response.status_code} - {_error_message(response)}"
            )
        return response.content

    async def add(self, data: bytes) -> List[StoredObject]:
        """
        Add and pin a file.

        Args:
            data: File bytes

        Returns:
            Stored objects reported by IPFS; the first one is the file itself

        Raises:
            PeerStorageError: If the add request fails
        """
        client = self._ensure_client()
        try:
            response = await client.post(
                "/api/v0/add",
                params={"pin": "true"},
                files={"file": ("file", data, "application/octet-stream")},
            )
        except httpx.TransportError as e:
            raise PeerStorageUnavailableError(f"IPFS API unavailable: {type(e).__name__}: {e}")

        if response.status_code != 200:
            raise PeerStorageError(f"IPFS add failed: {response.status_code} - {_error_message(response)}")

        stored = []
        for line in response.text.splitlines():
            if not line.strip():
                continue
            entry = json.loads(line)
            stored.append(StoredObject(identifier=entry.get("Hash", ""), size=int(entry.get("Size", 0))))

        if not stored:
            raise PeerStorageError("IPFS add returned an empty response")

        logger.info(f"Added {len(data)} bytes to IPFS as {stored[0].identifier}")
        return stored

    async def ping(self) -> bool:
        """
        Check if the IPFS API is available.

        Returns:
            True if the API responds, False otherwise
        """
        client = self._ensure_client()
        try:
            response = await client.post("/api/v0/version", timeout=5)
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"IPFS ping failed: {e}")
            return False
