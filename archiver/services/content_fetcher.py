"""Fetches content from IPFS and sniffs its file type."""

import logging
from typing import Callable, Optional

import httpx

from common.types import FetchedContent, FileTypeInfo
from archiver.content_type import detect_file_type
from archiver.exceptions import PeerStorageError
from archiver.ipfs_client import IpfsClient

logger = logging.getLogger(__name__)


class ContentFetcher:
    def __init__(
        self,
        ipfs_client: IpfsClient,
        sniffer: Callable[[bytes], Optional[FileTypeInfo]] = detect_file_type,
    ):
        self.ipfs_client = ipfs_client
        self.sniffer = sniffer

    async def fetch(self, content_id: str) -> Optional[FetchedContent]:
        """
        Get a file from IPFS and detect its content type.

        Args:
            content_id: CID or IPFS path

        Returns:
            FetchedContent, or None if the content could not be retrieved
        """
        try:
            data = await self.ipfs_client.cat(content_id)
        except (PeerStorageError, httpx.HTTPError) as e:
            logger.warning(f"Unable to fetch {content_id} from IPFS: {e}")
            return None

        return FetchedContent(data=data, file_type=self.sniffer(data))
