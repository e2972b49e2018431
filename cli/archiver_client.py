"""HTTP client for communicating with the archiver service."""

import os
import time
import uuid
from typing import Optional

import httpx

from common.constants import MAX_FILE_SIZE_BYTES, MAX_FILE_SIZE_TEXT
from common.logging_config import get_logger
from cli.config import Config
from cli.constants import GREEN, RED, RESET
from cli.utils import format_file_size

logger = get_logger(__name__)


class ArchiverClient:
    """HTTP client for the archiver API with connection retry and error mapping."""

    def __init__(self, config: Config):
        """
        Initialize archiver client.

        Args:
            config: Configuration instance
        """
        self.config = config
        self.session = httpx.Client(
            base_url=config.get_base_url(),
            timeout=config.get_timeout()
        )
        self.request_id = None
        logger.info(f"Initialized ArchiverClient [base_url={config.get_base_url()}]")

    def _request_with_retry(
        self,
        method: str,
        endpoint: str,
        max_retries: Optional[int] = None,
        **kwargs
    ) -> httpx.Response:
        """
        Make HTTP request, retrying only when the connection could not be made.

        Archival writes are not idempotent, so timeouts and server errors
        are never retried.

        Args:
            method: HTTP method (GET, POST)
            endpoint: API endpoint path
            max_retries: Max retry attempts (uses config default if None)
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            HTTP response object

        Raises:
            ConnectionError: If the archiver cannot be reached or times out
        """
        retry_config = self.config.get_retry_config()
        max_retries = max_retries if max_retries is not None else retry_config['max_retries']
        backoff = retry_config['retry_backoff_multiplier']

        self.request_id = str(uuid.uuid4())
        headers = kwargs.pop('headers', {})
        headers['X-Request-ID'] = self.request_id

        logger.debug(f"Making request: {method} {endpoint} [request_id={self.request_id}]")

        for attempt in range(max_retries + 1):
            try:
                response = self.session.request(method, endpoint, headers=headers, **kwargs)
                logger.debug(
                    f"Response received: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
                )
                return response

            except httpx.ConnectError as e:
                if attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Connection failed (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint}, retrying in {delay}s [request_id={self.request_id}]"
                    )
                    time.sleep(delay)
                    continue
                logger.error(
                    f"Connection failed (max retries exceeded): {method} {endpoint} error={e} [request_id={self.request_id}]"
                )
                raise ConnectionError("Cannot connect to archiver server. Is it running?")

            except httpx.TimeoutException:
                logger.error(f"Request timed out: {method} {endpoint} [request_id={self.request_id}]")
                raise ConnectionError("Request timed out. The archive may still complete on the server.")

        raise ConnectionError("Max retries exceeded")

    def _format_error(self, response: httpx.Response) -> str:
        """
        Map HTTP errors to user-friendly messages.

        Args:
            response: HTTP response object

        Returns:
            User-friendly error message
        """
        try:
            error_data = response.json()
            detail = error_data.get('detail', 'Unknown error')
            code = error_data.get('code', 'UNKNOWN')
        except ValueError:
            detail = response.text if response.text else 'Unknown error'
            code = 'UNKNOWN'

        error_messages = {
            'INVALID_CONTENT_ID': f'Invalid CID: {detail}',
            'FILE_TOO_LARGE': f'File is too large, maximum size is: {MAX_FILE_SIZE_TEXT}',
            'ARCHIVE_NOT_FOUND': 'No verified copy found on Arweave.',
            'CONTENT_NOT_FOUND': 'Content not found on IPFS.',
            'PEER_STORAGE_UNAVAILABLE': 'IPFS is currently unavailable. Please try again later.',
            'LEDGER_SUBMISSION_FAILED': f'Arweave rejected the transaction: {detail}',
            'LEDGER_UNAVAILABLE': 'Arweave gateway is currently unavailable. Please try again later.',
        }

        if code in error_messages:
            return error_messages[code]

        status_messages = {
            400: 'Bad request',
            404: 'Not found',
            413: 'File too large',
            422: 'Invalid request',
            500: 'Server error',
            502: 'Upstream gateway error',
            503: 'Service unavailable',
        }

        message = status_messages.get(response.status_code, detail)
        return f"{message} (Code: {code})" if code != 'UNKNOWN' else message

    @staticmethod
    def _format_result(result: dict) -> str:
        if not result.get('ok'):
            return f"{RED}Failed{RESET}: {result.get('error')}"
        state = "Already on Arweave" if result.get('already_existed') else "Archived"
        return f"{GREEN}{state}{RESET}: {result['content_id']} -> {result['ledger_tx_id']}"

    def add_file(self, file_path: str, content_type: Optional[str] = None) -> str:
        """
        Upload a local file for IPFS add and Arweave archival.

        Args:
            file_path: Path to the local file
            content_type: Optional mime type for the Content-Type tag

        Returns:
            Formatted result message
        """
        if not os.path.isfile(file_path):
            return f"Error: File not found: {file_path}"

        file_size = os.path.getsize(file_path)
        if file_size > MAX_FILE_SIZE_BYTES:
            return (
                f"Error: {file_path} is {format_file_size(file_size)}, "
                f"maximum size is: {MAX_FILE_SIZE_TEXT}"
            )

        logger.info(f"Uploading {file_path} ({file_size} bytes)")
        data = {'content_type': content_type} if content_type else {}
        try:
            with open(file_path, 'rb') as f:
                response = self._request_with_retry(
                    'POST',
                    '/archives',
                    files={'file': (os.path.basename(file_path), f)},
                    data=data,
                )
        except ConnectionError as e:
            logger.error(f"Connection error during upload: {e}")
            return f"Error: {e}"

        if response.status_code == 201:
            return self._format_result(response.json())
        return f"Error archiving {file_path}: {self._format_error(response)}"

    def pin(self, content_ids: list[str]) -> str:
        """
        Archive existing IPFS files.

        A single CID uses the single-item endpoint; several use the batch
        endpoint.

        Args:
            content_ids: Valid CIDs

        Returns:
            Formatted result lines, one per CID
        """
        try:
            if len(content_ids) == 1:
                response = self._request_with_retry('POST', f'/archives/{content_ids[0]}')
                if response.status_code != 200:
                    return f"Error: {self._format_error(response)}"
                return self._format_result(response.json())

            response = self._request_with_retry(
                'POST',
                '/archives/batch',
                json={'content_ids': content_ids},
            )
        except ConnectionError as e:
            logger.error(f"Connection error during pin: {e}")
            return f"Error: {e}"

        if response.status_code != 200:
            return f"Error: {self._format_error(response)}"

        data = response.json()
        lines = [
            f"{content_id}: {self._format_result(result)}"
            for content_id, result in zip(content_ids, data['results'])
        ]
        lines.append(f"{data['archived_count']} archived, {data['failed_count']} failed")
        return '\n'.join(lines)

    def find(self, content_id: str) -> str:
        """
        Look up a verified Arweave copy of a CID.

        Returns:
            Transaction id line or a not-found message
        """
        try:
            response = self._request_with_retry('GET', f'/archives/{content_id}')
        except ConnectionError as e:
            logger.error(f"Connection error during find: {e}")
            return f"Error: {e}"

        if response.status_code == 200:
            data = response.json()
            return f"{data['content_id']} is on Arweave: {data['ledger_tx_id']}"
        return self._format_error(response)

    def close(self) -> None:
        self.session.close()
