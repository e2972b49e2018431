"""Shared pytest fixtures for all tests."""

import asyncio
from typing import Dict, List, Optional, Set, Tuple

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from multiformats import CID, multihash

from common.constants import IPFS_CAT_TIMEOUT_SECONDS, IPFS_TAG_NAME
from common.types import StoredObject, SubmissionStatus
from archiver.arweave_transaction import DraftTransaction, Wallet, b64url_encode
from archiver.exceptions import ContentNotFoundError, LedgerError, PeerStorageUnavailableError
from archiver.services.archive_service import ArchiveService
from cli.config import Config


def make_cid(data: bytes) -> str:
    """CIDv1 (raw codec, sha2-256) for a payload."""
    return str(CID("base32", 1, "raw", multihash.digest(data, "sha2-256")))


def _b64url_uint(value: int) -> str:
    return b64url_encode(value.to_bytes((value.bit_length() + 7) // 8, "big"))


class FakeIpfsClient:
    """In-memory IPFS double that records every cat call."""

    def __init__(self, latency: Optional[float] = None):
        self.files: Dict[str, bytes] = {}
        self.unavailable: Set[str] = set()
        self.cat_calls: List[str] = []
        self.latency = latency
        self.in_flight = 0
        self.max_in_flight = 0

    def put(self, data: bytes) -> str:
        content_id = make_cid(data)
        self.files[content_id] = data
        return content_id

    async def cat(self, identifier: str, timeout: float = IPFS_CAT_TIMEOUT_SECONDS) -> bytes:
        self.cat_calls.append(identifier)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.latency is not None:
                await asyncio.sleep(self.latency)
            if identifier in self.unavailable:
                raise PeerStorageUnavailableError(f"Timed out fetching {identifier}")
            if identifier not in self.files:
                raise ContentNotFoundError(f"{identifier} not found")
            return self.files[identifier]
        finally:
            self.in_flight -= 1

    async def add(self, data: bytes) -> List[StoredObject]:
        return [StoredObject(identifier=self.put(data), size=len(data))]

    async def ping(self) -> bool:
        return True

    async def close(self):
        pass


class FakeArweaveClient:
    """In-memory Arweave gateway double. Transactions are kept oldest first."""

    def __init__(self):
        self.transactions: List[Tuple[str, bytes, List[Tuple[str, str]]]] = []
        self.submitted: List[DraftTransaction] = []
        self.fetch_calls: List[str] = []
        self.status = SubmissionStatus(status_code=200, status_text="OK")
        self.explode_for: Set[str] = set()
        self.unreadable: Set[str] = set()

    def seed(self, tx_id: str, data: bytes, content_id: str) -> None:
        self.transactions.append((tx_id, data, [(IPFS_TAG_NAME, content_id)]))

    async def query_by_tag(self, tag_name: str, tag_value: str) -> List[str]:
        matches = [tx_id for tx_id, _, tags in self.transactions if (tag_name, tag_value) in tags]
        return list(reversed(matches))

    async def fetch_transaction_data(self, tx_id: str) -> bytes:
        self.fetch_calls.append(tx_id)
        if tx_id in self.unreadable:
            raise LedgerError(f"Unable to fetch data for {tx_id}: 404 - Not Found")
        for known_id, data, _ in self.transactions:
            if known_id == tx_id:
                return data
        raise LedgerError(f"Unable to fetch data for {tx_id}: 404 - Not Found")

    async def create_transaction(self, data: bytes, wallet: Wallet) -> DraftTransaction:
        return DraftTransaction(
            owner=wallet.owner,
            last_tx=b64url_encode(b"anchor" * 8),
            reward="1000",
            data=data,
        )

    def sign(self, tx: DraftTransaction, wallet: Wallet) -> None:
        tx.sign(wallet)

    async def submit(self, tx: DraftTransaction) -> SubmissionStatus:
        assert tx.is_signed, "unsigned transaction submitted"
        tags = dict(tx.tags)
        if tags.get(IPFS_TAG_NAME) in self.explode_for:
            raise RuntimeError(f"gateway exploded for {tags[IPFS_TAG_NAME]}")
        self.submitted.append(tx)
        if self.status.accepted:
            self.transactions.append((tx.id, tx.data, list(tx.tags)))
        return self.status

    async def ping(self) -> bool:
        return True

    async def close(self):
        pass


@pytest.fixture(scope="session")
def wallet_jwk():
    """Throwaway RSA key in Arweave JWK form."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    numbers = key.private_numbers()
    return {
        "kty": "RSA",
        "n": _b64url_uint(numbers.public_numbers.n),
        "e": _b64url_uint(numbers.public_numbers.e),
        "d": _b64url_uint(numbers.d),
        "p": _b64url_uint(numbers.p),
        "q": _b64url_uint(numbers.q),
        "dp": _b64url_uint(numbers.dmp1),
        "dq": _b64url_uint(numbers.dmq1),
        "qi": _b64url_uint(numbers.iqmp),
    }


@pytest.fixture(scope="session")
def wallet(wallet_jwk):
    return Wallet.from_jwk(wallet_jwk)


@pytest.fixture
def fake_ipfs():
    return FakeIpfsClient()


@pytest.fixture
def fake_arweave():
    return FakeArweaveClient()


@pytest.fixture
def archive_service(fake_ipfs, fake_arweave, wallet):
    """ArchiveService wired to in-memory doubles, no inter-batch delay."""
    return ArchiveService(
        ipfs_client=fake_ipfs,
        arweave_client=fake_arweave,
        wallet=wallet,
        batch_size=10,
        batch_delay_seconds=0,
    )


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .permafy directory
    """
    config_dir = tmp_path / '.permafy'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing file uploads.

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'test.txt'
    file_path.write_text('Sample content for testing')
    return file_path
