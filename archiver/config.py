"""Configuration settings for the archiver service."""

import json
import os

from common.constants import ARCHIVE_BATCH_DELAY_MS, ARCHIVE_BATCH_SIZE
from archiver.exceptions import ConfigurationError


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, ""))
    except ValueError:
        return default


IPFS_API_HOST = os.environ.get("IPFS_API_HOST", "ipfs.infura.io")

IPFS_API_PORT = _int_env("IPFS_API_PORT", 5001)

IPFS_API_PROTOCOL = os.environ.get("IPFS_API_PROTOCOL", "https")

ARWEAVE_HOST = os.environ.get("ARWEAVE_HOST", "arweave.net")

ARWEAVE_PORT = _int_env("ARWEAVE_PORT", 443)

ARWEAVE_PROTOCOL = os.environ.get("ARWEAVE_PROTOCOL", "https")

BATCH_SIZE = _int_env("PERMAFY_BATCH_SIZE", ARCHIVE_BATCH_SIZE)

BATCH_DELAY_SECONDS = _int_env("PERMAFY_BATCH_DELAY_MS", ARCHIVE_BATCH_DELAY_MS) / 1000

ARCHIVER_HOST = os.environ.get("PERMAFY_HOST", "0.0.0.0")

ARCHIVER_PORT = _int_env("PERMAFY_PORT", 8000)


def ipfs_base_url() -> str:
    return f"{IPFS_API_PROTOCOL}://{IPFS_API_HOST}:{IPFS_API_PORT}"


def arweave_base_url() -> str:
    return f"{ARWEAVE_PROTOCOL}://{ARWEAVE_HOST}:{ARWEAVE_PORT}"


def load_wallet_jwk() -> dict:
    """
    Read the Arweave wallet from the AR_WALLET_JSON environment variable.

    Returns:
        JWK dictionary

    Raises:
        ConfigurationError: If the variable is unset or not a JSON object
    """
    raw = os.environ.get("AR_WALLET_JSON")
    if not raw:
        raise ConfigurationError("Please set AR_WALLET_JSON environment variable")
    try:
        jwk = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"AR_WALLET_JSON is not valid JSON: {e.msg}")
    if not isinstance(jwk, dict):
        raise ConfigurationError("AR_WALLET_JSON must be a JSON object")
    return jwk
