"""SHA-256 digests used to prove two payloads are byte-identical."""

import hashlib
import hmac


def compute_checksum(data: bytes) -> str:
    """
    Compute the SHA-256 digest of a payload.

    Args:
        data: Payload bytes

    Returns:
        Lowercase hex digest
    """
    return hashlib.sha256(data).hexdigest()


def verify_checksum(data: bytes, expected: str) -> bool:
    """
    Check data against a digest computed earlier, in constant time.

    Args:
        data: Payload to check (e.g., an Arweave copy)
        expected: Hex digest of the reference payload (e.g., the IPFS source)

    Returns:
        True if the payloads are byte-identical
    """
    return hmac.compare_digest(compute_checksum(data), expected)
