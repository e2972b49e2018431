"""Content identifier (CID) parsing and validation."""

from typing import Any, Optional

from multiformats import CID


def parse_cid(identifier: Any) -> Optional[CID]:
    """
    Try to decode an IPFS content identifier.

    Never raises. Any decode failure, including a non-string argument,
    yields None.

    Args:
        identifier: CIDv0 (base58 "Qm...") or CIDv1 multibase string

    Returns:
        Decoded CID, or None if the identifier is malformed
    """
    if not isinstance(identifier, str) or not identifier:
        return None
    try:
        return CID.decode(identifier)
    except Exception:
        return None


def is_valid_cid(identifier: Any) -> bool:
    """Return True if identifier decodes as a CID."""
    return parse_cid(identifier) is not None
