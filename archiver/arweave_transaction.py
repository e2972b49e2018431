"""Arweave wallet and draft transaction model with RSA-PSS signing."""

import base64
import hashlib
from dataclasses import dataclass, field
from typing import List, Tuple

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from archiver.exceptions import ConfigurationError

JWK_PRIVATE_FIELDS = ("n", "e", "d", "p", "q", "dp", "dq", "qi")

# Arweave signs with a fixed 32 byte salt
PSS_SALT_LENGTH = 32


def b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(value: str) -> bytes:
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


def _b64url_int(value: str) -> int:
    return int.from_bytes(b64url_decode(value), "big")


class Wallet:
    """
    RSA signing key loaded from an Arweave JWK.

    The wallet is only loaded here; generating or storing keys is
    somebody else's job.
    """

    def __init__(self, private_key: rsa.RSAPrivateKey, owner: str):
        self._private_key = private_key
        self.owner = owner

    @classmethod
    def from_jwk(cls, jwk: dict) -> "Wallet":
        """
        Build a wallet from a JWK dictionary.

        Args:
            jwk: Arweave keyfile contents (kty RSA with private fields)

        Returns:
            Wallet instance

        Raises:
            ConfigurationError: If private fields are missing or inconsistent
        """
        missing = [name for name in JWK_PRIVATE_FIELDS if not jwk.get(name)]
        if missing:
            raise ConfigurationError(f"Wallet JWK is missing fields: {', '.join(missing)}")

        try:
            public_numbers = rsa.RSAPublicNumbers(_b64url_int(jwk["e"]), _b64url_int(jwk["n"]))
            private_numbers = rsa.RSAPrivateNumbers(
                p=_b64url_int(jwk["p"]),
                q=_b64url_int(jwk["q"]),
                d=_b64url_int(jwk["d"]),
                dmp1=_b64url_int(jwk["dp"]),
                dmq1=_b64url_int(jwk["dq"]),
                iqmp=_b64url_int(jwk["qi"]),
                public_numbers=public_numbers,
            )
            private_key = private_numbers.private_key()
        except (ValueError, TypeError) as e:
            raise ConfigurationError(f"Wallet JWK is not a valid RSA key: {e}")

        return cls(private_key, owner=jwk["n"])

    @property
    def address(self) -> str:
        """Arweave address: b64url(sha256(modulus))."""
        return b64url_encode(hashlib.sha256(b64url_decode(self.owner)).digest())

    def public_key(self) -> rsa.RSAPublicKey:
        return self._private_key.public_key()

    def sign(self, message: bytes) -> bytes:
        return self._private_key.sign(
            message,
            padding.PSS(mgf=padding.MGF1(hashes.SHA256()), salt_length=PSS_SALT_LENGTH),
            hashes.SHA256(),
        )


@dataclass
class DraftTransaction:
    """
    Format 1 Arweave data transaction, carrying its data inline.

    Format 1 keeps the data in the transaction body, which is enough for
    payloads up to the archival size limit.
    """
    owner: str
    last_tx: str
    reward: str
    data: bytes
    target: str = ""
    quantity: str = "0"
    tags: List[Tuple[str, str]] = field(default_factory=list)
    signature: str = ""
    id: str = ""
    format: int = 1

    def add_tag(self, name: str, value: str) -> None:
        self.tags.append((name, value))

    def signature_data(self) -> bytes:
        tag_bytes = b"".join(name.encode("utf-8") + value.encode("utf-8") for name, value in self.tags)
        return b"".join([
            b64url_decode(self.owner),
            b64url_decode(self.target),
            self.data,
            self.quantity.encode("utf-8"),
            self.reward.encode("utf-8"),
            b64url_decode(self.last_tx),
            tag_bytes,
        ])

    def sign(self, wallet: Wallet) -> None:
        """Sign in place and derive the transaction id from the signature."""
        raw_signature = wallet.sign(self.signature_data())
        self.signature = b64url_encode(raw_signature)
        self.id = b64url_encode(hashlib.sha256(raw_signature).digest())

    @property
    def is_signed(self) -> bool:
        return bool(self.signature)

    def to_json(self) -> dict:
        return {
            "format": self.format,
            "id": self.id,
            "last_tx": self.last_tx,
            "owner": self.owner,
            "tags": [
                {"name": b64url_encode(name.encode("utf-8")), "value": b64url_encode(value.encode("utf-8"))}
                for name, value in self.tags
            ],
            "target": self.target,
            "quantity": self.quantity,
            "data": b64url_encode(self.data),
            "data_size": str(len(self.data)),
            "data_root": "",
            "reward": self.reward,
            "signature": self.signature,
        }
