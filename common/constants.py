"""Project-wide constants (size limits, ledger tag names, batching defaults)."""

MAX_FILE_SIZE_BYTES: int = 10 * 1024 * 1024  # 10 MiB archival limit
MAX_FILE_SIZE_TEXT: str = "10MiB"

IPFS_TAG_NAME: str = "IPFS-Add"
CONTENT_TYPE_TAG_NAME: str = "Content-Type"

IPFS_CAT_TIMEOUT_SECONDS: float = 50.0
HTTP_TIMEOUT_SECONDS: float = 30.0

MAX_DEDUP_CANDIDATES: int = 5

ARCHIVE_BATCH_SIZE: int = 10
ARCHIVE_BATCH_DELAY_MS: int = 30
