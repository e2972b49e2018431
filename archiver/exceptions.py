"""Custom exception classes for the archiver."""


class ArchiverException(Exception):
    """
    Base exception class for all archiver errors.
    """
    pass


class ConfigurationError(ArchiverException):
    """
    Raised at startup when required configuration (wallet) is missing or malformed.
    """
    pass


class InvalidContentIdError(ArchiverException):
    """
    Raised when a content identifier is not a valid CID.
    """
    pass


class PeerStorageError(ArchiverException):
    """
    Raised when an IPFS request fails.
    """
    pass


class ContentNotFoundError(PeerStorageError):
    """
    Raised when IPFS cannot return the requested content.
    """
    pass


class PeerStorageUnavailableError(PeerStorageError):
    """
    Raised when the IPFS API is unreachable or times out.
    """
    pass


class UnexpectedStoreResponseError(ArchiverException):
    """
    Raised when IPFS add returns something that is not a valid CID.
    """
    pass


class LedgerError(ArchiverException):
    """
    Raised when an Arweave gateway request fails.
    """
    pass


class LedgerSubmissionError(LedgerError):
    """
    Raised when the Arweave gateway rejects a transaction.
    """
    pass


class ArchiveNotFoundError(ArchiverException):
    """
    Raised when no verified Arweave copy exists for a CID.
    """
    pass


class FileTooLargeError(ArchiverException):
    """
    Raised when an uploaded file exceeds the archival size limit.
    """
    pass
