class RepositoryError(Exception):
    """Base exception for storage-level failures raised by repositories."""


class DuplicateKeyError(RepositoryError):
    """Raised when a write hits a unique constraint (e.g. one report per user per day)."""


class ConcurrentModificationError(RepositoryError):
    """Raised when a compare-and-swap on a report's status finds a different status."""
