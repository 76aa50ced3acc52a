"""Object Storage Port - Domain interface for S3-compatible storage.

This port defines the contract for writing and removing paper blobs.
Adapters must implement this interface to provide R2, S3, MinIO or other
storage backends.

Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class BlobDeleteResult:
    """Outcome of a blob deletion attempt.

    Attributes:
        success: True if the object is gone (or never existed)
        storage_key: Key derived from the locator, None if it could not be determined
        message: Human-readable summary
        error: Failure detail when success is False
    """
    success: bool
    storage_key: Optional[str]
    message: str
    error: Optional[str] = None


class ObjectStoragePort(ABC):
    """Port interface for S3-compatible object storage operations.

    Key Design Principles:
    - Flat key namespace; the store knows nothing about documents
    - put() raises StorageError, so an upload can abort before metadata exists
    - put() never overwrites: an existing key raises StorageKeyConflictError
    - delete() never raises; failures come back as a BlobDeleteResult

    Example Usage:
        storage = S3StorageAdapter(...)

        locator = await storage.put(
            key='papers/algebra_1700000000000.pdf',
            data=pdf_bytes,
            content_type='application/pdf',
        )

        result = await storage.delete(locator)
        if not result.success:
            logger.warning(result.error)
    """

    @abstractmethod
    async def put(self, key: str, data: bytes, content_type: str) -> str:
        """Store bytes under key and return the durable public locator.

        Writes are create-only; an object that already exists under key is
        left untouched.

        Raises:
            StorageKeyConflictError: If an object already exists under key
            StorageError: If the upload fails or storage is unavailable
        """

    @abstractmethod
    async def delete(self, locator: str) -> BlobDeleteResult:
        """Remove the object a locator points at.

        The storage key is recovered from the locator. If no key can be
        determined, or the backend fails, the result reports it instead of
        raising.
        """
