"""S3 Storage Adapter - Implementation of ObjectStoragePort using boto3.

Provides S3-compatible storage operations for Cloudflare R2, AWS S3, MinIO and
other S3-compatible services. boto3 is blocking, so calls run in a worker
thread to keep the event loop free.

Architecture: Hexagonal - Adapter implementation in infrastructure layer
"""

import asyncio
import logging
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from ...domain.documents.errors import StorageError, StorageKeyConflictError
from ...domain.documents.ports.object_storage_port import (
    BlobDeleteResult,
    ObjectStoragePort,
)
from ...domain.documents.storage_keys import build_public_url, extract_storage_key
from .storage_config import StorageConfig

logger = logging.getLogger(__name__)


class S3StorageAdapter(ObjectStoragePort):
    """S3-compatible storage adapter using boto3.

    Locators are public URLs: ``{public_url}/{key}`` when a public URL is
    configured, otherwise a path-style URL on the endpoint (or the
    virtual-hosted AWS URL when no endpoint is set).

    Example:
        config = load_storage_config()
        storage = S3StorageAdapter.from_config(config)

        locator = await storage.put('papers/algebra_1700000000000.pdf', data, 'application/pdf')
    """

    def __init__(
        self,
        endpoint_url: Optional[str],
        access_key: str,
        secret_key: str,
        bucket_name: str,
        region: str = "auto",
        public_url: Optional[str] = None,
    ):
        """Initialize S3 storage adapter.

        Args:
            endpoint_url: S3 endpoint URL (None for AWS S3, URL for R2/MinIO)
            access_key: S3 access key ID
            secret_key: S3 secret access key
            bucket_name: S3 bucket name
            region: Region ('auto' for R2)
            public_url: Public base URL objects are served from

        Raises:
            StorageError: If S3 client initialization fails
        """
        try:
            self.s3_client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                region_name=region,
                config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
            )
        except NoCredentialsError as e:
            raise StorageError(f"Invalid S3 credentials: {e}")
        except (BotoCoreError, ValueError) as e:
            raise StorageError(f"Failed to initialize S3 client: {e}")

        self.endpoint_url = endpoint_url
        self.bucket_name = bucket_name
        self.region = region
        self.public_url = public_url

        logger.info(
            f"Initialized S3 storage adapter: bucket={bucket_name}, "
            f"endpoint={endpoint_url or 'AWS S3'}, region={region}"
        )

    @classmethod
    def from_config(cls, config: StorageConfig) -> "S3StorageAdapter":
        """Build an adapter from a StorageConfig."""
        return cls(
            endpoint_url=config.endpoint_url,
            access_key=config.access_key,
            secret_key=config.secret_key,
            bucket_name=config.bucket_name,
            region=config.region,
            public_url=config.public_url,
        )

    def locator_for(self, storage_key: str) -> str:
        """Public locator recorded as the document's file_url."""
        if self.public_url:
            return build_public_url(self.public_url, storage_key)
        if self.endpoint_url:
            return build_public_url(f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}", storage_key)
        return build_public_url(f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com", storage_key)

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        """Upload bytes under key without overwriting an existing object.

        The existence check catches collisions on stores that ignore
        conditional writes; If-None-Match closes the window between the check
        and the write on stores that honour it (S3, R2).

        Returns:
            str: Public locator of the stored object

        Raises:
            StorageKeyConflictError: If an object already exists under key
            StorageError: If upload fails
        """
        if await self._object_exists(key):
            logger.warning(f"S3 upload refused, key already in use: storage_key={key}")
            raise StorageKeyConflictError(key)

        try:
            await asyncio.to_thread(
                self.s3_client.put_object,
                Bucket=self.bucket_name,
                Key=key,
                Body=data,
                ContentType=content_type,
                IfNoneMatch="*",
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in ("PreconditionFailed", "412", "ConditionalRequestConflict"):
                logger.warning(f"S3 upload refused, key already in use: storage_key={key}")
                raise StorageKeyConflictError(key)
            logger.error(
                f"S3 upload failed: storage_key={key}, "
                f"error={error_code}, message={e}"
            )
            raise StorageError("Failed to upload file to cloud storage")
        except BotoCoreError as e:
            logger.error(f"S3 upload failed: storage_key={key}, error={e}")
            raise StorageError("Failed to upload file to cloud storage")

        logger.info(
            f"Uploaded file: storage_key={key}, size={len(data)}, mime_type={content_type}"
        )
        return self.locator_for(key)

    async def _object_exists(self, key: str) -> bool:
        """HEAD the key; a missing object or bucket counts as absent.

        Raises:
            StorageError: If the backend cannot answer
        """
        try:
            await asyncio.to_thread(self.s3_client.head_object, Bucket=self.bucket_name, Key=key)
            return True
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in ("404", "NoSuchKey", "NoSuchBucket", "NotFound"):
                return False
            logger.error(f"S3 existence check failed: storage_key={key}, error={error_code}")
            raise StorageError("Failed to upload file to cloud storage")
        except BotoCoreError as e:
            logger.error(f"S3 existence check failed: storage_key={key}, error={e}")
            raise StorageError("Failed to upload file to cloud storage")

    async def delete(self, locator: str) -> BlobDeleteResult:
        """Delete the object behind a locator without raising.

        S3 DeleteObject is idempotent, so a missing object counts as deleted.
        """
        storage_key = extract_storage_key(locator, self.public_url, self.bucket_name)
        if not storage_key:
            logger.warning(f"Could not extract storage key from locator: {locator}")
            return BlobDeleteResult(
                success=False,
                storage_key=None,
                message="Could not determine storage key from file URL",
                error="unknown storage key",
            )

        try:
            await asyncio.to_thread(
                self.s3_client.delete_object,
                Bucket=self.bucket_name,
                Key=storage_key,
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(
                f"S3 deletion failed: storage_key={storage_key}, error={error_code}"
            )
            return BlobDeleteResult(
                success=False,
                storage_key=storage_key,
                message=f"Failed to delete file from storage: {error_code}",
                error=error_code,
            )
        except Exception as e:
            logger.error(
                f"Unexpected error during deletion: storage_key={storage_key}, error={e}",
                exc_info=True,
            )
            return BlobDeleteResult(
                success=False,
                storage_key=storage_key,
                message=f"Failed to delete file from storage: {type(e).__name__}",
                error=str(e),
            )

        logger.info(f"Deleted file: storage_key={storage_key}")
        return BlobDeleteResult(
            success=True,
            storage_key=storage_key,
            message="File deleted from storage",
        )

    async def verify_bucket_exists(self) -> bool:
        """Verify that the configured bucket exists.

        Called on application startup so misconfiguration shows up in the logs
        before the first upload.

        Raises:
            StorageError: If bucket check fails or bucket doesn't exist
        """
        try:
            await asyncio.to_thread(self.s3_client.head_bucket, Bucket=self.bucket_name)
            logger.info(f"Verified bucket exists: {self.bucket_name}")
            return True
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code == "404":
                raise StorageError(
                    f"Bucket '{self.bucket_name}' does not exist. "
                    f"Create it first or update the S3_BUCKET_NAME environment variable."
                )
            raise StorageError(f"Failed to verify bucket: {error_code}")
        except BotoCoreError as e:
            raise StorageError(f"Failed to verify bucket: {e}")
