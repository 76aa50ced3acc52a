"""Storage configuration for S3-compatible object storage.

Builds the object storage configuration from application settings and validates it.
Supports Cloudflare R2 (production), MinIO (development) and AWS S3 with the same interface.
"""

from dataclasses import dataclass
from typing import Optional

from ...config import Settings, get_settings


@dataclass
class StorageConfig:
    """Configuration for S3-compatible object storage.

    Attributes:
        endpoint_url: S3 endpoint URL (e.g., 'https://<account>.r2.cloudflarestorage.com',
                      'http://localhost:9000' for MinIO, None for AWS S3)
        access_key: S3 access key ID
        secret_key: S3 secret access key
        bucket_name: Bucket name for storing papers
        region: Region ('auto' for R2)
        public_url: Public base URL objects are served from (None to derive
                    a path-style URL from the endpoint)
        key_prefix: Prefix prepended to every paper key
    """
    endpoint_url: Optional[str]
    access_key: str
    secret_key: str
    bucket_name: str
    region: str = "auto"
    public_url: Optional[str] = None
    key_prefix: str = "papers/"


def load_storage_config(settings: Optional[Settings] = None) -> StorageConfig:
    """Load storage configuration from settings.

    Environment Variables:
        S3_ENDPOINT_URL: R2/MinIO endpoint URL; unset for AWS S3
        S3_ACCESS_KEY_ID / S3_SECRET_ACCESS_KEY: credentials
        S3_BUCKET_NAME: bucket name
        S3_REGION: region ('auto' for R2)
        S3_PUBLIC_URL: public base URL of the bucket (R2 public bucket / CDN domain)
        STORAGE_KEY_PREFIX: key prefix (default 'papers/')

    Example:
        # For Cloudflare R2:
        S3_ENDPOINT_URL=https://<account-id>.r2.cloudflarestorage.com
        S3_BUCKET_NAME=paperbank-papers
        S3_PUBLIC_URL=https://pub-1234.r2.dev
    """
    settings = settings or get_settings()

    return StorageConfig(
        endpoint_url=settings.S3_ENDPOINT_URL or None,
        access_key=settings.S3_ACCESS_KEY_ID,
        secret_key=settings.S3_SECRET_ACCESS_KEY,
        bucket_name=settings.S3_BUCKET_NAME,
        region=settings.S3_REGION,
        public_url=settings.S3_PUBLIC_URL or None,
        key_prefix=settings.STORAGE_KEY_PREFIX,
    )


def validate_storage_config(config: StorageConfig) -> None:
    """Validate storage configuration.

    Raises:
        ValueError: If configuration is invalid
    """
    if not config.access_key:
        raise ValueError("Storage access_key is required")

    if not config.secret_key:
        raise ValueError("Storage secret_key is required")

    if not config.bucket_name:
        raise ValueError("Storage bucket_name is required")

    for name, url in (("endpoint_url", config.endpoint_url), ("public_url", config.public_url)):
        if url and not url.startswith(("http://", "https://")):
            raise ValueError(
                f"Invalid {name}: {url}. Must start with http:// or https://"
            )

    if not config.endpoint_url and not config.region:
        raise ValueError("Region is required when using AWS S3 (S3_ENDPOINT_URL not set)")
