"""Object storage access via S3 (aioboto3)."""

from __future__ import annotations

import structlog

from loro.config import get_settings

logger = structlog.get_logger()


class StorageError(Exception):
    """Raised when a signed URL cannot be produced."""


class StorageService:
    """Signs download URLs for documents kept in the configured bucket."""

    def __init__(
        self,
        bucket: str,
        region: str,
        endpoint_url: str | None = None,
        default_ttl: int = 3600,
    ) -> None:
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        self.default_ttl = default_ttl

    async def get_signed_url(self, key: str, expires_in: int | None = None) -> str:
        """Return a time-limited GET URL for ``key``.

        Raises:
            StorageError: If the object does not exist or signing fails.
        """
        import aioboto3
        from botocore.exceptions import BotoCoreError, ClientError

        ttl = expires_in or self.default_ttl
        session = aioboto3.Session()
        try:
            async with session.client("s3", region_name=self.region, endpoint_url=self.endpoint_url) as s3:
                await s3.head_object(Bucket=self.bucket, Key=key)
                url: str = await s3.generate_presigned_url(
                    "get_object",
                    Params={"Bucket": self.bucket, "Key": key},
                    ExpiresIn=ttl,
                )
        except (BotoCoreError, ClientError) as e:
            logger.warning("storage_sign_failed", key=key, error=str(e))
            raise StorageError(str(e)) from e

        logger.debug("storage_url_signed", key=key, expires_in=ttl)
        return url


# Module-level singleton
_storage_service: StorageService | None = None


def get_storage_service() -> StorageService:
    """Get or create the storage service singleton (FastAPI dependency)."""
    global _storage_service  # noqa: PLW0603
    if _storage_service is None:
        settings = get_settings()
        _storage_service = StorageService(
            bucket=settings.storage_bucket,
            region=settings.storage_region,
            endpoint_url=settings.storage_endpoint_url,
            default_ttl=settings.storage_signed_url_ttl_seconds,
        )
    return _storage_service
