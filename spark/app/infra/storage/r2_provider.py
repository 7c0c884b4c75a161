# spark/app/infra/storage/r2_provider.py
"""
Image blob store on Cloudflare R2.
R2 speaks the S3 API, so this is boto3 pointed at the account endpoint.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from spark.app.domain.errors import StorageError
from spark.app.domain.models import StoredObject
from spark.app.infra.storage.base import StorageProvider

logger = logging.getLogger(__name__)

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", "Unknown"))


class R2StorageProvider(StorageProvider):
    """
    Uploaded and hero images kept in a single R2 bucket.

    Arguments left as None are read from R2_ACCOUNT_ID, R2_ACCESS_KEY_ID,
    R2_SECRET_ACCESS_KEY and R2_BUCKET_NAME. Passing `client` skips the
    endpoint setup entirely.
    """

    def __init__(
        self,
        account_id: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        bucket_name: Optional[str] = None,
        client: Any = None,
    ):
        self.account_id = account_id or os.getenv("R2_ACCOUNT_ID")
        self.access_key_id = access_key_id or os.getenv("R2_ACCESS_KEY_ID")
        self.secret_access_key = secret_access_key or os.getenv("R2_SECRET_ACCESS_KEY")
        self.bucket_name = bucket_name or os.getenv("R2_BUCKET_NAME")

        if client is not None:
            self._client = client
            return

        if not all([self.account_id, self.access_key_id, self.secret_access_key, self.bucket_name]):
            raise StorageError(
                "Image storage not configured. Required: R2_ACCOUNT_ID, R2_ACCESS_KEY_ID, "
                "R2_SECRET_ACCESS_KEY, R2_BUCKET_NAME"
            )

        self.endpoint_url = f"https://{self.account_id}.r2.cloudflarestorage.com"

        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint_url,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=Config(
                signature_version="s3v4",
                retries={"max_attempts": 3, "mode": "adaptive"},
            ),
            region_name="auto",  # R2 uses 'auto' as region
        )

        logger.info(
            "R2StorageProvider initialized: bucket=%s, endpoint=%s",
            self.bucket_name,
            self.endpoint_url,
        )

    def put_object(
        self,
        object_key: str,
        body: bytes,
        content_type: str,
        cache_control: Optional[str] = None,
    ) -> StoredObject:
        """Upload an object to R2."""
        params: dict[str, Any] = {
            "Bucket": self.bucket_name,
            "Key": object_key,
            "Body": body,
            "ContentType": content_type,
        }
        if cache_control:
            params["CacheControl"] = cache_control

        try:
            response = self._client.put_object(**params)
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to upload to R2: key=%s, error=%s", object_key, e)
            raise StorageError(f"Failed to upload image: {e}") from e

        logger.info("Uploaded to R2: key=%s, size=%d bytes", object_key, len(body))
        return StoredObject(
            key=object_key,
            size=len(body),
            etag=response.get("ETag"),
            content_type=content_type,
            cache_control=cache_control,
        )

    def get_object(self, object_key: str) -> Optional[StoredObject]:
        """Fetch an object and its body from R2."""
        try:
            response = self._client.get_object(Bucket=self.bucket_name, Key=object_key)
        except ClientError as e:
            if _error_code(e) in _MISSING_CODES:
                return None
            logger.error("Failed to get object from R2: %s", e)
            raise StorageError(f"Failed to read image: {e}") from e
        except BotoCoreError as e:
            logger.error("Failed to get object from R2: %s", e)
            raise StorageError(f"Failed to read image: {e}") from e

        body = response["Body"].read()
        return StoredObject(
            key=object_key,
            size=int(response.get("ContentLength") or len(body)),
            etag=response.get("ETag"),
            content_type=response.get("ContentType"),
            cache_control=response.get("CacheControl"),
            uploaded_at=response.get("LastModified"),
            body=body,
        )

    def list_objects(self, prefix: str = "") -> list[StoredObject]:
        """List objects under a prefix in R2."""
        objects: list[StoredObject] = []
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket_name, Prefix=prefix):
                for entry in page.get("Contents", []):
                    objects.append(
                        StoredObject(
                            key=entry["Key"],
                            size=int(entry.get("Size") or 0),
                            etag=entry.get("ETag"),
                            uploaded_at=entry.get("LastModified"),
                        )
                    )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to list objects in R2: prefix=%s, error=%s", prefix, e)
            raise StorageError(f"Failed to list images: {e}") from e
        return objects
