# spark/app/infra/storage/base.py
"""
Abstract base class for blob storage providers.
This interface allows easy swapping between storage backends (R2, S3, local, etc.)
"""
from __future__ import annotations

import re
import secrets
import string
import time
from abc import ABC, abstractmethod
from typing import Optional

from spark.app.domain.models import StoredObject

_RANDOM_ALPHABET = string.ascii_lowercase + string.digits
_UNSAFE_EXTENSION = re.compile(r"[^a-zA-Z0-9]")


class StorageProvider(ABC):
    """
    Abstract interface for image blob operations.

    Implementations:
    - R2StorageProvider: Cloudflare R2 (S3-compatible)
    """

    @abstractmethod
    def put_object(
        self,
        object_key: str,
        body: bytes,
        content_type: str,
        cache_control: Optional[str] = None,
    ) -> StoredObject:
        """
        Store an object under `object_key`, replacing any existing one.

        Returns:
            Metadata of the stored object (without body)
        """

    @abstractmethod
    def get_object(self, object_key: str) -> Optional[StoredObject]:
        """
        Fetch an object with its body.

        Returns:
            The object, or None if the key does not exist
        """

    @abstractmethod
    def list_objects(self, prefix: str = "") -> list[StoredObject]:
        """List objects under a key prefix (metadata only)."""

    def generate_object_key(self, filename: str, prefix: str = "recipes") -> str:
        """
        Generate a unique object key for an uploaded image.

        Format: {prefix}/{epoch_ms}-{random}.{ext}
        """
        extension = filename.rsplit(".", 1)[-1] if "." in filename else ""
        extension = _UNSAFE_EXTENSION.sub("", extension).lower() or "jpg"
        timestamp = int(time.time() * 1000)
        random_part = "".join(secrets.choice(_RANDOM_ALPHABET) for _ in range(13))
        return f"{prefix}/{timestamp}-{random_part}.{extension}"
