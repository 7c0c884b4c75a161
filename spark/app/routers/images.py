# spark/app/routers/images.py
"""
Image upload and serving routes backed by the blob store.

Uploaded recipe images live under `recipes/`, curated hero images under `heroes/`.
"""
from __future__ import annotations

import logging
import os
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile
from pydantic import BaseModel

from spark.app.deps import get_storage
from spark.app.domain.errors import NotFoundError, ValidationError
from spark.app.domain.models import StoredObject
from spark.app.infra.storage.base import StorageProvider
from spark.app.schemas.common import ApiResponse, ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["images"])

# Max upload size (10MB)
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
UPLOAD_CACHE_CONTROL = "public, max-age=31536000, immutable"
DEFAULT_CONTENT_TYPE = "image/jpeg"
HERO_PREFIX = "heroes/"


class UploadResponse(BaseModel):
    url: str
    filename: str
    size: int
    type: str


class HeroImage(BaseModel):
    name: str
    url: str
    size: int
    uploaded: Optional[str] = None


def image_url(object_key: str) -> str:
    return f"/api/image?path={quote(object_key, safe='/')}"


def _hero_name(object_key: str) -> str:
    return os.path.splitext(object_key[len(HERO_PREFIX):])[0]


def _serve(storage: StorageProvider, object_key: str) -> Response:
    stored = storage.get_object(object_key)
    if stored is None:
        raise NotFoundError("Image", object_key)

    headers = {"Cache-Control": stored.cache_control or UPLOAD_CACHE_CONTROL}
    if stored.etag:
        headers["ETag"] = stored.etag
    return Response(
        content=stored.body or b"",
        media_type=stored.content_type or DEFAULT_CONTENT_TYPE,
        headers=headers,
    )


@router.post("/upload", response_model=ApiResponse[UploadResponse])
def upload_image(
    image: UploadFile = File(...),
    storage: StorageProvider = Depends(get_storage),
) -> ApiResponse[UploadResponse]:
    content_type = image.content_type or ""
    if not content_type.startswith("image/"):
        raise ValidationError("File must be an image")

    body = image.file.read()
    if len(body) > MAX_UPLOAD_BYTES:
        raise ValidationError("File too large. Maximum size is 10MB")

    object_key = storage.generate_object_key(image.filename or "")
    stored: StoredObject = storage.put_object(
        object_key,
        body,
        content_type=content_type,
        cache_control=UPLOAD_CACHE_CONTROL,
    )
    return ok(
        UploadResponse(
            url=image_url(stored.key),
            filename=stored.key,
            size=stored.size,
            type=content_type,
        )
    )


@router.get("/image")
def get_image(
    path: str = Query(..., min_length=1),
    storage: StorageProvider = Depends(get_storage),
) -> Response:
    return _serve(storage, path)


@router.get("/images/{object_key:path}")
def get_image_by_path(
    object_key: str,
    storage: StorageProvider = Depends(get_storage),
) -> Response:
    return _serve(storage, object_key)


@router.get("/hero-images", response_model=ApiResponse[list[HeroImage]])
def list_hero_images(
    storage: StorageProvider = Depends(get_storage),
) -> ApiResponse[list[HeroImage]]:
    heroes = [
        HeroImage(
            name=_hero_name(stored.key),
            url=image_url(stored.key),
            size=stored.size,
            uploaded=stored.uploaded_at.isoformat() if stored.uploaded_at else None,
        )
        for stored in storage.list_objects(HERO_PREFIX)
        if stored.key != HERO_PREFIX and not stored.key.endswith("/")
    ]
    logger.info("Listed %d hero images", len(heroes))
    return ok(heroes)
