from __future__ import annotations

import io
import re
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from spark.app.domain.errors import StorageError
from spark.app.infra.storage.r2_provider import R2StorageProvider


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "GetObject")


@pytest.fixture
def s3() -> MagicMock:
    return MagicMock()


@pytest.fixture
def provider(s3) -> R2StorageProvider:
    return R2StorageProvider(bucket_name="images", client=s3)


class TestR2StorageProvider:
    def test_missing_configuration(self, monkeypatch) -> None:
        for name in ("R2_ACCOUNT_ID", "R2_ACCESS_KEY_ID", "R2_SECRET_ACCESS_KEY", "R2_BUCKET_NAME"):
            monkeypatch.delenv(name, raising=False)
        with pytest.raises(StorageError, match="not configured"):
            R2StorageProvider()

    def test_put_object(self, provider, s3) -> None:
        s3.put_object.return_value = {"ETag": '"abc"'}
        stored = provider.put_object("recipes/1.png", b"data", "image/png", cache_control="public")

        s3.put_object.assert_called_once_with(
            Bucket="images", Key="recipes/1.png", Body=b"data", ContentType="image/png", CacheControl="public"
        )
        assert stored.size == 4
        assert stored.etag == '"abc"'

    def test_put_object_failure(self, provider, s3) -> None:
        s3.put_object.side_effect = _client_error("AccessDenied")
        with pytest.raises(StorageError):
            provider.put_object("recipes/1.png", b"data", "image/png")

    def test_get_object(self, provider, s3) -> None:
        s3.get_object.return_value = {
            "Body": io.BytesIO(b"img"),
            "ContentType": "image/webp",
            "ETag": '"e"',
            "CacheControl": "public, max-age=60",
        }
        stored = provider.get_object("recipes/1.webp")
        assert stored.body == b"img"
        assert stored.size == 3
        assert stored.content_type == "image/webp"

    @pytest.mark.parametrize("code", ["NoSuchKey", "404"])
    def test_get_missing_object(self, provider, s3, code: str) -> None:
        s3.get_object.side_effect = _client_error(code)
        assert provider.get_object("nope") is None

    def test_get_object_other_error(self, provider, s3) -> None:
        s3.get_object.side_effect = _client_error("AccessDenied")
        with pytest.raises(StorageError):
            provider.get_object("recipes/1.png")

    def test_list_objects_walks_pages(self, provider, s3) -> None:
        uploaded = datetime(2024, 5, 1, tzinfo=timezone.utc)
        s3.get_paginator.return_value.paginate.return_value = [
            {"Contents": [{"Key": "heroes/a.png", "Size": 10, "LastModified": uploaded}]},
            {"Contents": [{"Key": "heroes/b.jpg", "Size": 20, "LastModified": uploaded}]},
            {},
        ]
        objects = provider.list_objects("heroes/")

        s3.get_paginator.assert_called_once_with("list_objects_v2")
        s3.get_paginator.return_value.paginate.assert_called_once_with(Bucket="images", Prefix="heroes/")
        assert [obj.key for obj in objects] == ["heroes/a.png", "heroes/b.jpg"]
        assert objects[1].size == 20

    def test_generate_object_key(self, provider) -> None:
        key = provider.generate_object_key("Photo.PNG")
        assert re.fullmatch(r"recipes/\d{13}-[a-z0-9]{13}\.png", key)
        assert provider.generate_object_key("noext").endswith(".jpg")
        assert provider.generate_object_key("x.png", prefix="heroes").startswith("heroes/")
