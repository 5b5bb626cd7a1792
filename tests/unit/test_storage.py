"""Unit tests for the storage clients' listing and URL behavior."""

import asyncio

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from src.infrastructure.storage.client import (
    MockStorageClient,
    R2StorageClient,
    StorageConfig,
    StorageError,
)


@pytest.fixture
def storage() -> MockStorageClient:
    client = MockStorageClient()
    for path in (
        "photos/hero.jpg",
        "photos/wedding/2_b.jpg",
        "photos/wedding/1_a.jpg",
        "photos/wedding/extra/deep.jpg",
        "photos/portraits/1.jpg",
        "photos_old/x.jpg",
    ):
        asyncio.run(client.upload(path, b"x"))
    return client


class TestMockListing:

    def test_lists_one_level(self, storage):
        result = asyncio.run(storage.list_folder("photos"))

        assert [i.path for i in result.items] == ["photos/hero.jpg"]
        assert result.prefixes == ["portraits", "wedding"]

    def test_items_in_key_order(self, storage):
        result = asyncio.run(storage.list_folder("photos/wedding/"))

        assert [i.name for i in result.items] == ["1_a.jpg", "2_b.jpg"]
        assert result.prefixes == ["extra"]

    def test_empty_folder(self, storage):
        result = asyncio.run(storage.list_folder("videos"))

        assert result.items == []
        assert result.prefixes == []


class TestMockBlobs:

    def test_missing_blob_errors(self, storage):
        with pytest.raises(StorageError):
            asyncio.run(storage.download("photos/none.jpg"))
        with pytest.raises(StorageError):
            asyncio.run(storage.delete("photos/none.jpg"))

    def test_exists_and_url(self, storage):
        assert asyncio.run(storage.exists("photos/hero.jpg"))
        assert not asyncio.run(storage.exists("photos/none.jpg"))
        assert asyncio.run(storage.get_url("photos/hero.jpg")) == "mock://storage/photos/hero.jpg"


def make_r2_client() -> R2StorageClient:
    return R2StorageClient(StorageConfig(
        access_key_id="key",
        secret_access_key="secret",
        bucket_name="media",
        endpoint_url="https://account.r2.cloudflarestorage.com",
        public_base_url="https://media.example.com/",
    ))


def test_r2_public_url_is_quoted():
    client = make_r2_client()

    url = asyncio.run(client.get_url("photos/summer wedding/1 a.jpg"))

    assert url == "https://media.example.com/photos/summer%20wedding/1%20a.jpg"


class TestR2Exists:

    def test_missing_key_is_false(self, monkeypatch):
        client = make_r2_client()

        def head_object(**kwargs):
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject")

        monkeypatch.setattr(client._s3_client, "head_object", head_object)

        assert asyncio.run(client.exists("videos/a.mp4")) is False

    def test_unreachable_endpoint_is_storage_error(self, monkeypatch):
        client = make_r2_client()

        def head_object(**kwargs):
            raise EndpointConnectionError(endpoint_url="https://account.r2.cloudflarestorage.com")

        monkeypatch.setattr(client._s3_client, "head_object", head_object)

        with pytest.raises(StorageError):
            asyncio.run(client.exists("videos/a.mp4"))

    def test_access_denied_is_storage_error(self, monkeypatch):
        client = make_r2_client()

        def head_object(**kwargs):
            raise ClientError({"Error": {"Code": "403", "Message": "Forbidden"}}, "HeadObject")

        monkeypatch.setattr(client._s3_client, "head_object", head_object)

        with pytest.raises(StorageError):
            asyncio.run(client.exists("videos/a.mp4"))
