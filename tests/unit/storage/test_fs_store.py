"""Tests for FSObjectStore over the fake filesystem."""

import pytest

from scribe.core.io import FakeFileSystem, absolute_path
from scribe.core.storage import FSObjectStore, ObjectNotFoundError


@pytest.fixture
def fs():
    """Provide fresh FakeFileSystem instance."""
    return FakeFileSystem()


@pytest.fixture
def store(fs: FakeFileSystem):
    return FSObjectStore(fs, absolute_path("/blog/posts"))


class TestContainer:
    """Tests for container creation."""

    async def test_ensure_container_creates_directory(self, fs: FakeFileSystem, store):
        await store.ensure_container(public=False)
        assert await fs.is_dir(absolute_path("/blog/posts"))

    async def test_listing_missing_container_is_empty(self, store):
        page = await store.list_keys("post-")
        assert page.keys == []


class TestObjects:
    """Tests for object reads, writes and deletes."""

    async def test_write_read(self, fs: FakeFileSystem, store):
        await store.write("post-1.json", b'{"id": "1"}')

        assert await store.exists("post-1.json")
        assert await store.read("post-1.json") == b'{"id": "1"}'
        assert await fs.read_bytes(absolute_path("/blog/posts/post-1.json")) == b'{"id": "1"}'

    async def test_read_missing_raises(self, store):
        with pytest.raises(ObjectNotFoundError):
            await store.read("post-2.json")

    async def test_delete_missing_raises(self, store):
        with pytest.raises(ObjectNotFoundError):
            await store.delete("post-2.json")

    async def test_invalid_key_rejected(self, store):
        with pytest.raises(ValueError):
            await store.write("../escape", b"")


class TestListing:
    """Tests for prefix listing."""

    async def test_listing_skips_directories_and_foreign_names(self, fs: FakeFileSystem, store):
        await store.write("post-1.json", b"{}")
        await store.write("post-2.json", b"{}")
        await store.write("category-cache.json", b"{}")
        await fs.mkdirs(absolute_path("/blog/posts/post-dir"))
        await fs.write_bytes(absolute_path("/blog/posts/~tmp123.tmp"), b"")

        page = await store.list_keys("post-", page_size=10)

        assert page.keys == ["post-1.json", "post-2.json"]
        assert page.continuation is None


class TestUri:
    """Tests for durable URIs."""

    def test_file_uri_by_default(self, store):
        assert store.uri("a.png") == "file:///blog/posts/a.png"

    def test_base_url(self, fs: FakeFileSystem):
        store = FSObjectStore(fs, absolute_path("/blog/files"), base_url="https://cdn.example/files/")
        assert store.uri("a.png") == "https://cdn.example/files/a.png"
