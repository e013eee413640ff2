"""Tests for the content-hash asset cache."""

import pytest

from loaderkit.cache import HASH_FILE, AssetCache
from loaderkit.errors import CacheReadFailure


@pytest.mark.asyncio
async def test_missing_directory_is_a_miss(temp_dir):
    cache = AssetCache()

    assert await cache.is_cached(temp_dir / "esml", "abc") is False
    assert await cache.read_hash(temp_dir / "esml") is None


@pytest.mark.asyncio
async def test_store_then_hit(temp_dir):
    cache = AssetCache()
    asset_dir = temp_dir / "nested" / "esml"

    await cache.store(asset_dir, "abc")

    assert (asset_dir / HASH_FILE).read_text() == "abc"
    assert await cache.is_cached(asset_dir, "abc") is True


@pytest.mark.asyncio
async def test_different_hash_is_a_miss(temp_dir):
    cache = AssetCache()
    await cache.store(temp_dir, "old")

    assert await cache.is_cached(temp_dir, "new") is False


@pytest.mark.asyncio
async def test_store_overwrites(temp_dir):
    cache = AssetCache()
    await cache.store(temp_dir, "first")
    await cache.store(temp_dir, "second")

    assert await cache.read_hash(temp_dir) == "second"


@pytest.mark.asyncio
async def test_unreadable_hash_raises(temp_dir):
    """Read errors other than not-found are fatal."""
    (temp_dir / HASH_FILE).mkdir()

    with pytest.raises(CacheReadFailure):
        await AssetCache().is_cached(temp_dir, "abc")


@pytest.mark.asyncio
async def test_undecodable_hash_is_a_miss(temp_dir):
    (temp_dir / HASH_FILE).write_bytes(b"\xff\xfe\x00garbage")

    assert await AssetCache().is_cached(temp_dir, "abc") is False
