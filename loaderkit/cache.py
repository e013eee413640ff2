"""
Content-hash cache for downloaded loader assets.

Each asset owns a private cache directory holding the downloaded files plus a
single ``.hash`` token recording the hash of the last fully successful
download. Writing the token is the commit point of a fetch.
"""

import logging
from pathlib import Path

from . import fsutil
from .errors import CacheReadFailure

logger = logging.getLogger(__name__)

HASH_FILE = ".hash"


class AssetCache:
    """Answers whether an asset directory already holds a given version."""

    async def read_hash(self, asset_dir: Path) -> str | None:
        """
        Read the committed hash token of an asset directory.

        Returns:
            The stored hash, or None when nothing has been committed yet

        Raises:
            CacheReadFailure: If the token exists but cannot be read
        """
        hash_file = Path(asset_dir) / HASH_FILE
        try:
            # A mangled token reads as a mismatch rather than an error
            return await fsutil.read_text(hash_file, errors="replace")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheReadFailure(f"Could not read {hash_file}: {e}") from e

    async def is_cached(self, asset_dir: Path, expected_hash: str) -> bool:
        """Check whether ``asset_dir`` holds the content with ``expected_hash``."""
        stored = await self.read_hash(asset_dir)
        cached = stored is not None and stored == expected_hash
        logger.debug(
            f"Cache {'hit' if cached else 'miss'} for {asset_dir} ({expected_hash})"
        )
        return cached

    async def store(self, asset_dir: Path, content_hash: str) -> None:
        """Commit ``content_hash`` as the current content of ``asset_dir``."""
        await fsutil.ensure_dir(asset_dir)
        await fsutil.write_text(Path(asset_dir) / HASH_FILE, content_hash)
