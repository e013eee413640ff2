"""
Asset fetcher - resolves, downloads and caches one loader asset.

Fetch pipeline: lookup listing → resolve constraint → cache check →
download (on miss) → commit hash.
"""

import logging
from pathlib import Path
from typing import Callable

from .cache import AssetCache
from .endpoints import EndpointRegistry
from .errors import LoaderkitError, TransferFailure
from .models import AssetRecord, PackageName
from .versions import lookup_version, resolve_version

logger = logging.getLogger(__name__)

# resolved version -> directory the package is downloaded into
DestDir = Callable[[str], Path]


class AssetFetcher:
    """Fetches named assets into private directories under a cache root."""

    def __init__(
        self,
        endpoints: EndpointRegistry,
        cache_root: Path,
        cache: AssetCache | None = None,
    ):
        """
        Initialize AssetFetcher.

        Args:
            endpoints: Registry used to find the endpoint of each repository
            cache_root: Directory holding one private directory per asset
            cache: Hash cache (a fresh AssetCache by default)
        """
        self.endpoints = endpoints
        self.cache_root = Path(cache_root)
        self.cache = cache or AssetCache()

    def asset_dir(self, asset_name: str) -> Path:
        return self.cache_root / asset_name

    async def fetch(self, asset_name: str, repo: str, constraint: str) -> str:
        """
        Make the version of ``repo`` matching ``constraint`` present in the cache.

        Args:
            asset_name: Name of the asset's private cache directory (e.g. "esml")
            repo: Package reference such as "github:systemjs/systemjs"
            constraint: Range expression or literal tag

        Returns:
            The resolved version

        Raises:
            UnknownEndpoint: If the repository's endpoint is not registered
            NoMatchingVersion, UnknownVersion: If the constraint cannot be resolved
            CacheReadFailure: If the stored hash cannot be read
            TransferFailure: If the endpoint lookup or download fails
        """
        record = await self.fetch_record(asset_name, repo, constraint)
        return record.version

    async def fetch_record(self, asset_name: str, repo: str, constraint: str) -> AssetRecord:
        """Same as fetch, returning the full AssetRecord."""
        dest_dir = self.asset_dir(asset_name)
        return await self.fetch_package(
            asset_name, PackageName.parse(repo), constraint, lambda version: dest_dir
        )

    async def fetch_package(
        self, name: str, pkg: PackageName, constraint: str, dest_dir: DestDir
    ) -> AssetRecord:
        """
        Resolve ``pkg`` against its endpoint and download it unless cached.

        Args:
            name: Name reported in the returned record
            pkg: Parsed package reference
            constraint: Range expression or literal tag
            dest_dir: Maps the resolved version to the directory it lives in

        Returns:
            AssetRecord of the resolved version
        """
        label = f"{pkg.endpoint}:{pkg.package}"
        endpoint = self.endpoints.get(pkg.endpoint)

        # The listing is always fetched, even when the cache turns out to be current
        try:
            listing = await endpoint.lookup(pkg.package)
        except LoaderkitError:
            raise
        except Exception as e:
            raise TransferFailure(f"Lookup of {label} failed: {e}") from e

        version = resolve_version(constraint, listing, label)
        entry = lookup_version(version, listing, label)
        target = dest_dir(version)

        if await self.cache.is_cached(target, entry.hash):
            logger.debug(f"{name}: {label}@{version} already cached")
        else:
            try:
                await endpoint.download(pkg.package, version, entry.hash, entry.meta, target)
            except LoaderkitError:
                raise
            except Exception as e:
                raise TransferFailure(
                    f"Download of {label}@{version} failed: {e}"
                ) from e
            await self.cache.store(target, entry.hash)

        return AssetRecord(name=name, version=version, hash=entry.hash)
