"""npm endpoint: versions are the published versions of a registry package."""

import asyncio
import hashlib
import logging
from pathlib import Path
from urllib.parse import quote

import httpx

from .. import fsutil
from ..errors import TransferFailure
from ..models import VersionEntry, VersionListing
from .base import extract_tarball

logger = logging.getLogger(__name__)


class NpmEndpoint:
    """Endpoint backed by an npm registry.

    The hash of every version is its ``dist.shasum`` and ``meta["tarball"]``
    holds the tarball URL. Dist-tags (``latest``, ``next``) are listed as
    additional literal keys pointing at the tagged version's entry.
    """

    def __init__(
        self, client: httpx.AsyncClient, registry_url: str = "https://registry.npmjs.org"
    ):
        self.client = client
        self.registry_url = registry_url.rstrip("/")

    async def lookup(self, package: str) -> VersionListing:
        url = f"{self.registry_url}/{quote(package, safe='@')}"
        response = await self.client.get(url, headers={"Accept": "application/json"})
        response.raise_for_status()
        document = response.json()

        listing: VersionListing = {}
        for version, manifest in document.get("versions", {}).items():
            dist = manifest.get("dist", {})
            listing[version] = VersionEntry(
                hash=dist.get("shasum", ""),
                meta={"tarball": dist.get("tarball")},
            )

        for tag, version in document.get("dist-tags", {}).items():
            if version in listing and tag not in listing:
                listing[tag] = listing[version]

        logger.debug(f"npm:{package} lists {len(listing)} versions")
        return listing

    async def download(
        self, package: str, version: str, hash: str, meta: dict, dest_dir: Path
    ) -> None:
        tarball = meta.get("tarball")
        if not tarball:
            raise TransferFailure(f"npm:{package}@{version} has no tarball URL")

        logger.info(f"Downloading npm:{package}@{version}")
        response = await self.client.get(tarball, follow_redirects=True)
        response.raise_for_status()

        if hash and hashlib.sha1(response.content).hexdigest() != hash:
            raise TransferFailure(
                f"Checksum mismatch for npm:{package}@{version}, expected {hash}"
            )

        await fsutil.remove_tree(dest_dir)
        await asyncio.to_thread(extract_tarball, response.content, dest_dir)
