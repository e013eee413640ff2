"""GitHub endpoint: versions are the tags and branches of a repository."""

import asyncio
import logging
from pathlib import Path
from typing import Any, AsyncIterator, Dict

import httpx

from .. import fsutil
from ..models import VersionEntry, VersionListing
from ..versions import parse_version
from .base import extract_tarball

logger = logging.getLogger(__name__)


class GithubEndpoint:
    """Endpoint backed by the GitHub REST API.

    Tags are listed with a leading ``v`` removed when the remainder is a
    semantic version (``v0.14.0`` is listed as ``0.14.0``); branches are
    listed under their own name. The hash of every entry is its commit sha,
    and ``meta["ref"]`` keeps the original git ref.

    Example:
        >>> async with httpx.AsyncClient() as client:
        ...     endpoint = GithubEndpoint(client)
        ...     listing = await endpoint.lookup("systemjs/systemjs")
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_url: str = "https://api.github.com",
        token: str | None = None,
    ):
        self.client = client
        self.api_url = api_url.rstrip("/")
        self.headers = {"Accept": "application/vnd.github+json"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    async def _paged(self, url: str) -> AsyncIterator[Dict[str, Any]]:
        """Yield items of a paginated listing, following ``Link: next``."""
        next_url: str | None = url
        params: Dict[str, Any] | None = {"per_page": 100}
        while next_url:
            response = await self.client.get(next_url, params=params, headers=self.headers)
            response.raise_for_status()
            for item in response.json():
                yield item
            next_url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            params = None

    async def lookup(self, package: str) -> VersionListing:
        repo_url = f"{self.api_url}/repos/{package}"
        listing: VersionListing = {}

        async for branch in self._paged(f"{repo_url}/branches"):
            name = branch["name"]
            listing[name] = VersionEntry(
                hash=branch["commit"]["sha"], meta={"ref": name}
            )

        # Tags win over branches of the same name
        async for tag in self._paged(f"{repo_url}/tags"):
            name = tag["name"]
            key = name[1:] if name.startswith("v") and parse_version(name[1:]) else name
            listing[key] = VersionEntry(hash=tag["commit"]["sha"], meta={"ref": name})

        logger.debug(f"github:{package} lists {len(listing)} versions")
        return listing

    async def download(
        self, package: str, version: str, hash: str, meta: dict, dest_dir: Path
    ) -> None:
        url = f"{self.api_url}/repos/{package}/tarball/{hash}"
        logger.info(f"Downloading github:{package}@{version}")

        response = await self.client.get(url, headers=self.headers, follow_redirects=True)
        response.raise_for_status()

        await fsutil.remove_tree(dest_dir)
        files = await asyncio.to_thread(extract_tarball, response.content, dest_dir)
        logger.debug(f"Extracted {files} files into {dest_dir}")
