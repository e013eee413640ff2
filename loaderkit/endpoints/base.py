"""Endpoint capability and registry.

An endpoint is a package source (a GitHub repository host, an npm registry)
that can list the versions of a package and download one of them into a
directory. The provisioning pipeline only depends on this interface.
"""

import io
import logging
import tarfile
from pathlib import Path, PurePosixPath
from typing import Dict, List, Protocol, runtime_checkable

from ..errors import UnknownEndpoint
from ..models import VersionListing

logger = logging.getLogger(__name__)


@runtime_checkable
class Endpoint(Protocol):
    """Protocol for package sources.

    Example implementations:
    - GithubEndpoint: tags and branches of a GitHub repository
    - NpmEndpoint: published versions of an npm package
    """

    async def lookup(self, package: str) -> VersionListing:
        """List the available versions of a package.

        Args:
            package: Endpoint-specific package path (e.g. "systemjs/systemjs")

        Returns:
            Mapping of version string to its hash and metadata
        """
        ...

    async def download(
        self, package: str, version: str, hash: str, meta: dict, dest_dir: Path
    ) -> None:
        """Download one version of a package, replacing the contents of dest_dir.

        Args:
            package: Endpoint-specific package path
            version: Listing key being downloaded
            hash: Content hash advertised for that version
            meta: Opaque metadata advertised for that version
            dest_dir: Directory to place the package files in
        """
        ...


class EndpointRegistry:
    """Maps endpoint names (the prefix of a package name) to endpoints."""

    def __init__(self, endpoints: Dict[str, Endpoint] | None = None):
        self._endpoints: Dict[str, Endpoint] = dict(endpoints or {})

    def register(self, name: str, endpoint: Endpoint) -> None:
        self._endpoints[name] = endpoint

    def get(self, name: str) -> Endpoint:
        """Return the endpoint registered under ``name``.

        Raises:
            UnknownEndpoint: If no endpoint has that name
        """
        try:
            return self._endpoints[name]
        except KeyError:
            raise UnknownEndpoint(
                f"No endpoint named {name!r} (known: {', '.join(self.names) or 'none'})"
            ) from None

    @property
    def names(self) -> List[str]:
        return sorted(self._endpoints)


def extract_tarball(data: bytes, dest_dir: Path, strip_components: int = 1) -> int:
    """
    Extract a gzipped tarball into dest_dir.

    The first ``strip_components`` path segments of every member are dropped.
    Only regular files and directories are extracted; members that would land
    outside dest_dir are skipped.

    Returns:
        Number of files written
    """
    dest_dir = Path(dest_dir).resolve()
    dest_dir.mkdir(parents=True, exist_ok=True)
    written = 0

    with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as tar:
        for member in tar.getmembers():
            parts = PurePosixPath(member.name).parts[strip_components:]
            if not parts:
                continue

            target = dest_dir.joinpath(*parts).resolve()
            if not target.is_relative_to(dest_dir):
                logger.warning(f"Skipping tar member outside destination: {member.name}")
                continue

            if member.isdir():
                target.mkdir(parents=True, exist_ok=True)
            elif member.isfile():
                source = tar.extractfile(member)
                if source is None:
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(source.read())
                written += 1

    return written
