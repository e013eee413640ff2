"""
Loader provisioning - cleanup, concurrent fetch, materialization, manifest.

Provision Pipeline: remove stale loader files → fetch loader assets (concurrent)
→ copy their dist files into the install directory (concurrent) → write the
manifest → provision the transpiler.
"""

import logging
import re
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from pydantic import BaseModel

from . import fsutil
from .errors import MaterializationFailure
from .fetcher import AssetFetcher
from .models import LoaderVersions, ProjectConfig
from .tasks import gather_all
from .transpiler import TranspilerProvisioner

logger = logging.getLogger(__name__)

# We always download the latest semver compatible version
LOADER_VERSIONS = {
    "esml": "^0.14.0",
    "system": "^0.14.0",
}

EDGE_VERSION = "master"

MANIFEST_FILE = ".loaderversions"

# Files the loader cannot run without
CORE_FILES = ("system.js", "es6-module-loader.js")

STALE_FILE_PATTERN = re.compile(r"^(system-csp|system|es6-module-loader|traceur|babel)")

# (output filename, source text) -> transformed text
Transform = Callable[[str, str], str]


class LoaderAsset(BaseModel):
    """One loader-family asset and where its files come from."""
    key: str
    cache_name: str
    repo: str
    basename: str

    def outputs(self, unminified: bool) -> List[Tuple[str, str]]:
        """(cached source path, output filename) pairs to materialize."""
        main = f"dist/{self.basename}{'.src' if unminified else ''}.js"
        files = [(main, f"{self.basename}.js")]
        if not unminified:
            files.append((f"dist/{self.basename}.src.js", f"{self.basename}.src.js"))
            files.append((f"dist/{self.basename}.js.map", f"{self.basename}.js.map"))
        return files


LOADER_ASSETS = (
    LoaderAsset(
        key="esml",
        cache_name="esml",
        repo="github:ModuleLoader/es6-module-loader",
        basename="es6-module-loader",
    ),
    LoaderAsset(
        key="system",
        cache_name="systemjs",
        repo="github:systemjs/systemjs",
        basename="system",
    ),
)


def expected_manifest() -> str:
    """Manifest token of the pinned loader versions."""
    return ",".join([LOADER_VERSIONS["esml"], LOADER_VERSIONS["system"]])


class ProvisioningOrchestrator:
    """Downloads the module loader files into the project's install directory."""

    def __init__(
        self,
        config: ProjectConfig,
        fetcher: AssetFetcher,
        transpiler: TranspilerProvisioner,
        transform: Optional[Transform] = None,
    ):
        """
        Initialize ProvisioningOrchestrator.

        Args:
            config: Project configuration (provides the install directory)
            fetcher: Fetcher for the loader assets
            transpiler: Provisioner run once the loader files are in place
            transform: Optional hook applied to the text of every copied file
        """
        self.config = config
        self.fetcher = fetcher
        self.transpiler = transpiler
        self.transform = transform

    @property
    def install_dir(self) -> Path:
        return self.config.install_dir

    async def provision_loader(
        self,
        transpiler_name: Optional[str] = None,
        unminified: bool = False,
        edge: bool = False,
    ) -> LoaderVersions:
        """
        Download the loader files, replacing any previously installed ones.

        Args:
            transpiler_name: Transpiler to provision afterwards
            unminified: Install the unminified sources as the main files and
                skip the source maps
            edge: Use the latest unstable loader sources instead of the pinned
                versions

        Returns:
            The loader versions that were installed

        Raises:
            LoaderkitError: If any asset fails to fetch or copy; no manifest
                is written in that case
        """
        logger.info("Looking up loader files...")
        await fsutil.ensure_dir(self.install_dir)

        removed = await self.remove_stale_files()
        if removed:
            logger.debug(f"Removed old loader files: {', '.join(removed)}")

        versions = await gather_all(
            *(self._provision_asset(asset, unminified, edge) for asset in LOADER_ASSETS)
        )
        using = LoaderVersions(**dict(zip((a.key for a in LOADER_ASSETS), versions)))

        logger.info("Using loader versions:")
        logger.info(f"  es6-module-loader@{using.esml}")
        logger.info(f"  systemjs@{using.system}")

        await fsutil.write_text(self.install_dir / MANIFEST_FILE, expected_manifest())

        await self.transpiler.provision_transpiler(transpiler_name, update=True)
        logger.info("Loader files downloaded successfully")
        return using

    async def remove_stale_files(self) -> List[str]:
        """Delete every loader-component file in the install directory.

        All deletions have completed when this returns.
        """
        stale = [
            name
            for name in await fsutil.list_files(self.install_dir)
            if STALE_FILE_PATTERN.match(name)
        ]
        await gather_all(
            *(fsutil.unlink(self.install_dir / name, missing_ok=True) for name in stale)
        )
        return stale

    async def _provision_asset(self, asset: LoaderAsset, unminified: bool, edge: bool) -> str:
        constraint = EDGE_VERSION if edge else LOADER_VERSIONS[asset.key]
        version = await self.fetcher.fetch(asset.cache_name, asset.repo, constraint)

        source_dir = self.fetcher.asset_dir(asset.cache_name)
        await gather_all(
            *(
                self.copy_file(source_dir / source, name)
                for source, name in asset.outputs(unminified)
            )
        )
        return version

    async def copy_file(self, source: Path, name: str) -> None:
        """Copy a cached file into the install directory as ``name``.

        Raises:
            MaterializationFailure: If the file cannot be read, transformed or written
        """
        target = self.install_dir / name
        try:
            if self.transform is None:
                await fsutil.write_bytes(target, await fsutil.read_bytes(source))
            else:
                text = await fsutil.read_text(source)
                await fsutil.write_text(target, self.transform(name, text))
        except Exception as e:
            raise MaterializationFailure(f"Could not install {name} from {source}: {e}") from e

        logger.info(f"  {name}")
