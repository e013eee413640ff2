"""
Loaderkit Core - Versioned, cacheable module loader provisioning.

Check Pipeline: read manifest → (stale or files missing) provision loader
                → otherwise quick transpiler check
Provision Pipeline: cleanup → fetch loader assets → copy files → manifest → transpiler
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from . import fsutil
from .cache import AssetCache
from .config import ConfigStore
from .endpoints import EndpointRegistry
from .errors import InvalidMode
from .fetcher import AssetFetcher
from .installer import EndpointInstaller, Installer
from .models import EndpointMode, LoaderVersions, ProjectConfig, ProvisionOutcome
from .orchestrator import (
    CORE_FILES,
    MANIFEST_FILE,
    ProvisioningOrchestrator,
    Transform,
    expected_manifest,
)
from .transpiler import TranspilerProvisioner

logger = logging.getLogger(__name__)


class LoaderCore:
    """Main coordinator for the loader provisioning pipeline."""

    def __init__(
        self,
        config: ProjectConfig,
        store: ConfigStore,
        endpoints: EndpointRegistry,
        cache_root: Path,
        installer: Optional[Installer] = None,
        transform: Optional[Transform] = None,
    ):
        """
        Initialize LoaderCore.

        Args:
            config: Project configuration loaded for this invocation
            store: Store the configuration is saved to
            endpoints: Registry of package endpoints
            cache_root: Directory holding the private loader asset caches
            installer: Installer for transpiler packages (an EndpointInstaller
                over ``endpoints`` by default)
            transform: Optional text hook applied to every copied loader file
        """
        self.config = config
        self.store = store
        self.cache_root = Path(cache_root)

        cache = AssetCache()
        installer = installer or EndpointInstaller(config, store, endpoints, cache)
        self.fetcher = AssetFetcher(endpoints, self.cache_root, cache)
        self.transpiler = TranspilerProvisioner(config, store, installer)
        self.orchestrator = ProvisioningOrchestrator(
            config, self.fetcher, self.transpiler, transform
        )

    @property
    def install_dir(self) -> Path:
        return self.config.install_dir

    async def read_manifest(self) -> str:
        """Return the persisted manifest token, or "" when there is none."""
        try:
            # Undecodable bytes become U+FFFD and can never match the expected token
            return await fsutil.read_text(self.install_dir / MANIFEST_FILE, errors="replace")
        except FileNotFoundError:
            return ""

    async def check_and_provision(
        self, transpiler_name: Optional[str] = None
    ) -> ProvisionOutcome:
        """
        Provision the loader when it is missing or outdated.

        Args:
            transpiler_name: Transpiler to provision (defaults to the configured one)

        Returns:
            FULL when the loader files were (re)downloaded, TRANSPILER_ONLY
            when only the transpiler was checked
        """
        manifest = await self.read_manifest()
        if manifest != expected_manifest():
            logger.debug(f"Loader manifest {manifest!r} is stale")
            await self.provision_loader(transpiler_name)
            return ProvisionOutcome.FULL

        # Even if the manifest is fresh, still check the files exist
        try:
            files = await fsutil.list_dir(self.install_dir)
        except FileNotFoundError:
            files = []

        missing = [name for name in CORE_FILES if name not in files]
        if missing:
            logger.debug(f"Loader files missing: {', '.join(missing)}")
            await self.provision_loader(transpiler_name)
            return ProvisionOutcome.FULL

        await self.provision_transpiler(transpiler_name)
        return ProvisionOutcome.TRANSPILER_ONLY

    async def provision_loader(
        self,
        transpiler_name: Optional[str] = None,
        unminified: bool = False,
        edge: bool = False,
    ) -> LoaderVersions:
        return await self.orchestrator.provision_loader(transpiler_name, unminified, edge)

    async def provision_transpiler(
        self, transpiler_name: Optional[str] = None, update: bool = False
    ) -> str:
        return await self.transpiler.provision_transpiler(transpiler_name, update)

    async def set_mode(self, modes: Iterable[str]) -> List[str]:
        """
        Point every endpoint at local library sources or at the CDN.

        Args:
            modes: Requested modes ("local" and/or "remote")

        Returns:
            Messages describing the applied modes

        Raises:
            InvalidMode: If no requested mode is recognised
        """
        modes = list(modes)
        messages = []
        endpoints = self.config.loader.endpoints

        if EndpointMode.LOCAL.value in modes:
            for options in endpoints.values():
                options.mode = EndpointMode.LOCAL
            messages.append("Loader set to local library sources")

        if EndpointMode.REMOTE.value in modes:
            for options in endpoints.values():
                options.mode = EndpointMode.REMOTE
            messages.append("Loader set to CDN library sources")

        if not messages:
            raise InvalidMode(f"Invalid mode {', '.join(modes) or '(none)'}")

        await self.store.save(self.config)
        return messages

    async def init(self) -> ProvisionOutcome:
        """Write the project configuration, then make sure the loader is installed."""
        await self.store.save(self.config)
        logger.info(f"Verified config file at {self.store.config_file}")
        return await self.check_and_provision()

    async def reset(self) -> None:
        """Forget installed loader versions and cached downloads."""
        await fsutil.unlink(self.install_dir / MANIFEST_FILE, missing_ok=True)
        await fsutil.remove_tree(self.cache_root)
        logger.info("Loader manifest and download cache removed")
