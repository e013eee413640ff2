"""
Installer capability and a reference implementation.

The transpiler provisioner delegates acquisition of the transpiler engine and
its runtime companion to an installer. EndpointInstaller installs each package
into ``<packages>/<endpoint>/<package>@<version>`` and records the install
target in the project configuration.
"""

import logging
from pathlib import Path
from typing import Dict, List, Protocol

from . import fsutil
from .cache import AssetCache
from .config import ConfigStore
from .endpoints import EndpointRegistry
from .errors import ResolutionError
from .fetcher import AssetFetcher
from .models import InstallOptions, PackageName, ProjectConfig, VersionEntry
from .tasks import gather_all
from .versions import lookup_version, resolve_version

logger = logging.getLogger(__name__)


class Installer(Protocol):
    """Protocol for package installers."""

    async def install(self, specs: Dict[str, str], options: InstallOptions) -> None:
        """Install packages.

        Args:
            specs: Mapping of dependency name to package reference
                (e.g. {"babel": "npm:babel@^4.7.12"})
            options: quick skips network access for packages already present,
                dev records them as dev dependencies, summary logs the result
        """
        ...


class EndpointInstaller:
    """Installs packages straight from endpoints into the packages directory."""

    def __init__(
        self,
        config: ProjectConfig,
        store: ConfigStore,
        endpoints: EndpointRegistry,
        cache: AssetCache | None = None,
    ):
        self.config = config
        self.store = store
        self.fetcher = AssetFetcher(endpoints, config.install_dir, cache)

    def package_dir(self, pkg: PackageName, version: str) -> Path:
        return self.config.install_dir / pkg.endpoint / f"{pkg.package}@{version}"

    async def installed_versions(self, pkg: PackageName) -> List[str]:
        """Versions of ``pkg`` with an install directory."""
        parent = (self.config.install_dir / pkg.endpoint / pkg.package).parent
        prefix = f"{Path(pkg.package).name}@"
        try:
            entries = await fsutil.list_dir(parent)
        except FileNotFoundError:
            return []
        return [name[len(prefix):] for name in entries if name.startswith(prefix)]

    async def install(self, specs: Dict[str, str], options: InstallOptions) -> None:
        await gather_all(
            *(self._install_one(name, target, options) for name, target in specs.items())
        )

        changed = False
        deps = self.config.dev_dependencies if options.dev else self.config.dependencies
        for name, target in specs.items():
            if self.config.declared_target(name) != target:
                deps[name] = target
                changed = True
        if changed:
            await self.store.save(self.config)

    async def _install_one(self, name: str, target: str, options: InstallOptions) -> str:
        pkg = PackageName.parse(target)

        if options.quick:
            installed = await self.installed_versions(pkg)
            if installed:
                present = {version: VersionEntry(hash="") for version in installed}
                try:
                    version = resolve_version(pkg.version or "*", present, pkg.exact_name)
                    lookup_version(version, present, pkg.exact_name)
                except ResolutionError:
                    pass
                else:
                    logger.debug(f"{name}: {pkg.exact_name} present as {version}")
                    return version

        fetched = await self.fetcher.fetch_package(
            name,
            pkg,
            pkg.version or "*",
            lambda version: self.package_dir(pkg, version),
        )

        if options.summary:
            logger.info(f"Installed {name} as {pkg.exact_name} ({fetched.version})")
        return fetched.version
