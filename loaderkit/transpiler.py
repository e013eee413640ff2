"""
Transpiler provisioning.

Selects the transpiler engine and its runtime companion package, delegates
their acquisition to an installer and records the selection in the loader
configuration. Configuration changes are idempotent.
"""

import logging
from typing import Dict, Optional

from .config import ConfigStore
from .installer import Installer
from .models import InstallOptions, ProjectConfig

logger = logging.getLogger(__name__)

DEFAULT_TRANSPILER = "traceur"

# Packages installed when the project does not declare its own target
TRANSPILER_PACKAGES = {
    "babel": "npm:babel@^4.7.12",
    "babel-runtime": "npm:babel-runtime@^4.7.12",
    "traceur": "github:jmcriffey/bower-traceur@0.0.87",
    "traceur-runtime": "github:jmcriffey/bower-traceur-runtime@0.0.87",
}


def default_package(name: str, transpiler_name: str) -> str:
    """Default install target for the engine or its ``-runtime`` companion."""
    engine = "traceur" if transpiler_name == "traceur" else "babel"
    suffix = "-runtime" if name.endswith("-runtime") else ""
    return TRANSPILER_PACKAGES[engine + suffix]


class TranspilerProvisioner:
    """Makes sure the configured transpiler and its runtime are installed."""

    def __init__(self, config: ProjectConfig, store: ConfigStore, installer: Installer):
        """
        Initialize TranspilerProvisioner.

        Args:
            config: Project configuration, updated in place
            store: Store the configuration is saved to after changes
            installer: Installer acquiring the engine and runtime packages
        """
        self.config = config
        self.store = store
        self.installer = installer

    def install_specs(self, transpiler_name: str) -> Dict[str, str]:
        """Install targets for the engine and its runtime companion."""
        specs = {}
        for name in (transpiler_name, f"{transpiler_name}-runtime"):
            specs[name] = self.config.declared_target(name) or default_package(
                name, transpiler_name
            )
        return specs

    async def provision_transpiler(
        self, transpiler_name: Optional[str] = None, update: bool = False
    ) -> str:
        """
        Install the transpiler and record it in the loader configuration.

        Args:
            transpiler_name: Engine to use (defaults to the configured one,
                then to traceur)
            update: Fully re-check the packages instead of a quick existence check

        Returns:
            The name of the transpiler in use
        """
        loader = self.config.loader
        transpiler_name = transpiler_name or loader.transpiler or DEFAULT_TRANSPILER

        await self.installer.install(
            self.install_specs(transpiler_name),
            InstallOptions(quick=not update, dev=True, summary=False),
        )

        changed = False
        if loader.transpiler != transpiler_name:
            loader.transpiler = transpiler_name
            logger.info(f"ES6 transpiler set to {transpiler_name}.")
            changed = True

        if transpiler_name == "babel" and not loader.babel_options.optional:
            loader.babel_options.optional = ["runtime"]
            changed = True

        if changed:
            await self.store.save(self.config)

        return transpiler_name
