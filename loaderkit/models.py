"""
Centralized Pydantic models for Loaderkit.

This module contains the data models used throughout the provisioning pipeline:
- Registry version listings and parsed package names
- Records of provisioned assets and loader versions
- The project configuration threaded through every component
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError


# =============================================================================
# Core Enums
# =============================================================================

class EndpointMode(str, Enum):
    """Where the loader reads library sources from."""
    LOCAL = "local"
    REMOTE = "remote"


class ProvisionOutcome(str, Enum):
    """What a staleness check decided to do."""
    FULL = "full"
    TRANSPILER_ONLY = "transpiler_only"


# =============================================================================
# Registry Models
# =============================================================================

class VersionEntry(BaseModel):
    """Metadata advertised by an endpoint for one version of a package."""
    hash: str
    meta: Dict[str, Any] = Field(default_factory=dict)


VersionListing = Dict[str, VersionEntry]


class PackageName(BaseModel):
    """
    A package reference of the form ``endpoint:package[@version]``.

    Examples:
        github:systemjs/systemjs
        npm:babel@^4.7.12
        npm:@scope/name@1.0.0
    """

    endpoint: str
    package: str
    version: str = ""

    @classmethod
    def parse(cls, name: str) -> "PackageName":
        """Parse a package reference string.

        Raises:
            ConfigurationError: If the string has no endpoint prefix or package
        """
        endpoint, sep, rest = name.partition(":")
        if not sep or not endpoint or not rest:
            raise ConfigurationError(
                f"Invalid package name {name!r}, expected endpoint:package[@version]"
            )

        # A leading @ belongs to an npm scope, not to the version
        at = rest.rfind("@")
        if at > 0:
            package, version = rest[:at], rest[at + 1:]
        else:
            package, version = rest, ""

        return cls(endpoint=endpoint, package=package, version=version)

    @property
    def exact_name(self) -> str:
        base = f"{self.endpoint}:{self.package}"
        return f"{base}@{self.version}" if self.version else base

    def __str__(self) -> str:
        return self.exact_name


# =============================================================================
# Provisioning Records
# =============================================================================

class AssetRecord(BaseModel):
    """One provisioned unit: the asset name, its chosen version and hash."""
    name: str
    version: str
    hash: str


class LoaderVersions(BaseModel):
    """Versions of the loader-family assets fetched by a provisioning run."""
    esml: str
    system: str


class InstallOptions(BaseModel):
    """Options passed to an installer."""
    quick: bool = False
    dev: bool = False
    summary: bool = True


# =============================================================================
# Project Configuration
# =============================================================================

class EndpointOptions(BaseModel):
    """Per-endpoint loader options."""
    mode: EndpointMode = EndpointMode.REMOTE


class BabelOptions(BaseModel):
    """Options handed to the babel engine; unknown keys are preserved."""
    model_config = ConfigDict(extra="allow")

    optional: Optional[List[str]] = None


def _default_endpoints() -> Dict[str, EndpointOptions]:
    return {"github": EndpointOptions(), "npm": EndpointOptions()}


class LoaderOptions(BaseModel):
    """Loader section of the project configuration."""
    model_config = ConfigDict(populate_by_name=True)

    transpiler: Optional[str] = None
    babel_options: BabelOptions = Field(
        default_factory=BabelOptions, alias="babelOptions"
    )
    endpoints: Dict[str, EndpointOptions] = Field(default_factory=_default_endpoints)


class ProjectConfig(BaseModel):
    """
    Project configuration consumed and updated by the provisioning pipeline.

    Loaded once per top-level invocation and passed explicitly to each
    component. ``base_dir`` is the directory of the configuration file and is
    not persisted.
    """

    model_config = ConfigDict(populate_by_name=True)

    packages: str = "packages"
    dependencies: Dict[str, str] = Field(default_factory=dict)
    dev_dependencies: Dict[str, str] = Field(
        default_factory=dict, alias="devDependencies"
    )
    loader: LoaderOptions = Field(default_factory=LoaderOptions)

    base_dir: Path = Field(default_factory=Path.cwd, exclude=True)

    @property
    def install_dir(self) -> Path:
        """Absolute directory the loader files are materialized into."""
        return (self.base_dir / self.packages).resolve()

    def declared_target(self, name: str) -> Optional[str]:
        """Return the install target declared for ``name``, dev dependencies first."""
        return self.dev_dependencies.get(name) or self.dependencies.get(name)
