"""
Pytest configuration and fixtures for Loaderkit tests.
"""

import tempfile
from pathlib import Path
from typing import Dict, List

import pytest

from loaderkit.config import ConfigStore
from loaderkit.core import LoaderCore
from loaderkit.endpoints import EndpointRegistry
from loaderkit.models import InstallOptions, ProjectConfig, VersionEntry

ESML_PACKAGE = "ModuleLoader/es6-module-loader"
SYSTEM_PACKAGE = "systemjs/systemjs"


def dist_files(basename: str) -> Dict[str, str]:
    """Files published by a loader repository under dist/."""
    return {
        f"dist/{basename}.js": f"/* {basename} min */",
        f"dist/{basename}.src.js": f"/* {basename} src */",
        f"dist/{basename}.js.map": f'{{"file": "{basename}.js"}}',
    }


class FakeEndpoint:
    """In-memory endpoint recording every lookup and download."""

    def __init__(self, listings, files=None):
        self.listings: Dict[str, Dict[str, VersionEntry]] = listings
        self.files: Dict[str, Dict[str, str]] = files or {}
        self.lookups: List[str] = []
        self.downloads: List[tuple] = []
        self.fail_downloads: Dict[str, Exception] = {}

    async def lookup(self, package):
        self.lookups.append(package)
        return dict(self.listings[package])

    async def download(self, package, version, hash, meta, dest_dir):
        self.downloads.append((package, version, hash))
        if package in self.fail_downloads:
            raise self.fail_downloads[package]
        for relpath, content in self.files.get(package, {}).items():
            target = Path(dest_dir) / relpath
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")


class FakeInstaller:
    """Installer recording its calls without touching the filesystem."""

    def __init__(self):
        self.calls: List[tuple] = []

    async def install(self, specs, options: InstallOptions):
        self.calls.append((dict(specs), options))


class CountingStore(ConfigStore):
    """ConfigStore counting how often it saves."""

    def __init__(self, config_file):
        super().__init__(config_file)
        self.saves = 0

    async def save(self, config):
        self.saves += 1
        await super().save(config)


def loader_listings():
    return {
        ESML_PACKAGE: {
            "0.13.0": VersionEntry(hash="esml-0130"),
            "0.14.1": VersionEntry(hash="esml-0141"),
            "0.14.2": VersionEntry(hash="esml-0142"),
            "0.15.0": VersionEntry(hash="esml-0150"),
            "master": VersionEntry(hash="esml-master"),
        },
        SYSTEM_PACKAGE: {
            "0.14.0": VersionEntry(hash="system-0140"),
            "0.14.3": VersionEntry(hash="system-0143"),
            "1.0.0": VersionEntry(hash="system-100"),
            "master": VersionEntry(hash="system-master"),
        },
    }


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def github():
    """Fake github endpoint serving both loader repositories."""
    return FakeEndpoint(
        loader_listings(),
        {
            ESML_PACKAGE: dist_files("es6-module-loader"),
            SYSTEM_PACKAGE: dist_files("system"),
        },
    )


@pytest.fixture
def registry(github):
    return EndpointRegistry({"github": github})


@pytest.fixture
def installer():
    return FakeInstaller()


@pytest.fixture
def store(temp_dir):
    return CountingStore(temp_dir / "project" / "loaderkit.json")


@pytest.fixture
def project_config(temp_dir):
    return ProjectConfig(base_dir=temp_dir / "project")


@pytest.fixture
def cache_root(temp_dir):
    return temp_dir / "home" / ".loaderkit" / "loader-files"


@pytest.fixture
def core(project_config, store, registry, cache_root, installer):
    """LoaderCore wired to the fake endpoint and installer."""
    return LoaderCore(project_config, store, registry, cache_root, installer=installer)
