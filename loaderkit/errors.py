"""
Loaderkit errors - Typed failures raised by the provisioning pipeline.

Inner components raise these and never report them; the CLI is the single
place where they are logged and shown to the user.
"""


class LoaderkitError(Exception):
    """Base exception for all Loaderkit errors."""
    pass


class ConfigurationError(LoaderkitError):
    """Errors in the project configuration file."""
    pass


class ResolutionError(LoaderkitError):
    """A version constraint could not be turned into a listed version."""
    pass


class NoMatchingVersion(ResolutionError):
    """A range constraint has no satisfying entry in the version listing."""

    def __init__(self, constraint: str, package: str | None = None):
        self.constraint = constraint
        self.package = package
        target = f" for {package}" if package else ""
        super().__init__(f"No version matching {constraint!r}{target}")


class UnknownVersion(ResolutionError):
    """A literal tag has no corresponding entry in the version listing."""

    def __init__(self, version: str, package: str | None = None):
        self.version = version
        self.package = package
        target = f" of {package}" if package else ""
        super().__init__(f"Version {version!r}{target} is not available")


class CacheReadFailure(LoaderkitError):
    """A cached hash token exists but could not be read."""
    pass


class TransferFailure(LoaderkitError):
    """Endpoint lookup or download failed."""
    pass


class MaterializationFailure(LoaderkitError):
    """Copying a cached asset file into the install directory failed."""
    pass


class UnknownEndpoint(LoaderkitError):
    """No endpoint is registered under the requested name."""
    pass


class InvalidMode(LoaderkitError):
    """None of the requested loader modes is recognised."""
    pass
