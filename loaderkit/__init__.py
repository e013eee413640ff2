"""
Loaderkit - Versioned, cacheable module loader provisioning.

Resolves loader and transpiler versions against package registries, caches
downloads by content hash and installs the loader files into a project.
Repeat runs are cheap: a version manifest short-circuits re-provisioning and
cached assets are never downloaded twice.
"""

from .core import LoaderCore
from .errors import LoaderkitError
from .settings import LoaderkitSettings, get_settings, reload_settings

__version__ = "0.1.0"
__all__ = [
    "LoaderCore",
    "LoaderkitError",
    "LoaderkitSettings",
    "get_settings",
    "reload_settings",
]
