"""
Version resolution against registry listings.

A constraint is either an npm-style range (``^0.14.0``, ``~1.2``, ``>=1 <2``)
resolved to the highest satisfying listed version, or a literal tag (a branch
name such as ``master``) returned verbatim.
"""

import logging
from typing import List, Optional, Tuple

from semantic_version import NpmSpec, Version

from .errors import NoMatchingVersion, UnknownVersion
from .models import VersionEntry, VersionListing

logger = logging.getLogger(__name__)


def parse_range(constraint: str) -> Optional[NpmSpec]:
    """Parse an npm range expression, returning None for literal tags."""
    try:
        return NpmSpec(constraint)
    except ValueError:
        return None


def parse_version(key: str) -> Optional[Version]:
    """Parse a listing key as a semantic version.

    Leading ``v`` / ``=`` prefixes are accepted, as registries commonly tag
    releases as ``v1.2.0``.
    """
    try:
        return Version(key.strip().lstrip("=v"))
    except ValueError:
        return None


def sorted_versions(listing: VersionListing) -> List[Tuple[str, Version]]:
    """Listing keys that are valid semantic versions, highest first."""
    valid = []
    for key in listing:
        version = parse_version(key)
        if version is not None:
            valid.append((key, version))
    return sorted(valid, key=lambda item: item[1], reverse=True)


def resolve_version(
    constraint: str, listing: VersionListing, package: Optional[str] = None
) -> str:
    """
    Choose the listing key a constraint refers to.

    Args:
        constraint: Range expression or literal tag
        listing: Versions advertised by the endpoint
        package: Package name, used in error messages only

    Returns:
        The highest listed version satisfying the range, or the constraint
        itself when it is not a range

    Raises:
        NoMatchingVersion: If a range matches no listed version
    """
    spec = parse_range(constraint)
    if spec is None:
        return constraint

    for key, version in sorted_versions(listing):
        if spec.match(version):
            logger.debug(f"Resolved {package or 'package'}@{constraint} to {key}")
            return key

    raise NoMatchingVersion(constraint, package)


def lookup_version(
    version: str, listing: VersionListing, package: Optional[str] = None
) -> VersionEntry:
    """Return the listing entry for a resolved version.

    Raises:
        UnknownVersion: If the version is not in the listing
    """
    try:
        return listing[version]
    except KeyError:
        raise UnknownVersion(version, package) from None
