"""Tests for version resolution."""

import pytest

from loaderkit.errors import NoMatchingVersion, UnknownVersion
from loaderkit.models import VersionEntry
from loaderkit.versions import (
    lookup_version,
    parse_range,
    parse_version,
    resolve_version,
    sorted_versions,
)


def listing(*versions):
    return {v: VersionEntry(hash=f"hash-{v}") for v in versions}


class TestResolveRange:
    """Range constraints resolve to the highest satisfying listed version."""

    def test_caret_picks_highest_compatible(self):
        result = resolve_version("^1.2.0", listing("1.2.0", "1.3.0", "2.0.0"))
        assert result == "1.3.0"

    def test_order_of_listing_does_not_matter(self):
        result = resolve_version("^0.14.0", listing("0.14.3", "0.15.0", "0.14.10", "0.14.0"))
        assert result == "0.14.10"

    def test_tilde_range(self):
        assert resolve_version("~1.2.0", listing("1.2.0", "1.2.9", "1.3.0")) == "1.2.9"

    def test_compound_range(self):
        assert resolve_version(">=1.0.0 <2.0.0", listing("0.9.0", "1.5.0", "2.0.0")) == "1.5.0"

    def test_exact_version_is_a_range(self):
        assert resolve_version("0.0.87", listing("0.0.86", "0.0.87", "0.0.88")) == "0.0.87"

    def test_invalid_keys_are_ignored(self):
        versions = listing("master", "1.2.0", "not-a-version", "feature/x")
        assert resolve_version("^1.0.0", versions) == "1.2.0"

    def test_v_prefixed_keys_match_and_are_returned_verbatim(self):
        assert resolve_version("^1.0.0", listing("v1.0.0", "v1.4.0")) == "v1.4.0"

    def test_prereleases_are_not_selected_by_plain_range(self):
        assert resolve_version("^1.0.0", listing("1.0.0", "1.1.0-beta.1")) == "1.0.0"

    def test_higher_prerelease_is_skipped_for_pinned_loader_range(self):
        versions = listing("0.13.0", "0.14.1", "0.14.2", "0.14.5-beta", "0.15.0")
        assert resolve_version("^0.14.0", versions) == "0.14.2"

    def test_no_match_raises(self):
        with pytest.raises(NoMatchingVersion) as exc_info:
            resolve_version("^3.0.0", listing("1.0.0", "2.0.0"), "npm:babel")

        assert exc_info.value.constraint == "^3.0.0"
        assert "npm:babel" in str(exc_info.value)

    def test_no_valid_versions_raises(self):
        with pytest.raises(NoMatchingVersion):
            resolve_version("^1.0.0", listing("master", "develop"))

    def test_empty_listing_raises(self):
        with pytest.raises(NoMatchingVersion):
            resolve_version("^1.0.0", {})


class TestResolveLiteral:
    """Non-range constraints are returned unchanged."""

    @pytest.mark.parametrize("tag", ["master", "feature/loader", "latest"])
    def test_literal_returned_verbatim(self, tag):
        assert resolve_version(tag, listing("1.0.0", "master")) == tag

    def test_literal_not_in_listing_is_still_returned(self):
        assert resolve_version("develop", {}) == "develop"


class TestLookupVersion:
    def test_lookup_returns_entry(self):
        versions = listing("1.0.0", "master")
        assert lookup_version("master", versions).hash == "hash-master"

    def test_unknown_version_raises(self):
        with pytest.raises(UnknownVersion) as exc_info:
            lookup_version("develop", listing("1.0.0"), "github:a/b")

        assert exc_info.value.version == "develop"


class TestParsing:
    def test_parse_range_rejects_branch_names(self):
        assert parse_range("master") is None
        assert parse_range("^0.14.0") is not None

    def test_parse_version(self):
        assert str(parse_version("v1.2.3")) == "1.2.3"
        assert parse_version("1.2") is None
        assert parse_version("master") is None

    def test_sorted_versions_descending(self):
        keys = [key for key, _ in sorted_versions(listing("1.0.0", "master", "1.10.0", "1.9.0"))]
        assert keys == ["1.10.0", "1.9.0", "1.0.0"]
