"""Tests for the semver and PEP 440 version dialects."""

import pytest

from image_meta.versioning import parse_pep440, parse_semver


class TestParseSemver:
    """Test semantic version parsing."""

    def test_release_with_v_prefix(self):
        parsed = parse_semver("v1.1.1")

        assert parsed.version == "1.1.1"
        assert (parsed.major, parsed.minor, parsed.patch) == ("1", "1", "1")
        assert parsed.raw == "v1.1.1"
        assert parsed.is_release is True

    def test_prerelease(self):
        parsed = parse_semver("2.0.8-beta.67")

        assert parsed.version == "2.0.8-beta.67"
        assert parsed.is_release is False

    def test_build_metadata_dropped(self):
        parsed = parse_semver("v1.2.3+build.11")

        assert parsed.version == "1.2.3"
        assert parsed.is_release is True

    @pytest.mark.parametrize("raw", ["1.2", "v1.2.3.4", "01.2.3", "release1", "sometag"])
    def test_invalid(self, raw):
        assert parse_semver(raw) is None

    def test_fields(self):
        assert parse_semver("v3.2.1").fields() == {
            "raw": "v3.2.1",
            "version": "3.2.1",
            "major": "3",
            "minor": "2",
            "patch": "1",
        }


class TestParsePep440:
    """Test PEP 440 version parsing."""

    def test_release(self):
        parsed = parse_pep440("1.2.3")

        assert parsed.version == "1.2.3"
        assert (parsed.major, parsed.minor, parsed.patch) == ("1", "2", "3")
        assert parsed.is_release is True

    def test_normalized(self):
        assert parse_pep440("v1.2.3").version == "1.2.3"
        assert parse_pep440("1.2.3-RC1").version == "1.2.3rc1"

    @pytest.mark.parametrize("raw", ["1.2.3rc1", "1.2.3a4", "1.2.3.post1", "1.2.3.dev2"])
    def test_not_a_release(self, raw):
        assert parse_pep440(raw).is_release is False

    def test_short_version_has_zero_patch(self):
        parsed = parse_pep440("1.2")

        assert parsed.patch == "0"

    def test_invalid(self):
        assert parse_pep440("sometag") is None
