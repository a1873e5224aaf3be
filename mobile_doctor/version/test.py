"""Unit tests for version handling."""

import pytest

from .lib import (
    VersionRange,
    compare_versions,
    extract_version_triplet,
    get_version_from_string,
    is_valid_version,
    max_satisfying,
    parse_version,
    version_gte,
    version_lt,
)


class TestGetVersionFromString:
    """Tests for generic version normalization."""

    @pytest.mark.unit
    def test_full_version(self):
        assert get_version_from_string("Android Debug Bridge version 1.0.41") == "1.0.41"

    @pytest.mark.unit
    def test_patch_defaults_to_zero(self):
        assert get_version_from_string("Xcode 9.4\nBuild version 9F1027a") == "9.4.0"

    @pytest.mark.unit
    def test_node_style_prefix(self):
        assert get_version_from_string("v18.17.1") == "18.17.1"

    @pytest.mark.unit
    def test_suffix_kept(self):
        assert get_version_from_string("1.5.0-beta") == "1.5.0-beta"

    @pytest.mark.unit
    def test_unparsable(self):
        assert get_version_from_string("command not found") is None
        assert get_version_from_string("") is None
        assert get_version_from_string(None) is None


class TestExtractVersionTriplet:
    """Tests for three-component extraction."""

    @pytest.mark.unit
    def test_from_javac_output(self):
        assert extract_version_triplet("javac 1.8.0_211") == "1.8.0"

    @pytest.mark.unit
    def test_from_directory_name(self):
        assert extract_version_triplet("build-tools-25.0.2") == "25.0.2"

    @pytest.mark.unit
    def test_two_components_rejected(self):
        assert extract_version_triplet("android-25") is None
        assert extract_version_triplet("javac 17") is None


class TestParseAndCompare:
    """Tests for parsing and ordering."""

    @pytest.mark.unit
    def test_parse_version(self):
        assert parse_version("1.8.0_211") == (1, 8, 0)
        assert parse_version("25") == (25,)
        assert parse_version("v3.12.0") == (3, 12, 0)
        assert parse_version("latest") is None

    @pytest.mark.unit
    def test_compare_pads_missing_components(self):
        assert compare_versions("1.0", "1.0.0") == 0
        assert compare_versions("0.38.2", "0.39.0") == -1
        assert compare_versions("10.0.0", "9.9.9") == 1

    @pytest.mark.unit
    def test_helpers(self):
        assert version_lt("0.37.0", "0.38.2") is True
        assert version_gte("7.3.0", "7.3.0") is True
        assert version_gte("7.2.1", "7.3.0") is False

    @pytest.mark.unit
    def test_compare_rejects_garbage(self):
        with pytest.raises(ValueError):
            compare_versions("abc", "1.0.0")

    @pytest.mark.unit
    def test_is_valid_version(self):
        assert is_valid_version("1.11.3") is True
        assert is_valid_version("1.0.0.beta.1") is False
        assert is_valid_version("1.0") is False
        assert is_valid_version(None) is False


class TestVersionRange:
    """Tests for range parsing and matching."""

    @pytest.mark.unit
    def test_parse_lower_and_upper(self):
        version_range = VersionRange.parse(">=23 <=25")
        assert version_range == VersionRange("23", "25", True, True)
        assert str(version_range) == ">=23 <=25"

    @pytest.mark.unit
    def test_parse_exclusive_upper(self):
        version_range = VersionRange.parse(">=25 <26")
        assert version_range.upper_inclusive is False

    @pytest.mark.unit
    def test_parse_invalid(self):
        with pytest.raises(ValueError):
            VersionRange.parse("latest")

    @pytest.mark.unit
    def test_partial_upper_admits_minor_releases(self):
        version_range = VersionRange.parse(">=23 <=25")
        assert version_range.satisfied_by("25.0.3") is True
        assert version_range.satisfied_by("26.0.0") is False

    @pytest.mark.unit
    def test_exclusive_upper(self):
        version_range = VersionRange("25", "26", upper_inclusive=False)
        assert version_range.satisfied_by("25.1.0") is True
        assert version_range.satisfied_by("24.2.1") is False
        assert version_range.satisfied_by("26.0.0") is False

    @pytest.mark.unit
    def test_exact_version(self):
        assert VersionRange.parse("=22.0.1").exact_version == "22.0.1"
        assert VersionRange.parse(">=22 <=22").exact_version == "22"
        assert VersionRange.parse(">=23 <=25").exact_version is None


class TestMaxSatisfying:
    """Tests for selecting the best candidate."""

    @pytest.mark.unit
    def test_selects_highest_in_range(self):
        result = max_satisfying(["23.0.1", "23.0.2", "24.0.0"], VersionRange.parse(">=23 <=25"))
        assert result == "24.0.0"

    @pytest.mark.unit
    def test_nothing_in_range(self):
        assert max_satisfying(["21.0.0"], VersionRange.parse(">=23 <=25")) is None

    @pytest.mark.unit
    def test_ignores_out_of_range_higher_versions(self):
        result = max_satisfying(["26.0.0", "23.0.3"], VersionRange.parse(">=23 <=25"))
        assert result == "23.0.3"

    @pytest.mark.unit
    def test_empty_candidates(self):
        assert max_satisfying([], VersionRange.parse(">=1")) is None
