"""Unit tests for plugins.versions: constraint translation and matching."""
from __future__ import annotations

import pytest

from plugins.versions import parse_version, satisfies, to_specifier


class TestSatisfies:
    @pytest.mark.parametrize(
        ("version", "constraint"),
        [
            ("1.2.3", "1.2.3"),
            ("1.2.3", "=1.2.3"),
            ("1.2.3", "==1.2.3"),
            ("1.4.0", ">=1.2"),
            ("1.4.0", ">=1.0 <2.0"),
            ("1.4.0", ">=1.0, <2.0"),
            ("1.4.0", ">= 1.0"),
            ("1.9.9", "^1.2.3"),
            ("0.2.9", "^0.2.3"),
            ("1.2.9", "~1.2.3"),
            ("1.5.0", "~=1.2"),
            ("1.7.0", "1.x"),
            ("1.2.5", "1.2.*"),
            ("3.0.0", "*"),
            ("3.0.0", ""),
            ("1.0.0-beta.1", "1.x"),
        ],
    )
    def test_matches(self, version: str, constraint: str) -> None:
        assert satisfies(version, constraint)

    @pytest.mark.parametrize(
        ("version", "constraint"),
        [
            ("1.2.4", "1.2.3"),
            ("2.0.0", ">=1.0 <2.0"),
            ("2.0.0", "^1.2.3"),
            ("0.3.0", "^0.2.3"),
            ("0.0.4", "^0.0.3"),
            ("1.3.0", "~1.2.3"),
            ("2.0.0", "1.x"),
            ("1.1.0", "!=1.1.0"),
        ],
    )
    def test_rejects(self, version: str, constraint: str) -> None:
        assert not satisfies(version, constraint)

    def test_none_constraint_accepts_anything(self) -> None:
        assert satisfies("0.0.1", None)

    def test_unparsable_available_version_never_matches(self) -> None:
        assert not satisfies("not-a-version", ">=1.0")


class TestToSpecifier:
    def test_caret_upper_bound(self) -> None:
        assert str(to_specifier("^1.2.3")) == str(to_specifier(">=1.2.3,<2.0.0"))

    @pytest.mark.parametrize(
        ("constraint", "expanded"),
        [
            ("^0", ">=0,<1.0.0"),
            ("^0.0", ">=0.0,<0.1.0"),
            ("^0.0.0", ">=0.0.0,<0.0.1"),
            ("^0.2", ">=0.2,<0.3.0"),
            ("^1", ">=1,<2.0.0"),
        ],
    )
    def test_caret_partial_versions(self, constraint: str, expanded: str) -> None:
        assert str(to_specifier(constraint)) == str(to_specifier(expanded))

    @pytest.mark.parametrize(
        ("version", "constraint"),
        [("0.5.0", "^0"), ("0.0.9", "^0.0")],
    )
    def test_caret_partial_zero_matches(self, version: str, constraint: str) -> None:
        assert satisfies(version, constraint)

    def test_invalid_constraint_raises_value_error(self) -> None:
        with pytest.raises(ValueError, match="invalid version constraint"):
            to_specifier(">=banana")

    def test_wildcard_with_range_operator_rejected(self) -> None:
        with pytest.raises(ValueError):
            to_specifier(">=1.x")


class TestParseVersion:
    def test_semver_prerelease(self) -> None:
        assert parse_version("1.0.0-beta.1").is_prerelease

    def test_invalid(self) -> None:
        with pytest.raises(ValueError):
            parse_version("one")
