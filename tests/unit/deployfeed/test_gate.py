"""Unit tests for deployment gate evaluation."""

from __future__ import annotations

import pytest

from deployfeed.errors import UnknownEnvironmentError
from deployfeed.gate import evaluate, is_latest_tag, is_semver, range_allows
from deployfeed.policy import Environment


@pytest.mark.parametrize(
    ("environment", "current", "release", "expected"),
    [
        ("production", "2.4.1", "2.4.2", True),
        ("production", "2.4.1", "2.5.0", False),
        ("sandbox", "2.4.1", "3.0.0", False),
        ("dev", "2.4.1", "1.9.9", False),
    ],
)
def test_release_scenarios(environment: str, current: str, release: str, expected: bool) -> None:
    result = evaluate(environment, current, release)
    assert result.will_be_replaced is expected
    assert result.environment is Environment(environment)
    assert result.current_tag == current
    assert result.release_version == release


@pytest.mark.parametrize("release", ["2.4.1", "2.4.2", "2.5.0", "3.0.0", "10.0.0"])
def test_dev_promotes_greater_or_equal(release: str) -> None:
    assert evaluate("dev", "2.4.1", release).will_be_replaced is True


@pytest.mark.parametrize("release", ["2.4.0", "2.3.9", "1.9.9"])
def test_dev_rejects_lesser(release: str) -> None:
    assert evaluate("dev", "2.4.1", release).will_be_replaced is False


def test_sandbox_caret_range() -> None:
    assert evaluate("sandbox", "2.4.1", "2.4.2").will_be_replaced is True
    assert evaluate("sandbox", "2.4.1", "2.9.0").will_be_replaced is True
    assert evaluate("sandbox", "2.4.1", "3.0.0").will_be_replaced is False
    assert evaluate("sandbox", "2.4.1", "1.4.1").will_be_replaced is False


def test_production_tilde_range() -> None:
    assert evaluate("production", "2.4.1", "2.4.9").will_be_replaced is True
    assert evaluate("production", "2.4.1", "2.5.0").will_be_replaced is False
    assert evaluate("production", "2.4.1", "3.4.1").will_be_replaced is False


def test_prerelease_release_is_compared_as_build() -> None:
    assert evaluate("production", "2.4.1", "2.4.2-rc1").will_be_replaced is True
    assert evaluate("dev", "2.4.1", "2.4.1-build7").will_be_replaced is True


@pytest.mark.parametrize("tag", ["latest", "latest-foo", "latest-abc123"])
@pytest.mark.parametrize("environment", ["dev", "sandbox", "production"])
def test_latest_tags_are_always_replaced(environment: str, tag: str) -> None:
    assert evaluate(environment, tag, "0.0.1").will_be_replaced is True


def test_latest_prefix_is_case_sensitive() -> None:
    assert is_latest_tag("latest-1") is True
    assert is_latest_tag("Latest") is False
    assert is_latest_tag("v-latest") is False


@pytest.mark.parametrize("environment", ["dev", "sandbox", "production"])
def test_non_semver_tag_is_never_replaced(environment: str) -> None:
    assert evaluate(environment, "abc123", "2.4.2").will_be_replaced is False


def test_range_allows_requires_semver_current_tag() -> None:
    assert is_semver("2.4.1") is True
    assert is_semver("abc123") is False
    assert range_allows(">=", "abc123", "9.9.9") is False
    assert range_allows("~", "2.4.1", "2.4.3") is True


def test_unknown_environment_raises() -> None:
    with pytest.raises(UnknownEnvironmentError, match="staging"):
        evaluate("staging", "2.4.1", "2.4.2")


def test_surrounding_whitespace_is_ignored() -> None:
    assert evaluate("dev", " 2.4.1", "2.4.2").will_be_replaced is True
    assert evaluate("production", "2.4.1\n", " 2.4.3 ").will_be_replaced is True
    assert is_semver(" 2.4.1 ") is True


@pytest.mark.parametrize(
    ("current", "release"),
    [
        ("2.4.1", "99999999999999999999.0.0"),
        ("99999999999999999999.0.0", "99999999999999999999.0.1"),
    ],
)
def test_oversized_version_components_never_match(current: str, release: str) -> None:
    assert evaluate("dev", current, release).will_be_replaced is False


def test_version_component_bound() -> None:
    assert is_semver(f"{2**53 - 1}.0.0") is True
    assert is_semver(f"{2**53}.0.0") is False
