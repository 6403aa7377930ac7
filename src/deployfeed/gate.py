"""Deployment gate evaluation."""

from __future__ import annotations

import nodesemver

from deployfeed.errors import UnknownEnvironmentError
from deployfeed.policy import Environment, policy_for
from deployfeed.tags import normalize
from deployfeed.types import GateResult

LATEST_TAG_PREFIX = "latest"
# Largest integer a version component may hold (JavaScript's Number.MAX_SAFE_INTEGER).
MAX_VERSION_COMPONENT = 2**53 - 1


def _parse(version: str):
    parsed = nodesemver.parse(version.strip(), loose=False)
    if parsed is None:
        return None
    if max(parsed.major, parsed.minor, parsed.patch) > MAX_VERSION_COMPONENT:
        return None
    return parsed


def is_semver(tag: str) -> bool:
    """Return True when tag parses as a strict semantic version.

    Surrounding whitespace is ignored; components above
    ``MAX_VERSION_COMPONENT`` are rejected.
    """
    return _parse(tag) is not None


def range_allows(comparator: str, current_tag: str, candidate_version: str) -> bool:
    """Check whether the candidate satisfies ``<comparator><current_tag>``.

    Non-semver current tags never match. A candidate that is not a valid
    version does not satisfy any range.
    """
    candidate_tag = normalize(candidate_version.strip())
    if not is_semver(current_tag) or not is_semver(candidate_tag):
        return False

    semver_range = f"{comparator}{current_tag.strip()}"
    try:
        return bool(nodesemver.satisfies(candidate_tag, semver_range, loose=False))
    except ValueError:
        return False


def is_latest_tag(current_tag: str) -> bool:
    """Images tagged ``latest*`` are always replaced."""
    return current_tag.startswith(LATEST_TAG_PREFIX)


def evaluate(
    environment: Environment | str,
    current_tag: str,
    candidate_version: str,
) -> GateResult:
    """Decide whether the candidate release will replace the deployed tag.

    Args:
        environment: Environment whose promotion policy applies
        current_tag: Tag of the image currently running in the environment
        candidate_version: Release version being published

    Returns:
        GateResult carrying the decision and the inputs it was derived from

    Raises:
        UnknownEnvironmentError: If the environment has no promotion policy
    """
    comparator = policy_for(environment)
    if comparator is None:
        raise UnknownEnvironmentError(str(environment))

    will_be_replaced = range_allows(comparator, current_tag, candidate_version) or is_latest_tag(
        current_tag
    )

    return GateResult(
        environment=Environment(environment),
        current_tag=current_tag,
        release_version=candidate_version,
        will_be_replaced=will_be_replaced,
    )
