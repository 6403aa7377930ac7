"""Environment promotion policy table."""

from __future__ import annotations

from enum import Enum


class Environment(str, Enum):
    """Deployment targets in report display order.

    Each member carries the semver range comparator that decides which
    candidate releases may replace the image running there.
    """

    DEV = ("dev", ">=")
    SANDBOX = ("sandbox", "^")
    PRODUCTION = ("production", "~")

    comparator: str

    def __new__(cls, name: str, comparator: str) -> Environment:
        member = str.__new__(cls, name)
        member._value_ = name
        member.comparator = comparator
        return member

    def __str__(self) -> str:
        return self.value


# dev deploys every newer version, sandbox only minor and patch bumps,
# production only patches.
POLICY_TABLE: tuple[Environment, ...] = tuple(Environment)


def policy_for(environment: Environment | str) -> str | None:
    """Return the range comparator for an environment, or None if unknown."""
    try:
        return Environment(environment).comparator
    except ValueError:
        return None
