"""Domain types for deployment status reports."""

from __future__ import annotations

from dataclasses import dataclass

from deployfeed.policy import Environment


@dataclass(frozen=True)
class EnvironmentCredentials:
    """Access keys for one environment's container service."""

    key: str
    secret: str

    @property
    def is_active(self) -> bool:
        return bool(self.key) and bool(self.secret)

    def __repr__(self) -> str:
        return f"EnvironmentCredentials(key={self.key!r}, secret='***')"


@dataclass(frozen=True)
class CurrentImage:
    """Image reference currently deployed to an environment."""

    image: str
    tag: str


@dataclass(frozen=True)
class GateResult:
    """Promotion decision for one environment."""

    environment: Environment
    current_tag: str
    release_version: str
    will_be_replaced: bool


@dataclass(frozen=True)
class LookupFailure:
    """Marker for an environment whose current image could not be resolved."""

    environment: Environment
    error: str


ReportEntry = GateResult | LookupFailure


@dataclass(frozen=True)
class Report:
    """Ordered per-environment results for one release."""

    release_version: str
    entries: tuple[ReportEntry, ...]

    @property
    def results(self) -> tuple[GateResult, ...]:
        return tuple(entry for entry in self.entries if isinstance(entry, GateResult))

    @property
    def failures(self) -> tuple[LookupFailure, ...]:
        return tuple(entry for entry in self.entries if isinstance(entry, LookupFailure))
