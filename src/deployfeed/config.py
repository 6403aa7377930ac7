"""Run configuration parsing and validation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from deployfeed.ecs import DEFAULT_REGION
from deployfeed.errors import ConfigError
from deployfeed.policy import Environment
from deployfeed.types import EnvironmentCredentials

DEFAULT_BASE_BRANCH = "main"


@dataclass(frozen=True)
class RunConfig:
    """Validated inputs for one reporting run."""

    release_version: str
    owner: str
    repo_name: str
    cluster_name: str
    service_name: str
    credentials: Mapping[Environment, EnvironmentCredentials] = field(default_factory=dict)
    token: str | None = None
    sha: str | None = None
    region: str = DEFAULT_REGION
    base_branch: str = DEFAULT_BASE_BRANCH

    @property
    def can_comment(self) -> bool:
        return bool(self.token) and bool(self.sha)


def parse_repository(repository: str) -> tuple[str, str]:
    """Split ``owner/repo`` into its parts."""
    parts = repository.strip().split("/")
    if len(parts) != 2 or not all(part.strip() for part in parts):
        raise ConfigError(f"repository must be of the form `owner/repo`, got `{repository}`")
    return parts[0].strip(), parts[1].strip()


def load_credentials_file(path: Path) -> dict[Environment, EnvironmentCredentials]:
    """Load per-environment credentials from a YAML file.

    Expected shape::

        environments:
          dev:
            key: AKIA...
            secret: ...
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path} parse error: {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} parse error: expected mapping at top level")

    environments_raw = raw.get("environments", {})
    if not isinstance(environments_raw, dict):
        raise ConfigError(f"{path}: `environments` must be a mapping")

    credentials: dict[Environment, EnvironmentCredentials] = {}
    for name, entry in environments_raw.items():
        try:
            environment = Environment(str(name))
        except ValueError as exc:
            known = ", ".join(env.value for env in Environment)
            raise ConfigError(f"{path}: unknown environment `{name}` (expected one of {known})") from exc
        if not isinstance(entry, dict):
            raise ConfigError(f"{path}: environments.{name} must be a mapping")
        credentials[environment] = EnvironmentCredentials(
            key=_as_text(entry.get("key")),
            secret=_as_text(entry.get("secret")),
        )
    return credentials


def merge_credentials(
    explicit: Mapping[Environment, EnvironmentCredentials],
    fallback: Mapping[Environment, EnvironmentCredentials],
) -> dict[Environment, EnvironmentCredentials]:
    """Prefer explicitly supplied credentials, filling gaps from ``fallback``."""
    merged: dict[Environment, EnvironmentCredentials] = {}
    for environment in Environment:
        chosen = explicit.get(environment)
        if chosen is None or not chosen.is_active:
            chosen = fallback.get(environment, chosen)
        if chosen is not None:
            merged[environment] = chosen
    return merged


def build_run_config(
    *,
    release_version: str | None,
    repository: str | None,
    cluster_name: str | None,
    service_name: str | None,
    credentials: Mapping[Environment, EnvironmentCredentials],
    config_file: Path | None = None,
    token: str | None = None,
    sha: str | None = None,
    region: str = DEFAULT_REGION,
    base_branch: str = DEFAULT_BASE_BRANCH,
) -> RunConfig:
    """Validate raw inputs and assemble a RunConfig.

    Raises:
        ConfigError: If a required input is missing or malformed
    """
    missing = [
        name
        for name, value in (
            ("releaseVersion", release_version),
            ("repository", repository),
            ("clusterName", cluster_name),
            ("serviceName", service_name),
        )
        if not (value or "").strip()
    ]
    if missing:
        raise ConfigError(f"Missing required input(s): {', '.join(missing)}")

    owner, repo_name = parse_repository(repository or "")

    merged = dict(credentials)
    if config_file is not None:
        merged = merge_credentials(credentials, load_credentials_file(config_file))

    return RunConfig(
        release_version=(release_version or "").strip(),
        owner=owner,
        repo_name=repo_name,
        cluster_name=(cluster_name or "").strip(),
        service_name=(service_name or "").strip(),
        credentials=merged,
        token=token or None,
        sha=sha or None,
        region=region,
        base_branch=base_branch,
    )


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
