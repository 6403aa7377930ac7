"""Fan-out of gate evaluation across configured environments."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping

from deployfeed.gate import evaluate
from deployfeed.policy import POLICY_TABLE, Environment
from deployfeed.types import (
    CurrentImage,
    EnvironmentCredentials,
    LookupFailure,
    Report,
    ReportEntry,
)

logger = logging.getLogger(__name__)

ImageLookup = Callable[
    [Environment, EnvironmentCredentials, str, str, str],
    Awaitable[CurrentImage],
]


def active_environments(
    credentials: Mapping[Environment, EnvironmentCredentials | None],
) -> list[Environment]:
    """Return policy-table environments with usable credentials, in table order."""
    active: list[Environment] = []
    for environment in POLICY_TABLE:
        creds = credentials.get(environment)
        if creds is not None and creds.is_active:
            active.append(environment)
    return active


def qualified_name(environment: Environment, name: str) -> str:
    """Prefix a cluster or service name with its environment."""
    return f"{environment.value}-{name}"


async def _evaluate_environment(
    environment: Environment,
    creds: EnvironmentCredentials,
    *,
    release_version: str,
    repo_name: str,
    cluster_name: str,
    service_name: str,
    lookup: ImageLookup,
) -> ReportEntry:
    try:
        image = await lookup(
            environment,
            creds,
            repo_name,
            qualified_name(environment, cluster_name),
            qualified_name(environment, service_name),
        )
        result = evaluate(environment, image.tag, release_version)
    except Exception as exc:
        logger.warning("Error fetching current image for %s: %s", environment.value, exc)
        return LookupFailure(environment=environment, error=str(exc) or type(exc).__name__)

    logger.debug(
        "%s runs %s; will_be_replaced=%s",
        environment.value,
        image.image,
        result.will_be_replaced,
    )
    return result


async def collect_report(
    *,
    release_version: str,
    repo_name: str,
    cluster_name: str,
    service_name: str,
    credentials: Mapping[Environment, EnvironmentCredentials | None],
    lookup: ImageLookup,
) -> Report:
    """Resolve each active environment's image and evaluate its gate.

    Lookups run concurrently. A failing environment becomes a LookupFailure
    entry and never affects its siblings. Entries follow policy-table order,
    not completion order.
    """
    environments = active_environments(credentials)
    if not environments:
        logger.info("No environments have credentials configured")

    entries = await asyncio.gather(
        *(
            _evaluate_environment(
                environment,
                credentials[environment],  # type: ignore[arg-type]
                release_version=release_version,
                repo_name=repo_name,
                cluster_name=cluster_name,
                service_name=service_name,
                lookup=lookup,
            )
            for environment in environments
        )
    )
    return Report(release_version=release_version, entries=tuple(entries))
