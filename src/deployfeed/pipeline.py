"""End-to-end reporting run: evaluate, render, publish, comment."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TextIO

import httpx

from deployfeed.config import RunConfig
from deployfeed.ecs import EcsImageLookup
from deployfeed.github import GitHubClient, PullRequest
from deployfeed.orchestrator import ImageLookup, collect_report
from deployfeed.outputs import canonical_dumps, set_output, validate_payload
from deployfeed.reporting import render, report_to_payload
from deployfeed.types import Report

logger = logging.getLogger(__name__)

IMAGES_OUTPUT = "images"


@dataclass
class RunResult:
    """Everything a reporting run produced."""

    report: Report
    body: str
    payload: list[dict[str, Any]]
    pull_requests: list[PullRequest] = field(default_factory=list)
    comments_posted: int = 0


async def run_report(
    config: RunConfig,
    *,
    lookup: ImageLookup | None = None,
    github: GitHubClient | None = None,
    now: datetime | None = None,
    output_path: Path | None = None,
    output_stream: TextIO | None = None,
) -> RunResult:
    """Run one deployment status report.

    Args:
        config: Validated run configuration
        lookup: Image lookup used per environment (defaults to ECS)
        github: Client used for pull request comments; created from the
            configured token when omitted
        now: Timestamp printed in the summary footer
        output_path: File receiving the ``images`` output
        output_stream: Fallback stream when no output file is configured

    Returns:
        RunResult with the report, rendered body and serialized payload
    """
    image_lookup = lookup or EcsImageLookup(region=config.region)
    report = await collect_report(
        release_version=config.release_version,
        repo_name=config.repo_name,
        cluster_name=config.cluster_name,
        service_name=config.service_name,
        credentials=config.credentials,
        lookup=image_lookup,
    )

    body = render(report, config.release_version, now or datetime.now(UTC))
    logger.info("Comment: %s", body)

    result = RunResult(report=report, body=body, payload=report_to_payload(report))

    validate_payload(result.payload)
    set_output(
        IMAGES_OUTPUT,
        canonical_dumps(result.payload),
        output_path=output_path,
        stream=output_stream,
    )

    if config.can_comment or github is not None:
        await _comment_on_pull_requests(config, result, github)
    else:
        logger.info("No token or sha supplied; skipping pull request comments")
    return result


async def _comment_on_pull_requests(
    config: RunConfig,
    result: RunResult,
    github: GitHubClient | None,
) -> None:
    owned = github is None
    client = github or GitHubClient(config.token or "")
    try:
        try:
            pulls = await client.find_open_pull_requests(
                config.owner,
                config.repo_name,
                config.sha or "",
                base_branch=config.base_branch,
            )
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Could not list pull requests for %s: %s", config.sha, exc)
            return

        result.pull_requests = pulls
        posted = await asyncio.gather(
            *(
                client.create_comment(config.owner, config.repo_name, pr.number, result.body)
                for pr in pulls
            )
        )
        result.comments_posted = sum(1 for ok in posted if ok)
    finally:
        if owned:
            await client.aclose()
