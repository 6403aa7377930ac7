"""Summary rendering and serialization for deployment reports."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from deployfeed.types import GateResult, LookupFailure, Report, ReportEntry

UPDATED_GLYPH = "✅"
NOT_UPDATED_GLYPH = "❌"
FAILED_GLYPH = "⚠️"


def render_entry(entry: ReportEntry) -> str:
    if isinstance(entry, LookupFailure):
        return f"{FAILED_GLYPH} **{entry.environment.value}** current image could not be determined: {entry.error}"
    if entry.will_be_replaced:
        return f"{UPDATED_GLYPH} **{entry.environment.value}** will be updated, currently running {entry.current_tag}"
    return f"{NOT_UPDATED_GLYPH} **{entry.environment.value}** will not be updated, currently running {entry.current_tag}"


def render(report: Report, release_version: str, timestamp: datetime) -> str:
    """Render the pull request comment body for a report."""
    lines = [
        f"Continuous Deployment Summary for **v{release_version}**:",
        "",
        *(render_entry(entry) for entry in report.entries),
        "",
        f"_Information valid as of {format_timestamp(timestamp)}_",
    ]
    return "\n".join(lines)


def report_to_payload(report: Report) -> list[dict[str, Any]]:
    """Convert a report to the JSON payload exposed as the ``images`` output."""
    payload: list[dict[str, Any]] = []
    for entry in report.entries:
        if isinstance(entry, GateResult):
            payload.append(
                {
                    "env": entry.environment.value,
                    "currentImageTag": entry.current_tag,
                    "releaseVersion": entry.release_version,
                    "willBeReplaced": entry.will_be_replaced,
                }
            )
        else:
            payload.append({"env": entry.environment.value, "error": entry.error})
    return payload


def format_timestamp(timestamp: datetime) -> str:
    """Format as UTC ISO-8601 with millisecond precision. Naive values are taken as UTC."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(UTC)
    return timestamp.strftime("%Y-%m-%dT%H:%M:%S.") + f"{timestamp.microsecond // 1000:03d}Z"
