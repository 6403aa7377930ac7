"""deployfeed - continuous deployment status reporter."""

from deployfeed.gate import evaluate
from deployfeed.orchestrator import collect_report
from deployfeed.policy import Environment, policy_for
from deployfeed.reporting import render, report_to_payload
from deployfeed.tags import normalize

__version__ = "0.1.0"

__all__ = [
    "Environment",
    "__version__",
    "collect_report",
    "evaluate",
    "normalize",
    "policy_for",
    "render",
    "report_to_payload",
]
