"""Run output propagation for CI runners."""

from __future__ import annotations

import json
import os
import uuid
from importlib.resources import files
from pathlib import Path
from typing import Any, TextIO

from jsonschema.validators import Draft202012Validator

REPORT_SCHEMA = "report"
GITHUB_OUTPUT_ENV = "GITHUB_OUTPUT"


def canonical_dumps(obj: Any) -> str:
    """Serialize a JSON-compatible object on a single line with stable formatting."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def load_schema(schema_name: str) -> dict[str, Any]:
    """Load a packaged JSON schema by canonical name."""
    resource = files("deployfeed.schemas") / f"{schema_name}.schema.json"
    try:
        return json.loads(resource.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise KeyError(f"Schema `{schema_name}` is not packaged with deployfeed") from exc


def validate_payload(data: Any, schema_name: str = REPORT_SCHEMA) -> None:
    """Validate data against a packaged schema.

    Raises:
        ValueError: If validation fails
    """
    validator = Draft202012Validator(load_schema(schema_name))
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        messages = [
            f"{'.'.join(str(p) for p in e.path)}: {e.message}" if e.path else e.message
            for e in errors
        ]
        raise ValueError(
            f"Schema validation failed for '{schema_name}':\n"
            + "\n".join(f"  - {msg}" for msg in messages)
        )


def set_output(
    name: str,
    value: str,
    *,
    output_path: Path | None = None,
    stream: TextIO | None = None,
) -> None:
    """Expose a step output.

    Appends to the file named by ``$GITHUB_OUTPUT`` when available; otherwise
    writes ``name=value`` to ``stream``.
    """
    if output_path is None:
        env_path = os.environ.get(GITHUB_OUTPUT_ENV)
        output_path = Path(env_path) if env_path else None

    if output_path is None:
        if stream is not None:
            stream.write(f"{name}={value}\n")
        return

    with output_path.open("a", encoding="utf-8") as handle:
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            handle.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            handle.write(f"{name}={value}\n")
