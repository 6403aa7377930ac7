"""Unit tests for release version and tag helpers."""

from __future__ import annotations

from deployfeed.tags import extract_tag, normalize


def test_normalize_prerelease_becomes_build() -> None:
    assert normalize("1.2.3-rc1") == "1.2.3+rc1"


def test_normalize_replaces_only_first_dash() -> None:
    assert normalize("1.2.3-rc-1") == "1.2.3+rc-1"


def test_normalize_without_dash_is_identity() -> None:
    assert normalize("1.2.3") == "1.2.3"
    assert normalize(normalize("1.2.3")) == "1.2.3"
    assert normalize("") == ""


def test_extract_tag() -> None:
    assert extract_tag("123.dkr.ecr.eu-north-1.amazonaws.com/acme/api:2.4.1") == "2.4.1"
    assert extract_tag("acme/api:latest-abc") == "latest-abc"


def test_extract_tag_without_separator() -> None:
    assert extract_tag("acme/api") == ""


def test_extract_tag_uses_segment_after_first_colon() -> None:
    assert extract_tag("registry:5000/acme/api:1.0.0") == "5000/acme/api"
