"""Release version and image tag helpers."""

from __future__ import annotations


def normalize(candidate_version: str) -> str:
    """Rewrite the first prerelease separator as build metadata.

    Registry tags cannot contain ``+``, so builds are published with ``-``.
    Range checks treat prereleases as below their base version but ignore
    build metadata, so ``1.2.3-rc1`` is compared as ``1.2.3+rc1``.
    """
    return candidate_version.replace("-", "+", 1)


def extract_tag(image_reference: str) -> str:
    """Return the part of an image reference after the first ``:``."""
    _, separator, tag = image_reference.partition(":")
    if not separator:
        return ""
    return tag.split(":", 1)[0]
