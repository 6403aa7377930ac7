"""Pytest configuration and fixtures for deployfeed tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping

import pytest

from deployfeed.policy import Environment
from deployfeed.types import CurrentImage, EnvironmentCredentials


class FakeImageLookup:
    """Async image lookup returning canned tags per environment.

    Values in ``tags`` may be an exception instance, which is raised instead.
    ``delays`` holds per-environment sleeps used to scramble completion order.
    """

    def __init__(
        self,
        tags: Mapping[Environment, str | Exception],
        delays: Mapping[Environment, float] | None = None,
        repo: str = "acme/api",
    ) -> None:
        self.tags = dict(tags)
        self.delays = dict(delays or {})
        self.repo = repo
        self.calls: list[tuple[Environment, str, str, str]] = []
        self.completed: list[Environment] = []

    async def __call__(
        self,
        environment: Environment,
        credentials: EnvironmentCredentials,
        repo_name: str,
        cluster: str,
        service: str,
    ) -> CurrentImage:
        self.calls.append((environment, repo_name, cluster, service))
        await asyncio.sleep(self.delays.get(environment, 0))
        self.completed.append(environment)
        value = self.tags[environment]
        if isinstance(value, Exception):
            raise value
        return CurrentImage(image=f"123.dkr.ecr.eu-north-1.amazonaws.com/{self.repo}:{value}", tag=value)


@pytest.fixture
def all_credentials() -> dict[Environment, EnvironmentCredentials]:
    return {
        Environment.DEV: EnvironmentCredentials("dev-key", "dev-secret"),
        Environment.SANDBOX: EnvironmentCredentials("sandbox-key", "sandbox-secret"),
        Environment.PRODUCTION: EnvironmentCredentials("production-key", "production-secret"),
    }


@pytest.fixture
def fake_lookup() -> Callable[..., FakeImageLookup]:
    return FakeImageLookup
