"""Resolve the image currently deployed to an ECS service."""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Callable
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from deployfeed.errors import ImageLookupError
from deployfeed.policy import Environment
from deployfeed.tags import extract_tag
from deployfeed.types import CurrentImage, EnvironmentCredentials

logger = logging.getLogger(__name__)

DEFAULT_REGION = "eu-north-1"

EcsClientFactory = Callable[[EnvironmentCredentials, str], Any]


def make_ecs_client(credentials: EnvironmentCredentials, region: str) -> Any:
    """Create a boto3 ECS client scoped to one environment's keys."""
    return boto3.client(
        "ecs",
        region_name=region,
        aws_access_key_id=credentials.key,
        aws_secret_access_key=credentials.secret,
    )


class EcsImageLookup:
    """Image lookup backed by ECS service and task definition descriptions.

    Instances are awaitable callables matching the orchestrator's lookup
    signature. boto3 is blocking, so each lookup runs in a worker thread.
    """

    def __init__(
        self,
        region: str = DEFAULT_REGION,
        client_factory: EcsClientFactory = make_ecs_client,
    ) -> None:
        self.region = region
        self.client_factory = client_factory

    async def __call__(
        self,
        environment: Environment,
        credentials: EnvironmentCredentials,
        repo_name: str,
        cluster: str,
        service: str,
    ) -> CurrentImage:
        return await asyncio.to_thread(
            self.describe_current_image,
            environment,
            credentials,
            repo_name,
            cluster,
            service,
        )

    def describe_current_image(
        self,
        environment: Environment,
        credentials: EnvironmentCredentials,
        repo_name: str,
        cluster: str,
        service: str,
    ) -> CurrentImage:
        client = self.client_factory(credentials, self.region)
        logger.debug("Describing %s/%s for %s", cluster, service, environment.value)

        try:
            services = client.describe_services(cluster=cluster, services=[service])
            found = services.get("services") or []
            if not found:
                raise ImageLookupError(f"service `{service}` not found in cluster `{cluster}`")
            task_definition_arn = found[0]["taskDefinition"]

            described = client.describe_task_definition(taskDefinition=task_definition_arn)
        except (BotoCoreError, ClientError) as exc:
            raise ImageLookupError(f"ECS request failed for {cluster}/{service}: {exc}") from exc

        containers = described["taskDefinition"].get("containerDefinitions", [])
        pattern = re.compile(repo_name)
        for container in containers:
            image = str(container.get("image", ""))
            if pattern.search(image):
                return CurrentImage(image=image, tag=extract_tag(image))

        raise ImageLookupError(
            f"no container image matching `{repo_name}` in task definition {task_definition_arn}"
        )
