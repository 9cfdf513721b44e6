"""Authenticated JSON client for the automation platform REST API."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import aiohttp

from workato.launcher.config import Environment, LauncherConfig
from workato.launcher.errors import LauncherError, RemoteCallFailed

logger = logging.getLogger(__name__)

FailureHook = Callable[[RemoteCallFailed], Awaitable[None]]


class PlatformClient:
    """Issues GET and POST calls and accepts only HTTP 200 responses."""

    def __init__(
        self, config: LauncherConfig, on_failure: FailureHook | None = None
    ) -> None:
        """Initialize client with configuration and optional failure hook."""
        self.config = config
        self.on_failure = on_failure
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def headers(self, environment: Environment) -> dict[str, str]:
        """Build request headers for an environment."""
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.token_for(environment)}",
        }

    async def get(
        self,
        path: str,
        environment: Environment,
        params: Mapping[str, str] | None = None,
    ) -> Any:
        """GET a resource and return its parsed JSON body."""
        return await self.request("GET", path, environment, params=params)

    async def post(
        self,
        path: str,
        environment: Environment,
        json: Mapping[str, object] | None = None,
        params: Mapping[str, str] | None = None,
    ) -> Any:
        """POST to a resource and return its parsed JSON body."""
        return await self.request("POST", path, environment, json=json, params=params)

    async def request(
        self,
        method: str,
        path: str,
        environment: Environment,
        json: Mapping[str, object] | None = None,
        params: Mapping[str, str] | None = None,
    ) -> Any:
        """Perform a call and return its parsed JSON body.

        Raises:
            RemoteCallFailed: If the call fails or the response status is not 200

        """
        url = f"{self.config.host}{path}"
        logger.debug(f"{method} {url} ({environment.value})")

        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.request(
                    method,
                    url,
                    headers=self.headers(environment),
                    json=json,
                    params=params,
                ) as response:
                    if response.status == 200:
                        return await response.json(content_type=None)

                    text = await response.text()
                    error = RemoteCallFailed(method, url, response.status, text)
                    logger.error(f"Response to {url} failed: {response.status}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            error = RemoteCallFailed(method, url, None, str(e) or type(e).__name__)
            error.__cause__ = e
            logger.error(f"Request to {url} failed: {error.body}")

        await self._report_failure(error)
        raise error

    async def _report_failure(self, error: RemoteCallFailed) -> None:
        if self.on_failure is None:
            return
        try:
            await self.on_failure(error)
        except LauncherError:
            logger.exception(f"Failure hook raised while reporting: {error}")
