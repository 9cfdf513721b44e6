"""Webhook notifications about pull request lifecycle events."""

import asyncio
import logging
from collections.abc import Mapping

import aiohttp

from workato.launcher.config import LauncherConfig
from workato.launcher.errors import RemoteCallFailed
from workato.launcher.pr_metadata import PullRequestContext
from workato.launcher.projects import ProjectResolver

logger = logging.getLogger(__name__)

BUILD_FAILED = "pr_build_failed"
BUILD_SUCCEEDED = "pr_build_succeeded"
PR_MERGED = "pr_merged"
DEPLOYMENT_SUCCEEDED = "deployment_succeeded"
REVIEWER_ASSIGNED = "reviewer_assigned"
PR_APPROVED = "pr_approved"


def normalize_pr_url(url: str) -> str:
    """Turn a pull request API URL into its web URL.

    Idempotent: web URLs pass through unchanged.
    """
    return (
        url.replace("api.github.com", "github.com")
        .replace("/repos/", "/")
        .replace("/pulls/", "/pull/")
    )


class Notifier:
    """Posts events enriched with pull request context to a webhook."""

    def __init__(
        self,
        config: LauncherConfig,
        resolver: ProjectResolver,
        context: PullRequestContext,
    ) -> None:
        """Initialize notifier with configuration, resolver and PR context."""
        self.config = config
        self.resolver = resolver
        self.context = context
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)
        self._fields: dict[str, object] | None = None
        self._notifying = False
        self._failure_notified = False

    async def context_fields(self) -> dict[str, object]:
        """Return the fixed fields attached to every event, resolving once."""
        if self._fields is None:
            pull_request = self.context.pull_request
            project_name = await self.resolver.project_name(self.context.build_id)
            self._fields = {
                "pr_url": normalize_pr_url(pull_request.url),
                "folder_id": self.context.folder_id,
                "build_id": self.context.build_id,
                "project_name": project_name,
                "pr_title": pull_request.title,
            }
        return self._fields

    async def build_payload(
        self, event: str, extra: Mapping[str, object] | None = None
    ) -> dict[str, object]:
        """Merge extra fields with the event tag and fixed context fields.

        Fixed context fields overwrite extra fields with the same name.
        """
        payload: dict[str, object] = dict(extra or {})
        payload["event"] = event
        payload.update(await self.context_fields())
        return payload

    async def notify(
        self, event: str, extra: Mapping[str, object] | None = None
    ) -> None:
        """Send an event to the webhook.

        Raises:
            RemoteCallFailed: If the webhook or context lookup fails

        """
        if not self.config.webhook_url:
            logger.warning(f"No webhook configured, skipping '{event}' notification")
            return

        self._notifying = True
        try:
            payload = await self.build_payload(event, extra)
            await self._deliver(self.config.webhook_url, payload)
        finally:
            self._notifying = False

        logger.info(f"Sent '{event}' notification")

    async def notify_failure(self, error: RemoteCallFailed) -> None:
        """Report a failed platform call once; never recurses into itself."""
        if self._notifying or self._failure_notified:
            logger.error(f"Not notifying about failure: {error}")
            return

        self._failure_notified = True
        await self.notify(BUILD_FAILED, {"error": error.body, "status": error.status})

    async def _deliver(self, url: str, payload: Mapping[str, object]) -> None:
        headers = {"Content-Type": "application/json"}
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.post(
                    url, headers=headers, json=payload
                ) as response:
                    if 200 <= response.status < 300:
                        return
                    text = await response.text()
                    status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RemoteCallFailed("POST", url, None, str(e) or type(e).__name__) from e

        raise RemoteCallFailed("POST", url, status, text)
