"""CLI entry point for the Workato launcher."""

import asyncio
import json
import logging
import os
import sys
from collections.abc import Callable, Coroutine
from typing import Any

import typer
from pydantic import ValidationError

from workato.launcher.client import PlatformClient
from workato.launcher.config import Environment, LauncherConfig
from workato.launcher.deployment import DeploymentOrchestrator
from workato.launcher.errors import (
    InputValidationError,
    LauncherError,
    PollingTimeout,
    ProjectMatchError,
)
from workato.launcher.launch_input import LaunchInput, parse_launch_input
from workato.launcher.notifier import (
    BUILD_FAILED,
    DEPLOYMENT_SUCCEEDED,
    PR_APPROVED,
    PR_MERGED,
    REVIEWER_ASSIGNED,
    Notifier,
)
from workato.launcher.pr_metadata import PullRequestContext
from workato.launcher.projects import ProjectResolver
from workato.launcher.reporting import red, run_summary
from workato.launcher.test_run import TestRunOrchestrator

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
    force=True,
)
logger = logging.getLogger(__name__)

app = typer.Typer()


class PullRequestCommand:
    """Wires the components a pull request command needs.

    The client reports failed calls through the notifier, once.
    """

    def __init__(self, config: LauncherConfig) -> None:
        """Extract PR identifiers before any remote call is made."""
        self.config = config
        self.context = PullRequestContext(config.pull_request)
        self.client = PlatformClient(config)
        self.resolver = ProjectResolver(self.client)
        self.notifier = Notifier(config, self.resolver, self.context)
        self.client.on_failure = self.notifier.notify_failure

    def require_webhook(self) -> None:
        """Fail validation when no webhook is configured."""
        if not self.config.webhook_url:
            raise InputValidationError("WEBHOOK_URL is required")

    async def test_package(self, json_output: bool) -> bool:
        """Deploy the PR's build to test and run the project's test cases."""
        deployer = DeploymentOrchestrator(self.client, self.config)
        try:
            deployment = await deployer.deploy(self.context.build_id, "test")
            if not deployment.succeeded:
                await self.notifier.notify(
                    BUILD_FAILED, {"stage": "deployment", "state": deployment.state}
                )
                return False

            project_id = await self.resolver.target_project_id(
                self.context.build_id, Environment.TEST
            )
            runner = TestRunOrchestrator(self.client, self.config, self.notifier)
            outcome = await runner.run_tests(project_id)
        except (PollingTimeout, ProjectMatchError) as e:
            await self.notifier.notify(BUILD_FAILED, {"reason": str(e)})
            raise

        if json_output:
            typer.echo(json.dumps(run_summary(self.config.host, outcome), indent=2))
        return outcome.succeeded

    async def deploy_to_production(self, json_output: bool) -> bool:
        """Deploy a merged PR's build to production with its release notes."""
        await self.notifier.notify(PR_MERGED)

        deployer = DeploymentOrchestrator(self.client, self.config)
        try:
            outcome = await deployer.deploy(
                self.context.build_id, "prod", self.context.release_notes
            )
        except PollingTimeout as e:
            await self.notifier.notify(BUILD_FAILED, {"reason": str(e)})
            raise

        if outcome.succeeded:
            await self.notifier.notify(
                DEPLOYMENT_SUCCEEDED, {"deployment_id": outcome.deployment_id}
            )
        else:
            await self.notifier.notify(
                BUILD_FAILED, {"stage": "deployment", "state": outcome.state}
            )
        return outcome.succeeded

    async def notify_review_requested(self, json_output: bool) -> bool:
        """Tell the webhook a reviewer was assigned."""
        self.require_webhook()
        await self.notifier.notify(REVIEWER_ASSIGNED, self._people())
        return True

    async def notify_pr_approved(self, json_output: bool) -> bool:
        """Tell the webhook the PR was approved."""
        self.require_webhook()
        await self.notifier.notify(PR_APPROVED, self._people())
        return True

    def _people(self) -> dict[str, object]:
        pull_request = self.config.pull_request
        return {"author": pull_request.author, "reviewer": pull_request.reviewer}


def read_launch_input() -> LaunchInput:
    """Scrape identifiers from standard input."""
    return parse_launch_input(sys.stdin)


def run_test(config: LauncherConfig, json_output: bool) -> bool:
    """Run the test cases of the project named on standard input."""
    launch_input = read_launch_input()
    if launch_input.project_id is None or launch_input.project_build_id is None:
        raise InputValidationError("project_id and project_build_id are required")

    runner = TestRunOrchestrator(PlatformClient(config), config)
    outcome = asyncio.run(runner.run_tests(launch_input.project_id))

    if json_output:
        typer.echo(json.dumps(run_summary(config.host, outcome), indent=2))
    return outcome.succeeded


def run_deploy(config: LauncherConfig, json_output: bool) -> bool:
    """Deploy the build named on standard input to production."""
    build_id = read_launch_input().require_project_build_id()
    deployer = DeploymentOrchestrator(PlatformClient(config), config)
    outcome = asyncio.run(deployer.deploy(build_id, "prod"))
    return outcome.succeeded


def _pull_request_handler(
    method: Callable[[PullRequestCommand, bool], Coroutine[Any, Any, bool]],
) -> Callable[[LauncherConfig, bool], bool]:
    def handler(config: LauncherConfig, json_output: bool) -> bool:
        command = PullRequestCommand(config)
        return asyncio.run(method(command, json_output))

    return handler


COMMANDS: dict[str, Callable[[LauncherConfig, bool], bool]] = {
    "test": run_test,
    "deploy": run_deploy,
    "test_package": _pull_request_handler(PullRequestCommand.test_package),
    "deploy_to_production": _pull_request_handler(
        PullRequestCommand.deploy_to_production
    ),
    "notify_review_requested": _pull_request_handler(
        PullRequestCommand.notify_review_requested
    ),
    "notify_pr_approved": _pull_request_handler(
        PullRequestCommand.notify_pr_approved
    ),
}


@app.command()
def main(
    command: str = typer.Argument(..., help="Command to run"),
    json_output: bool = typer.Option(
        False, "--json", help="Print a JSON summary of test results"
    ),
) -> None:
    """Deploy builds and run test cases on the automation platform."""
    handler = COMMANDS.get(command)
    if handler is None:
        supported = ", ".join(f"'{name}'" for name in COMMANDS)
        typer.echo(red(f"Incorrect command. {supported} are supported"))
        raise typer.Exit(code=1)

    try:
        config = LauncherConfig.from_env(os.environ)
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        typer.echo(red(f"Invalid configuration: {e}"))
        raise typer.Exit(code=1)

    logger.info(f"Running '{command}' against {config.host}")

    try:
        succeeded = handler(config, json_output)
    except InputValidationError as e:
        typer.echo(red(f"Incorrect input: {e}"))
        raise typer.Exit(code=1)
    except LauncherError as e:
        logger.error(f"'{command}' failed: {type(e).__name__}: {e}")
        typer.echo(red(f"Error: {e}"))
        raise typer.Exit(code=1)
    except Exception as e:
        logger.exception(f"'{command}' failed unexpectedly")
        typer.echo(red(f"Error: {e}"))
        raise typer.Exit(code=1)

    if not succeeded:
        logger.error(f"'{command}' finished unsuccessfully")
        raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover
    app()
