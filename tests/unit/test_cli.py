"""Tests for CLI entry point."""

from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from workato.launcher.cli import app
from workato.launcher.errors import (
    AmbiguousProjectMatch,
    PollingTimeout,
    RemoteCallFailed,
)
from workato.launcher.models.deployment import DeploymentOutcome
from workato.launcher.models.test_run import TestCaseResult, TestRunOutcome

runner = CliRunner()

BASE_ENV = {
    "WORKATO_DC": "preview",
    "WORKATO_DEV_ENV_AUTH_TOKEN": "dev-token",
    "WORKATO_TEST_ENV_AUTH_TOKEN": "test-token",
    "WEBHOOK_URL": "https://hooks.example.com/pr",
    "PR_TITLE": "release : Account sync",
    "PR_BODY": "project_build_id=42 fid=8",
    "PR_URL": "https://api.github.com/repos/acme/recipes/pulls/17",
    "PR_AUTHOR": "alice",
    "PR_REVIEWER": "bob",
    "LAUNCHER_POLL_DELAY": "0",
}


def make_outcome(*statuses: str) -> TestRunOutcome:
    """Build a test run outcome with one result per status."""
    return TestRunOutcome(
        run_request_id=55,
        coverage=80,
        results=[
            TestCaseResult.model_validate(
                {
                    "recipe": {"id": 1, "name": "Sync"},
                    "job": {"id": 2},
                    "test_case": {"name": f"case {i}"},
                    "status": status,
                }
            )
            for i, status in enumerate(statuses)
        ],
    )


def make_deployment(state: str) -> DeploymentOutcome:
    """Build a deployment outcome."""
    return DeploymentOutcome(deployment_id=7, environment_type="prod", state=state)


def test_unknown_command() -> None:
    """An unknown command prints usage and exits 1."""
    result = runner.invoke(app, ["launch"], env=BASE_ENV)

    assert result.exit_code == 1
    assert "Incorrect command" in result.stdout
    assert "'test_package'" in result.stdout


def test_test_command_success() -> None:
    """test runs the project from stdin and exits 0 when tests pass."""
    mock_orchestrator = AsyncMock()
    mock_orchestrator.run_tests = AsyncMock(return_value=make_outcome("succeeded"))

    with patch(
        "workato.launcher.cli.TestRunOrchestrator", return_value=mock_orchestrator
    ):
        result = runner.invoke(
            app,
            ["test"],
            input="project_id: 12\nproject_build_id: 34\n",
            env=BASE_ENV,
        )

    assert result.exit_code == 0
    mock_orchestrator.run_tests.assert_awaited_once_with(12)


def test_test_command_failure() -> None:
    """test exits 1 when any test case fails."""
    mock_orchestrator = AsyncMock()
    mock_orchestrator.run_tests = AsyncMock(
        return_value=make_outcome("succeeded", "failed")
    )

    with patch(
        "workato.launcher.cli.TestRunOrchestrator", return_value=mock_orchestrator
    ):
        result = runner.invoke(
            app,
            ["test"],
            input="project_id: 12\nproject_build_id: 34\n",
            env=BASE_ENV,
        )

    assert result.exit_code == 1


def test_test_command_json_summary() -> None:
    """test prints a JSON summary with --json."""
    mock_orchestrator = AsyncMock()
    mock_orchestrator.run_tests = AsyncMock(return_value=make_outcome("succeeded"))

    with patch(
        "workato.launcher.cli.TestRunOrchestrator", return_value=mock_orchestrator
    ):
        result = runner.invoke(
            app,
            ["test", "--json"],
            input="project_id: 12\nproject_build_id: 34\n",
            env=BASE_ENV,
        )

    assert result.exit_code == 0
    assert '"passed": 1' in result.stdout
    assert '"coverage": 80' in result.stdout


@pytest.mark.parametrize(
    "stdin", ["", "project_id: 12\n", "project_build_id: 34\n"]
)
def test_test_command_requires_both_ids(stdin: str) -> None:
    """test exits 1 without remote calls when an identifier is missing."""
    with patch("workato.launcher.cli.TestRunOrchestrator") as mock_class:
        result = runner.invoke(app, ["test"], input=stdin, env=BASE_ENV)

    assert result.exit_code == 1
    assert "project_id and project_build_id are required" in result.stdout
    mock_class.assert_not_called()


def test_deploy_command_success() -> None:
    """deploy deploys the build from stdin to production."""
    mock_orchestrator = AsyncMock()
    mock_orchestrator.deploy = AsyncMock(return_value=make_deployment("success"))

    with patch(
        "workato.launcher.cli.DeploymentOrchestrator", return_value=mock_orchestrator
    ):
        result = runner.invoke(
            app, ["deploy"], input="project_build_id: 34\n", env=BASE_ENV
        )

    assert result.exit_code == 0
    mock_orchestrator.deploy.assert_awaited_once_with(34, "prod")


def test_deploy_command_failure() -> None:
    """deploy exits 1 when the deployment fails."""
    mock_orchestrator = AsyncMock()
    mock_orchestrator.deploy = AsyncMock(return_value=make_deployment("failed"))

    with patch(
        "workato.launcher.cli.DeploymentOrchestrator", return_value=mock_orchestrator
    ):
        result = runner.invoke(
            app, ["deploy"], input="project_build_id: 34\n", env=BASE_ENV
        )

    assert result.exit_code == 1


def test_deploy_command_requires_build_id() -> None:
    """deploy exits 1 when project_build_id is missing."""
    result = runner.invoke(app, ["deploy"], input="project_id: 1\n", env=BASE_ENV)

    assert result.exit_code == 1
    assert "project_build_id is required" in result.stdout


def test_deploy_command_remote_failure() -> None:
    """Remote failures exit 1."""
    mock_orchestrator = AsyncMock()
    mock_orchestrator.deploy = AsyncMock(
        side_effect=RemoteCallFailed("POST", "https://x", 500, "boom")
    )

    with patch(
        "workato.launcher.cli.DeploymentOrchestrator", return_value=mock_orchestrator
    ):
        result = runner.invoke(
            app, ["deploy"], input="project_build_id: 34\n", env=BASE_ENV
        )

    assert result.exit_code == 1
    assert "boom" in result.stdout


def test_invalid_configuration() -> None:
    """Invalid settings exit 1."""
    result = runner.invoke(
        app, ["deploy"], env={**BASE_ENV, "LAUNCHER_POLL_ATTEMPTS": "zero"}
    )

    assert result.exit_code == 1
    assert "Invalid configuration" in result.stdout


def test_test_package_missing_build_id() -> None:
    """test_package exits 1 without remote calls when the marker is absent."""
    with (
        patch("workato.launcher.cli.PlatformClient") as mock_client,
        patch("workato.launcher.cli.DeploymentOrchestrator") as mock_deployer,
    ):
        result = runner.invoke(
            app, ["test_package"], env={**BASE_ENV, "PR_BODY": "fid=8"}
        )

    assert result.exit_code == 1
    assert "project_build_id=" in result.stdout
    mock_client.assert_not_called()
    mock_deployer.assert_not_called()


def test_test_package_deployment_failure() -> None:
    """test_package notifies and exits 1 when the test deployment fails."""
    mock_deployer = AsyncMock()
    mock_deployer.deploy = AsyncMock(return_value=make_deployment("failed"))
    mock_notifier = AsyncMock()

    with (
        patch(
            "workato.launcher.cli.DeploymentOrchestrator", return_value=mock_deployer
        ),
        patch("workato.launcher.cli.Notifier", return_value=mock_notifier),
        patch("workato.launcher.cli.TestRunOrchestrator") as mock_runner,
    ):
        result = runner.invoke(app, ["test_package"], env=BASE_ENV)

    assert result.exit_code == 1
    mock_deployer.deploy.assert_awaited_once_with(42, "test")
    mock_notifier.notify.assert_awaited_once_with(
        "pr_build_failed", {"stage": "deployment", "state": "failed"}
    )
    mock_runner.assert_not_called()


def test_test_package_timeout_notifies() -> None:
    """test_package reports a polling timeout before exiting 1."""
    mock_deployer = AsyncMock()
    mock_deployer.deploy = AsyncMock(side_effect=PollingTimeout(100, 5.0))
    mock_notifier = AsyncMock()

    with (
        patch(
            "workato.launcher.cli.DeploymentOrchestrator", return_value=mock_deployer
        ),
        patch("workato.launcher.cli.Notifier", return_value=mock_notifier),
    ):
        result = runner.invoke(app, ["test_package"], env=BASE_ENV)

    assert result.exit_code == 1
    event, extra = mock_notifier.notify.await_args.args
    assert event == "pr_build_failed"
    assert "100 attempts" in extra["reason"]


def test_deploy_to_production_success() -> None:
    """deploy_to_production notifies merge and deployment success."""
    mock_deployer = AsyncMock()
    mock_deployer.deploy = AsyncMock(return_value=make_deployment("success"))
    mock_notifier = AsyncMock()

    with (
        patch(
            "workato.launcher.cli.DeploymentOrchestrator", return_value=mock_deployer
        ),
        patch("workato.launcher.cli.Notifier", return_value=mock_notifier),
    ):
        result = runner.invoke(app, ["deploy_to_production"], env=BASE_ENV)

    assert result.exit_code == 0
    mock_deployer.deploy.assert_awaited_once_with(
        42, "prod", "Account sync. project_build_id=42 fid=8"
    )
    events = [call.args[0] for call in mock_notifier.notify.await_args_list]
    assert events == ["pr_merged", "deployment_succeeded"]


def test_deploy_to_production_failure() -> None:
    """deploy_to_production notifies failure and exits 1."""
    mock_deployer = AsyncMock()
    mock_deployer.deploy = AsyncMock(return_value=make_deployment("failed"))
    mock_notifier = AsyncMock()

    with (
        patch(
            "workato.launcher.cli.DeploymentOrchestrator", return_value=mock_deployer
        ),
        patch("workato.launcher.cli.Notifier", return_value=mock_notifier),
    ):
        result = runner.invoke(app, ["deploy_to_production"], env=BASE_ENV)

    assert result.exit_code == 1
    events = [call.args[0] for call in mock_notifier.notify.await_args_list]
    assert events == ["pr_merged", "pr_build_failed"]


@pytest.mark.parametrize(
    ("command", "event"),
    [
        ("notify_review_requested", "reviewer_assigned"),
        ("notify_pr_approved", "pr_approved"),
    ],
)
def test_notify_commands(command: str, event: str) -> None:
    """Notification commands send their event with author and reviewer."""
    mock_notifier = AsyncMock()

    with patch("workato.launcher.cli.Notifier", return_value=mock_notifier):
        result = runner.invoke(app, [command], env=BASE_ENV)

    assert result.exit_code == 0
    mock_notifier.notify.assert_awaited_once_with(
        event, {"author": "alice", "reviewer": "bob"}
    )


def test_notify_commands_require_webhook() -> None:
    """Notification commands exit 1 without a webhook."""
    env = {**BASE_ENV, "WEBHOOK_URL": ""}

    with patch("workato.launcher.cli.Notifier") as mock_notifier_class:
        result = runner.invoke(app, ["notify_pr_approved"], env=env)

    assert result.exit_code == 1
    assert "WEBHOOK_URL is required" in result.stdout
    mock_notifier_class.return_value.notify.assert_not_called()


def test_deploy_command_unexpected_error() -> None:
    """Unexpected errors print a one-line message and exit 1."""
    mock_orchestrator = AsyncMock()
    mock_orchestrator.deploy = AsyncMock(side_effect=ValueError("bad payload"))

    with patch(
        "workato.launcher.cli.DeploymentOrchestrator", return_value=mock_orchestrator
    ):
        result = runner.invoke(
            app, ["deploy"], input="project_build_id: 34\n", env=BASE_ENV
        )

    assert result.exit_code == 1
    assert "Error: bad payload" in result.stdout
    assert not isinstance(result.exception, ValueError)


def test_test_package_project_match_notifies() -> None:
    """test_package reports an unresolvable target project before exiting 1."""
    mock_deployer = AsyncMock()
    mock_deployer.deploy = AsyncMock(return_value=make_deployment("success"))
    mock_resolver = AsyncMock()
    mock_resolver.target_project_id = AsyncMock(
        side_effect=AmbiguousProjectMatch("Accounts", [1, 2])
    )
    mock_notifier = AsyncMock()

    with (
        patch(
            "workato.launcher.cli.DeploymentOrchestrator", return_value=mock_deployer
        ),
        patch("workato.launcher.cli.ProjectResolver", return_value=mock_resolver),
        patch("workato.launcher.cli.Notifier", return_value=mock_notifier),
        patch("workato.launcher.cli.TestRunOrchestrator") as mock_runner,
    ):
        result = runner.invoke(app, ["test_package"], env=BASE_ENV)

    assert result.exit_code == 1
    event, extra = mock_notifier.notify.await_args.args
    assert event == "pr_build_failed"
    assert "Accounts" in extra["reason"]
    mock_runner.assert_not_called()
