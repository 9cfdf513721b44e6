"""Data models for platform payloads, pull requests and outcomes."""

from workato.launcher.models.deployment import Deployment, DeploymentOutcome
from workato.launcher.models.project import Project, ProjectBuild
from workato.launcher.models.pull_request import PullRequest
from workato.launcher.models.test_run import (
    JobRef,
    RecipeRef,
    RunRequest,
    TestCaseRef,
    TestCaseResult,
    TestRunOutcome,
    partition_results,
)

__all__ = [
    "Deployment",
    "DeploymentOutcome",
    "JobRef",
    "Project",
    "ProjectBuild",
    "PullRequest",
    "RecipeRef",
    "RunRequest",
    "TestCaseRef",
    "TestCaseResult",
    "TestRunOutcome",
    "partition_results",
]
