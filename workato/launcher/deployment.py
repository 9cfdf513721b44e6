"""Deploy a project build and wait for the deployment to finish."""

import logging

import typer

from workato.launcher.client import PlatformClient
from workato.launcher.config import Environment, LauncherConfig
from workato.launcher.models.deployment import Deployment, DeploymentOutcome
from workato.launcher.poller import wait_until_complete
from workato.launcher.reporting import report_deployment

logger = logging.getLogger(__name__)


class DeploymentOrchestrator:
    """Launches deployments with the origin environment's credentials."""

    def __init__(
        self,
        client: PlatformClient,
        config: LauncherConfig,
        environment: Environment = Environment.DEV,
    ) -> None:
        """Initialize orchestrator with a client and polling configuration."""
        self.client = client
        self.config = config
        self.environment = environment

    async def launch(
        self, build_id: int, environment_type: str, description: str | None = None
    ) -> int | str:
        """Launch a deployment and return its id."""
        body = {"description": description} if description else None
        data = await self.client.post(
            f"/api/project_builds/{build_id}/deploy",
            self.environment,
            json=body,
            params={"environment_type": environment_type},
        )
        return Deployment.model_validate(data).id

    async def fetch(self, deployment_id: int | str) -> Deployment:
        """Fetch the current state of a deployment."""
        data = await self.client.get(
            f"/api/deployments/{deployment_id}", self.environment
        )
        return Deployment.model_validate(data)

    async def deploy(
        self, build_id: int, environment_type: str, description: str | None = None
    ) -> DeploymentOutcome:
        """Deploy a build and report whether it succeeded.

        Args:
            build_id: Project build to deploy
            environment_type: Target environment type (e.g., "test", "prod")
            description: Optional human-readable deployment description

        Returns:
            Outcome carrying the final state and raw details

        Raises:
            RemoteCallFailed: If any platform call fails
            PollingTimeout: If the deployment never reaches a final state

        """
        logger.info(f"Deploying build {build_id} to {environment_type}")
        deployment_id = await self.launch(build_id, environment_type, description)
        logger.info(f"Deployment launched with id: {deployment_id}")

        async def check() -> Deployment | None:
            deployment = await self.fetch(deployment_id)
            if deployment.is_terminal:
                return deployment
            typer.echo("Deployment is in progress...")
            return None

        deployment = await wait_until_complete(
            check, self.config.poll_attempts, self.config.poll_delay
        )

        outcome = DeploymentOutcome(
            deployment_id=deployment_id,
            environment_type=environment_type,
            state=deployment.state,
            details=deployment.model_dump(),
        )
        logger.info(f"Deployment {deployment_id} finished: {outcome.state}")
        report_deployment(outcome.succeeded, outcome.details)
        return outcome
