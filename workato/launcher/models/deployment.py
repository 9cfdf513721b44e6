"""Models for project build deployments."""

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

SUCCESS = "success"
FAILED = "failed"
TERMINAL_STATES = frozenset({SUCCESS, FAILED})


class Deployment(BaseModel):
    """Deployment as reported by the platform.

    Unknown fields are kept so the full detail payload can be reported
    when a deployment fails.
    """

    model_config = ConfigDict(extra="allow")

    id: int | str = Field(..., description="Deployment identifier")
    state: str | None = Field(default=None, description="Deployment state")

    @property
    def is_terminal(self) -> bool:
        """Check whether the deployment reached a final state."""
        return self.state in TERMINAL_STATES

    @property
    def succeeded(self) -> bool:
        """Check whether the deployment reached the success state."""
        return self.state == SUCCESS


class DeploymentOutcome(BaseModel):
    """Result of waiting for a deployment."""

    deployment_id: int | str = Field(..., description="Deployment identifier")
    environment_type: str = Field(..., description="Target environment type")
    state: str | None = Field(default=None, description="Final deployment state")
    details: Mapping[str, object] = Field(
        default_factory=dict, description="Raw deployment payload"
    )

    @property
    def succeeded(self) -> bool:
        """Check whether the deployment succeeded."""
        return self.state == SUCCESS
