"""Launcher configuration loaded once from the environment."""

from collections.abc import Mapping
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from workato.launcher.models.pull_request import PullRequest

DEFAULT_DATA_CENTER = "preview"


class Environment(str, Enum):
    """Platform environment a request is authenticated against."""

    DEV = "dev"
    TEST = "test"


class LauncherConfig(BaseModel):
    """Immutable process-wide settings shared by every component."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(..., description="Platform base URL")
    dev_token: str = Field(default="", description="Dev environment API token")
    test_token: str = Field(default="", description="Test environment API token")
    webhook_url: str | None = Field(
        default=None, description="Webhook receiving lifecycle notifications"
    )
    pull_request: PullRequest = Field(
        default_factory=PullRequest, description="Pull request metadata"
    )
    poll_attempts: int = Field(default=100, ge=1, description="Polling budget")
    poll_delay: float = Field(
        default=5.0, ge=0, description="Seconds between polling attempts"
    )
    request_timeout: float = Field(
        default=60.0, gt=0, description="Per-request timeout in seconds"
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "LauncherConfig":
        """Build configuration from environment variables."""
        data_center = environ.get("WORKATO_DC") or DEFAULT_DATA_CENTER
        fallback_token = environ.get("WORKATO_AUTH_TOKEN", "")

        settings: dict[str, object] = {
            "host": f"https://{data_center}.workato.com",
            "dev_token": environ.get("WORKATO_DEV_ENV_AUTH_TOKEN") or fallback_token,
            "test_token": environ.get("WORKATO_TEST_ENV_AUTH_TOKEN")
            or fallback_token,
            "webhook_url": environ.get("WEBHOOK_URL") or None,
            "pull_request": PullRequest(
                title=environ.get("PR_TITLE", ""),
                body=environ.get("PR_BODY", ""),
                url=environ.get("PR_URL", ""),
                author=environ.get("PR_AUTHOR", ""),
                reviewer=environ.get("PR_REVIEWER", ""),
            ),
        }

        overrides = {
            "poll_attempts": "LAUNCHER_POLL_ATTEMPTS",
            "poll_delay": "LAUNCHER_POLL_DELAY",
            "request_timeout": "LAUNCHER_REQUEST_TIMEOUT",
        }
        for field_name, variable in overrides.items():
            if environ.get(variable):
                settings[field_name] = environ[variable]

        return cls.model_validate(settings)

    def token_for(self, environment: Environment) -> str:
        """Return the bearer token for an environment."""
        if environment is Environment.DEV:
            return self.dev_token
        if environment is Environment.TEST:
            return self.test_token
        raise ValueError(f"Invalid environment: {environment}")
