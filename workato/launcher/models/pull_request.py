"""Model for pull request metadata supplied through the environment."""

from pydantic import BaseModel, ConfigDict, Field


class PullRequest(BaseModel):
    """Pull request the launcher is acting on behalf of."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(default="", description="Pull request title")
    body: str = Field(default="", description="Pull request body")
    url: str = Field(default="", description="Pull request API or web URL")
    author: str = Field(default="", description="Pull request author")
    reviewer: str = Field(default="", description="Requested reviewer")
