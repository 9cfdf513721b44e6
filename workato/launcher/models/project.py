"""Models for projects and project builds."""

from pydantic import BaseModel, Field


class Project(BaseModel):
    """Project within a single environment."""

    id: int = Field(..., description="Environment-local project identifier")
    name: str = Field(..., description="Project name")
    folder_id: int | None = Field(default=None, description="Project folder")


class ProjectBuild(BaseModel):
    """Build of a project in its origin environment."""

    id: int = Field(..., description="Project build identifier")
    project_id: int = Field(..., description="Project the build belongs to")
    state: str | None = Field(default=None, description="Build state")
