"""Scrape launch identifiers from standard input."""

import re
from collections.abc import Iterable

from pydantic import BaseModel, Field

from workato.launcher.errors import InputValidationError

PROJECT_BUILD_ID_LINE = re.compile(r"^project_build_id: (?P<project_build_id>\d+)")
PROJECT_ID_LINE = re.compile(r"^project_id: (?P<project_id>\d+)")


class LaunchInput(BaseModel):
    """Identifiers scraped from a launch transcript."""

    project_id: int | None = Field(default=None, description="Project to test")
    project_build_id: int | None = Field(
        default=None, description="Project build to deploy"
    )

    def require_project_id(self) -> int:
        """Return project_id or fail validation."""
        if self.project_id is None:
            raise InputValidationError("project_id is required")
        return self.project_id

    def require_project_build_id(self) -> int:
        """Return project_build_id or fail validation."""
        if self.project_build_id is None:
            raise InputValidationError("project_build_id is required")
        return self.project_build_id


def parse_launch_input(lines: Iterable[str]) -> LaunchInput:
    """Collect identifiers from lines; later lines override earlier ones."""
    scraped = LaunchInput()
    for line in lines:
        if match := PROJECT_BUILD_ID_LINE.match(line):
            scraped.project_build_id = int(match["project_build_id"])
        if match := PROJECT_ID_LINE.match(line):
            scraped.project_id = int(match["project_id"])
    return scraped
