"""Resolve a project across environments by name.

Project ids are local to an environment, so the same project is found in
another environment by exact name match. Renamed or duplicated projects
break this join; duplicates raise AmbiguousProjectMatch instead of
picking one.
"""

import logging

from workato.launcher.client import PlatformClient
from workato.launcher.config import Environment
from workato.launcher.errors import AmbiguousProjectMatch, ProjectMatchError
from workato.launcher.models.project import Project, ProjectBuild

logger = logging.getLogger(__name__)


def find_project_name(projects: list[Project], project_id: int) -> str:
    """Return the name of the project with the given id."""
    for project in projects:
        if project.id == project_id:
            return project.name
    raise ProjectMatchError(f"Project {project_id} not found")


def find_project_id(projects: list[Project], name: str) -> int:
    """Return the id of the only project with the given name."""
    matches = [project.id for project in projects if project.name == name]
    if not matches:
        raise ProjectMatchError(f"Project named '{name}' not found")
    if len(matches) > 1:
        raise AmbiguousProjectMatch(name, matches)
    return matches[0]


class ProjectResolver:
    """Looks up projects behind a build in the origin and target environments."""

    def __init__(
        self, client: PlatformClient, origin: Environment = Environment.DEV
    ) -> None:
        """Initialize resolver with a client and the build's origin environment."""
        self.client = client
        self.origin = origin
        self._names: dict[int, str] = {}

    async def fetch_build(self, build_id: int) -> ProjectBuild:
        """Fetch build metadata from the origin environment."""
        data = await self.client.get(f"/api/project_builds/{build_id}", self.origin)
        return ProjectBuild.model_validate(data)

    async def list_projects(self, environment: Environment) -> list[Project]:
        """Fetch every project visible in an environment."""
        data = await self.client.get("/api/projects", environment)
        return [Project.model_validate(item) for item in data]

    async def project_name(self, build_id: int) -> str:
        """Return the name of the project a build belongs to."""
        if build_id not in self._names:
            build = await self.fetch_build(build_id)
            projects = await self.list_projects(self.origin)
            self._names[build_id] = find_project_name(projects, build.project_id)
            logger.info(
                f"Build {build_id} belongs to project '{self._names[build_id]}'"
            )
        return self._names[build_id]

    async def target_project_id(
        self, build_id: int, target: Environment = Environment.TEST
    ) -> int:
        """Return the id of the build's project in the target environment."""
        name = await self.project_name(build_id)
        projects = await self.list_projects(target)
        project_id = find_project_id(projects, name)
        logger.info(f"Project '{name}' has id {project_id} in {target.value}")
        return project_id
