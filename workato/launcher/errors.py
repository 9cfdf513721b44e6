"""Error types raised by the launcher."""


class LauncherError(Exception):
    """Base class for launcher failures."""


class InputValidationError(LauncherError, ValueError):
    """Required identifiers are missing from the input."""


class MissingMarkerError(InputValidationError):
    """A required marker is absent from pull request text."""

    def __init__(self, marker: str) -> None:
        """Initialize with the name of the missing marker."""
        super().__init__(f"Pull request body does not contain '{marker}'")
        self.marker = marker


class RemoteCallFailed(LauncherError, RuntimeError):
    """A remote call failed or returned a status other than the accepted one.

    status is None when no response was received.
    """

    def __init__(
        self, method: str, url: str, status: int | None, body: str
    ) -> None:
        """Initialize with the details of the failed response."""
        detail = body if status is None else f"{status} {body}"
        super().__init__(f"{method} {url} failed: {detail}")
        self.method = method
        self.url = url
        self.status = status
        self.body = body


class PollingTimeout(LauncherError, TimeoutError):
    """The polling budget was exhausted without a terminal result."""

    def __init__(self, attempts: int, delay: float) -> None:
        """Initialize with the exhausted polling budget."""
        super().__init__(
            f"Operation did not complete after {attempts} attempts "
            f"({delay} seconds apart)"
        )
        self.attempts = attempts
        self.delay = delay


class ProjectMatchError(LauncherError, LookupError):
    """A project could not be resolved across environments."""


class AmbiguousProjectMatch(ProjectMatchError):
    """More than one project carries the same name."""

    def __init__(self, name: str, project_ids: list[int]) -> None:
        """Initialize with the duplicated name and matching ids."""
        super().__init__(
            f"Project name '{name}' is shared by projects {project_ids}"
        )
        self.name = name
        self.project_ids = project_ids
