"""Extract identifiers and release notes from pull request text.

Recognized patterns:

- ``project_build_id=<int>`` in the body: build to deploy and test
- ``fid=<int>`` in the body: folder holding the project
- ``release :`` in the title: release notes follow the marker
- ``**Visual diff`` in the body: everything after it is ignored
"""

import re

from workato.launcher.errors import MissingMarkerError
from workato.launcher.models.pull_request import PullRequest

BUILD_ID_PATTERN = re.compile(r"project_build_id=(\d+)")
FOLDER_ID_PATTERN = re.compile(r"\bfid=(\d+)")
RELEASE_MARKER = re.compile(r"release\s*:", re.IGNORECASE)
VISUAL_DIFF_MARKER = "**Visual diff"
HEADING_PATTERN = re.compile(r"^#+\s*")


def _extract_int(pattern: re.Pattern[str], text: str, marker: str) -> int:
    match = pattern.search(text)
    if not match:
        raise MissingMarkerError(marker)
    return int(match.group(1))


def extract_build_id(body: str) -> int:
    """Return the project build id embedded in a pull request body."""
    return _extract_int(BUILD_ID_PATTERN, body, "project_build_id=")


def extract_folder_id(body: str) -> int:
    """Return the folder id embedded in a pull request body."""
    return _extract_int(FOLDER_ID_PATTERN, body, "fid=")


def release_summary(title: str) -> str:
    """Return the title text following the release marker, or the whole title."""
    match = RELEASE_MARKER.search(title)
    summary = title[match.end() :] if match else title
    return summary.strip()


def release_details(body: str) -> str:
    """Flatten the body above the visual diff into sentences.

    Headings and blank lines both start a new sentence; single line
    breaks are joined with spaces.
    """
    text = body.split(VISUAL_DIFF_MARKER, 1)[0]

    segments: list[str] = []
    current: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        heading = HEADING_PATTERN.match(stripped)
        if stripped and not heading:
            current.append(stripped)
            continue

        if current:
            segments.append(" ".join(current))
            current = []
        if heading:
            title = stripped[heading.end() :].strip()
            if title:
                segments.append(title)

    if current:
        segments.append(" ".join(current))

    return ". ".join(
        segment.rstrip(". ") for segment in segments if segment.rstrip(". ")
    )


def release_notes(title: str, body: str) -> str:
    """Build a deployment description from a pull request title and body."""
    parts = [release_summary(title).rstrip(". "), release_details(body)]
    return ". ".join(part for part in parts if part)


class PullRequestContext:
    """Identifiers a pull request command needs, extracted up front."""

    def __init__(self, pull_request: PullRequest) -> None:
        """Extract identifiers, raising MissingMarkerError if any is absent."""
        self.pull_request = pull_request
        self.build_id = extract_build_id(pull_request.body)
        self.folder_id = extract_folder_id(pull_request.body)

    @property
    def release_notes(self) -> str:
        """Deployment description for this pull request."""
        return release_notes(self.pull_request.title, self.pull_request.body)
