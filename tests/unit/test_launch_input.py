"""Tests for scraping launch identifiers from standard input."""

import pytest

from workato.launcher.errors import InputValidationError
from workato.launcher.launch_input import parse_launch_input


def test_parse_launch_input() -> None:
    """parse_launch_input reads both identifiers."""
    scraped = parse_launch_input(
        [
            "Building package...\n",
            "project_id: 12\n",
            "project_build_id: 345\n",
            "done\n",
        ]
    )

    assert scraped.project_id == 12
    assert scraped.project_build_id == 345


def test_parse_launch_input_anchored_at_line_start() -> None:
    """Identifiers must start the line."""
    scraped = parse_launch_input(["  project_id: 12\n", "x project_build_id: 3\n"])

    assert scraped.project_id is None
    assert scraped.project_build_id is None


def test_parse_launch_input_last_value_wins() -> None:
    """A later line overrides an earlier one."""
    scraped = parse_launch_input(["project_id: 1\n", "project_id: 2\n"])
    assert scraped.project_id == 2


def test_require_project_build_id_missing() -> None:
    """require_project_build_id fails validation when absent."""
    scraped = parse_launch_input(["project_id: 1\n"])

    with pytest.raises(InputValidationError, match="project_build_id is required"):
        scraped.require_project_build_id()


def test_require_project_id() -> None:
    """require_project_id returns the scraped value."""
    assert parse_launch_input(["project_id: 7"]).require_project_id() == 7
