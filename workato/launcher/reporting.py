"""Console reporting of deployments and test runs."""

import json
from collections.abc import Mapping

import typer

from workato.launcher.models.test_run import TestCaseResult, TestRunOutcome

SEPARATOR = "=================="


def red(text: str) -> str:
    """Color text red."""
    return typer.style(text, fg=typer.colors.RED)


def green(text: str) -> str:
    """Color text green."""
    return typer.style(text, fg=typer.colors.GREEN)


def job_link(host: str, result: TestCaseResult) -> str | None:
    """Build a link to the job that executed a test case, if its recipe is known."""
    if result.recipe is None:
        return None
    link = f"{host}/recipes/{result.recipe.id}"
    if result.job is not None:
        link = f"{link}/job/{result.job.id}"
    return link


def format_status(result: TestCaseResult) -> str:
    """Render PASS or FAIL for a test case."""
    return green("PASS") if result.passed else red("FAIL")


def group_by_recipe(
    results: list[TestCaseResult],
) -> dict[str, list[TestCaseResult]]:
    """Group results by recipe name, keeping first-seen order."""
    grouped: dict[str, list[TestCaseResult]] = {}
    for result in results:
        grouped.setdefault(result.recipe_name, []).append(result)
    return grouped


def report_tests(host: str, results: list[TestCaseResult]) -> None:
    """Print a recipe header followed by one line per test case."""
    for recipe_name, recipe_results in group_by_recipe(results).items():
        typer.echo(f"  {recipe_name}")
        for result in recipe_results:
            line = f"    {result.test_case_name}: {format_status(result)}."
            link = job_link(host, result)
            if link is not None:
                line = f"{line} Link: {link}"
            typer.echo(line)


def report_test_run(host: str, outcome: TestRunOutcome) -> None:
    """Print every executed test case, then the failing subset if any."""
    typer.echo("Executed test cases:")
    report_tests(host, outcome.results)

    if outcome.succeeded:
        message = "All tests passed successfully."
        if outcome.coverage is not None:
            message = f"{message} Coverage: {outcome.coverage}%"
        typer.echo(green(message))
        return

    typer.echo(f"\n\n{SEPARATOR}")
    typer.echo(red("Failed test cases:"))
    report_tests(host, outcome.failed)


def run_summary(host: str, outcome: TestRunOutcome) -> dict[str, object]:
    """Build a machine-readable summary of a test run."""
    return {
        "run_request_id": outcome.run_request_id,
        "total": outcome.total,
        "passed": len(outcome.passed),
        "failed": len(outcome.failed),
        "coverage": outcome.coverage,
        "results": [
            {
                "recipe": result.recipe_name,
                "test_case": result.test_case_name,
                "status": result.status,
                "link": job_link(host, result),
            }
            for result in outcome.results
        ],
    }


def report_deployment(succeeded: bool, details: Mapping[str, object]) -> None:
    """Print the outcome of a deployment."""
    if succeeded:
        typer.echo(green("Deployment succeeded"))
    else:
        typer.echo(red("Deployment failed\n\n"))
        typer.echo(json.dumps(dict(details), indent=2, default=str))
