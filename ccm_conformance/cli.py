"""CLI entry point for the conformance test runner.

Usage:
    ccm-conformance run [--suite all] [--provider mock] [--plan plan.yaml] [options]
    ccm-conformance list-suites
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .conditions.deadline import Deadline
from .errors import PlanError
from .plan import RunPlan, apply_filters, parse_plan, split_names, validate_plan
from .providers import TestEnvironment, create_provider
from .reporting import JsonReporter, TextReporter
from .runner import RunOutcome, TestRunner
from .suite.builtin import SUITE_FACTORIES, build_suites
from .suite.schema import TestResult, TestSuite

logger = logging.getLogger(__name__)

LOG_LEVELS = ["debug", "info", "warning", "error"]


@click.group()
@click.version_option(version=__version__, prog_name="ccm-conformance")
def main() -> None:
    """Cloud-agnostic conformance tests for cloud controller providers."""


@main.command("run")
@click.option("--plan", "plan_path", type=click.Path(path_type=Path), help="YAML run plan file.")
@click.option("--suite", "suites", help="Suite(s) to run: all, or comma-separated names.")
@click.option("--provider", help="Cloud provider name.")
@click.option("--cluster", help="Cluster name.")
@click.option("--region", help="Region.")
@click.option("--zone", help="Zone.")
@click.option("--timeout", type=float, help="Overall run timeout in seconds (advisory).")
@click.option("--tests", help="Comma-separated list of specific tests to run.")
@click.option("--skip", help="Comma-separated list of tests to skip.")
@click.option("--cleanup/--no-cleanup", default=None, help="Clean up resources after tests.")
@click.option(
    "--mock-external/--no-mock-external",
    default=None,
    help="Mock external services instead of probing load balancer endpoints.",
)
@click.option("--output", type=click.Choice(["text", "json"]), help="Output format.")
@click.option("--report", "report_path", type=click.Path(path_type=Path), help="Also save a JSON report here.")
@click.option("--verbose", "-v", is_flag=True, default=None, help="Show every test result.")
@click.option("--log-level", type=click.Choice(LOG_LEVELS), default="warning", show_default=True)
def run_command(
    plan_path: Optional[Path],
    suites: Optional[str],
    provider: Optional[str],
    cluster: Optional[str],
    region: Optional[str],
    zone: Optional[str],
    timeout: Optional[float],
    tests: Optional[str],
    skip: Optional[str],
    cleanup: Optional[bool],
    mock_external: Optional[bool],
    output: Optional[str],
    report_path: Optional[Path],
    verbose: Optional[bool],
    log_level: str,
) -> None:
    """Run conformance suites against a provider."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        plan = parse_plan(plan_path) if plan_path else RunPlan()
    except PlanError as e:
        raise click.ClickException(f"Failed to load run plan: {e}") from e

    overrides = {
        "provider": provider,
        "cluster": cluster,
        "region": region,
        "zone": zone,
        "timeout": timeout,
        "cleanup": cleanup,
        "mock_external": mock_external,
        "output": output,
        "verbose": verbose,
        "suites": split_names(suites) if suites else None,
        "tests": split_names(tests) if tests else None,
        "skip": split_names(skip) if skip else None,
    }
    plan = RunPlan(**{
        **plan.to_dict(),
        **{k: v for k, v in overrides.items() if v is not None},
    })

    validation = validate_plan(plan)
    for warning in validation.warnings:
        click.echo(f"Warning: {warning.path}: {warning.message}", err=True)
    if not validation.valid:
        errors_str = "; ".join(f"{e.path}: {e.message}" for e in validation.errors)
        raise click.ClickException(f"Invalid run plan: {errors_str}")

    try:
        outcome, env = execute_plan(plan)
    except KeyboardInterrupt:
        click.echo("Test run interrupted by user", err=True)
        sys.exit(130)

    if plan.output == "json" or report_path:
        reporter = JsonReporter()
        report = reporter.generate(
            outcome.results,
            outcome.summary,
            duration=outcome.duration,
            provider=plan.provider,
            error=outcome.error,
            logs=env.logs,
            resource_counts=env.resource_counts,
            metrics=env.metrics,
        )
        if report_path:
            saved = reporter.save(report, report_path)
            click.echo(f"Report saved: {saved}", err=True)
        if plan.output == "json":
            click.echo(reporter.to_json_string(report))

    if plan.output == "text":
        click.echo(TextReporter(verbose=plan.verbose).render(
            outcome.results,
            outcome.summary,
            duration=outcome.duration,
            error=outcome.error,
            logs=env.logs,
            resource_counts=env.resource_counts,
        ))

    if not outcome.success:
        sys.exit(1)


def select_suites(plan: RunPlan) -> list[TestSuite]:
    """Build the suites named by the plan, in order, without duplicates."""
    if "all" in plan.suites:
        selected = build_suites("all")
    else:
        selected = []
        for name in dict.fromkeys(plan.suites):
            selected.extend(build_suites(name))
    return apply_filters(selected, only=plan.tests, skip=plan.skip)


def execute_plan(plan: RunPlan) -> tuple[RunOutcome, TestEnvironment]:
    """Set up the environment, run the selected suites, tear down.

    Returns:
        The run outcome and the torn-down environment, whose logs,
        resource counts and metrics are kept for reporting.
    """
    env = TestEnvironment(create_provider(plan.provider), plan.environment_config())
    env.setup()

    on_result = _echo_result if plan.verbose and plan.output == "text" else None
    runner = TestRunner(env, on_result=on_result)
    for suite in select_suites(plan):
        runner.register(suite)
    logger.info("Running %d suite(s) against provider %s", len(runner.suites), plan.provider)

    try:
        outcome = runner.execute(Deadline(env.config.test_timeout))
    finally:
        env.teardown()
    return outcome, env


def _echo_result(result: TestResult) -> None:
    click.echo(f"  [{result.status}] {result.suite}/{result.test.name}", err=True)


@main.command("list-suites")
def list_suites_command() -> None:
    """List the built-in suites and their tests."""
    for key, factory in SUITE_FACTORIES.items():
        suite = factory()
        click.echo(f"{key}: {suite.name} - {suite.description}")
        for test in suite.tests:
            click.echo(f"  {test.name}: {test.description}")


if __name__ == "__main__":
    main()
