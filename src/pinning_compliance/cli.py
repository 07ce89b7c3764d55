"""Command-line interface for pinning-compliance."""

import asyncio
import logging
import sys

import click

from .checks import CHECKS, run_checks
from .exceptions import ConfigurationError
from .models import CheckOutcome, ComplianceConfig, ServiceAndTokenPair

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.version_option(package_name="pinning-compliance")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    envvar="PINNING_COMPLIANCE_LOG_LEVEL",
    help="Log level for harness diagnostics (default: WARNING)",
)
def cli(log_level: str) -> None:
    """Pinning Service API compliance checks."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command("list")
def list_checks() -> None:
    """List the registered checks."""
    for name, check in CHECKS.items():
        summary = (check.__doc__ or "").strip().splitlines()
        click.echo(f"{name}: {summary[0] if summary else ''}")


@cli.command()
@click.option(
    "--service",
    "services",
    multiple=True,
    envvar="PINNING_COMPLIANCE_SERVICE",
    help="Pinning service endpoint URL (repeatable, paired with --token)",
)
@click.option(
    "--token",
    "tokens",
    multiple=True,
    envvar="PINNING_COMPLIANCE_TOKEN",
    help="Bearer token for the matching --service (repeatable)",
)
@click.option(
    "--check",
    "check_names",
    multiple=True,
    type=click.Choice(sorted(CHECKS)),
    help="Check to run (repeatable, default: all)",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=30.0,
    help="Per-request timeout in seconds (default: 30)",
)
def run(
    services: tuple[str, ...],
    tokens: tuple[str, ...],
    check_names: tuple[str, ...],
    timeout: float,
) -> None:
    """Run compliance checks against one or more pinning services."""
    if len(services) != len(tokens):
        click.echo(
            f"Error: got {len(services)} --service and {len(tokens)} --token values; "
            "each service needs exactly one token",
            err=True,
        )
        sys.exit(2)

    try:
        config = ComplianceConfig(
            pairs=[ServiceAndTokenPair(s, t) for s, t in zip(services, tokens, strict=True)],
            checks=list(check_names),
            timeout_seconds=timeout,
        )
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    outcomes = asyncio.run(run_checks(config))

    for outcome in outcomes:
        _echo_outcome(outcome)

    failed = [o for o in outcomes if not o.passed]
    click.echo()
    click.echo(f"{len(outcomes) - len(failed)} of {len(outcomes)} checks passed")
    if failed:
        sys.exit(1)


def _echo_outcome(outcome: CheckOutcome) -> None:
    mark = "✓" if outcome.passed else "✗"
    click.echo(f"{mark} {outcome.name} ({outcome.pair.endpoint})")
    for report in outcome.reports:
        click.echo(f"  {report.title}")
        if report.error is not None and not report.results:
            click.echo(f"    ✗ call raised {report.error!r}")
        for result in report.all_results:
            if result.passed:
                click.echo(f"    ✓ {result.title}")
            else:
                click.echo(f"    ✗ {result.title}: {result.reason}")
    if outcome.error is not None:
        click.echo(f"  ! could not run: {outcome.error}")


if __name__ == "__main__":
    cli()
