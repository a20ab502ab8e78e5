import json
import logging

import click

from fundreach.config import Settings
from fundreach.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _parse_project(ctx, param, values: tuple[str, ...]) -> list[dict]:
    projects = []
    for value in values:
        try:
            start_year, total_amount = value.split(":", 1)
            projects.append({"start_year": int(start_year), "total_amount": float(total_amount)})
        except ValueError:
            raise click.BadParameter(f"expected START_YEAR:AMOUNT, got {value!r}", ctx=ctx, param=param)
    return projects


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool):
    """Fundreach - Monte Carlo projection of funded project schedules"""
    settings = Settings()
    setup_logging(settings.log_dir, settings.log_file)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command()
@click.option("--project", "-p", "projects", multiple=True, callback=_parse_project,
              metavar="START_YEAR:AMOUNT", help="Project outflow (repeatable)")
@click.option("--volatility", type=float, required=True,
              help="Standard deviation of the yearly performance")
@click.option("--years", "num_years", type=int, default=None, help="Number of simulated years")
@click.option("--runs", "num_runs", type=int, default=None, help="Number of Monte Carlo runs")
@click.option("--investment", "investment_amount", type=float, default=None,
              help="Initial capital")
@click.option("--performance", type=float, default=None, help="Mean yearly performance")
@click.option("--liquidity", type=float, default=None, help="Additional liquidity buffer")
@click.option("--seed", type=int, default=None, help="Random seed (default: fixed internal seed)")
@click.option("--parallel", is_flag=True, help="Aggregate projects across worker processes")
@click.option("--workers", type=int, default=None, help="Maximum worker processes")
@click.option("--indent", type=int, default=2, show_default=True, help="JSON indentation")
@click.option("--output", "-o", type=click.File("w"), default="-", help="Write JSON here (default: stdout)")
def simulate(projects: list[dict], volatility: float, num_years: int | None,
             num_runs: int | None, investment_amount: float | None,
             performance: float | None, liquidity: float | None, seed: int | None,
             parallel: bool, workers: int | None, indent: int, output):
    """Simulate the projects and print per-project results as JSON."""
    from fundreach.analysis.compute import run_simulation_parallel
    from fundreach.analysis.simulation import run_simulation
    from fundreach.analysis.sim_models import InvalidOptionsError

    settings = Settings()
    if workers is not None:
        settings.simulation_max_workers = workers

    options = {"projects": projects, "volatility": volatility, "seed": seed}
    for name, value in (
        ("num_years", num_years),
        ("num_runs", num_runs),
        ("investment_amount", investment_amount),
        ("performance", performance),
        ("liquidity", liquidity),
    ):
        if value is not None:
            options[name] = value

    try:
        if parallel:
            results = run_simulation_parallel(options, settings=settings)
        else:
            results = run_simulation(options, settings=settings)
    except InvalidOptionsError as e:
        raise click.UsageError(str(e))

    click.echo(json.dumps(results, indent=indent, ensure_ascii=False), file=output)


if __name__ == "__main__":
    cli()
