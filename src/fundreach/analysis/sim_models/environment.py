"""Shared, read-only simulation context."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

import numpy as np

from .options import Project, SimulationOptions
from .paths import simulate_outcomes
from .random_stream import RandomStream
from .schedule import build_schedule, group_by

logger = logging.getLogger(__name__)

IndexedProject = tuple[int, Project]


@dataclass(frozen=True)
class Environment:
    investment_amount: float
    liquidity: float
    num_runs: int
    num_years: int
    cash_flows: tuple[float, ...]
    no_interest_reference_line: tuple[float, ...]
    # projects keyed by start year, each as (input position, project)
    projects_by_start_year: Mapping[int, tuple[IndexedProject, ...]]
    # projects this environment emits results for, in input order
    projects_to_simulate: tuple[IndexedProject, ...]
    # absolute portfolio values indexed [year, run]
    simulated_values: np.ndarray


def create_environment(
    options: SimulationOptions,
    task_index: int | None = None,
    values_per_worker: int | None = None,
) -> Environment:
    """Build the environment every per-project aggregation reads from.

    With a partition (``task_index``, ``values_per_worker``) only that slice of
    the projects is emitted, but the schedule and the simulated values are
    always built from all projects, since every project competes for the
    same capital.
    """
    indexed = list(enumerate(options.projects))

    projects_to_simulate = indexed
    if task_index is not None and values_per_worker:
        start = task_index * values_per_worker
        projects_to_simulate = indexed[start:start + values_per_worker]

    by_year = sorted(indexed, key=lambda item: item[1].start_year)  # stable
    projects_by_start_year = group_by(by_year, lambda item: item[1].start_year)

    cash_flows, reference_line = build_schedule(
        projects_by_start_year, options.num_years, options.investment_amount,
    )

    simulated_values = simulate_outcomes(
        cash_flows,
        options.investment_amount,
        num_runs=options.num_runs,
        num_years=options.num_years,
        volatility=options.volatility,
        performance=options.performance,
        random_stream=RandomStream(options.seed),
    )
    simulated_values.flags.writeable = False

    logger.debug(
        "Environment ready: %d projects (%d emitted), %d years, %d runs",
        len(indexed), len(projects_to_simulate), options.num_years, options.num_runs,
    )

    return Environment(
        investment_amount=options.investment_amount,
        liquidity=options.liquidity,
        num_runs=options.num_runs,
        num_years=options.num_years,
        cash_flows=tuple(cash_flows),
        no_interest_reference_line=tuple(reference_line),
        projects_by_start_year=MappingProxyType(
            {year: tuple(items) for year, items in projects_by_start_year.items()}
        ),
        projects_to_simulate=tuple(projects_to_simulate),
        simulated_values=simulated_values,
    )
