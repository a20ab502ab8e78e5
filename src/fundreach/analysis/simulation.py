"""Monte Carlo capital projection orchestrator.

Builds the shared environment (cash-flow schedule, reference line and
simulated portfolio values) and aggregates every project against it.
"""

import logging
from collections.abc import Mapping
from typing import Any

from fundreach.analysis.sim_models import ProjectResult
from fundreach.analysis.sim_models.aggregate import calculate_projects
from fundreach.analysis.sim_models.environment import create_environment
from fundreach.analysis.sim_models.options import SimulationOptions, initialize_options
from fundreach.config import Settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def run_simulation(
    options: SimulationOptions | Mapping[str, Any] | None = None,
    settings: Settings | None = None,
    **overrides: Any,
) -> list[ProjectResult]:
    """Run the simulation synchronously in the calling process.

    Args:
        options: Simulation options, either validated or as a mapping with
            snake_case or camelCase keys. ``volatility`` is required.
        settings: Source of defaults for omitted options.
        **overrides: Individual options taking precedence over ``options``.

    Returns:
        One result per project, in input order. Empty if there are no projects.

    Raises:
        InvalidOptionsError: before any simulation work, for invalid options.
    """
    settings = settings or Settings()
    opts = initialize_options(options, defaults=settings.option_defaults(), **overrides)
    if not opts.projects:
        logger.debug("No projects to simulate")
        return []

    logger.info(
        "Simulating %d projects: %d runs over %d years",
        len(opts.projects), opts.num_runs, opts.num_years,
    )
    environment = create_environment(opts)
    return calculate_projects(environment)


def simulate_partition(
    options: SimulationOptions,
    task_index: int,
    values_per_worker: int,
) -> list[ProjectResult]:
    """Results for one contiguous slice of the projects.

    The environment is rebuilt from all projects, so the slice is aggregated
    against the same statistical basis as a full synchronous run.
    """
    environment = create_environment(options, task_index, values_per_worker)
    return calculate_projects(environment)
