"""Parallel simulation driver.

Splits the project list into contiguous chunks, rebuilds the full
environment in each worker process and merges the per-chunk results back
into input order.
"""

import logging
import math
import os
from collections.abc import Mapping
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Any

from fundreach.analysis.sim_models import ProjectResult
from fundreach.analysis.sim_models.options import SimulationOptions, initialize_options
from fundreach.config import Settings

logger = logging.getLogger(__name__)


def partition_projects(
    num_projects: int,
    min_values_per_task: int = 2,
    max_degree_of_parallelism: int | None = None,
) -> tuple[int, int]:
    """Split ``num_projects`` into contiguous chunks.

    Every chunk but the last holds ``values_per_worker`` projects, which is
    at least ``min_values_per_task``; there are never more chunks than the
    degree of parallelism.

    Returns:
        (num_tasks, values_per_worker)
    """
    if num_projects <= 0:
        return 0, 0

    max_degree = max(1, max_degree_of_parallelism or os.cpu_count() or 1)
    values_per_worker = max(1, min_values_per_task, math.ceil(num_projects / max_degree))
    num_tasks = math.ceil(num_projects / values_per_worker)
    return num_tasks, values_per_worker


def _run_partition_worker(
    options: dict,
    task_index: int,
    values_per_worker: int,
) -> tuple[int, list[ProjectResult]]:
    """Picklable worker for ProcessPoolExecutor.

    Args:
        options: Plain-dict simulation options (all projects).
        task_index: Which chunk of projects to aggregate.
        values_per_worker: Chunk size.

    Returns:
        (task_index, results for the chunk in input order)
    """
    from fundreach.analysis.simulation import simulate_partition

    opts = SimulationOptions.model_validate(options)
    return task_index, simulate_partition(opts, task_index, values_per_worker)


class ParallelSimulationRunner:
    """Fans the aggregation out over worker processes, one chunk per task."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()

    def run(
        self,
        options: SimulationOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> list[ProjectResult]:
        opts = initialize_options(options, defaults=self.settings.option_defaults(), **overrides)
        if not opts.projects:
            logger.debug("No projects to simulate")
            return []

        num_tasks, values_per_worker = partition_projects(
            len(opts.projects),
            min_values_per_task=self.settings.simulation_min_values_per_task,
            max_degree_of_parallelism=self.settings.simulation_max_workers,
        )
        max_workers = min(self.settings.simulation_max_workers or os.cpu_count() or 1, num_tasks)

        logger.info(
            "Running parallel simulation for %d projects in %d chunks of %d with %d workers",
            len(opts.projects), num_tasks, values_per_worker, max_workers,
        )

        # Pickle-safe plain types
        worker_options = opts.to_worker_dict()
        chunk_results: dict[int, list[ProjectResult]] = {}

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(_run_partition_worker, worker_options, task_index, values_per_worker): task_index
                for task_index in range(num_tasks)
            }

            for future in as_completed(futures):
                task_index = futures[future]
                try:
                    _, results = future.result()
                except Exception as e:
                    logger.error("Simulation chunk %d failed: %s", task_index, e)
                    for pending in futures:
                        pending.cancel()
                    raise
                chunk_results[task_index] = results
                logger.debug("Chunk %d done: %d projects", task_index, len(results))

        # Re-sequence: completion order is arbitrary, chunk order is input order
        merged: list[ProjectResult] = []
        for task_index in range(num_tasks):
            merged.extend(chunk_results[task_index])

        logger.info("Parallel simulation complete: %d results", len(merged))
        return merged


def run_simulation_parallel(
    options: SimulationOptions | Mapping[str, Any] | None = None,
    settings: Settings | None = None,
    **overrides: Any,
) -> list[ProjectResult]:
    """Same contract as ``run_simulation``, executed across worker processes."""
    return ParallelSimulationRunner(settings).run(options, **overrides)
