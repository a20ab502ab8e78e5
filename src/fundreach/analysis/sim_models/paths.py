"""Monte Carlo performance paths converted into absolute portfolio values."""

import logging
from collections.abc import Sequence

import numpy as np
from numpy.typing import ArrayLike

from .random_stream import RandomStream

logger = logging.getLogger(__name__)

BASE_INDEX = 100.0


def round_half_away_from_zero(values: ArrayLike) -> np.ndarray:
    """Round to the nearest integer, ties away from zero (np.round ties to even)."""
    values = np.asarray(values, dtype=float)
    return np.asarray(np.sign(values) * np.floor(np.abs(values) + 0.5))


def simulate_indices(
    num_runs: int,
    num_years: int,
    volatility: float,
    performance: float,
    random_stream: RandomStream,
) -> np.ndarray:
    """Relative index paths, shape ``(num_runs, num_years + 1)``, starting at 100.

    Shocks are drawn run by run: every year of run 0, then run 1, and so on.
    """
    shocks = random_stream.normals(performance, volatility, (num_runs, num_years))
    indices = np.empty((num_runs, num_years + 1), dtype=float)
    indices[:, 0] = BASE_INDEX
    for year in range(1, num_years + 1):
        indices[:, year] = indices[:, year - 1] * (1.0 + shocks[:, year - 1])
    return indices


def to_absolute_values(
    indices: np.ndarray,
    investment_amount: float,
    cash_flows: Sequence[float],
) -> np.ndarray:
    """Turn relative index paths (years on the last axis) into portfolio values.

    The outflow of year ``y`` is taken at the start of the step into index
    ``y + 1``; the first step carries no cash flow. Only stored values are
    rounded, compounding runs on the unrounded value.
    """
    indices = np.asarray(indices, dtype=float)
    num_steps = indices.shape[-1]
    if num_steps - 1 > len(cash_flows):
        raise ValueError(
            f"{num_steps} index steps need {num_steps - 1} cash flows, got {len(cash_flows)}"
        )

    values = np.empty_like(indices)
    current_value = np.full(indices.shape[:-1], float(investment_amount))
    previous_index = np.full(indices.shape[:-1], BASE_INDEX)

    for year in range(num_steps):
        current_index = indices[..., year]
        cash_flow_start_of_year = 0.0 if year == 0 else cash_flows[year - 1]

        # scale current value with the performance gain of the index
        current_value = (current_value + cash_flow_start_of_year) * (current_index / previous_index)
        values[..., year] = round_half_away_from_zero(current_value)
        previous_index = current_index

    return values


def simulate_outcomes(
    cash_flows: Sequence[float],
    investment_amount: float,
    num_runs: int,
    num_years: int,
    volatility: float,
    performance: float,
    random_stream: RandomStream | None = None,
) -> np.ndarray:
    """Run the Monte Carlo simulation for all years and runs.

    Returns:
        Absolute portfolio values indexed ``[year, run]`` with shape
        ``(num_years + 1, num_runs)``.
    """
    if random_stream is None:
        random_stream = RandomStream()

    logger.debug(
        "Simulating %d runs over %d years (performance=%.4f, volatility=%.4f, seed=%s)",
        num_runs, num_years, performance, volatility, random_stream.seed,
    )

    indices = simulate_indices(num_runs, num_years, volatility, performance, random_stream)
    return to_absolute_values(indices, investment_amount, cash_flows).T.copy()
