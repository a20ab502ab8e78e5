"""Deterministic cash-flow schedule built from projects."""

from collections.abc import Callable, Hashable, Iterable, Mapping, Sequence
from typing import Any, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def group_by(items: Iterable[T], key: Callable[[T], K]) -> dict[K, list[T]]:
    """Group items by key, keeping first-seen key order and item order per key."""
    groups: dict[K, list[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def projects_to_cash_flows(
    projects_by_start_year: Mapping[int, Sequence[Any]],
    num_years: int,
) -> list[float]:
    """Outflow per year: negative sum of the amounts of projects starting that year.

    Entries of ``projects_by_start_year`` are ``(input_index, project)`` pairs.
    """
    cash_flows: list[float] = []
    for year in range(num_years):
        projects_this_year = projects_by_start_year.get(year, ())
        cash_flows.append(-sum(project.total_amount for _, project in projects_this_year))
    return cash_flows


def no_interest_reference_line(cash_flows: Sequence[float], investment_amount: float) -> list[float]:
    """Capital left at each year under a zero-return assumption."""
    line: list[float] = []
    amount_left = investment_amount
    for cash_flow in cash_flows:
        amount_left += cash_flow
        line.append(amount_left)
    return line


def build_schedule(
    projects_by_start_year: Mapping[int, Sequence[Any]],
    num_years: int,
    investment_amount: float,
) -> tuple[list[float], list[float]]:
    """Return ``(cash_flows, no_interest_reference_line)``."""
    cash_flows = projects_to_cash_flows(projects_by_start_year, num_years)
    return cash_flows, no_interest_reference_line(cash_flows, investment_amount)
