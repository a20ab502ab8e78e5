"""Per-project reduction of simulated values into groups, buckets and statistics."""

import math
from collections.abc import Mapping, Sequence

import numpy as np

from . import Band, Bucket, Group, GroupName, ProjectResult, SubBucket
from .environment import Environment, IndexedProject
from .options import Project

NUMBER_OF_BUCKETS = 10

GROUP_DESCRIPTIONS = {
    GroupName.GREEN: "Ziel erreichbar",
    GroupName.YELLOW: "mit Zusatzliquidität erreichbar",
    GroupName.GRAY: "nicht erreichbar",
    GroupName.RED: "nicht erreichbar, mit Verlust",
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def create_groups(required_amount: float, no_interest_reference: float, liquidity: float) -> list[Group]:
    """The four reachability bands, ordered green, yellow, gray, red.

    Red ends where yellow starts when the reference line lies above
    ``required_amount - liquidity``; gray is then empty.
    """
    red_to = min(no_interest_reference, required_amount - liquidity)
    return [
        {
            "name": GroupName.GREEN.value,
            "description": GROUP_DESCRIPTIONS[GroupName.GREEN],
            "separator": True,
            "percentage": 0.0,
            "from": required_amount,
        },
        {
            "name": GroupName.YELLOW.value,
            "description": GROUP_DESCRIPTIONS[GroupName.YELLOW],
            "separator": True,
            "percentage": 0.0,
            "from": required_amount - liquidity,
            "to": required_amount,
        },
        {
            "name": GroupName.GRAY.value,
            "description": GROUP_DESCRIPTIONS[GroupName.GRAY],
            "separator": False,
            "percentage": 0.0,
            "from": no_interest_reference,
            "to": required_amount - liquidity,
        },
        {
            "name": GroupName.RED.value,
            "description": GROUP_DESCRIPTIONS[GroupName.RED],
            "separator": False,
            "percentage": 0.0,
            "to": red_to,
        },
    ]


def _group_mask(values: np.ndarray, group: Group) -> np.ndarray:
    mask = np.ones(values.shape, dtype=bool)
    if "from" in group:
        mask &= values >= group["from"]
    if "to" in group:
        mask &= values < group["to"]
    return mask


def group_for_value(value: float, groups: Sequence[Group]) -> Group | None:
    """First group whose [from, to) range contains the value."""
    for group in groups:
        if ("from" not in group or group["from"] <= value) and ("to" not in group or group["to"] > value):
            return group
    return None


def assign_groups(values: np.ndarray, groups: Sequence[Group]) -> np.ndarray:
    """Position of the first matching group for every value.

    First match wins, so overlapping bands (e.g. from a negative liquidity)
    still assign each value exactly once.
    """
    membership = np.full(values.shape, -1, dtype=np.intp)
    for position, group in enumerate(groups):
        unassigned = membership == -1
        membership[unassigned & _group_mask(values, group)] = position
    if np.any(membership == -1):
        raise ValueError("Reachability groups do not cover all simulated values")
    return membership


def calculate_required_amount(
    project_index: int,
    project: Project,
    projects_by_start_year: Mapping[int, Sequence[IndexedProject]],
) -> float:
    """Own amount plus the amounts of same-year projects listed before it."""
    amount = project.total_amount
    for other_index, other_project in projects_by_start_year[project.start_year]:
        if other_index == project_index:
            break
        amount += other_project.total_amount
    return amount


def median(sorted_values: Sequence[float]) -> float:
    n = len(sorted_values)
    half = n // 2
    if n % 2:
        return float(sorted_values[half])
    return (float(sorted_values[half - 1]) + float(sorted_values[half])) / 2.0


def build_buckets(
    sorted_values: np.ndarray,
    membership: np.ndarray,
    groups: Sequence[Group],
) -> list[Bucket]:
    """Decile histogram over sorted values, each bucket split by group."""
    bucket_size = max(1, _round_half_up(len(sorted_values) / NUMBER_OF_BUCKETS))
    buckets: list[Bucket] = []

    for start in range(0, len(sorted_values), bucket_size):
        chunk = sorted_values[start:start + bucket_size]
        chunk_groups = membership[start:start + bucket_size]

        sub_buckets: dict[str, SubBucket] = {}
        for position in dict.fromkeys(chunk_groups.tolist()):
            members = chunk[chunk_groups == position]
            name = groups[position]["name"]
            sub_buckets[name] = SubBucket(group=name, min=int(members.min()), max=int(members.max()))

        buckets.append(Bucket(min=int(chunk.min()), max=int(chunk.max()), sub_buckets=sub_buckets))

    return buckets


def calculate_project(project_index: int, project: Project, environment: Environment) -> ProjectResult:
    """Aggregate the simulated outcome distribution for one project.

    The project's outcomes are the portfolio values at the end of its start
    year, i.e. after its outflow and that year's market performance.
    """
    year_row = project.start_year + 1
    if not 0 < year_row < environment.simulated_values.shape[0]:
        raise IndexError(
            f"Project starting in year {project.start_year} is outside the "
            f"{environment.num_years}-year simulation"
        )

    required_amount = calculate_required_amount(
        project_index, project, environment.projects_by_start_year,
    )
    values = np.sort(environment.simulated_values[year_row])
    n = len(values)

    groups = create_groups(
        required_amount,
        environment.no_interest_reference_line[project.start_year],
        environment.liquidity,
    )
    membership = assign_groups(values, groups)
    buckets = build_buckets(values, membership, groups)

    counts = np.bincount(membership, minlength=len(groups))
    non_empty_groups: list[Group] = [
        {**group, "percentage": int(count) / n}
        for group, count in zip(groups, counts)
        if count
    ]

    one_sixth = _round_half_up(n / 6)
    return ProjectResult(
        project=project.as_dict(),
        min=int(values[0]),
        max=int(values[-1]),
        median=median(values),
        two_third=Band(min=int(values[one_sixth]), max=int(values[n - 1 - one_sixth])),
        buckets=buckets,
        groups=non_empty_groups,
    )


def calculate_projects(environment: Environment) -> list[ProjectResult]:
    """Results for every project the environment emits, in input order."""
    return [
        calculate_project(index, project, environment)
        for index, project in environment.projects_to_simulate
    ]
