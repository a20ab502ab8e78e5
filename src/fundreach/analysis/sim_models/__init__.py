"""Capital projection simulation building blocks.

Provides the pieces the simulation drivers are assembled from:
- random_stream: seedable source of normally-distributed shocks
- schedule: cash-flow schedule and no-interest reference line
- paths: Monte Carlo performance paths as absolute portfolio values
- options: validated simulation options
- environment: shared, read-only simulation context
- aggregate: per-project reduction into groups, buckets and statistics
"""

from enum import Enum
from typing import TypedDict


class GroupName(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    GRAY = "gray"
    RED = "red"


# Reachability band covering values in [from, to). Functional form because
# "from" is a keyword; open-ended bands omit "from" or "to".
Group = TypedDict(
    "Group",
    {
        "name": str,
        "description": str,
        "separator": bool,
        "percentage": float,
        "from": float,
        "to": float,
    },
    total=False,
)


class SubBucket(TypedDict):
    group: str
    min: float
    max: float


class Bucket(TypedDict):
    min: float
    max: float
    sub_buckets: dict[str, SubBucket]


class Band(TypedDict):
    min: float
    max: float


class ProjectDict(TypedDict):
    start_year: int
    total_amount: float


class ProjectResult(TypedDict):
    """Standard return type for one aggregated project."""
    project: ProjectDict
    min: float
    max: float
    median: float
    two_third: Band
    buckets: list[Bucket]
    groups: list[Group]


class InvalidOptionsError(ValueError):
    """Simulation options failed validation; no simulation work was done."""


__all__ = [
    "GroupName",
    "Group",
    "SubBucket",
    "Bucket",
    "Band",
    "ProjectDict",
    "ProjectResult",
    "InvalidOptionsError",
]
