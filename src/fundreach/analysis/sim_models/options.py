"""Simulation options with defaults applied at a single boundary."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel, to_snake

from . import InvalidOptionsError, ProjectDict

DEFAULT_NUM_YEARS = 10
DEFAULT_NUM_RUNS = 10000
DEFAULT_INVESTMENT_AMOUNT = 1_000_000
DEFAULT_PERFORMANCE = 0.0
DEFAULT_LIQUIDITY = 10_000


class Project(BaseModel):
    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False,
    )

    start_year: int = Field(ge=0, description="Year the project draws its capital")
    total_amount: float = Field(description="Capital the project needs")

    def as_dict(self) -> ProjectDict:
        return ProjectDict(start_year=self.start_year, total_amount=self.total_amount)


class SimulationOptions(BaseModel):
    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False,
    )

    num_years: int = Field(DEFAULT_NUM_YEARS, gt=0)
    num_runs: int = Field(DEFAULT_NUM_RUNS, gt=0)
    projects: tuple[Project, ...] = ()
    investment_amount: float = DEFAULT_INVESTMENT_AMOUNT
    performance: float = DEFAULT_PERFORMANCE
    volatility: float = Field(ge=0, description="Standard deviation of the yearly performance")
    seed: int | None = None
    liquidity: float = DEFAULT_LIQUIDITY

    @model_validator(mode="after")
    def _projects_within_horizon(self) -> "SimulationOptions":
        for position, project in enumerate(self.projects):
            if project.start_year >= self.num_years:
                raise ValueError(
                    f"project {position} starts in year {project.start_year}, "
                    f"beyond the simulated horizon of {self.num_years} years"
                )
        return self

    def to_worker_dict(self) -> dict[str, Any]:
        """Plain, pickle-safe representation for worker processes."""
        return self.model_dump(mode="python")


def initialize_options(
    options: SimulationOptions | Mapping[str, Any] | None = None,
    defaults: Mapping[str, Any] | None = None,
    **overrides: Any,
) -> SimulationOptions:
    """Validate caller options and fill in defaults.

    ``defaults`` (e.g. from Settings) apply below the caller's values; field
    names may be snake_case or camelCase.

    Raises:
        InvalidOptionsError: if any option is missing or out of range.
    """
    if isinstance(options, SimulationOptions) and not defaults and not overrides:
        return options

    if isinstance(options, SimulationOptions):
        supplied: dict[str, Any] = options.model_dump(exclude_unset=True)
    else:
        supplied = dict(options or {})

    merged = {
        to_snake(key): value
        for source in (defaults or {}, supplied, overrides)
        for key, value in source.items()
    }
    if "projects" in merged and merged["projects"] is None:
        merged["projects"] = ()

    try:
        return SimulationOptions.model_validate(merged)
    except ValidationError as e:
        raise InvalidOptionsError(f"Invalid simulation options: {e}") from e
