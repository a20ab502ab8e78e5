"""Pytest configuration and shared fixtures."""

import pytest

from fundreach.analysis.sim_models.options import initialize_options


@pytest.fixture
def sample_projects():
    """Ten projects spread over the horizon, input order not sorted by year."""
    return [
        {"start_year": 3, "total_amount": 120000},
        {"start_year": 0, "total_amount": 50000},
        {"start_year": 1, "total_amount": 80000},
        {"start_year": 3, "total_amount": 40000},
        {"start_year": 0, "total_amount": 30000},
        {"start_year": 4, "total_amount": 200000},
        {"start_year": 2, "total_amount": 60000},
        {"start_year": 1, "total_amount": 25000},
        {"start_year": 4, "total_amount": 10000},
        {"start_year": 2, "total_amount": 90000},
    ]


@pytest.fixture
def sample_options(sample_projects):
    """Small but noisy simulation over five years."""
    return {
        "projects": sample_projects,
        "num_years": 5,
        "num_runs": 600,
        "investment_amount": 1_000_000,
        "performance": 0.02,
        "volatility": 0.15,
        "liquidity": 10_000,
    }


@pytest.fixture
def validated_options(sample_options):
    return initialize_options(sample_options)
