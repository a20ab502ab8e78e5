"""Unit tests for random stream and path simulation."""

import numpy as np
import pytest

from fundreach.analysis.sim_models.paths import (
    round_half_away_from_zero,
    simulate_indices,
    simulate_outcomes,
    to_absolute_values,
)
from fundreach.analysis.sim_models.random_stream import DEFAULT_SEED, RandomStream


class TestRandomStream:
    def test_same_seed_same_draws(self):
        a, b = RandomStream(7), RandomStream(7)
        assert [a.next_normal(0, 1) for _ in range(5)] == [b.next_normal(0, 1) for _ in range(5)]

    def test_none_uses_default_seed(self):
        assert RandomStream(None).seed == DEFAULT_SEED
        assert np.array_equal(RandomStream(None).normals(0, 1, 10), RandomStream().normals(0, 1, 10))

    def test_reseed_restarts_sequence(self):
        stream = RandomStream(3)
        first = stream.normals(0, 1, 4)
        stream.reseed(3)
        assert np.array_equal(stream.normals(0, 1, 4), first)

    def test_zero_stddev_returns_mean(self):
        assert RandomStream().next_normal(0.05, 0.0) == pytest.approx(0.05)


class TestRounding:
    def test_ties_away_from_zero(self):
        result = round_half_away_from_zero([0.5, 1.5, 2.5, -0.5, -2.5, 2.4, -2.6])
        assert result.tolist() == [1, 2, 3, -1, -3, 2, -3]

    def test_returns_array_for_scalar_and_sequence(self):
        assert isinstance(round_half_away_from_zero([0.5]), np.ndarray)
        assert round_half_away_from_zero(-2.5).tolist() == -3


class TestIndices:
    def test_shape_and_base(self):
        indices = simulate_indices(4, 3, 0.1, 0.0, RandomStream())
        assert indices.shape == (4, 4)
        assert np.all(indices[:, 0] == 100.0)

    def test_constant_performance_compounds(self):
        indices = simulate_indices(2, 3, 0.0, 0.1, RandomStream())
        assert indices[0].tolist() == pytest.approx([100.0, 110.0, 121.0, 133.1])


class TestAbsoluteValues:
    def test_cash_flow_applied_from_second_step(self):
        values = to_absolute_values(np.array([100.0, 110.0, 99.0]), 1000, [-100, 0])
        assert values.tolist() == [1000, 990, 891]

    def test_compounds_on_unrounded_value(self):
        # 1.5 * 1.5 = 2.25 -> 2 ; rounding in between would give 2 * 1.5 = 3
        values = to_absolute_values(np.array([100.0, 150.0, 225.0]), 1, [0, 0])
        assert values.tolist() == [1, 2, 2]

    def test_too_few_cash_flows(self):
        with pytest.raises(ValueError):
            to_absolute_values(np.array([100.0, 100.0, 100.0]), 1000, [0])


class TestSimulateOutcomes:
    def test_matrix_shape(self):
        values = simulate_outcomes([-10, -10, 0], 1000, num_runs=50, num_years=3,
                                   volatility=0.1, performance=0.0)
        assert values.shape == (4, 50)

    def test_first_row_is_investment(self):
        values = simulate_outcomes([0, 0], 5000, num_runs=20, num_years=2,
                                   volatility=0.2, performance=0.0)
        assert np.all(values[0] == 5000)

    def test_zero_volatility_matches_reference_line(self):
        values = simulate_outcomes([-100000, -50000], 1_000_000, num_runs=5, num_years=2,
                                   volatility=0.0, performance=0.0)
        assert values[:, 0].tolist() == [1_000_000, 900_000, 850_000]
        assert np.all(values == values[:, :1])

    def test_deterministic_for_seed(self):
        kwargs = dict(num_runs=100, num_years=4, volatility=0.2, performance=0.01)
        a = simulate_outcomes([-1, -2, -3, -4], 1000, random_stream=RandomStream(5), **kwargs)
        b = simulate_outcomes([-1, -2, -3, -4], 1000, random_stream=RandomStream(5), **kwargs)
        c = simulate_outcomes([-1, -2, -3, -4], 1000, random_stream=RandomStream(6), **kwargs)
        assert np.array_equal(a, b)
        assert not np.array_equal(a, c)

    def test_values_are_whole_currency_units(self):
        values = simulate_outcomes([-12345.6], 1_000_000, num_runs=30, num_years=1,
                                   volatility=0.05, performance=0.0)
        assert np.array_equal(values, np.round(values))
