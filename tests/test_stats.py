from __future__ import annotations

import pytest

from spotcast.core.stats import clamp, covariance_slope, mean, round2


def test_mean_empty_is_zero() -> None:
    assert mean([]) == 0.0


@pytest.mark.parametrize("x", [-3.5, 0.0, 42.0])
def test_mean_single_value(x: float) -> None:
    assert mean([x]) == x


def test_mean_accepts_generators() -> None:
    assert mean(v for v in [1.0, 2.0, 3.0]) == pytest.approx(2.0)


def test_covariance_slope_recovers_linear_slope() -> None:
    xs = [0.0, 1.0, 2.0, 3.0, 4.0]
    ys = [2 * x + 1 for x in xs]
    assert covariance_slope(xs, ys) == pytest.approx(2.0)


@pytest.mark.parametrize("ys", [[1.0, 5.0, -3.0, 8.0], [0.0, 0.0, 0.0, 0.0], [1e6, -1e6, 3.0, 7.0]])
def test_covariance_slope_zero_variance_x(ys) -> None:
    assert covariance_slope([0.1, 0.1, 0.1, 0.1], ys) == 0.0


def test_covariance_slope_needs_two_pairs() -> None:
    assert covariance_slope([], []) == 0.0
    assert covariance_slope([1.0], [5.0]) == 0.0


def test_clamp_and_round2() -> None:
    assert clamp(500.0, -20.0, 450.0) == 450.0
    assert clamp(-100.0, -20.0, 450.0) == -20.0
    assert clamp(12.5, -20.0, 450.0) == 12.5
    assert round2(53.499999) == 53.5
    assert round2(7) == 7.0
