import numpy as np

from sensorcast.models.differencing import difference, integrate


def test_output_length():
    x = np.arange(30, dtype=float)
    assert len(difference(x, 1, 0, 7)) == 29
    assert len(difference(x, 1, 1, 7)) == 22
    assert len(difference(x, 2, 2, 7)) == 14
    assert len(difference(x[:5], 1, 1, 7)) == 0


def test_linear_series_differences_to_ones():
    x = np.arange(100.0, 130.0)
    assert np.allclose(difference(x, 1), 1.0)
    assert np.allclose(difference(x, 2), 0.0)


def test_seasonal_difference_removes_weekly_cycle():
    x = np.tile([1.0, 4.0, 2.0, 8.0, 5.0, 7.0, 3.0], 5)
    assert np.allclose(difference(x, 0, 1, 7), 0.0)


def test_integrate_reconstructs_original():
    rng = np.random.default_rng(3)
    x = np.cumsum(rng.normal(size=40))
    for d in (1, 2, 3):
        levels = [x]
        for _ in range(d):
            levels.append(np.diff(levels[-1]))
        last = [levels[k][d - k - 1] for k in range(d)]
        rebuilt = integrate(difference(x, d), last)
        assert np.allclose(rebuilt, x[d:])


def test_zero_lag_seasonal_difference_is_zeros():
    x = np.arange(10, dtype=float)
    out = difference(x, 0, 1, 0)
    assert len(out) == 10
    assert np.all(out == 0.0)
    assert len(difference(x, 1, 2, 0)) == 9
