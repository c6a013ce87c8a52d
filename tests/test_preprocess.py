import numpy as np
import pandas as pd
import pytest

from sensorcast.data import stats
from sensorcast.data.preprocess import (
    CleanSpec,
    NormalizationParams,
    adjust_seasonality,
    clean,
    denormalize,
    extract_series,
    fill_missing,
    normalize,
    remove_outliers_iqr,
    smooth,
)


def test_stats_conventions():
    assert stats.mean([]) == 0.0
    assert stats.std([3.0]) == 0.0
    assert stats.std([1.0, 3.0]) == pytest.approx(np.sqrt(2.0))
    # (n+1)p rule: position 1.25 between 1 and 2
    assert stats.percentile([1.0, 2.0, 3.0, 4.0], 25) == pytest.approx(1.25)
    assert stats.percentile([1.0, 2.0, 3.0, 4.0], 75) == pytest.approx(3.75)


def test_constant_series_normalizes_to_zero():
    z, params = clean(np.full(30, 5.0))
    assert np.allclose(z, 0.0)
    assert params == NormalizationParams(mean=5.0, std=1.0)
    assert np.allclose(denormalize(z, params), 5.0)


def test_normalize_roundtrip(weekly_series):
    z, params = normalize(weekly_series)
    assert abs(np.mean(z)) < 1e-9
    assert np.allclose(denormalize(z, params), weekly_series)


def test_outlier_replaced_by_previous_value():
    x = np.arange(20, dtype=float)
    x[10] = 1000.0
    out = remove_outliers_iqr(x)
    assert out[10] == 9.0
    assert np.array_equal(np.delete(out, 10), np.delete(x, 10))


def test_first_outlier_uses_series_mean():
    x = np.arange(20, dtype=float)
    x[0] = 1000.0
    out = remove_outliers_iqr(x)
    assert out[0] == pytest.approx(np.mean(x))
    assert out[1] == 1.0


def test_outlier_step_skips_short_series_and_fills_nan():
    short = np.array([1.0, 500.0, 2.0])
    assert np.array_equal(remove_outliers_iqr(short), short)

    x = np.arange(12, dtype=float)
    x[5] = np.nan
    out = remove_outliers_iqr(x)
    assert out[5] == 4.0


def test_seasonal_factors_ignore_tail():
    rng = np.random.default_rng(0)
    x = rng.normal(size=50)
    y = x.copy()
    y[40:] += 100.0  # only the last 20% changes
    ax, ay = adjust_seasonality(x), adjust_seasonality(y)
    assert np.allclose(ax[:40], ay[:40])
    assert np.allclose(ay[40:] - ax[40:], 100.0)


def test_seasonal_adjustment_removes_weekly_pattern():
    pattern = np.array([0.0, 1.0, 2.0, 3.0, 2.0, 1.0, 0.0])
    x = 10.0 + np.tile(pattern, 6)
    out = adjust_seasonality(x)
    assert np.allclose(out, out[0])

    short = x[:13]
    assert np.array_equal(adjust_seasonality(short), short)


def test_smoothing_is_causal():
    rng = np.random.default_rng(1)
    x = rng.normal(size=40)
    y = x.copy()
    y[25] += 50.0
    sx, sy = smooth(x), smooth(y)
    assert np.array_equal(sx[:25], sy[:25])
    # window = min(5, 40 // 10 + 1) = 5 -> mean of x[i-5..i]
    assert sx[10] == pytest.approx(np.mean(x[5:11]))
    assert sx[0] == x[0]


def test_fill_missing_uses_previous_value():
    x = np.array([np.nan, 1.0, np.nan, np.inf, 2.0])
    assert np.array_equal(fill_missing(x), [0.0, 1.0, 1.0, 1.0, 2.0])
    kept = fill_missing(x, include_inf=False)
    assert np.isinf(kept[3])


def test_clean_handles_missing_values(weekly_series):
    x = list(weekly_series)
    x[20] = None
    x[33] = np.nan
    z, params = clean(x, CleanSpec())
    assert len(z) == len(x)
    assert np.all(np.isfinite(z))
    assert params.std > 0


def test_extract_series_sorts_and_drops_nulls():
    df = pd.DataFrame(
        {
            "datetime": pd.to_datetime(["2024-01-03", "2024-01-01", None, "2024-01-02"]),
            "value": [3.0, 1.0, 9.0, None],
        }
    )
    assert np.array_equal(extract_series(df), [1.0, 3.0])

    with pytest.raises(ValueError):
        extract_series(pd.DataFrame({"value": [1.0]}))
