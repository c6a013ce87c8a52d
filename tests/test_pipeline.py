import numpy as np
import pandas as pd
import pytest

from sensorcast.config import SelectionConfig
from sensorcast.errors import InsufficientDataError
from sensorcast.eval.metrics import EvaluationMetrics
from sensorcast.pipeline import GroupResult, fit_group, r2_summary, run_groups


def _frame(weekly_series):
    a = pd.DataFrame(
        {
            "site_id": 1,
            "threshold_type": 1,
            "datetime": pd.date_range("2024-01-01", periods=60, freq="D"),
            "value": weekly_series,
        }
    )
    b = pd.DataFrame(
        {
            "site_id": 2,
            "threshold_type": 1,
            "datetime": pd.date_range("2024-01-01", periods=10, freq="D"),
            "value": np.arange(10.0),
        }
    )
    # shuffled rows and one missing value
    df = pd.concat([a, b], ignore_index=True).sample(frac=1.0, random_state=0)
    df.loc[df.index[0], "value"] = np.nan
    return df


def test_run_groups_skips_short_groups(weekly_series):
    results = run_groups(_frame(weekly_series), sel_cfg=SelectionConfig(horizon=7))
    assert list(results) == [(1, 1)]
    res = results[(1, 1)]
    assert res.predictions.shape == (7,)
    assert np.all(np.isfinite(res.predictions))
    assert res.fitted.metrics == res.metrics


def test_run_groups_requires_columns():
    with pytest.raises(ValueError):
        run_groups(pd.DataFrame({"datetime": [], "value": []}))


def test_fit_group_constant_series():
    res = fit_group(np.full(30, 5.0), site_id="s", threshold_type="t")
    assert res.predictions.shape == (30,)
    assert np.allclose(res.predictions, 5.0)


def test_fit_group_rejects_short_series():
    with pytest.raises(InsufficientDataError):
        fit_group(np.arange(15.0))


def test_r2_summary_buckets():
    def result(r2):
        m = EvaluationMetrics(mse=1.0, mae=1.0, r2=r2, aic=0.0, bic=0.0, log_likelihood=0.0)
        return GroupResult("s", "t", None, m, np.zeros(0))

    values = [0.9, 0.85, 0.7, 0.5, 0.1]
    out = r2_summary({i: result(v) for i, v in enumerate(values)})
    assert out["n_groups"] == 5
    assert out["mean_r2"] == pytest.approx(np.mean(values))
    assert out["max_r2"] == 0.9 and out["min_r2"] == 0.1
    assert out["std_r2"] == pytest.approx(np.std(values))
    assert (out["excellent"], out["good"], out["fair"], out["poor"]) == (2, 1, 1, 1)

    assert r2_summary({}) == {"n_groups": 0}
