import numpy as np
import pytest

from sensorcast.data.preprocess import clean
from sensorcast.errors import InsufficientDataError
from sensorcast.eval.metrics import SENTINEL
from sensorcast.models.sarima import SarimaOrder, train
from sensorcast.opt.select import CANDIDATE_ORDERS, select_best


def test_candidate_grid():
    assert len(CANDIDATE_ORDERS) == 15
    assert len(set(CANDIDATE_ORDERS)) == 15
    assert all(o.s == 7 for o in CANDIDATE_ORDERS)


def test_picks_minimum_aic(weekly_series):
    z, norm = clean(weekly_series)
    fitted, metrics = select_best(z, norm)

    aics = [train(z, o, norm)[1].aic for o in CANDIDATE_ORDERS]
    assert metrics.aic == min(aics)
    assert fitted.order == CANDIDATE_ORDERS[aics.index(min(aics))]
    assert fitted.metrics == metrics
    assert fitted.normalization == norm


def test_selection_is_deterministic(weekly_series):
    z, norm = clean(weekly_series)
    first_fit, first = select_best(z, norm)
    second_fit, second = select_best(z, norm)
    assert first_fit.order == second_fit.order
    assert first == second
    assert np.array_equal(first_fit.residuals, second_fit.residuals)


def test_all_failures_keep_first_candidate():
    fitted, metrics = select_best(np.zeros(30))
    assert metrics is SENTINEL
    assert fitted.order == CANDIDATE_ORDERS[0]

    a, b = SarimaOrder(2, 1, 0), SarimaOrder(1, 1, 0)
    fitted, _ = select_best(np.zeros(30), candidates=[a, b])
    assert fitted.order == a


def test_short_series_rejected():
    with pytest.raises(InsufficientDataError):
        select_best(np.arange(19.0))
