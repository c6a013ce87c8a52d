"""Seasonal ARIMA training (lightweight estimator).

English:
    `train` runs the whole chain for one order:
        NaN fill -> differencing -> coefficient estimation -> residuals -> metrics
    and returns an explicit `FittedModel` value. Any failure inside the chain,
    including a NaN AIC, is logged and converted to sentinel metrics
    (AIC = max float) so that one bad candidate never aborts a grid search.

    `update_model` is "online learning" as a full retrain on the extended
    series, not an incremental update: O(series length) per call.

日本語:
    `train`は1つの次数について、欠損補完 -> 差分 -> 係数推定 -> 残差 -> 指標
    を実行し、`FittedModel`を返します。途中の失敗はログに残し、
    センチネル指標（AIC=最大値）に変換します。

    `update_model`は系列を延長して全体を再学習します（逐次更新ではありません）。
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Tuple
import numpy as np

from ..data.preprocess import NormalizationParams, fill_missing
from ..errors import EstimationError
from ..eval.metrics import SENTINEL, EvaluationMetrics, evaluate
from .differencing import difference
from .estimation import Coefficients, compute_residuals, estimate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SarimaOrder:
    """(p, d, q) x (P, D, Q, s) orders."""

    p: int
    d: int
    q: int
    P: int = 0
    D: int = 0
    Q: int = 0
    s: int = 7

    def __post_init__(self):
        for name in ("p", "d", "q", "P", "D", "Q", "s"):
            v = getattr(self, name)
            if not isinstance(v, (int, np.integer)) or v < 0:
                raise ValueError(f"SARIMA order {name} must be a non-negative integer, got {v!r}")

    @property
    def max_lag(self) -> int:
        return max(self.p, self.q) or 1

    @property
    def n_params(self) -> int:
        return self.p + self.q + self.P + self.Q + 1

    def __str__(self) -> str:
        return f"SARIMA({self.p},{self.d},{self.q})({self.P},{self.D},{self.Q},{self.s})"


def _empty_coefficients() -> Coefficients:
    return Coefficients(
        ar=np.zeros(0),
        ma=np.zeros(0),
        seasonal_ar=np.zeros(0),
        seasonal_ma=np.zeros(0),
        intercept=0.0,
    )


@dataclass(frozen=True, eq=False)
class FittedModel:
    """Result of one `train` call.

    EN: `series` is the (normalized) training series; forecasts start from its
        tail and are mapped back with `normalization`.
    JP: `series`は学習に使った（標準化済み）系列。予測はその末尾から始め、
        `normalization`で元のスケールに戻します。
    """

    order: SarimaOrder
    coef: Coefficients
    residuals: np.ndarray
    series: np.ndarray
    normalization: NormalizationParams = NormalizationParams()
    metrics: EvaluationMetrics = field(default=SENTINEL)

    @property
    def failed(self) -> bool:
        return self.metrics is SENTINEL


def train(
    series,
    order: SarimaOrder,
    normalization: NormalizationParams = NormalizationParams(),
) -> Tuple[FittedModel, EvaluationMetrics]:
    """Fit one order on a cleaned series.

    Only the causal NaN fill runs here; the full cleaning chain runs upstream
    once per group.
    """
    x = fill_missing(series, include_inf=False)
    try:
        dx = difference(x, order.d, order.D, order.s)
        coef = estimate(dx, order.p, order.q, order.P, order.Q, order.s)
        res = compute_residuals(dx, coef, order.p, order.q)
        metrics = evaluate(res, dx, n_obs=len(x), k=order.n_params)
        if np.isnan(metrics.aic):
            raise EstimationError("AIC is NaN")
    except Exception as exc:
        logger.warning("Training %s failed: %s", order, exc)
        failed = FittedModel(order, _empty_coefficients(), np.zeros(0), x, normalization, SENTINEL)
        return failed, SENTINEL

    fitted = FittedModel(order, coef, res, x, normalization, metrics)
    return fitted, metrics


def update_model(fitted: FittedModel, new_points) -> FittedModel:
    """Retrain on the stored series extended by new observations.

    EN: new points are appended as given, without any transform; the caller
        supplies them on the same scale as the stored series. Order and
        normalization are kept.
    JP: 新しい観測値は変換せずそのまま追加します（保存済み系列と同じスケールで
        渡してください）。次数と標準化パラメータは引き継ぎます。
    """
    new = np.asarray(new_points, dtype=float)
    if new.size == 0:
        return fitted

    extended = np.concatenate([fitted.series, new])
    updated, _ = train(extended, fitted.order, fitted.normalization)
    logger.info(
        "Model %s retrained: %d new points, %d total",
        fitted.order, new.size, len(extended),
    )
    return updated
