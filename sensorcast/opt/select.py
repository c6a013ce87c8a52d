"""Grid search over a fixed set of SARIMA orders.

English:
    Train one independent model per candidate on the same cleaned series and keep
    the candidate with the lowest AIC. The scan keeps a candidate only when its
    AIC is strictly lower, so the first-listed order wins ties and failed fits
    (sentinel AIC) are never preferred over a real fit.

日本語:
    同じ清掃済み系列に対して候補ごとに独立したモデルを学習し、AIC最小の候補を
    選びます。AICが厳密に小さい場合のみ更新するため、同点では先の候補が残ります。
"""

from __future__ import annotations
import logging
from typing import Sequence, Tuple
import numpy as np

from ..config import SelectionConfig
from ..data.preprocess import NormalizationParams
from ..errors import InsufficientDataError
from ..eval.metrics import EvaluationMetrics
from ..models.sarima import FittedModel, SarimaOrder, train

logger = logging.getLogger(__name__)


# EN: weekly seasonality (s=7) throughout; order matters for tie-breaking.
# JP: 季節周期は常に7。同点時の優先順位があるため順序は固定です。
CANDIDATE_ORDERS: Tuple[SarimaOrder, ...] = (
    SarimaOrder(1, 1, 1, 1, 0, 1, 7),
    SarimaOrder(1, 1, 1, 0, 0, 0, 7),
    SarimaOrder(2, 1, 2, 1, 0, 1, 7),
    SarimaOrder(1, 1, 1, 1, 1, 1, 7),
    SarimaOrder(0, 1, 1, 0, 0, 1, 7),
    SarimaOrder(2, 1, 1, 1, 0, 1, 7),
    SarimaOrder(1, 1, 2, 1, 0, 1, 7),
    SarimaOrder(3, 1, 1, 1, 0, 1, 7),
    SarimaOrder(1, 1, 3, 1, 0, 1, 7),
    SarimaOrder(2, 1, 2, 0, 0, 0, 7),
    SarimaOrder(1, 1, 1, 2, 0, 1, 7),
    SarimaOrder(1, 1, 1, 1, 0, 2, 7),
    SarimaOrder(0, 1, 2, 0, 0, 1, 7),
    SarimaOrder(2, 1, 0, 1, 0, 1, 7),
    SarimaOrder(0, 1, 3, 0, 0, 1, 7),
)


def select_best(
    series,
    normalization: NormalizationParams = NormalizationParams(),
    candidates: Sequence[SarimaOrder] = CANDIDATE_ORDERS,
    cfg: SelectionConfig = SelectionConfig(),
) -> Tuple[FittedModel, EvaluationMetrics]:
    """Return the fitted model and metrics of the minimum-AIC candidate.

    Raises InsufficientDataError when the series is shorter than cfg.min_points.
    """
    x = np.asarray(series, dtype=float)
    if len(x) < cfg.min_points:
        raise InsufficientDataError(
            f"need at least {cfg.min_points} points for order selection, got {len(x)}"
        )
    if not candidates:
        raise ValueError("candidates must not be empty")

    best = None
    for i, order in enumerate(candidates, start=1):
        fitted, metrics = train(x, order, normalization)
        logger.info(
            "Candidate %d/%d %s: AIC=%.4f, BIC=%.4f, R2=%.4f",
            i, len(candidates), order, metrics.aic, metrics.bic, metrics.r2,
        )
        if best is None or metrics.aic < best[1].aic:
            best = (fitted, metrics)

    fitted, metrics = best
    logger.info(
        "Best order %s: AIC=%.4f, BIC=%.4f, R2=%.4f, MSE=%.4f, MAE=%.4f",
        fitted.order, metrics.aic, metrics.bic, metrics.r2, metrics.mse, metrics.mae,
    )
    return fitted, metrics
