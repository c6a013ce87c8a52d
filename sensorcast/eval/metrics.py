"""Model fit metrics.

English:
    - In-sample fit metrics of a trained model (MSE, MAE, R^2, log-likelihood,
      AIC, BIC) computed from its residuals.

日本語:
    - 学習済みモデルの残差から計算する適合度指標（MSE, MAE, R^2, 対数尤度, AIC, BIC）。
"""

from __future__ import annotations
import sys
from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True)
class EvaluationMetrics:
    mse: float
    mae: float
    r2: float
    aic: float
    bic: float
    log_likelihood: float


# EN: returned for failed fits so a grid search still has a well-defined minimum.
# JP: 学習失敗時の値。グリッド探索の最小AICが常に定義されるようにします。
SENTINEL = EvaluationMetrics(
    mse=sys.float_info.max,
    mae=sys.float_info.max,
    r2=0.0,
    aic=sys.float_info.max,
    bic=sys.float_info.max,
    log_likelihood=0.0,
)


def evaluate(residuals, differenced, n_obs: int, k: int) -> EvaluationMetrics:
    """Fit metrics from residuals.

    Parameters
    ----------
    residuals:
        in-sample one-step residuals.
    differenced:
        the differenced series the residuals were computed on.
    n_obs:
        length of the training series (used by BIC).
    k:
        parameter count p + q + P + Q + 1.

    Notes / 注意:
        - TSS is taken around the *residual* mean, not the series mean.
        - A zero MSE gives log-likelihood +inf and AIC -inf.
        - R^2 is 0 when TSS is 0.
    """
    r = np.asarray(residuals, dtype=float)
    x = np.asarray(differenced, dtype=float)
    if r.size == 0:
        return SENTINEL

    n = r.size
    mse = float(np.mean(r ** 2))
    mae = float(np.mean(np.abs(r)))

    rss = float(np.sum(r ** 2))
    tss = float(np.sum((x - np.mean(r)) ** 2))
    r2 = 1.0 - rss / tss if tss != 0 else 0.0

    with np.errstate(divide="ignore"):
        log_likelihood = float(-0.5 * n * np.log(2.0 * np.pi * mse) - 0.5 * n)
    aic = 2.0 * k - 2.0 * log_likelihood
    bic = float(np.log(n_obs)) * k - 2.0 * log_likelihood

    return EvaluationMetrics(
        mse=mse,
        mae=mae,
        r2=float(r2),
        aic=float(aic),
        bic=float(bic),
        log_likelihood=log_likelihood,
    )
