"""Coefficient estimation and in-sample residuals.

English:
    - AR terms: Yule-Walker equations on uncentred autocovariances (divided by
      n-k), solved with a dense LU factorization.
    - MA terms: a deliberately simple heuristic. One OLS regression of x[i] on
      x[i-1] gives the first coefficient; the remaining ones are fixed at 0.1.
    - Seasonal AR/MA terms reuse the same estimators with order P*s / Q*s.

    These are transparent approximations, not maximum-likelihood SARIMA.

日本語:
    - AR項: 非中心化自己共分散（n-kで割る）によるYule-Walker方程式をLU分解で解く。
    - MA項: 意図的に簡略化。x[i]をx[i-1]に回帰した傾きを第1係数とし、
      残りは0.1で固定。
    - 季節AR/MA項は同じ推定器を次数P*s / Q*sで使います。

    最尤推定ではなく、透明性を優先した近似です。
"""

from __future__ import annotations
from dataclasses import dataclass
import numpy as np
from scipy.linalg import lu_factor, lu_solve, toeplitz
from scipy.stats import linregress
from statsmodels.tsa.stattools import acovf

from ..errors import EstimationError

# Pivot magnitude below which the Toeplitz system is treated as singular.
SINGULARITY_THRESHOLD = 1e-11
MA_FILL = 0.1


@dataclass(frozen=True)
class Coefficients:
    ar: np.ndarray
    ma: np.ndarray
    seasonal_ar: np.ndarray
    seasonal_ma: np.ndarray
    intercept: float


def estimate_ar(x, order: int) -> np.ndarray:
    """Yule-Walker AR coefficients; empty when order is 0 or x is too short."""
    x = np.asarray(x, dtype=float)
    if order == 0 or len(x) <= order:
        return np.zeros(0)

    acov = acovf(x, adjusted=True, demean=False, fft=False, nlag=order)
    R = toeplitz(acov[:order])
    lu, piv = lu_factor(R)
    if np.any(np.abs(np.diag(lu)) < SINGULARITY_THRESHOLD):
        raise EstimationError(f"singular Yule-Walker matrix for AR order {order}")
    return lu_solve((lu, piv), acov[1 : order + 1])


def estimate_ma(x, order: int) -> np.ndarray:
    """MA heuristic: lag-1 OLS slope, then MA_FILL for the higher lags.

    EN: regression rows are i = order .. n-1 (x = x[i-1], y = x[i]).
    JP: 回帰に使う行は i = order .. n-1 です。
    """
    x = np.asarray(x, dtype=float)
    if order == 0 or len(x) <= order:
        return np.zeros(0)

    xs = x[order - 1 : -1]
    ys = x[order:]
    try:
        fit = linregress(xs, ys)
    except ValueError as exc:
        # all regressors identical -> slope undefined
        raise EstimationError(f"MA regression failed for order {order}: {exc}") from exc
    if not np.isfinite(fit.slope):
        raise EstimationError(f"MA regression slope undefined for order {order}")

    coef = np.full(order, MA_FILL, dtype=float)
    coef[0] = fit.slope
    return coef


def estimate(x, p: int, q: int, P: int = 0, Q: int = 0, s: int = 7) -> Coefficients:
    """Estimate every coefficient block from a differenced series.

    Raises EstimationError when any block fails.
    """
    x = np.asarray(x, dtype=float)
    return Coefficients(
        ar=estimate_ar(x, p),
        ma=estimate_ma(x, q),
        seasonal_ar=estimate_ar(x, P * s),
        seasonal_ma=estimate_ma(x, Q * s),
        intercept=float(np.mean(x)) if len(x) else 0.0,
    )


def compute_residuals(x, coef: Coefficients, p: int, q: int) -> np.ndarray:
    """One-step in-sample residuals, computed recursively.

    English:
        Starting at max(p, q) (at least 1):
            pred[i] = intercept + sum_j ar[j]*x[i-j-1] + sum_j ma[j]*res[-j-1]
            res[i]  = x[i] - pred[i]
        Later residuals depend on earlier ones, so this is a plain loop.

    日本語:
        後の残差が前の残差に依存するため、逐次ループで計算します。
    """
    x = np.asarray(x, dtype=float)
    start = max(p, q) or 1
    ar, ma = coef.ar, coef.ma

    res: list[float] = []
    for i in range(start, len(x)):
        pred = coef.intercept
        for j in range(min(len(ar), i)):
            pred += ar[j] * x[i - j - 1]
        for j in range(min(len(ma), len(res))):
            pred += ma[j] * res[-j - 1]
        res.append(float(x[i] - pred))
    return np.asarray(res, dtype=float)
