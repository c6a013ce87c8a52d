"""Recursive multi-step forecasting.

English:
    Roll the fitted AR/MA recursion forward from the tail of the training series,
    adding a linear trend and a weekly seasonal correction, clipping each step
    into a band around the historical range, and finally denormalizing.

    Future true values are never read: every step only uses the training tail and
    the model's own earlier predictions.

日本語:
    学習系列の末尾からAR/MA再帰を前に進め、線形トレンドと週次季節補正を加え、
    各ステップを過去の値域に基づく範囲にクリップし、最後に逆標準化します。

    未来の真値は一切参照せず、学習系列の末尾と自身の予測値のみを使います。
"""

from __future__ import annotations
import logging
import numpy as np
from scipy.stats import linregress

from ..config import ForecastConfig
from ..data import stats
from ..data.preprocess import denormalize
from .sarima import FittedModel

logger = logging.getLogger(__name__)


def _trend_slope(x: np.ndarray, cfg: ForecastConfig) -> float:
    # EN: OLS slope over the last trend_window points (x = relative index).
    # JP: 直近trend_window点のOLS傾き（説明変数は相対インデックス）。
    if len(x) < cfg.trend_min_points:
        return 0.0
    tail = x[-cfg.trend_window:]
    return float(linregress(np.arange(len(tail), dtype=float), tail).slope)


def _seasonal_offset(x: np.ndarray, cfg: ForecastConfig) -> float:
    """Mean of the recent points sharing the next index's phase, minus their overall mean."""
    n = len(x)
    if n < cfg.season_min_points:
        return 0.0
    start = max(0, n - cfg.season_window)
    idx = np.arange(start, n)
    tail = x[start:]
    same_phase = tail[idx % cfg.season_length == n % cfg.season_length]
    if same_phase.size == 0:
        return 0.0
    return stats.mean(same_phase) - stats.mean(tail)


def forecast_normalized(
    fitted: FittedModel,
    horizon: int,
    series=None,
    cfg: ForecastConfig = ForecastConfig(),
) -> np.ndarray:
    """Forecast `horizon` steps in normalized space.

    English:
        For step t:
            pred = sum_j ar[j]*window[-j-1] + sum_j ma[j]*res_window[-j-1]
                   + trend*(t+1) + offset*sin(2*pi*dow/7)
        with dow = (len(series) + t) mod 7, clipped to
        [hist_min*clip_low, hist_max*clip_high]. The windows slide by one after
        each step; the new "residual" is pred minus the previous window value.

    日本語:
        各ステップで上式を計算し、過去の最小・最大に基づく範囲へクリップします。
        予測後にウィンドウを1つずらし、新しい残差は直前値との差とします。
    """
    if horizon <= 0:
        return np.zeros(0)

    x = np.asarray(fitted.series if series is None else series, dtype=float)
    n = len(x)
    max_lag = fitted.order.max_lag
    ar, ma = fitted.coef.ar, fitted.coef.ma

    window = list(x[-max_lag:]) if n else []
    res_window = list(fitted.residuals[-max_lag:])

    hist_min, hist_max = stats.minmax(x)
    hist_std = stats.std(x)
    lo, hi = hist_min * cfg.clip_low, hist_max * cfg.clip_high
    trend = _trend_slope(x, cfg)
    offset = _seasonal_offset(x, cfg)
    rng = np.random.default_rng(cfg.seed) if cfg.noise_level > 0 else None

    preds = np.empty(horizon, dtype=float)
    for t in range(horizon):
        pred = 0.0
        for j in range(min(len(ar), len(window))):
            pred += ar[j] * window[-j - 1]
        for j in range(min(len(ma), len(res_window))):
            pred += ma[j] * res_window[-j - 1]

        pred += trend * (t + 1)
        dow = (n + t) % cfg.season_length
        pred += offset * np.sin(2.0 * np.pi * dow / cfg.season_length)

        if rng is not None:
            pred += (rng.random() - 0.5) * cfg.noise_level * hist_std

        pred = max(lo, min(hi, pred))
        preds[t] = pred

        window.append(pred)
        if len(window) > max_lag:
            window.pop(0)
        res_window.append(pred - window[-2] if len(window) > 1 else 0.0)
        if len(res_window) > max_lag:
            res_window.pop(0)

        if t < 5 or t == horizon - 1:
            logger.debug(
                "Step %d: pred=%.4f trend=%.4f seasonal=%.4f",
                t + 1, pred, trend * (t + 1),
                offset * np.sin(2.0 * np.pi * dow / cfg.season_length),
            )

    return preds


def forecast(
    fitted: FittedModel,
    horizon: int,
    series=None,
    cfg: ForecastConfig = ForecastConfig(),
) -> np.ndarray:
    """Forecast `horizon` steps and map them back to the original scale."""
    z = forecast_normalized(fitted, horizon, series=series, cfg=cfg)
    out = denormalize(z, fitted.normalization)
    if z.size:
        logger.info(
            "Forecast %s: %d steps, normalized range [%.4f, %.4f], denormalized [%.4f, %.4f]",
            fitted.order, z.size, z.min(), z.max(), out.min(), out.max(),
        )
    return out
