"""Preprocessing utilities.

English:
    Turn a raw daily observation sequence into a model-ready series:
    - IQR outlier replacement (forward fill)
    - weekly seasonal adjustment (factors from the first 80% only)
    - causal moving-average smoothing
    - causal missing-value fill
    - z-score normalization (parameters kept for denormalizing forecasts)

    Every stage at position i reads only positions <= i of the stream it is
    building, so no future information leaks into the past.

日本語:
    生の日次観測列をモデル入力に変換します。
    - IQRによる外れ値置換（前方補完）
    - 週次の季節調整（係数は先頭80%のみから計算）
    - 因果的な移動平均による平滑化
    - 因果的な欠損補完
    - zスコア標準化（予測の逆変換用にパラメータを保持）

    各段階は位置iより後ろのデータを参照しないため、未来情報のリークはありません。
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Tuple
import numpy as np
import pandas as pd

from . import stats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanSpec:
    season_length: int = 7
    iqr_k: float = 1.5
    min_outlier_points: int = 10  # shorter series skip outlier removal
    seasonal_train_fraction: float = 0.8
    max_smooth_window: int = 5


@dataclass(frozen=True)
class NormalizationParams:
    """z-score parameters of one group.

    EN: std is never 0 (coerced to 1.0) so the transform stays invertible.
    JP: stdが0の場合は1.0に置き換え、逆変換可能に保ちます。
    """

    mean: float = 0.0
    std: float = 1.0


def extract_series(df: pd.DataFrame) -> np.ndarray:
    """Ordered value sequence from timestamped rows.

    Expected input columns: datetime, value

    EN: rows with a missing timestamp or value are dropped; duplicates are kept
        and calendar gaps are not filled (position is the only notion of time).
    JP: 欠損行は除外。重複や日付の欠落はそのまま（位置のみが時間を表す）。
    """
    if "datetime" not in df or "value" not in df:
        raise ValueError("df must have columns ['datetime', 'value']")

    s = df[["datetime", "value"]].dropna()
    s = s.sort_values("datetime", kind="mergesort")
    return s["value"].to_numpy(dtype=float)


def remove_outliers_iqr(x, spec: CleanSpec = CleanSpec()) -> np.ndarray:
    """Replace values outside [Q1 - k*IQR, Q3 + k*IQR] by the previous cleaned value.

    EN: bounds come from the whole series; the very first value falls back to
        the series mean. Non-finite values never pass the bounds check.
    JP: 範囲は系列全体から計算。先頭が外れ値なら平均値で置換します。
    """
    x = np.asarray(x, dtype=float)
    n = len(x)
    if n < spec.min_outlier_points:
        return x.copy()

    finite = x[np.isfinite(x)]
    q1 = stats.percentile(finite, 25)
    q3 = stats.percentile(finite, 75)
    iqr = q3 - q1
    lo = q1 - spec.iqr_k * iqr
    hi = q3 + spec.iqr_k * iqr

    out = np.empty(n, dtype=float)
    n_out = 0
    for i, v in enumerate(x):
        if lo <= v <= hi:
            out[i] = v
        else:
            n_out += 1
            out[i] = out[i - 1] if i > 0 else stats.mean(finite)

    if n_out:
        logger.info("IQR check replaced %d outliers", n_out)
    return out


def adjust_seasonality(x, spec: CleanSpec = CleanSpec()) -> np.ndarray:
    """Subtract per-phase (index mod season) offsets.

    EN: factors are estimated on the first `seasonal_train_fraction` of the
        series only, then applied to every element including the tail.
    JP: 係数は先頭部分のみで推定し、末尾を含む全要素に適用します。
    """
    x = np.asarray(x, dtype=float)
    n = len(x)
    season = spec.season_length
    if n < 2 * season:
        return x.copy()

    n_train = int(n * spec.seasonal_train_fraction)
    phase = np.arange(n) % season
    train = x[:n_train]
    overall = stats.mean(train)
    factors = np.array(
        [stats.mean(train[phase[:n_train] == k]) for k in range(season)],
        dtype=float,
    )

    logger.info("Seasonal adjustment: season=%d, factors from first %d points", season, n_train)
    return x - (factors[phase] - overall)


def smooth(x, spec: CleanSpec = CleanSpec()) -> np.ndarray:
    """Backward-looking moving average over [i - window, i]."""
    x = np.asarray(x, dtype=float)
    n = len(x)
    if n < 3:
        return x.copy()

    window = min(spec.max_smooth_window, n // 10 + 1)
    out = np.array([x[max(0, i - window): i + 1].mean() for i in range(n)], dtype=float)
    logger.info("Causal smoothing: window=%d", window)
    return out


def fill_missing(x, include_inf: bool = True) -> np.ndarray:
    """Replace missing values by the previous filled value (0 for the first).

    EN: NaN is always missing; +/-inf only when include_inf is True.
    JP: NaNは常に欠損扱い。infはinclude_inf=Trueのときのみ欠損扱い。
    """
    x = np.asarray(x, dtype=float)
    out = np.empty(len(x), dtype=float)
    for i, v in enumerate(x):
        missing = not np.isfinite(v) if include_inf else np.isnan(v)
        if missing:
            out[i] = out[i - 1] if i > 0 else 0.0
        else:
            out[i] = v
    return out


def normalize(x) -> Tuple[np.ndarray, NormalizationParams]:
    x = np.asarray(x, dtype=float)
    mu = stats.mean(x)
    sd = stats.std(x)
    if sd == 0:
        sd = 1.0
    params = NormalizationParams(mean=mu, std=sd)
    logger.info("Normalization: mean=%.4f, std=%.4f", mu, sd)
    return (x - mu) / sd, params


def denormalize(z, params: NormalizationParams) -> np.ndarray:
    z = np.asarray(z, dtype=float)
    return z * params.std + params.mean


def clean(values, spec: CleanSpec = CleanSpec()) -> Tuple[np.ndarray, NormalizationParams]:
    """Run the full cleaning chain.

    English:
        The stage order is fixed: outliers -> seasonality -> smoothing ->
        missing values -> normalization. Short inputs turn stages into no-ops;
        nothing here raises on short or degenerate data.

    日本語:
        段階の順序は固定です。短い入力では各段階が何もしないだけで、
        例外は発生しません。
    """
    x = np.asarray(values, dtype=float)
    y = remove_outliers_iqr(x, spec)
    y = adjust_seasonality(y, spec)
    y = smooth(y, spec)
    y = fill_missing(y)
    z, params = normalize(y)
    logger.info("Cleaning done: %d points in, %d points out", len(x), len(z))
    return z, params
