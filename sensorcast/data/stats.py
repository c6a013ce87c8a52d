"""Descriptive statistics shared by cleaning and forecasting.

English:
    Thin numpy wrappers with the conventions the rest of the package relies on:
    sample standard deviation (ddof=1), (n+1)p percentiles, and 0 for empty input.

日本語:
    標本標準偏差（ddof=1）、(n+1)p 方式のパーセンタイル、空入力は0、
    という前提をまとめたnumpyラッパーです。
"""

from __future__ import annotations
import numpy as np


def mean(x) -> float:
    x = np.asarray(x, dtype=float)
    if x.size == 0:
        return 0.0
    return float(np.mean(x))


def std(x) -> float:
    """Sample standard deviation; 0 for fewer than two values."""
    x = np.asarray(x, dtype=float)
    if x.size < 2:
        return 0.0
    return float(np.std(x, ddof=1))


def percentile(x, q: float) -> float:
    """Percentile with the (n+1)p position rule.

    EN: below the first rank returns the minimum, above the last the maximum,
        linear interpolation in between.
    JP: 位置(n+1)pで線形補間します（範囲外は最小値/最大値）。
    """
    x = np.asarray(x, dtype=float)
    if x.size == 0:
        return 0.0
    return float(np.percentile(x, q, method="weibull"))


def minmax(x) -> tuple[float, float]:
    x = np.asarray(x, dtype=float)
    if x.size == 0:
        return 0.0, 0.0
    return float(np.min(x)), float(np.max(x))
