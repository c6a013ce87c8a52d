"""Non-seasonal and seasonal differencing.

English:
    First differences are applied `d` times, then lag-`s` differences `D` times.
    The output has N - d - D*s points and may be empty for short input.
    With s = 0 a seasonal pass yields zeros of the same length.

日本語:
    通常差分をd回、その後に季節差分(ラグs)をD回適用します。
    出力長は N - d - D*s で、短い入力では空になり得ます。
    s = 0 の季節差分は同じ長さのゼロ列になります。
"""

from __future__ import annotations
import numpy as np


def difference(x, d: int, D: int = 0, s: int = 7) -> np.ndarray:
    y = np.asarray(x, dtype=float)
    for _ in range(d):
        y = y[1:] - y[:-1]
    for _ in range(D):
        if s == 0:
            # lag-0 difference: every point minus itself
            y = np.zeros_like(y)
        else:
            y = y[s:] - y[:-s] if len(y) > s else y[:0]
    return y


def integrate(dx, last_values) -> np.ndarray:
    """Undo `len(last_values)` first differences.

    EN: last_values[k] is the value right before the differenced block at
        differencing level k (level 0 = original series).
    JP: last_values[k] は差分レベルkにおける直前の値（0は元系列）。
    """
    y = np.asarray(dx, dtype=float)
    for base in reversed(list(last_values)):
        y = float(base) + np.cumsum(y)
    return y
