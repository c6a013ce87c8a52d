"""Central configuration dataclasses.

English:
    Keep forecasting / selection settings in one place.

日本語:
    予測・モデル選択の設定を一箇所で管理します。
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ForecastConfig:
    """Multi-step forecast settings.

    EN: trend is an OLS slope over the last `trend_window` points; the weekly
        offset is estimated from the last `season_window` points.
    JP: トレンドは直近`trend_window`点のOLS傾き、週次オフセットは
        直近`season_window`点から推定します。
    """

    trend_window: int = 20
    trend_min_points: int = 10
    season_window: int = 28
    season_min_points: int = 14
    season_length: int = 7
    clip_low: float = 0.8    # lower clip = historical min * clip_low
    clip_high: float = 1.2   # upper clip = historical max * clip_high
    noise_level: float = 0.0  # 0 disables random perturbation
    seed: Optional[int] = None


@dataclass(frozen=True)
class SelectionConfig:
    """Grid-search / batch settings."""

    min_points: int = 20   # groups with fewer points are skipped
    horizon: int = 30      # forecast horizon in days
