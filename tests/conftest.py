"""Test configuration.

English:
    Allow running `pytest` without installing the package.

日本語:
    パッケージをインストールしなくても `pytest` が動くように
    import path を調整します。
"""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

# Repo root contains the `sensorcast/` package directory.
ROOT = Path(__file__).resolve().parents[1]

# EN: Add the parent dir so `import sensorcast` works.
# JP: `import sensorcast` が通るように親ディレクトリを追加。
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def weekly_series() -> np.ndarray:
    """60 days of level + weekly cycle + mild trend + noise (fixed seed)."""
    rng = np.random.default_rng(7)
    t = np.arange(60, dtype=float)
    return 50.0 + 0.05 * t + 3.0 * np.sin(2 * np.pi * t / 7) + rng.normal(0, 0.5, size=60)
