"""Exceptions raised by the forecasting core.

English:
    Both derive from ValueError so callers that already guard against bad
    input keep working.

日本語:
    どちらもValueErrorの派生クラスです。
"""

from __future__ import annotations


class InsufficientDataError(ValueError):
    """Too few usable points to fit a group (skip it, do not abort the batch)."""


class EstimationError(ValueError):
    """Coefficient estimation failed (singular Yule-Walker system, flat regressor)."""
