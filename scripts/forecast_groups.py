#!/usr/bin/env python3
"""Fit and forecast every (site_id, threshold_type) group of a CSV.

The CSV needs columns: site_id, threshold_type, datetime, value

Example:
  python scripts/forecast_groups.py --csv data/raw/summary.csv --horizon 30 --out artifacts/forecasts.json
"""

from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from pathlib import Path
import pandas as pd

# EN: Allow `python scripts/...` without requiring `pip install -e .` first.
# JP: `pip install -e .` 前でも `python scripts/...` が動くようにパスを追加。
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sensorcast.config import SelectionConfig
from sensorcast.pipeline import r2_summary, run_groups

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--csv", required=True)
    p.add_argument("--horizon", type=int, default=30)
    p.add_argument("--min-points", type=int, default=20)
    p.add_argument("--out", default="artifacts/forecasts.json")
    args = p.parse_args()

    df = pd.read_csv(args.csv)
    df["datetime"] = pd.to_datetime(df["datetime"], errors="coerce")

    cfg = SelectionConfig(min_points=args.min_points, horizon=args.horizon)
    results = run_groups(df, sel_cfg=cfg)

    out = {
        "summary": r2_summary(results),
        "groups": [
            {
                "site_id": r.site_id,
                "threshold_type": r.threshold_type,
                "order": str(r.fitted.order),
                "metrics": {
                    "mse": r.metrics.mse,
                    "mae": r.metrics.mae,
                    "r2": r.metrics.r2,
                    "aic": r.metrics.aic,
                    "bic": r.metrics.bic,
                    "log_likelihood": r.metrics.log_likelihood,
                },
                "predictions": r.predictions.tolist(),
            }
            for r in results.values()
        ],
    }

    os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
    with open(args.out, "w", encoding="utf-8") as f:
        json.dump(out, f, indent=2, default=str)

    print(f"Saved forecasts: {args.out}")
    print("Summary:", out["summary"])


if __name__ == "__main__":
    main()
