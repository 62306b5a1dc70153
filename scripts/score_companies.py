"""
Score Companies
================
Runs the ESG scoring pipeline over a metric table:
  1. Load metrics (long format: company_id, metric_name, value, period)
  2. Data quality diagnostics
  3. Risk classification and benchmark ESG score per company
  4. Trend forecasts, scenario analysis, validation and target progress per company

Input:  data/sample_metrics.csv (or --data-dir DIR, --metrics PATH)
Output: reports/tables/risk_scores.csv
        reports/tables/data_quality.csv
        reports/scores.json

Usage: python scripts/score_companies.py
       python scripts/score_companies.py --metrics data/metrics.csv --industry manufacturing --years 5
"""

import argparse
import json
import os
import sys
import time
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))
os.chdir(PROJECT_ROOT)

from esg_scoring.data_collection.data_pipeline import PipelinePaths, ensure_dirs, load_config
from esg_scoring.data_collection.metric_store import MetricStore
from esg_scoring.pipeline import ScoringPipeline


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Score companies from reported ESG metrics")
    parser.add_argument("--data-dir", default="data", help="Input data directory")
    parser.add_argument("--metrics", default=None, help="Long-format metric CSV (default: <data-dir>/sample_metrics.csv)")
    parser.add_argument("--config", default=None, help="Scoring config YAML")
    parser.add_argument("--industry", default=None, help="Benchmark industry")
    parser.add_argument("--years", type=int, default=None, help="Forecast horizon (overrides config)")
    parser.add_argument("--out", default="reports", help="Output directory")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    paths = PipelinePaths(data_dir=Path(args.data_dir), reports_dir=Path(args.out))
    ensure_dirs(paths)

    print("=" * 70)
    print("ESG SCORING")
    print("=" * 70)
    start = time.time()

    config = load_config(args.config)
    if args.years is not None:
        config.setdefault("forecasting", {})["years"] = args.years
    store = MetricStore.from_csv(args.metrics or paths.metrics_csv)
    print(f"[OK] Loaded {len(store)} metric rows for {len(store.companies())} companies")

    quality = store.quality_report()
    print(f"[OK] Overall missing rate: {quality.overall_missing:.1%} over {quality.slots} company-periods")
    quality.to_frame().to_csv(paths.tables_dir / "data_quality.csv")

    pipeline = ScoringPipeline(config)
    summary = pipeline.score_all(store, industry=args.industry)
    summary.to_csv(paths.tables_dir / "risk_scores.csv", index=False)
    print(f"[OK] Scored {len(summary)} companies")

    details = {}
    for company_id in store.companies():
        details[company_id] = pipeline.score_company(store, company_id, industry=args.industry)
        invalid = details[company_id]["validation"]["errors"]
        if invalid:
            print(f"  [WARN] {company_id}: {len(invalid)} validation errors")
        for target in details[company_id].get("targets", []):
            if not target["onTrack"]:
                print(f"  [WARN] {company_id}: {target['metric']} target off track ({target['progress']}% progress)")

    scores_path = paths.reports_dir / "scores.json"
    scores_path.write_text(json.dumps(details, indent=2), encoding="utf-8")

    print(f"\n{'-'*70}")
    print(summary[["company_id", "overall_risk", "risk_level", "esg_score", "esg_rating"]].to_string(index=False))
    print(f"{'-'*70}")
    print(f"\nDone in {time.time() - start:.1f}s")
    print(f"  Tables: {paths.tables_dir}/")
    print(f"  Detail: {scores_path}")


if __name__ == "__main__":
    main()
