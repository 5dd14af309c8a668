from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import date
from typing import Any, Dict, Optional

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(SCRIPT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

REPORTS = ("funnel", "lead-sources", "advertising", "forecast", "goal-pacing")


def load_env_file(env_path: str) -> None:
    if not os.path.exists(env_path):
        return
    with open(env_path, "r", encoding="utf-8") as env_file:
        for line in env_file:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            os.environ.setdefault(key, value)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print funnel metrics for one account as JSON.")
    parser.add_argument("--account-id", required=True, help="Account (user) id to report on.")
    parser.add_argument(
        "--report",
        choices=REPORTS,
        default="funnel",
        help="Which metrics bundle to print (default: funnel).",
    )
    parser.add_argument(
        "--range",
        dest="time_range",
        default="currentYear",
        help="Range selector, e.g. currentYear, past6Months, year-2024, allTime (default: currentYear).",
    )
    parser.add_argument(
        "--horizon-months",
        type=int,
        default=6,
        help="Forecast horizon in months (forecast report only, default: 6).",
    )
    parser.add_argument(
        "--as-of",
        default=None,
        help="Compute as if today were this ISO date (default: today).",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Environment file path (default: .env).",
    )
    return parser.parse_args()


def resolve_today(as_of: Optional[str]) -> date:
    if not as_of:
        return date.today()
    try:
        return date.fromisoformat(as_of)
    except ValueError as exc:
        raise SystemExit(f"--as-of must be an ISO date (YYYY-MM-DD), got {as_of!r}") from exc


def build_report(report: str, account_id: str, time_range: str, horizon_months: int, today: date) -> Dict[str, Any]:
    from funnelmetrics.api.dependencies import get_insights_service
    from funnelmetrics.core.logging import configure_logging

    configure_logging(os.environ.get("LOG_LEVEL"))
    service = get_insights_service()
    if report == "lead-sources":
        result = service.get_lead_sources(account_id, time_range, today)
    elif report == "advertising":
        result = service.get_advertising(account_id, time_range, today)
    elif report == "forecast":
        result = service.get_forecast(account_id, time_range, horizon_months, today)
    elif report == "goal-pacing":
        result = service.get_goal_pacing(account_id, None, today)
    else:
        result = service.get_funnel(account_id, time_range, today)
    return result.model_dump(mode="json", by_alias=True)


def main() -> None:
    args = parse_args()
    load_env_file(args.env_file)
    today = resolve_today(args.as_of)
    payload = build_report(args.report, args.account_id, args.time_range, args.horizon_months, today)
    print(json.dumps(payload, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
