"""Run the attendance batch jobs from cron or by hand.

    python scripts/run_reconciliation.py auto-absent --tenant acme [--date 2024-03-01] [--force]
    python scripts/run_reconciliation.py fix-holidays --tenant acme
"""

from __future__ import annotations

import argparse
import importlib
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "attendance_engine"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from config import get_settings_module

from attendance_engine.common.logging_setup import configure_logging
from attendance_engine.container import build_container
from attendance_engine.main import settings_dict


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Attendance reconciliation jobs")
    sub = parser.add_subparsers(dest="job", required=True)

    absent = sub.add_parser("auto-absent", help="mark users without a record as absent")
    absent.add_argument("--tenant", required=True)
    absent.add_argument("--date", help="YYYY-MM-DD, defaults to today")
    absent.add_argument("--force", action="store_true", help="run even if disabled in settings")

    fix = sub.add_parser("fix-holidays", help="repair Sunday/holiday records of the last 6 months")
    fix.add_argument("--tenant", required=True)
    fix.add_argument("--today", help="YYYY-MM-DD, end of the repair window")

    return parser.parse_args(argv)


def main(argv=None) -> int:
    load_dotenv(override=False)
    args = parse_args(argv)
    settings = settings_dict(importlib.import_module(get_settings_module()))
    configure_logging(settings.get("LOG_LEVEL", "INFO"))

    container = build_container(db_config=settings["DB_CONFIG"], settings=settings)
    try:
        if args.job == "auto-absent":
            if args.force:
                records = container.auto_absent.mark_auto_absent(args.tenant, args.date)
            else:
                records = container.auto_absent.run_scheduled(args.tenant, args.date)
            result = {"marked": len(records), "usernames": [r.username for r in records]}
        else:
            result = container.holiday_reconciler.fix_past_holiday_attendance(args.tenant, today=args.today).to_dict()
    finally:
        container.notifier.close()

    print(json.dumps(result, indent=2, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
