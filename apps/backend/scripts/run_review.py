#!/usr/bin/env python3
"""
Review runner (operator CLI)

Runs one review rule over the corpus from the shell, using the same
pipeline as the /api/review endpoints.

Default mode is dry-run: counts and sample diffs are printed, nothing is
written. Use `--execute` to apply the planned mutations in batches.

Examples:
  python scripts/run_review.py --list
  python scripts/run_review.py --rule double-quotes --status approved
  python scripts/run_review.py --rule sentence-endings --session-start 1 --session-end 50 --execute
  python scripts/run_review.py --rule text-replace --search "지문에서" --replace "이 글에서"
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

CURRENT_FILE = Path(__file__).resolve()
BACKEND_DIR = CURRENT_FILE.parents[1]
sys.path.insert(0, str(BACKEND_DIR))

from infrastructure.db_manager import DatabaseManager  # noqa: E402
from infrastructure.record_store import OracleRecordStore  # noqa: E402
from services.corpus_reader import CorpusReadError  # noqa: E402
from services.review_rules.registry import RULE_TYPES, build_rule, describe_rules  # noqa: E402
from services.review_service import ReviewReport, ReviewRunner, ReviewScope  # noqa: E402
from services.scope_selector import SessionRange  # noqa: E402
from utils.logger import get_logger  # noqa: E402

logger = get_logger("run_review")


def _ok(label: str, value=None):
    if value is None:
        print(f"[OK] {label}")
    else:
        print(f"[OK] {label}: {value}")


def _warn(label: str, value=None):
    if value is None:
        print(f"[WARN] {label}")
    else:
        print(f"[WARN] {label}: {value}")


def _fail(label: str, value=None):
    if value is None:
        print(f"[FAIL] {label}")
    else:
        print(f"[FAIL] {label}: {value}")


def _print_report(report: ReviewReport, show_samples: int) -> None:
    _ok("Rule", report.engine)
    _ok("Mode", "dry-run" if report.dry_run else "apply")
    _ok("Records checked", report.total_checked)
    for table, count in sorted(report.table_counts.items()):
        _ok(f"  {table}", count)

    if report.dry_run:
        _ok("Affected records", report.affected_records)
        _ok("Mismatches", report.mismatch_count)
        for sample in list(report.samples)[:show_samples]:
            print(json.dumps(sample, ensure_ascii=False, default=str))
    else:
        _ok("Succeeded", report.success_count)
        if report.error_count:
            _warn("Failed", report.error_count)
        _ok("Total processed", report.total_processed)
    print(f"\n{report.message}")


def run(args: argparse.Namespace) -> int:
    params = {}
    if args.rule == "text-replace":
        params = {"search_text": args.search, "replace_text": args.replace or ""}

    try:
        rule = build_rule(args.rule, **params)
    except ValueError as e:
        _fail("Invalid rule parameters", e)
        return 2

    session_range = None
    if args.session_start is not None or args.session_end is not None:
        if args.session_start is None or args.session_end is None:
            _fail("Both --session-start and --session-end are required for a range")
            return 2
        try:
            session_range = SessionRange(args.session_start, args.session_end)
        except ValueError as e:
            _fail("Invalid session range", e)
            return 2

    if args.execute and not rule.auto_fix:
        _warn(f"{rule.name} is report-only; --execute ignored")

    scope = ReviewScope(statuses=tuple(args.status or ()), session_range=session_range)
    runner = ReviewRunner(OracleRecordStore(), batch_size=args.batch_size)

    DatabaseManager.init_pool()
    try:
        report = asyncio.run(runner.run(rule, scope, dry_run=not args.execute))
    except CorpusReadError as e:
        _fail("Corpus read failed", e)
        return 1
    finally:
        DatabaseManager.close_pool()

    _print_report(report, args.samples)
    return 0 if report.error_count == 0 else 3


def main() -> int:
    parser = argparse.ArgumentParser(description="Corpus review runner")
    parser.add_argument("--list", action="store_true", help="List available review rules and exit")
    parser.add_argument("--rule", choices=sorted(RULE_TYPES), help="Review rule to run")
    parser.add_argument("--status", action="append", help="Content set status to include (repeatable; default all)")
    parser.add_argument("--session-start", type=int, default=None)
    parser.add_argument("--session-end", type=int, default=None)
    parser.add_argument("--search", default=None, help="Search text (text-replace only)")
    parser.add_argument("--replace", default=None, help="Replacement text (text-replace only)")
    parser.add_argument("--batch-size", type=int, default=None, help="Mutations per write batch")
    parser.add_argument("--samples", type=int, default=10, help="Samples to print in dry-run mode")
    parser.add_argument("--execute", action="store_true", help="Apply planned changes (default dry-run)")
    args = parser.parse_args()

    if args.list:
        for info in describe_rules():
            kind = "fix" if info["autoFix"] else "report"
            print(f"{info['name']:<24} [{kind}] {info['description']}")
        return 0
    if not args.rule:
        parser.error("--rule is required unless --list is given")

    logger.info("review run requested", extra={"rule": args.rule, "execute": bool(args.execute)})
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
