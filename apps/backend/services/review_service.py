# -*- coding: utf-8 -*-
"""
Review Run Controller
=====================
Every review run goes through two explicit states:

    PlannedRun  --discard()-->  dry-run ReviewReport
                --apply()---->  applied ReviewReport

plan_run() only reads (scope selection, corpus scan, rule evaluation,
planning), so a preview can never write. apply() is the only path that
reaches the batched writer. Report-only rules are always discarded.

Re-running a rule after an apply yields no further mutations, so an
interrupted apply is recovered by simply running it again.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from infrastructure.record_store import RecordStore, Table
from services.batch_writer import WriteOutcome, apply_mutations
from services.corpus_reader import CorpusReadError, fetch_all
from services.monitoring import (
    REVIEW_RECORDS_CHECKED,
    REVIEW_RULE_ERRORS_TOTAL,
    REVIEW_RUN_DURATION_SECONDS,
    REVIEW_RUNS_TOTAL,
)
from services.mutation_planner import MutationPlan, plan
from services.review_rules.base import Proposal, Record, ReviewRule
from services.scope_selector import SessionRange, select_content_set_ids

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewScope:
    statuses: Tuple[str, ...] = ()
    session_range: Optional[SessionRange] = None


@dataclass(frozen=True)
class PlannedRun:
    rule: ReviewRule
    scope: ReviewScope
    content_set_count: int
    total_checked: int
    plan: MutationPlan

    @property
    def is_empty_scope(self) -> bool:
        return self.content_set_count == 0


@dataclass(frozen=True)
class ReviewReport:
    engine: str
    dry_run: bool
    message: str
    total_checked: int = 0
    affected_records: int = 0
    mismatch_count: int = 0
    table_counts: Dict[str, int] = field(default_factory=dict)
    samples: Tuple[Dict[str, Any], ...] = ()
    outcome: WriteOutcome = WriteOutcome()

    @property
    def success_count(self) -> int:
        return self.outcome.success_count

    @property
    def error_count(self) -> int:
        return self.outcome.error_count

    @property
    def total_processed(self) -> int:
        return self.outcome.total_processed

    def to_response(self) -> Dict[str, Any]:
        if self.dry_run:
            return {
                "success": True,
                "dryRun": True,
                "engine": self.engine,
                "message": self.message,
                "totalRecords": self.total_checked,
                "totalChecked": self.total_checked,
                "affectedRecords": self.affected_records,
                "mismatchCount": self.mismatch_count,
                "tableCounts": dict(self.table_counts),
                "samples": list(self.samples),
            }
        return {
            "success": True,
            "dryRun": False,
            "engine": self.engine,
            "message": self.message,
            "successCount": self.success_count,
            "errorCount": self.error_count,
            "totalProcessed": self.total_processed,
            "totalChecked": self.total_checked,
            "tableCounts": dict(self.table_counts),
        }


def _dry_run_message(planned: PlannedRun) -> str:
    if planned.is_empty_scope:
        return "No content sets match the requested scope."
    if not planned.rule.auto_fix:
        return f"Found {planned.plan.mismatch_count} issue(s) in {planned.total_checked} record(s)."
    return f"Dry run: {planned.plan.affected_records} of {planned.total_checked} record(s) would change."


class ReviewRunner:
    def __init__(
        self,
        store: RecordStore,
        page_size: Optional[int] = None,
        batch_size: Optional[int] = None,
        pause_seconds: Optional[float] = None,
    ):
        self.store = store
        self.page_size = page_size
        self.batch_size = batch_size
        self.pause_seconds = pause_seconds

    @staticmethod
    def _safe_evaluate(rule: ReviewRule, table: Table, record: Record, context: Dict[str, Any]) -> Optional[Proposal]:
        try:
            return rule.evaluate(table, record, context)
        except Exception as e:
            logger.error(
                f"Rule {rule.name} failed on {table.value} {record.get('id')}: {e}",
                exc_info=True,
            )
            REVIEW_RULE_ERRORS_TOTAL.labels(rule=rule.name, table=table.slug).inc()
            return None

    def plan_run(self, rule: ReviewRule, scope: ReviewScope) -> PlannedRun:
        """Scan, evaluate and plan. Never writes."""
        content_set_ids = select_content_set_ids(self.store, scope.statuses, scope.session_range, self.page_size)
        if not content_set_ids:
            return PlannedRun(rule=rule, scope=scope, content_set_count=0, total_checked=0, plan=MutationPlan())

        records = {
            table: fetch_all(self.store, table, content_set_ids, self.page_size)
            for table in rule.required_tables
        }
        context = rule.build_context(records)

        proposals: List[Proposal] = []
        total_checked = 0
        for table in rule.target_tables:
            for record in records[table]:
                total_checked += 1
                proposal = self._safe_evaluate(rule, table, record, context)
                if proposal is not None:
                    proposals.append(proposal)

        REVIEW_RECORDS_CHECKED.labels(rule=rule.name).observe(total_checked)
        return PlannedRun(
            rule=rule,
            scope=scope,
            content_set_count=len(content_set_ids),
            total_checked=total_checked,
            plan=plan(proposals, rule.sample_limit),
        )

    @staticmethod
    def discard(planned: PlannedRun) -> ReviewReport:
        return ReviewReport(
            engine=planned.rule.name,
            dry_run=True,
            message=_dry_run_message(planned),
            total_checked=planned.total_checked,
            affected_records=planned.plan.affected_records,
            mismatch_count=planned.plan.mismatch_count,
            table_counts=planned.plan.table_counts,
            samples=planned.plan.samples,
        )

    async def apply(self, planned: PlannedRun) -> ReviewReport:
        if not planned.rule.auto_fix:
            raise ValueError(f"Rule {planned.rule.name} is report-only and cannot be applied")

        outcome = await apply_mutations(
            self.store,
            planned.plan.mutations,
            batch_size=self.batch_size,
            pause_seconds=self.pause_seconds,
            rule_name=planned.rule.name,
        )
        if planned.is_empty_scope:
            message = "No content sets match the requested scope."
        else:
            message = (
                f"Applied {outcome.success_count} of {outcome.total_processed} change(s)"
                f" ({outcome.error_count} failed)."
            )
        return ReviewReport(
            engine=planned.rule.name,
            dry_run=False,
            message=message,
            total_checked=planned.total_checked,
            affected_records=planned.plan.affected_records,
            mismatch_count=planned.plan.mismatch_count,
            table_counts=planned.plan.table_counts,
            outcome=outcome,
        )

    async def run(self, rule: ReviewRule, scope: ReviewScope, dry_run: bool = True) -> ReviewReport:
        mode = "dry_run" if dry_run or not rule.auto_fix else "apply"
        started = time.time()
        try:
            planned = await asyncio.to_thread(self.plan_run, rule, scope)
        except CorpusReadError:
            REVIEW_RUNS_TOTAL.labels(rule=rule.name, mode=mode, status="read_error").inc()
            raise

        if mode == "dry_run":
            report = self.discard(planned)
        else:
            report = await self.apply(planned)

        duration = time.time() - started
        REVIEW_RUNS_TOTAL.labels(rule=rule.name, mode=mode, status="ok").inc()
        REVIEW_RUN_DURATION_SECONDS.labels(rule=rule.name, mode=mode).observe(duration)
        logger.info(
            f"Review {rule.name} ({mode}) completed in {duration:.2f}s",
            extra={
                "rule": rule.name,
                "total_checked": report.total_checked,
                "affected_records": report.affected_records,
                "mismatch_count": report.mismatch_count,
                "success_count": report.success_count,
                "error_count": report.error_count,
            },
        )
        return report
