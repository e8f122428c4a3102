# -*- coding: utf-8 -*-
"""
Review Monitoring
=================
Prometheus metrics for review runs. These are process-wide observability
counters only; the per-run numbers returned to callers come from the
run's ReviewReport.
"""

from prometheus_client import Counter, Gauge, Histogram

# ==============================================================================
# 1. RUN METRICS
# ==============================================================================
# Labels:
# - rule: endpoint name of the review rule (e.g. "double-quotes")
# - mode: dry_run, apply
# - status: ok, read_error
REVIEW_RUNS_TOTAL = Counter(
    'corpus_review_runs_total',
    'Review runs by rule, mode and terminal status',
    labelnames=['rule', 'mode', 'status']
)

REVIEW_RUN_DURATION_SECONDS = Histogram(
    'corpus_review_run_duration_seconds',
    'Wall time of a review run (scan + evaluate + optional apply)',
    labelnames=['rule', 'mode'],
    buckets=(0.5, 1, 2.5, 5, 10, 30, 60, 120, 300, 600)
)

# Records evaluated per run, to spot scope mistakes (e.g. empty status filter)
REVIEW_RECORDS_CHECKED = Histogram(
    'corpus_review_records_checked',
    'Number of records evaluated by a review run',
    labelnames=['rule'],
    buckets=(0, 10, 100, 1000, 10000, 50000, 100000, 500000)
)

# ==============================================================================
# 2. RULE & WRITE METRICS
# ==============================================================================
# A rule raised while evaluating one record; the record produced no proposal.
REVIEW_RULE_ERRORS_TOTAL = Counter(
    'corpus_review_rule_errors_total',
    'Unexpected rule evaluation failures (isolated per record)',
    labelnames=['rule', 'table']
)

# Labels:
# - action: update, delete
# - outcome: success, error
REVIEW_MUTATIONS_TOTAL = Counter(
    'corpus_review_mutations_total',
    'Mutations attempted by the batched writer',
    labelnames=['rule', 'table', 'action', 'outcome']
)

# ==============================================================================
# 3. INFRASTRUCTURE
# ==============================================================================
DB_POOL_UTILIZATION = Gauge(
    'corpus_review_db_pool_utilization',
    'Database connection pool statistics',
    labelnames=['pool_type', 'metric_type']
)
