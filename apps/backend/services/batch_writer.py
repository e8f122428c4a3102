# -*- coding: utf-8 -*-
"""
Batched Writer
==============
Applies planned mutations in fixed-size batches. Mutations inside a batch
run concurrently in worker threads (the store is a blocking driver)
and the batch is joined before the next one starts; a fixed pause separates
batches. A failing mutation is logged and counted, never raised.
"""

import asyncio
import logging
from dataclasses import dataclass
from functools import reduce
from typing import List, Optional, Sequence

from config import settings
from infrastructure.record_store import RecordStore
from services.monitoring import REVIEW_MUTATIONS_TOTAL
from services.mutation_planner import Mutation
from services.review_rules.base import Action

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriteOutcome:
    success_count: int = 0
    error_count: int = 0

    @property
    def total_processed(self) -> int:
        return self.success_count + self.error_count

    def merge(self, other: "WriteOutcome") -> "WriteOutcome":
        return WriteOutcome(
            success_count=self.success_count + other.success_count,
            error_count=self.error_count + other.error_count,
        )


SUCCEEDED = WriteOutcome(success_count=1)
FAILED = WriteOutcome(error_count=1)


def apply_mutation(store: RecordStore, mutation: Mutation) -> None:
    if mutation.action == Action.DELETE:
        store.delete_by_id(mutation.table, mutation.record_id)
    elif mutation.action == Action.UPDATE:
        store.update_by_id(mutation.table, mutation.record_id, mutation.values)
    else:
        raise ValueError(f"Unsupported mutation action: {mutation.action}")


def partition(mutations: Sequence[Mutation], batch_size: int) -> List[Sequence[Mutation]]:
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    return [mutations[i:i + batch_size] for i in range(0, len(mutations), batch_size)]


async def _run_mutation(store: RecordStore, mutation: Mutation, rule_name: str) -> WriteOutcome:
    labels = {"rule": rule_name, "table": mutation.table.slug, "action": mutation.action.value}
    try:
        await asyncio.to_thread(apply_mutation, store, mutation)
    except Exception as e:
        logger.warning(
            f"Mutation failed for {mutation.table.value} {mutation.record_id}: {e}",
            extra={"rule": rule_name, "record_id": str(mutation.record_id)},
        )
        REVIEW_MUTATIONS_TOTAL.labels(outcome="error", **labels).inc()
        return FAILED
    REVIEW_MUTATIONS_TOTAL.labels(outcome="success", **labels).inc()
    return SUCCEEDED


async def apply_mutations(
    store: RecordStore,
    mutations: Sequence[Mutation],
    batch_size: Optional[int] = None,
    pause_seconds: Optional[float] = None,
    rule_name: str = "",
) -> WriteOutcome:
    batch_size = batch_size or settings.REVIEW_BATCH_SIZE
    pause_seconds = settings.review_batch_pause_seconds if pause_seconds is None else pause_seconds

    batches = partition(list(mutations), batch_size)
    outcome = WriteOutcome()
    for index, batch in enumerate(batches, start=1):
        results = await asyncio.gather(*(_run_mutation(store, m, rule_name) for m in batch))
        outcome = reduce(WriteOutcome.merge, results, outcome)
        logger.info(
            f"Batch {index}/{len(batches)} applied",
            extra={"rule": rule_name, "success_count": outcome.success_count, "error_count": outcome.error_count},
        )
        if index < len(batches) and pause_seconds > 0:
            await asyncio.sleep(pause_seconds)

    return outcome
