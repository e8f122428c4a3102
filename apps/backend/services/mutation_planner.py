# -*- coding: utf-8 -*-
"""
Mutation Planner
================
Flattens rule proposals into one list of storage mutations plus a bounded
sample of human-readable diffs. Report-only findings are counted and
sampled the same way but never become mutations.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple

from infrastructure.record_store import Table, spec_for
from services.review_rules.base import Action, FieldChange, Proposal


@dataclass(frozen=True)
class Mutation:
    table: Table
    record_id: Any
    content_set_id: Any
    action: Action
    changes: Tuple[FieldChange, ...] = ()

    @property
    def values(self) -> Dict[str, Any]:
        return {change.field: change.after for change in self.changes}


@dataclass(frozen=True)
class MutationPlan:
    mutations: Tuple[Mutation, ...] = ()
    mismatch_count: int = 0
    table_counts: Dict[str, int] = field(default_factory=dict)
    samples: Tuple[Dict[str, Any], ...] = ()

    @property
    def affected_records(self) -> int:
        return len(self.mutations)


def _mutation_sample(proposal: Proposal) -> Dict[str, Any]:
    sample: Dict[str, Any] = {
        "id": proposal.record_id,
        "contentSetId": proposal.content_set_id,
        "table": proposal.table.slug,
        "tableLabel": spec_for(proposal.table).label,
        "action": proposal.action.value,
    }
    if proposal.changes:
        sample["changes"] = [change.to_dict() for change in proposal.changes]
    if proposal.note:
        sample["reason"] = proposal.note
    return sample


def _finding_samples(proposal: Proposal) -> List[Dict[str, Any]]:
    return [
        {
            "id": proposal.record_id,
            "contentSetId": proposal.content_set_id,
            "table": proposal.table.slug,
            "tableLabel": spec_for(proposal.table).label,
            "reason": finding.reason,
            **finding.details,
        }
        for finding in proposal.findings
    ]


def plan(proposals: Iterable[Proposal], sample_limit: int = 20) -> MutationPlan:
    mutations: List[Mutation] = []
    samples: List[Dict[str, Any]] = []
    table_counts: Counter = Counter()
    mismatch_count = 0

    for proposal in proposals:
        if proposal.is_mutation:
            mutations.append(
                Mutation(
                    table=proposal.table,
                    record_id=proposal.record_id,
                    content_set_id=proposal.content_set_id,
                    action=proposal.action,
                    changes=proposal.changes,
                )
            )
            table_counts[proposal.table.slug] += 1
            if len(samples) < sample_limit:
                samples.append(_mutation_sample(proposal))
        else:
            mismatch_count += len(proposal.findings)
            table_counts[proposal.table.slug] += len(proposal.findings)
            for sample in _finding_samples(proposal):
                if len(samples) >= sample_limit:
                    break
                samples.append(sample)

    return MutationPlan(
        mutations=tuple(mutations),
        mismatch_count=mismatch_count,
        table_counts=dict(table_counts),
        samples=tuple(samples),
    )
