# -*- coding: utf-8 -*-
"""
Review Rule Base
================
Shared vocabulary of the review pipeline: a rule looks at one record (plus
whatever cross-record context it built up front) and returns at most one
Proposal. Proposals carry field changes, a delete marker, or report-only
findings; they never touch storage.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Pattern, Sequence, Tuple, Union

from infrastructure.record_store import Table, spec_for

Record = Dict[str, Any]
RecordsByTable = Dict[Table, List[Record]]
Replacement = Union[str, Callable[["re.Match[str]"], str]]
RewriteStep = Tuple[Pattern[str], Replacement]


class Action(str, Enum):
    UPDATE = "update"
    DELETE = "delete"
    REPORT = "report"


@dataclass(frozen=True)
class FieldChange:
    field: str
    before: Any
    after: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "before": self.before, "after": self.after}


@dataclass(frozen=True)
class Finding:
    reason: str
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Proposal:
    table: Table
    record_id: Any
    content_set_id: Any
    action: Action
    changes: Tuple[FieldChange, ...] = ()
    findings: Tuple[Finding, ...] = ()
    note: str = ""

    @classmethod
    def update(cls, table: Table, record: Record, changes: Sequence[FieldChange]) -> "Proposal":
        return cls(
            table=table,
            record_id=record.get("id"),
            content_set_id=spec_for(table).owner_id(record),
            action=Action.UPDATE,
            changes=tuple(changes),
        )

    @classmethod
    def delete(cls, table: Table, record: Record, note: str = "") -> "Proposal":
        return cls(
            table=table,
            record_id=record.get("id"),
            content_set_id=spec_for(table).owner_id(record),
            action=Action.DELETE,
            note=note,
        )

    @classmethod
    def report(cls, table: Table, record: Record, findings: Sequence[Finding]) -> "Proposal":
        return cls(
            table=table,
            record_id=record.get("id"),
            content_set_id=spec_for(table).owner_id(record),
            action=Action.REPORT,
            findings=tuple(findings),
        )

    @property
    def is_mutation(self) -> bool:
        return self.action in (Action.UPDATE, Action.DELETE)


def apply_rewrites(text: str, steps: Iterable[RewriteStep]) -> str:
    """Run (pattern, replacement) steps in order; each step sees the previous output."""
    for pattern, replacement in steps:
        text = pattern.sub(replacement, text)
    return text


class ReviewRule:
    """
    One defect class. Subclasses set the class attributes and implement
    evaluate(); build_context() is optional. Request parameters a rule
    accepts (beyond the common scope fields) are listed in `parameters`.
    """

    name: str = ""
    description: str = ""
    target_tables: Tuple[Table, ...] = ()
    context_tables: Tuple[Table, ...] = ()
    auto_fix: bool = True
    sample_limit: int = 20
    parameters: Tuple[str, ...] = ()

    @property
    def required_tables(self) -> Tuple[Table, ...]:
        ordered: List[Table] = []
        for table in tuple(self.context_tables) + tuple(self.target_tables):
            if table not in ordered:
                ordered.append(table)
        return tuple(ordered)

    def build_context(self, records: RecordsByTable) -> Dict[str, Any]:
        return {}

    def evaluate(self, table: Table, record: Record, context: Dict[str, Any]) -> Optional[Proposal]:
        raise NotImplementedError

    @classmethod
    def describe(cls) -> Dict[str, Any]:
        return {
            "name": cls.name,
            "description": cls.description,
            "autoFix": cls.auto_fix,
            "targetTables": [t.slug for t in cls.target_tables],
            "contextTables": [t.slug for t in cls.context_tables],
            "sampleLimit": cls.sample_limit,
            "parameters": list(cls.parameters),
        }


class FieldRewriteRule(ReviewRule):
    """Rule that rewrites string fields in place, one FieldChange per changed field."""

    fields_by_table: Dict[Table, Tuple[str, ...]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.target_tables = tuple(cls.fields_by_table)

    def skip_record(self, table: Table, record: Record) -> bool:
        return False

    def rewrite(self, table: Table, field_name: str, text: str) -> str:
        raise NotImplementedError

    def evaluate(self, table: Table, record: Record, context: Dict[str, Any]) -> Optional[Proposal]:
        if self.skip_record(table, record):
            return None
        changes: List[FieldChange] = []
        for field_name in self.fields_by_table.get(table, ()):
            before = record.get(field_name)
            if not isinstance(before, str) or not before:
                continue
            after = self.rewrite(table, field_name, before)
            if after != before:
                changes.append(FieldChange(field_name, before, after))
        if not changes:
            return None
        return Proposal.update(table, record, changes)
