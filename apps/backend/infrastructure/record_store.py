# -*- coding: utf-8 -*-
"""
Corpus Record Store
===================
Closed set of corpus tables plus the three capabilities every review run
needs from storage: paginated range reads, update by id, delete by id.

Records travel through the review pipeline as plain dicts keyed by
lower-case column name; the owning Table always travels alongside.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Protocol, Tuple

from infrastructure.db_manager import DatabaseManager, safe_read_clob

logger = logging.getLogger(__name__)


class Table(str, Enum):
    CONTENT_SETS = "CONTENT_SETS"
    PASSAGES = "PASSAGES"
    VOCABULARY_TERMS = "VOCABULARY_TERMS"
    VOCABULARY_QUESTIONS = "VOCABULARY_QUESTIONS"
    PARAGRAPH_QUESTIONS = "PARAGRAPH_QUESTIONS"
    COMPREHENSIVE_QUESTIONS = "COMPREHENSIVE_QUESTIONS"

    @property
    def slug(self) -> str:
        return self.value.lower()


class RecordStoreError(Exception):
    """Base class for storage-level failures."""


class RecordNotFoundError(RecordStoreError):
    pass


class InvalidColumnError(RecordStoreError):
    pass


OPTION_FIELDS: Tuple[str, ...] = tuple(f"option_{i}" for i in range(1, 6))
PARAGRAPH_FIELDS: Tuple[str, ...] = tuple(f"paragraph_{i}" for i in range(1, 11))

QUESTION_TEXT_FIELDS: Tuple[str, ...] = ("question_text",) + OPTION_FIELDS + ("correct_answer", "explanation")
_QUESTION_COLUMNS: Tuple[str, ...] = (
    "id", "content_set_id", "question_number", "question_type", "question_format",
) + QUESTION_TEXT_FIELDS


@dataclass(frozen=True)
class TableSpec:
    table: Table
    label: str
    columns: Tuple[str, ...]
    owner_column: str
    writable: FrozenSet[str] = frozenset()
    clob_columns: FrozenSet[str] = frozenset()
    bool_columns: FrozenSet[str] = frozenset()

    def owner_id(self, record: Dict[str, Any]) -> Any:
        return record.get(self.owner_column)


TABLE_SPECS: Dict[Table, TableSpec] = {
    Table.CONTENT_SETS: TableSpec(
        table=Table.CONTENT_SETS,
        label="Content sets",
        columns=("id", "status", "session_number", "title", "grade", "subject", "area", "main_topic", "sub_topic"),
        owner_column="id",
    ),
    Table.PASSAGES: TableSpec(
        table=Table.PASSAGES,
        label="Passages",
        columns=("id", "content_set_id", "title") + PARAGRAPH_FIELDS,
        owner_column="content_set_id",
        clob_columns=frozenset(PARAGRAPH_FIELDS),
    ),
    Table.VOCABULARY_TERMS: TableSpec(
        table=Table.VOCABULARY_TERMS,
        label="Vocabulary terms",
        columns=("id", "content_set_id", "term", "definition", "example_sentence", "has_question_generated"),
        owner_column="content_set_id",
        writable=frozenset({"term", "definition", "example_sentence", "has_question_generated"}),
        bool_columns=frozenset({"has_question_generated"}),
    ),
    Table.VOCABULARY_QUESTIONS: TableSpec(
        table=Table.VOCABULARY_QUESTIONS,
        label="Vocabulary questions",
        columns=_QUESTION_COLUMNS + ("term",),
        owner_column="content_set_id",
        writable=frozenset(QUESTION_TEXT_FIELDS + ("term",)),
        clob_columns=frozenset({"explanation"}),
    ),
    Table.PARAGRAPH_QUESTIONS: TableSpec(
        table=Table.PARAGRAPH_QUESTIONS,
        label="Paragraph questions",
        columns=_QUESTION_COLUMNS + ("paragraph_number", "word_segments"),
        owner_column="content_set_id",
        writable=frozenset(QUESTION_TEXT_FIELDS),
        clob_columns=frozenset({"explanation"}),
    ),
    Table.COMPREHENSIVE_QUESTIONS: TableSpec(
        table=Table.COMPREHENSIVE_QUESTIONS,
        label="Comprehensive questions",
        columns=_QUESTION_COLUMNS,
        owner_column="content_set_id",
        writable=frozenset(QUESTION_TEXT_FIELDS),
        clob_columns=frozenset({"explanation"}),
    ),
}

QUESTION_TABLES: Tuple[Table, ...] = (
    Table.VOCABULARY_QUESTIONS,
    Table.PARAGRAPH_QUESTIONS,
    Table.COMPREHENSIVE_QUESTIONS,
)


def spec_for(table: Table) -> TableSpec:
    return TABLE_SPECS[Table(table)]


class RecordStore(Protocol):
    """Storage capabilities consumed by the corpus reader and batch writer."""

    def fetch_page(self, table: Table, offset: int, limit: int) -> List[Dict[str, Any]]:
        ...

    def update_by_id(self, table: Table, record_id: Any, changes: Dict[str, Any]) -> None:
        ...

    def delete_by_id(self, table: Table, record_id: Any) -> None:
        ...


class OracleRecordStore:
    """RecordStore backed by the Oracle read/write pools."""

    @staticmethod
    def build_page_sql(spec: TableSpec) -> str:
        cols = ", ".join(c.upper() for c in spec.columns)
        return (
            f"SELECT {cols} FROM {spec.table.value} "
            f"ORDER BY ID "
            f"OFFSET :p_offset ROWS FETCH NEXT :p_limit ROWS ONLY"
        )

    @staticmethod
    def build_update_sql(spec: TableSpec, columns: List[str]) -> str:
        assignments = ", ".join(f"{c.upper()} = :{c}" for c in columns)
        return f"UPDATE {spec.table.value} SET {assignments} WHERE ID = :p_record_id"

    @staticmethod
    def validate_changes(spec: TableSpec, changes: Dict[str, Any]) -> Dict[str, Any]:
        if not changes:
            raise InvalidColumnError(f"No columns given for update on {spec.table.value}")
        rejected = sorted(c for c in changes if c not in spec.writable)
        if rejected:
            raise InvalidColumnError(f"Columns not writable on {spec.table.value}: {', '.join(rejected)}")
        binds: Dict[str, Any] = {}
        for column, value in changes.items():
            if column in spec.bool_columns and value is not None:
                value = 1 if value else 0
            binds[column] = value
        return binds

    @staticmethod
    def row_to_record(spec: TableSpec, row) -> Dict[str, Any]:
        record: Dict[str, Any] = {}
        for column, value in zip(spec.columns, row):
            if column in spec.clob_columns and value is not None:
                value = safe_read_clob(value)
            elif column in spec.bool_columns and value is not None:
                value = bool(value)
            record[column] = value
        return record

    def fetch_page(self, table: Table, offset: int, limit: int) -> List[Dict[str, Any]]:
        spec = spec_for(table)
        sql = self.build_page_sql(spec)
        with DatabaseManager.get_read_connection() as conn:
            with conn.cursor() as cursor:
                cursor.execute(sql, {"p_offset": offset, "p_limit": limit})
                rows = cursor.fetchall()
                return [self.row_to_record(spec, row) for row in rows]

    def update_by_id(self, table: Table, record_id: Any, changes: Dict[str, Any]) -> None:
        spec = spec_for(table)
        binds = self.validate_changes(spec, changes)
        sql = self.build_update_sql(spec, list(binds))
        binds["p_record_id"] = record_id
        with DatabaseManager.get_write_connection() as conn:
            with conn.cursor() as cursor:
                cursor.execute(sql, binds)
                if cursor.rowcount == 0:
                    raise RecordNotFoundError(f"{table.value} record {record_id} not found")
            conn.commit()

    def delete_by_id(self, table: Table, record_id: Any) -> None:
        spec = spec_for(table)
        with DatabaseManager.get_write_connection() as conn:
            with conn.cursor() as cursor:
                cursor.execute(f"DELETE FROM {spec.table.value} WHERE ID = :p_record_id", {"p_record_id": record_id})
                if cursor.rowcount == 0:
                    raise RecordNotFoundError(f"{table.value} record {record_id} not found")
            conn.commit()
