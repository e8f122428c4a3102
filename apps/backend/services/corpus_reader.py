# -*- coding: utf-8 -*-
"""
Corpus Reader
=============
Unconditional paginated scans of one table. Membership filtering by content
set happens in memory after the scan: large IN-lists do not compose with
OFFSET/FETCH pagination.
"""

import logging
from typing import AbstractSet, Any, Dict, List, Optional

from config import settings
from infrastructure.record_store import RecordStore, Table, spec_for

logger = logging.getLogger(__name__)


class CorpusReadError(RuntimeError):
    """A page could not be read; the scan is abandoned without a partial result."""

    def __init__(self, table: Table, offset: int, cause: Exception):
        super().__init__(f"Failed to read {table.value} at offset {offset}: {cause}")
        self.table = table
        self.offset = offset
        self.cause = cause


def fetch_all(
    store: RecordStore,
    table: Table,
    id_filter: Optional[AbstractSet[Any]] = None,
    page_size: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Read every row of `table`, page by page, until a short page comes back.

    When `id_filter` is given only rows owned by one of those content sets
    are kept (the row's own id for CONTENT_SETS, content_set_id otherwise).
    """
    table = Table(table)
    page_size = page_size or settings.REVIEW_PAGE_SIZE
    spec = spec_for(table)

    records: List[Dict[str, Any]] = []
    offset = 0
    while True:
        try:
            page = store.fetch_page(table, offset, page_size)
        except Exception as e:
            logger.error(f"Corpus scan of {table.value} failed at offset {offset}: {e}", exc_info=True)
            raise CorpusReadError(table, offset, e) from e

        records.extend(page)
        if len(page) < page_size:
            break
        offset += page_size

    scanned = len(records)
    if id_filter is not None:
        records = [r for r in records if spec.owner_id(r) in id_filter]

    logger.info(
        "Corpus scan complete",
        extra={"table": table.value, "scanned": scanned, "kept": len(records), "pages": offset // page_size + 1},
    )
    return records
