import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Set

from infrastructure.record_store import RecordStore, Table
from services.corpus_reader import fetch_all
from utils.text_utils import parse_leading_int

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionRange:
    start: int
    end: int

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Invalid session range: start {self.start} > end {self.end}")

    def contains(self, session_number: Any) -> bool:
        value = parse_leading_int(session_number)
        return value is not None and self.start <= value <= self.end


def filter_content_sets(records: Iterable[dict], statuses: Iterable[str], session_range: Optional[SessionRange] = None) -> Set[Any]:
    wanted = {s for s in (statuses or []) if s}
    selected: Set[Any] = set()
    for record in records:
        if wanted and record.get("status") not in wanted:
            continue
        if session_range is not None and not session_range.contains(record.get("session_number")):
            continue
        selected.add(record.get("id"))
    return selected


def select_content_set_ids(
    store: RecordStore,
    statuses: Iterable[str] = (),
    session_range: Optional[SessionRange] = None,
    page_size: Optional[int] = None,
) -> Set[Any]:
    """Content set ids in scope; an empty set means there is nothing to review."""
    statuses = list(statuses or [])
    content_sets = fetch_all(store, Table.CONTENT_SETS, page_size=page_size)
    selected = filter_content_sets(content_sets, statuses, session_range)
    logger.info(
        f"Scope selected {len(selected)} of {len(content_sets)} content sets",
        extra={"statuses": statuses, "session_range": None if session_range is None else [session_range.start, session_range.end]},
    )
    return selected
