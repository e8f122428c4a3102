import unittest

from infrastructure.record_store import Table
from services.scope_selector import SessionRange, filter_content_sets, select_content_set_ids
from utils.text_utils import parse_leading_int

from review_fixtures import InMemoryRecordStore, content_set


class SessionRangeTests(unittest.TestCase):
    def test_inclusive_upper_bound(self):
        self.assertTrue(SessionRange(1, 50).contains("50"))
        self.assertFalse(SessionRange(1, 49).contains("50"))

    def test_inclusive_lower_bound(self):
        self.assertTrue(SessionRange(50, 60).contains("50"))
        self.assertFalse(SessionRange(51, 60).contains("50"))

    def test_non_numeric_or_missing_never_in_range(self):
        wide = SessionRange(-10**9, 10**9)
        self.assertFalse(wide.contains("abc"))
        self.assertFalse(wide.contains(""))
        self.assertFalse(wide.contains(None))

    def test_leading_integer_prefix_is_used(self):
        self.assertEqual(parse_leading_int("12차시"), 12)
        self.assertEqual(parse_leading_int(" 7"), 7)
        self.assertEqual(parse_leading_int(30), 30)
        self.assertIsNone(parse_leading_int("차시 12"))

    def test_reversed_range_is_rejected(self):
        with self.assertRaises(ValueError):
            SessionRange(10, 1)


class ScopeSelectorTests(unittest.TestCase):
    def setUp(self):
        self.sets = [
            content_set("a", "approved", "50"),
            content_set("b", "pending", "10"),
            content_set("c", "approved", "abc"),
            content_set("d", "rejected", None),
        ]

    def test_no_filters_selects_everything(self):
        self.assertEqual(filter_content_sets(self.sets, []), {"a", "b", "c", "d"})

    def test_status_filter(self):
        self.assertEqual(filter_content_sets(self.sets, ["approved"]), {"a", "c"})
        self.assertEqual(filter_content_sets(self.sets, ["approved", "pending"]), {"a", "b", "c"})

    def test_range_excludes_non_numeric_sessions(self):
        self.assertEqual(filter_content_sets(self.sets, [], SessionRange(1, 50)), {"a", "b"})
        self.assertEqual(filter_content_sets(self.sets, [], SessionRange(1, 49)), {"b"})

    def test_status_and_range_combine(self):
        self.assertEqual(filter_content_sets(self.sets, ["approved"], SessionRange(1, 100)), {"a"})

    def test_empty_result_is_not_an_error(self):
        store = InMemoryRecordStore({Table.CONTENT_SETS: self.sets})
        self.assertEqual(select_content_set_ids(store, ["archived"]), set())

    def test_reads_content_sets_through_store(self):
        store = InMemoryRecordStore({Table.CONTENT_SETS: self.sets})
        selected = select_content_set_ids(store, ["pending"], page_size=2)
        self.assertEqual(selected, {"b"})
        self.assertTrue(all(call[0] == Table.CONTENT_SETS for call in store.fetch_calls))


if __name__ == "__main__":
    unittest.main()
