import unittest

from infrastructure.record_store import Table
from services.corpus_reader import CorpusReadError, fetch_all

from review_fixtures import InMemoryRecordStore, question


def _questions(n, cs_for=lambda i: f"cs-{i % 3}"):
    return [question(f"q-{i:05d}", cs_for(i)) for i in range(n)]


class CorpusReaderTests(unittest.TestCase):
    def test_reads_until_short_page(self):
        store = InMemoryRecordStore({Table.COMPREHENSIVE_QUESTIONS: _questions(2500)})
        rows = fetch_all(store, Table.COMPREHENSIVE_QUESTIONS, page_size=1000)

        self.assertEqual(len(rows), 2500)
        self.assertEqual([c[1] for c in store.fetch_calls], [0, 1000, 2000])

    def test_exact_multiple_of_page_size_ends_on_empty_page(self):
        store = InMemoryRecordStore({Table.COMPREHENSIVE_QUESTIONS: _questions(2000)})
        rows = fetch_all(store, Table.COMPREHENSIVE_QUESTIONS, page_size=1000)

        self.assertEqual(len(rows), 2000)
        self.assertEqual([c[1] for c in store.fetch_calls], [0, 1000, 2000])

    def test_no_duplicates_or_skips(self):
        store = InMemoryRecordStore({Table.COMPREHENSIVE_QUESTIONS: _questions(1234)})
        rows = fetch_all(store, Table.COMPREHENSIVE_QUESTIONS, page_size=100)
        ids = [r["id"] for r in rows]
        self.assertEqual(len(ids), len(set(ids)))
        self.assertEqual(ids, [f"q-{i:05d}" for i in range(1234)])

    def test_id_filter_uses_content_set_id_for_child_tables(self):
        store = InMemoryRecordStore({Table.COMPREHENSIVE_QUESTIONS: _questions(30)})
        rows = fetch_all(store, Table.COMPREHENSIVE_QUESTIONS, id_filter={"cs-1"}, page_size=7)

        self.assertEqual(len(rows), 10)
        self.assertTrue(all(r["content_set_id"] == "cs-1" for r in rows))

    def test_id_filter_uses_own_id_for_content_sets(self):
        store = InMemoryRecordStore({
            Table.CONTENT_SETS: [{"id": "a", "status": "x"}, {"id": "b", "status": "y"}],
        })
        rows = fetch_all(store, Table.CONTENT_SETS, id_filter={"b"})
        self.assertEqual([r["id"] for r in rows], ["b"])

    def test_empty_id_filter_keeps_nothing(self):
        store = InMemoryRecordStore({Table.COMPREHENSIVE_QUESTIONS: _questions(5)})
        self.assertEqual(fetch_all(store, Table.COMPREHENSIVE_QUESTIONS, id_filter=set()), [])

    def test_page_fault_aborts_whole_read(self):
        store = InMemoryRecordStore(
            {Table.PASSAGES: [{"id": i, "content_set_id": "cs"} for i in range(50)]},
            fail_fetch=lambda table, offset: offset >= 20,
        )
        with self.assertRaises(CorpusReadError) as ctx:
            fetch_all(store, Table.PASSAGES, page_size=10)

        self.assertEqual(ctx.exception.table, Table.PASSAGES)
        self.assertEqual(ctx.exception.offset, 20)
        self.assertIsInstance(ctx.exception.cause, ConnectionError)


if __name__ == "__main__":
    unittest.main()
