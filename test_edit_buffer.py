import unittest

from default_table_initializer import DefaultTableInitializer
from edit_buffer import EditBuffer
from errors import ValidationFailure
from row_store import RowStore


class EditBufferTests(unittest.TestCase):
    def _buffer(self):
        store = RowStore(DefaultTableInitializer().rows())
        return EditBuffer(store), store

    def test_begin_edit_snapshots_full_row(self):
        buf, _ = self._buffer()
        buf.begin_edit("r1")
        self.assertTrue(buf.is_open("r1"))
        self.assertEqual(buf.pending_value("r1", "name"), "Alok Kumar Bhakta")
        self.assertEqual(buf.pending_value("r1", "age"), 23)
        self.assertFalse(buf.is_open("r2"))

    def test_begin_edit_is_idempotent(self):
        buf, _ = self._buffer()
        buf.begin_edit("r1")
        buf.set_field("r1", "name", "Changed")
        buf.begin_edit("r1")
        self.assertEqual(buf.pending_value("r1", "name"), "Changed")

    def test_begin_edit_unknown_row_raises(self):
        buf, _ = self._buffer()
        with self.assertRaises(KeyError):
            buf.begin_edit("nope")

    def test_set_field_requires_open_row(self):
        buf, _ = self._buffer()
        with self.assertRaises(KeyError):
            buf.set_field("r1", "name", "x")

    def test_set_field_coerces_age(self):
        buf, _ = self._buffer()
        buf.begin_edit("r1")
        buf.set_field("r1", "age", "42")
        self.assertEqual(buf.pending_value("r1", "age"), 42)
        buf.set_field("r1", "age", "42.5")
        self.assertEqual(buf.pending_value("r1", "age"), 42.5)
        buf.set_field("r1", "age", "")
        self.assertEqual(buf.pending_value("r1", "age"), "")
        buf.set_field("r1", "name", "7")
        self.assertEqual(buf.pending_value("r1", "name"), "7")

    def test_edits_do_not_touch_row_store(self):
        buf, store = self._buffer()
        buf.begin_edit("r1")
        buf.set_field("r1", "name", "Pending")
        self.assertEqual(store.get("r1").name, "Alok Kumar Bhakta")

    def test_commit_all_merges_and_clears(self):
        buf, store = self._buffer()
        buf.begin_edit("r1")
        buf.begin_edit("r2")
        buf.set_field("r1", "age", "30")
        buf.set_field("r1", "role", "Lead")
        committed = buf.commit_all()
        self.assertEqual(sorted(committed), ["r1", "r2"])
        self.assertEqual(store.get("r1").age, 30)
        self.assertEqual(store.get("r1").role, "Lead")
        self.assertEqual(store.get("r2").name, "Harsh Goyal")
        self.assertEqual(len(buf), 0)
        self.assertFalse(buf.is_open("r2"))

    def test_commit_all_rejects_non_numeric_age(self):
        buf, store = self._buffer()
        buf.begin_edit("r1")
        buf.set_field("r1", "age", "abc")
        with self.assertRaises(ValidationFailure) as ctx:
            buf.commit_all()
        self.assertEqual(ctx.exception.row_ids, ["r1"])
        self.assertEqual(store.get("r1").age, 23)
        self.assertTrue(buf.is_open("r1"))
        self.assertEqual(buf.pending_value("r1", "age"), "abc")

    def test_commit_all_is_all_or_nothing(self):
        buf, store = self._buffer()
        before = [r.to_dict() for r in store.list()]
        buf.begin_edit("r1")
        buf.begin_edit("r2")
        buf.set_field("r1", "name", "Valid edit")
        buf.set_field("r2", "age", "")
        with self.assertRaises(ValidationFailure) as ctx:
            buf.commit_all()
        self.assertEqual(ctx.exception.row_ids, ["r2"])
        self.assertEqual([r.to_dict() for r in store.list()], before)
        self.assertEqual(buf.open_ids(), ["r1", "r2"])
        self.assertEqual(buf.pending_value("r1", "name"), "Valid edit")

    def test_commit_rejects_row_without_age(self):
        buf, store = self._buffer()
        record = store.add({"name": "No age"})
        buf.begin_edit(record.id)
        with self.assertRaises(ValidationFailure):
            buf.commit_all()

    def test_discard_all_drops_everything(self):
        buf, store = self._buffer()
        buf.begin_edit("r1")
        buf.set_field("r1", "name", "Gone")
        buf.discard_all()
        self.assertEqual(len(buf), 0)
        self.assertEqual(store.get("r1").name, "Alok Kumar Bhakta")

    def test_snapshot_restore_and_prune(self):
        buf, _ = self._buffer()
        buf.begin_edit("r1")
        buf.begin_edit("r3")
        snap = buf.snapshot()
        other, _ = self._buffer()
        other.restore(snap)
        self.assertEqual(other.open_ids(), ["r1", "r3"])
        other.prune(["r3"])
        self.assertEqual(other.open_ids(), ["r3"])


if __name__ == "__main__":
    unittest.main()
