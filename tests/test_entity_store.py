import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from storefront.core.errors import NotFoundError, PersistenceError, ValidationError
from storefront.services.entity_store import EntityStore
from storefront.services.schemas import product_schema


def product(code="abc123", **overrides):
    fields = {
        "title": "Chocolinas",
        "description": "Galletitas de chocolate",
        "code": code,
        "price": 1000.99,
        "stock": 50,
        "category": "galletitas",
    }
    fields.update(overrides)
    return fields


class TestEntityStore(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "data" / "products.json"
        self.store = EntityStore(self.path, product_schema())

    def reopen(self, **kwargs):
        return EntityStore(self.path, product_schema(**kwargs))

    def test_new_store_creates_directory_and_empty_file(self):
        self.assertTrue(self.path.exists())
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8")), [])

    def test_empty_store(self):
        self.assertEqual(self.store.list(), [])
        with self.assertRaises(NotFoundError):
            self.store.get_by_id(1)

    def test_create_then_get_returns_fields_plus_id(self):
        created = self.store.create(product())
        self.assertEqual(created["id"], 1)
        expected = {**product(), "id": 1, "status": True, "thumbnails": []}
        self.assertEqual(self.store.get_by_id(1), expected)

    def test_missing_fields_are_named_and_nothing_is_written(self):
        fields = product()
        del fields["title"]
        del fields["stock"]
        with self.assertRaises(ValidationError) as ctx:
            self.store.create(fields)
        self.assertEqual(ctx.exception.missing, ["title", "stock"])
        self.assertIn("title, stock", ctx.exception.message)
        self.assertEqual(self.store.list(), [])
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8")), [])

    def test_null_counts_as_missing(self):
        with self.assertRaises(ValidationError) as ctx:
            self.store.create(product(category=None))
        self.assertEqual(ctx.exception.missing, ["category"])

    def test_wrong_type_is_a_validation_error(self):
        with self.assertRaises(ValidationError) as ctx:
            self.store.create(product(price="not a number"))
        self.assertEqual(ctx.exception.details["errors"][0]["field"], "price")

    def test_caller_supplied_id_is_ignored(self):
        created = self.store.create(product(id=99))
        self.assertEqual(created["id"], 1)

    def test_ids_increase_and_are_not_reused_after_delete(self):
        ids = [self.store.create(product(code=f"c{i}"))["id"] for i in range(3)]
        self.assertEqual(ids, [1, 2, 3])
        self.store.delete(3)
        self.store.delete(1)
        self.assertEqual(self.store.create(product(code="c4"))["id"], 4)

    def test_ids_are_not_reused_after_restart(self):
        self.store.create(product(code="a"))
        self.store.create(product(code="b"))
        self.store.delete(2)
        self.assertEqual(self.reopen().create(product(code="c"))["id"], 3)

    def test_ids_are_not_reused_when_file_has_no_sequence(self):
        seeded = [{**product(code=f"c{i}"), "id": i} for i in (1, 2, 3)]
        self.path.write_text(json.dumps(seeded), encoding="utf-8")
        self.reopen().delete(3)
        self.assertEqual(self.reopen().create(product(code="c4"))["id"], 4)

    def test_update_changes_only_given_field(self):
        self.store.create(product())
        updated = self.store.update(1, {"price": 890})
        self.assertEqual(updated["price"], 890)
        self.assertEqual(updated["id"], 1)
        self.assertEqual(updated["title"], "Chocolinas")
        self.assertEqual(self.store.get_by_id(1), updated)

    def test_update_never_changes_id(self):
        self.store.create(product())
        updated = self.store.update(1, {"id": 7, "stock": 3})
        self.assertEqual(updated["id"], 1)
        with self.assertRaises(NotFoundError):
            self.store.get_by_id(7)

    def test_update_unknown_id(self):
        with self.assertRaises(NotFoundError):
            self.store.update(5, {"price": 1})

    def test_update_cannot_clear_mandatory_field(self):
        self.store.create(product())
        with self.assertRaises(ValidationError):
            self.store.update(1, {"title": None})
        self.assertEqual(self.store.get_by_id(1)["title"], "Chocolinas")

    def test_delete_removes_exactly_one(self):
        self.store.create(product(code="a"))
        self.store.create(product(code="b"))
        removed = self.store.delete(1)
        self.assertEqual(removed["code"], "a")
        self.assertEqual([p["id"] for p in self.store.list()], [2])
        with self.assertRaises(NotFoundError):
            self.store.get_by_id(1)
        with self.assertRaises(NotFoundError):
            self.store.delete(1)

    def test_list_limit_returns_first_records(self):
        for i in range(5):
            self.store.create(product(code=f"c{i}"))
        self.assertEqual([p["id"] for p in self.store.list(limit=3)], [1, 2, 3])
        self.assertEqual(len(self.store.list(limit=10)), 5)
        with self.assertRaises(ValidationError):
            self.store.list(limit=0)

    def test_reload_from_file_keeps_order(self):
        for code in ("b", "a", "c"):
            self.store.create(product(code=code))
        self.store.delete(2)
        self.assertEqual(self.reopen().list(), self.store.list())

    def test_duplicate_codes_allowed_by_default(self):
        self.store.create(product(code="abc123"))
        self.store.create(product(code="abc123"))
        self.store.create(product(code="abc124"))
        self.assertEqual(len(self.store.list()), 3)

    def test_duplicate_codes_rejected_when_enforced(self):
        store = self.reopen(enforce_unique_code=True)
        store.create(product(code="abc123"))
        with self.assertRaises(ValidationError):
            store.create(product(code="abc123"))
        store.create(product(code="abc124"))
        self.assertEqual([p["code"] for p in store.list()], ["abc123", "abc124"])
        with self.assertRaises(ValidationError):
            store.update(2, {"code": "abc123"})
        # a record keeping its own code is not a clash
        store.update(1, {"code": "abc123", "stock": 1})

    def test_create_many_is_all_or_nothing(self):
        bad = product(code="b")
        del bad["price"]
        with self.assertRaises(ValidationError):
            self.store.create_many(product(code="a"), bad)
        self.assertEqual(self.store.list(), [])

        created = self.store.create_many(product(code="a"), product(code="b"))
        self.assertEqual([p["id"] for p in created], [1, 2])

    def test_returned_records_are_copies(self):
        created = self.store.create(product())
        created["title"] = "changed"
        self.store.get_by_id(1)["thumbnails"].append("x.png")
        self.assertEqual(self.store.get_by_id(1)["title"], "Chocolinas")
        self.assertEqual(self.store.get_by_id(1)["thumbnails"], [])

    def test_failed_write_leaves_collection_unchanged(self):
        self.store.create(product(code="a"))
        with mock.patch.object(self.store.file, "save", side_effect=PersistenceError("disk full")):
            with self.assertRaises(PersistenceError):
                self.store.delete(1)
        self.assertEqual(len(self.store), 1)

    def test_reload_on_read_sees_external_edits(self):
        store = EntityStore(self.path, product_schema(), reload_on_read=True)
        store.create(product(code="a"))
        external = [{**product(code="z"), "id": 10}]
        self.path.write_text(json.dumps(external), encoding="utf-8")
        self.assertEqual([p["id"] for p in store.list()], [10])
        self.assertEqual(store.create(product(code="y"))["id"], 11)

        self.path.unlink()
        self.assertEqual(store.list(), [])

    def test_external_edit_raises_the_counter_for_good(self):
        store = EntityStore(self.path, product_schema(), reload_on_read=True)
        store.create(product(code="a"))
        self.path.write_text(json.dumps([{**product(code="z"), "id": 10}]), encoding="utf-8")
        store.delete(10)
        self.assertEqual(self.reopen().create(product(code="y"))["id"], 11)

    def test_reload_on_read_recreates_removed_file(self):
        store = EntityStore(self.path, product_schema(), reload_on_read=True)
        store.create(product(code="a"))
        self.path.unlink()
        self.assertEqual(len(store), 0)
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8")), [])
        self.assertEqual(store.create(product(code="b"))["id"], 2)

    def test_len_follows_file_when_reloading(self):
        store = EntityStore(self.path, product_schema(), reload_on_read=True)
        store.create(product(code="a"))
        seeded = [{**product(code=c), "id": i} for i, c in ((1, "a"), (2, "b"))]
        self.path.write_text(json.dumps(seeded), encoding="utf-8")
        self.assertEqual(len(store), 2)
        self.assertEqual(len(store), len(store.list()))

    def test_corrupt_file_is_a_persistence_error(self):
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(PersistenceError):
            self.reopen()


if __name__ == "__main__":
    unittest.main()
