import os
import unittest
from datetime import datetime, timezone

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from fastapi import HTTPException
from sqlalchemy import Boolean, DateTime, Integer, String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

from app.schemas.grid import GridSort
from app.services.grid_errors import GridNotFound, InvalidGridQuery
from app.services.grid_filters import FieldConstraint, Predicate
from app.services.grid_storage import SqlAlchemyGridStorage, _coerce_filter_value


class _Base(DeclarativeBase):
    pass


class _GridTestModel(_Base):
    __tablename__ = "_grid_storage_test_model"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(String(50))
    rank: Mapped[int] = mapped_column(Integer)
    is_public: Mapped[bool] = mapped_column(Boolean)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class GridFilterCoercionTests(unittest.TestCase):
    def test_numbers_and_booleans_accept_strings(self):
        self.assertEqual(_coerce_filter_value(_GridTestModel.__table__.c.rank, "42"), 42)
        self.assertTrue(_coerce_filter_value(_GridTestModel.__table__.c.is_public, "true"))
        self.assertFalse(_coerce_filter_value(_GridTestModel.__table__.c.is_public, "0"))

    def test_datetime_becomes_timezone_aware(self):
        value = _coerce_filter_value(_GridTestModel.__table__.c.published_at, "2026-02-26T10:15:00")
        self.assertEqual(value.tzinfo, timezone.utc)

    def test_invalid_values_raise_400(self):
        for column, raw in (
            (_GridTestModel.__table__.c.rank, "many"),
            (_GridTestModel.__table__.c.is_public, "maybe"),
            (_GridTestModel.__table__.c.published_at, "yesterday"),
            (_GridTestModel.__table__.c.title, {"nested": True}),
        ):
            with self.assertRaises(HTTPException) as ctx:
                _coerce_filter_value(column, raw)
            self.assertEqual(ctx.exception.status_code, 400)

    def test_scalars_on_text_columns_become_strings(self):
        self.assertEqual(_coerce_filter_value(_GridTestModel.__table__.c.title, 7), "7")


class SqlAlchemyGridStorageTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.engine = create_engine("sqlite+pysqlite:///:memory:")
        _Base.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls):
        cls.engine.dispose()

    def setUp(self):
        self.db = Session(self.engine)
        self.db.query(_GridTestModel).delete()
        self.db.add_all(
            [
                _GridTestModel(id="c1", title="Alpha", rank=3, is_public=True),
                _GridTestModel(id="c2", title="Beta", rank=1, is_public=False),
                _GridTestModel(id="c3", title="Gamma", rank=2, is_public=True),
            ]
        )
        self.db.commit()
        self.storage = SqlAlchemyGridStorage(self.db, _GridTestModel)

    def tearDown(self):
        self.db.close()

    def test_find_many_with_membership_coerces_each_value(self):
        where = Predicate(all_of=(FieldConstraint("rank", "in", ["1", "3"]),))
        rows = self.storage.find_many(0, 10, GridSort(field="rank", direction="asc"), where)
        self.assertEqual([row["id"] for row in rows], ["c2", "c1"])
        self.assertEqual(self.storage.count(where), 2)

    def test_find_many_conjoins_search_with_equalities(self):
        where = Predicate(
            all_of=(FieldConstraint("isPublic", "equals", "true"),),
            any_of=(FieldConstraint("title", "contains", "a"), FieldConstraint("id", "contains", "c2")),
        )
        rows = self.storage.find_many(0, 10, GridSort(field="id", direction="asc"), where)
        self.assertEqual([row["id"] for row in rows], ["c1", "c3"])

    def test_equals_null_matches_missing_values(self):
        where = Predicate(all_of=(FieldConstraint("publishedAt", "equals", None),))
        self.assertEqual(self.storage.count(where), 3)

    def test_fields_use_camel_case_wire_names(self):
        rows = self.storage.find_many(0, 10, GridSort(field="isPublic", direction="asc"), None)
        self.assertEqual(rows[0]["id"], "c2")
        self.assertEqual(set(rows[0]), {"id", "title", "rank", "isPublic", "publishedAt"})
        with self.assertRaises(InvalidGridQuery):
            self.storage.count(Predicate(all_of=(FieldConstraint("is_public", "equals", True),)))

    def test_skip_and_take(self):
        rows = self.storage.find_many(1, 1, GridSort(field="title", direction="desc"), None)
        self.assertEqual([row["title"] for row in rows], ["Beta"])
        self.assertEqual(self.storage.count(None), 3)

    def test_unknown_field_and_bad_direction_are_rejected(self):
        with self.assertRaises(InvalidGridQuery):
            self.storage.count(Predicate(all_of=(FieldConstraint("missing", "equals", 1),)))
        with self.assertRaises(InvalidGridQuery):
            self.storage.find_many(0, 10, GridSort(field="missing", direction="asc"), None)
        with self.assertRaises(InvalidGridQuery):
            self.storage.find_many(0, 10, GridSort(field="title", direction="up"), None)

    def test_update_and_delete(self):
        updated = self.storage.update("c2", {"title": "Beta 2"})
        self.assertEqual(updated["title"], "Beta 2")
        deleted = self.storage.delete("c2")
        self.assertEqual(deleted["id"], "c2")
        self.assertIsNone(self.storage.find_unique("c2"))
        with self.assertRaises(GridNotFound):
            self.storage.update("c2", {"title": "again"})
        with self.assertRaises(GridNotFound):
            self.storage.delete("c2")

    def test_create_duplicate_primary_key_is_400(self):
        self.db.expunge_all()
        with self.assertRaises(HTTPException) as ctx:
            self.storage.create({"id": "c1", "title": "Dup", "rank": 9, "is_public": False})
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(self.storage.count(None), 3)


if __name__ == "__main__":
    unittest.main()
