from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Protocol

from fastapi import HTTPException
from pydantic.alias_generators import to_camel
from sqlalchemy import and_, asc, desc, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.inspection import inspect as sa_inspect
from sqlalchemy.orm import Session

from app.schemas.grid import GridSort
from app.services.grid_errors import GridNotFound, InvalidGridQuery
from app.services.grid_filters import FieldConstraint, Predicate

SORT_DIRECTIONS = {"asc", "desc"}
_LIKE_ESCAPE = "\\"


class GridStorage(Protocol):
    def find_many(self, skip: int, take: int, order_by: GridSort, where: Predicate | None) -> list[dict[str, Any]]: ...

    def count(self, where: Predicate | None) -> int: ...

    def find_unique(self, record_id: str) -> dict[str, Any] | None: ...

    def create(self, data: dict[str, Any]) -> dict[str, Any]: ...

    def update(self, record_id: str, data: dict[str, Any]) -> dict[str, Any]: ...

    def delete(self, record_id: str) -> dict[str, Any]: ...


def _serialize_value(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _serialize_value(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize_value(item) for item in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, Decimal):
        return float(value)
    return value


def wire_name(attribute: str) -> str:
    """Client-facing field name of a mapped attribute (``owner_id`` -> ``ownerId``)."""
    return to_camel(attribute)


def _row_to_dict(row: Any) -> dict[str, Any]:
    mapper = sa_inspect(type(row))
    return {wire_name(attr.key): _serialize_value(getattr(row, attr.key)) for attr in mapper.column_attrs}


def _columns_map(model: type) -> dict[str, Any]:
    mapper = sa_inspect(model)
    return {attr.key: attr.columns[0] for attr in mapper.column_attrs}


def _wire_columns_map(model: type) -> dict[str, Any]:
    return {wire_name(key): column for key, column in _columns_map(model).items()}


def _bad_filter_value(column_key: str, kind: str) -> InvalidGridQuery:
    return InvalidGridQuery(f'Invalid filter value for field "{column_key}" ({kind})')


def _coerce_bool_filter_value(column_key: str, value):
    if isinstance(value, bool):
        return value
    text = str(value or "").strip().lower()
    if text in {"1", "true", "yes", "y"}:
        return True
    if text in {"0", "false", "no", "n"}:
        return False
    raise _bad_filter_value(column_key, "boolean")


def _coerce_number_filter_value(column_key: str, value, python_type):
    if python_type in {int, float} and isinstance(value, (int, float)) and not isinstance(value, bool):
        return python_type(value)
    text = str(value).strip()
    if not text:
        raise _bad_filter_value(column_key, "number")
    try:
        if python_type is Decimal:
            return Decimal(text)
        return python_type(text)
    except (ValueError, TypeError, InvalidOperation):
        raise _bad_filter_value(column_key, "number")


def _coerce_datetime_filter_value(column_key: str, value):
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value or "").strip()
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise _bad_filter_value(column_key, "datetime")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _coerce_filter_value(column, value):
    if value is None:
        return None
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value
    if python_type is bool:
        return _coerce_bool_filter_value(column.key, value)
    if python_type in {int, float, Decimal}:
        return _coerce_number_filter_value(column.key, value, python_type)
    if python_type is datetime:
        return _coerce_datetime_filter_value(column.key, value)
    if python_type is date:
        try:
            return date.fromisoformat(str(value).strip()[:10])
        except ValueError:
            raise _bad_filter_value(column.key, "date")
    if python_type is str and not isinstance(value, str):
        if isinstance(value, (dict, list)):
            raise _bad_filter_value(column.key, "text")
        return str(value)
    return value


def _escape_like(text: str) -> str:
    return text.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2).replace("%", _LIKE_ESCAPE + "%").replace("_", _LIKE_ESCAPE + "_")


class SqlAlchemyGridStorage:
    """Grid storage accessor over one SQLAlchemy model.

    Field names coming from the client are only ever resolved through the
    model's mapped columns, under their camelCase wire names; anything else
    is rejected with a 400. Rows go back out under the same wire names.
    """

    def __init__(self, db: Session, model: type) -> None:
        self.db = db
        self.model = model
        self._columns = _wire_columns_map(model)

    def _column_or_400(self, field: str):
        column = self._columns.get(field)
        if column is None:
            raise InvalidGridQuery(f'Unknown field "{field}"')
        return column

    def _constraint_expression(self, constraint: FieldConstraint):
        column = self._column_or_400(constraint.field)
        if constraint.op == "in":
            values = [_coerce_filter_value(column, item) for item in constraint.value]
            return column.in_(values)
        if constraint.op == "contains":
            return column.ilike(f"%{_escape_like(str(constraint.value))}%", escape=_LIKE_ESCAPE)
        value = _coerce_filter_value(column, constraint.value)
        if value is None:
            return column.is_(None)
        return column == value

    def _where_clause(self, where: Predicate | None):
        if where is None or where.is_empty:
            return None
        clauses = [self._constraint_expression(c) for c in where.all_of]
        if where.any_of:
            clauses.append(or_(*[self._constraint_expression(c) for c in where.any_of]))
        return and_(*clauses)

    def _filtered_query(self, where: Predicate | None):
        query = self.db.query(self.model)
        clause = self._where_clause(where)
        if clause is not None:
            query = query.filter(clause)
        return query

    def _load_or_404(self, record_id: str):
        row = self.db.get(self.model, record_id)
        if row is None:
            raise GridNotFound(f"{self.model.__tablename__} {record_id!r}")
        return row

    def _commit_or_400(self) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(status_code=400, detail="Integrity constraint violated")

    def find_many(self, skip: int, take: int, order_by: GridSort, where: Predicate | None) -> list[dict[str, Any]]:
        column = self._column_or_400(order_by.field)
        if order_by.direction not in SORT_DIRECTIONS:
            raise InvalidGridQuery(f'Invalid sort direction "{order_by.direction}"')
        direction = asc if order_by.direction == "asc" else desc
        query = self._filtered_query(where).order_by(direction(column))
        pk = self._columns["id"]
        if column is not pk:
            query = query.order_by(direction(pk))
        rows = query.offset(skip).limit(take).all()
        return [_row_to_dict(row) for row in rows]

    def count(self, where: Predicate | None) -> int:
        return self._filtered_query(where).count()

    def find_unique(self, record_id: str) -> dict[str, Any] | None:
        row = self.db.get(self.model, record_id)
        return _row_to_dict(row) if row is not None else None

    def create(self, data: dict[str, Any]) -> dict[str, Any]:
        row = self.model(**data)
        self.db.add(row)
        self._commit_or_400()
        self.db.refresh(row)
        return _row_to_dict(row)

    def update(self, record_id: str, data: dict[str, Any]) -> dict[str, Any]:
        row = self._load_or_404(record_id)
        for key, value in data.items():
            setattr(row, key, value)
        self.db.add(row)
        self._commit_or_400()
        self.db.refresh(row)
        return _row_to_dict(row)

    def delete(self, record_id: str) -> dict[str, Any]:
        row = self._load_or_404(record_id)
        payload = _row_to_dict(row)
        self.db.delete(row)
        self._commit_or_400()
        return payload
