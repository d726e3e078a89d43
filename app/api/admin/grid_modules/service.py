from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from app.core.config import settings
from app.services.grid_errors import GridNotFound
from app.services.grid_params import parse_filter, parse_range, parse_sort
from app.services.grid_registry import GridResource, resolve_model
from app.services.grid_storage import GridStorage

from .payloads import _sanitize_payload, _split_record_id

StorageFactory = Callable[[GridResource], GridStorage]

_LOG = logging.getLogger("app.grid")


@dataclass(frozen=True)
class GridPage:
    rows: list[dict[str, Any]]
    skip: int
    take: int
    total: int

    @property
    def content_range(self) -> str:
        # Upper bound is skip + take even when fewer rows came back.
        return f"{self.skip}-{self.skip + self.take}/{self.total}"


def _record_id_or_404(record_id: str | None) -> str:
    if record_id is None or not str(record_id).strip():
        raise GridNotFound("missing record id")
    return record_id


def list_records_service(
    model_name: str,
    range_raw: str | None,
    sort_raw: str | None,
    filter_raw: str | None,
    storage_for: StorageFactory,
) -> GridPage:
    resource = resolve_model(model_name)
    page = parse_range(
        range_raw,
        max_page_size=settings.GRID_MAX_PAGE_SIZE,
        default_limit=settings.GRID_DEFAULT_PAGE_SIZE,
    )
    sort = parse_sort(sort_raw)
    where = parse_filter(resource, filter_raw)

    storage = storage_for(resource)
    rows = storage.find_many(page.offset, page.limit, sort, where)
    total = storage.count(where)
    _LOG.debug(
        "list model=%s skip=%s take=%s sort=%s:%s filtered=%s total=%s",
        resource.name.value,
        page.offset,
        page.limit,
        sort.field,
        sort.direction,
        where is not None,
        total,
    )
    return GridPage(rows=rows, skip=page.offset, take=page.limit, total=total)


def get_record_service(model_name: str, record_id: str | None, storage_for: StorageFactory) -> dict[str, Any] | None:
    resource = resolve_model(model_name)
    record_id = _record_id_or_404(record_id)
    return storage_for(resource).find_unique(record_id)


def create_record_service(model_name: str, payload: Any, storage_for: StorageFactory) -> dict[str, Any]:
    resource = resolve_model(model_name)
    data = _sanitize_payload(resource, payload, is_update=False)
    created = storage_for(resource).create(data)
    _LOG.info("created model=%s id=%s", resource.name.value, created.get("id"))
    return created


def update_record_service(
    model_name: str,
    record_id: str | None,
    payload: Any,
    storage_for: StorageFactory,
) -> dict[str, Any]:
    resource = resolve_model(model_name)
    record_id = _record_id_or_404(record_id)
    body_id, rest = _split_record_id(payload)
    # No coercion: the JSON number 5 is not the path segment "5".
    if body_id != record_id:
        raise GridNotFound(f"record id mismatch path={record_id!r} body={body_id!r}")
    data = _sanitize_payload(resource, rest, is_update=True)
    updated = storage_for(resource).update(record_id, data)
    _LOG.info("updated model=%s id=%s fields=%s", resource.name.value, record_id, sorted(data.keys()))
    return updated


def delete_record_service(model_name: str, record_id: str | None, storage_for: StorageFactory) -> dict[str, Any]:
    resource = resolve_model(model_name)
    record_id = _record_id_or_404(record_id)
    deleted = storage_for(resource).delete(record_id)
    _LOG.info("deleted model=%s id=%s", resource.name.value, record_id)
    return deleted
