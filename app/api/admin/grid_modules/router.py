from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session

from app.core.deps import require_role
from app.db.session import get_db
from app.services.grid_errors import NOT_FOUND_BODY, GridNotFound
from app.services.grid_registry import GridResource
from app.services.grid_storage import SqlAlchemyGridStorage

from .service import (
    StorageFactory,
    create_record_service,
    delete_record_service,
    get_record_service,
    list_records_service,
    update_record_service,
)

CONTENT_RANGE_HEADER = "Content-Range"
ALL_METHODS = ["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"]

_LOG = logging.getLogger("app.grid")

router = APIRouter(dependencies=[Depends(require_role("ADMIN"))])


def get_storage_factory(db: Session = Depends(get_db)) -> StorageFactory:
    def _storage_for(resource: GridResource) -> SqlAlchemyGridStorage:
        return SqlAlchemyGridStorage(db, resource.model)

    return _storage_for


def install_grid_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(GridNotFound)
    async def _grid_not_found_handler(request: Request, exc: GridNotFound):
        _LOG.info("%s %s -> 404 (%s)", request.method, request.url.path, exc.reason or NOT_FOUND_BODY)
        return PlainTextResponse(NOT_FOUND_BODY, status_code=404)


@router.get("/{model}")
def list_records(
    model: str,
    range_: str | None = Query(default=None, alias="range"),
    sort: str | None = Query(default=None),
    filter_: str | None = Query(default=None, alias="filter"),
    storage_for: StorageFactory = Depends(get_storage_factory),
):
    page = list_records_service(model, range_, sort, filter_, storage_for)
    return JSONResponse(content=page.rows, headers={CONTENT_RANGE_HEADER: page.content_range})


@router.get("/{model}/{record_id}")
def get_record(model: str, record_id: str, storage_for: StorageFactory = Depends(get_storage_factory)):
    return JSONResponse(content=get_record_service(model, record_id, storage_for))


@router.post("/{model}")
def create_record(
    model: str,
    payload: Any = Body(default=None),
    storage_for: StorageFactory = Depends(get_storage_factory),
):
    return create_record_service(model, payload, storage_for)


@router.put("/{model}/{record_id}")
def update_record(
    model: str,
    record_id: str,
    payload: Any = Body(default=None),
    storage_for: StorageFactory = Depends(get_storage_factory),
):
    return update_record_service(model, record_id, payload, storage_for)


@router.delete("/{model}/{record_id}")
def delete_record(model: str, record_id: str, storage_for: StorageFactory = Depends(get_storage_factory)):
    return delete_record_service(model, record_id, storage_for)


@router.api_route("/", methods=ALL_METHODS, include_in_schema=False)
@router.api_route("/{model}", methods=["HEAD", "OPTIONS", "PUT", "PATCH", "DELETE"], include_in_schema=False)
@router.api_route("/{model}/{record_id}", methods=["HEAD", "OPTIONS", "POST", "PATCH"], include_in_schema=False)
@router.api_route("/{model}/{record_id}/{rest:path}", methods=ALL_METHODS, include_in_schema=False)
def unsupported_route(request: Request):
    raise GridNotFound(f"unsupported {request.method}")
