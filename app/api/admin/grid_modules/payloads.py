from __future__ import annotations

from typing import Any

from fastapi import HTTPException
from pydantic import ValidationError

from app.services.grid_registry import GridResource
from app.services.grid_storage import _columns_map, wire_name

# The grid client echoes these back on every edit form submit.
READ_ONLY_FIELDS = {"id", "createdAt", "updatedAt"}


def _validation_detail(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "Invalid payload: " + "; ".join(parts)


def _sanitize_payload(resource: GridResource, payload: Any, *, is_update: bool) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")

    schema = resource.update_schema if is_update else resource.create_schema
    data = {key: value for key, value in payload.items() if key not in READ_ONLY_FIELDS}

    wire_fields = {field.alias or name for name, field in schema.model_fields.items()}
    unknown_fields = sorted(set(data.keys()) - wire_fields)
    if unknown_fields:
        raise HTTPException(status_code=400, detail="Unknown fields: " + ", ".join(unknown_fields))

    try:
        parsed = schema.model_validate(data)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=_validation_detail(exc))
    cleaned = parsed.model_dump(exclude_unset=True)

    if not is_update:
        return cleaned

    columns = _columns_map(resource.model)
    for key, value in cleaned.items():
        if value is None and not columns[key].nullable:
            raise HTTPException(status_code=400, detail=f'Field "{wire_name(key)}" cannot be null')
    if not cleaned:
        raise HTTPException(status_code=400, detail="No fields to update")
    return cleaned


def _split_record_id(payload: Any) -> tuple[Any, dict[str, Any]]:
    if not isinstance(payload, dict) or "id" not in payload:
        return None, {}
    rest = dict(payload)
    record_id = rest.pop("id")
    return record_id, rest
