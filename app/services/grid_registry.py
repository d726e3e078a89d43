from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel

from app.models.note import Note
from app.models.user import User
from app.schemas.grid import NoteCreate, NoteUpdate, UserCreate, UserUpdate
from app.services.grid_errors import GridNotFound


class GridModelName(str, Enum):
    USER = "user"
    NOTE = "note"


@dataclass(frozen=True)
class GridResource:
    name: GridModelName
    model: type
    search_fields: tuple[str, ...]
    create_schema: type[BaseModel]
    update_schema: type[BaseModel]


_REGISTRY: dict[str, GridResource] = {
    GridModelName.USER.value: GridResource(
        name=GridModelName.USER,
        model=User,
        search_fields=("email", "username", "name"),
        create_schema=UserCreate,
        update_schema=UserUpdate,
    ),
    GridModelName.NOTE.value: GridResource(
        name=GridModelName.NOTE,
        model=Note,
        search_fields=("title", "content"),
        create_schema=NoteCreate,
        update_schema=NoteUpdate,
    ),
}


def registered_models() -> list[str]:
    return sorted(_REGISTRY.keys())


def resolve_model(name: str | None) -> GridResource:
    if not isinstance(name, str):
        raise GridNotFound(f"model {name!r}")
    # Explicit allow-list, never attribute lookup on models.
    resource = _REGISTRY.get(name)
    if resource is None:
        raise GridNotFound(f"model {name!r}")
    return resource
