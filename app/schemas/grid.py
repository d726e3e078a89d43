from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional

DEFAULT_OFFSET = 0
DEFAULT_LIMIT = 10
MAX_QUERY_INT = 2**63 - 1

class GridRange(BaseModel):
    offset: int = Field(default=DEFAULT_OFFSET, ge=0, le=MAX_QUERY_INT)
    limit: int = Field(default=DEFAULT_LIMIT, ge=0, le=MAX_QUERY_INT)

class GridSort(BaseModel):
    field: str = "id"
    direction: str = "desc"


class _GridInput(BaseModel):
    # Wire names are the grid client's camelCase (ownerId); attributes stay snake_case.
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, alias_generator=to_camel)


class UserCreate(_GridInput):
    email: str = Field(min_length=3, max_length=255)
    username: str = Field(min_length=1, max_length=100)
    name: Optional[str] = Field(default=None, max_length=200)

class UserUpdate(_GridInput):
    email: Optional[str] = Field(default=None, min_length=3, max_length=255)
    username: Optional[str] = Field(default=None, min_length=1, max_length=100)
    name: Optional[str] = Field(default=None, max_length=200)


class NoteCreate(_GridInput):
    title: str = Field(min_length=1, max_length=200)
    content: str
    owner_id: str = Field(min_length=1, max_length=36)

class NoteUpdate(_GridInput):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = None
    owner_id: Optional[str] = Field(default=None, min_length=1, max_length=36)
