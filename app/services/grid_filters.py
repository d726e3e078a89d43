"""Backend-neutral predicate tree for grid filters.

A decoded ``filter`` object such as ``{"ownerId": "c1", "id": ["a", "b"], "q": "todo"}``
compiles to::

    Predicate(
        all_of=(ownerId equals "c1", id in ["a", "b"]),
        any_of=(title contains "todo", content contains "todo"),
    )

which reads as ``AND(all_of) AND OR(any_of)``. Full-text search narrows the
result when combined with other filters. Storage backends translate the tree
into their own query language (see ``app.services.grid_storage``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Sequence

SEARCH_KEY = "q"

ConstraintOp = Literal["equals", "in", "contains"]


@dataclass(frozen=True)
class FieldConstraint:
    field: str
    op: ConstraintOp
    value: Any


@dataclass(frozen=True)
class Predicate:
    all_of: tuple[FieldConstraint, ...] = ()
    any_of: tuple[FieldConstraint, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.all_of and not self.any_of

    def fields(self) -> set[str]:
        return {c.field for c in self.all_of} | {c.field for c in self.any_of}


def compile_filter(filters: Mapping[str, Any], search_fields: Sequence[str]) -> Predicate:
    all_of: list[FieldConstraint] = []
    any_of: list[FieldConstraint] = []
    for key, value in filters.items():
        if isinstance(value, (list, tuple)):
            all_of.append(FieldConstraint(key, "in", list(value)))
            continue
        if key == SEARCH_KEY:
            text = value if isinstance(value, str) else str(value if value is not None else "")
            if not text.strip():
                continue
            any_of = [FieldConstraint(field, "contains", text) for field in search_fields]
            continue
        all_of.append(FieldConstraint(key, "equals", value))
    return Predicate(all_of=tuple(all_of), any_of=tuple(any_of))
