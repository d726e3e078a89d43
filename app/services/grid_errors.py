from __future__ import annotations

from fastapi import HTTPException

NOT_FOUND_BODY = "Not found"


class GridNotFound(Exception):
    """Routing-level miss: unknown model, missing or mismatched record id."""

    def __init__(self, reason: str = "") -> None:
        super().__init__(reason or NOT_FOUND_BODY)
        self.reason = reason


class InvalidGridQuery(HTTPException):
    def __init__(self, detail: str) -> None:
        super().__init__(status_code=400, detail=detail)


class PageSizeExceeded(InvalidGridQuery):
    def __init__(self, limit: int, max_page_size: int) -> None:
        super().__init__(f"Requested page size {limit} exceeds the maximum of {max_page_size}")
        self.limit = limit
        self.max_page_size = max_page_size
