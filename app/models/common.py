import uuid
from datetime import datetime, timezone
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import DateTime, String

def utcnow():
    return datetime.now(timezone.utc)

def new_record_id() -> str:
    # cuid-shaped: lowercase, starts with a letter, 25 chars.
    return "c" + uuid.uuid4().hex[:24]

class StringIdMixin:
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_record_id)

class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
