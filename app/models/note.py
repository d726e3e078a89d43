from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from app.db.session import Base
from app.models.common import StringIdMixin, TimestampMixin

class Note(Base, StringIdMixin, TimestampMixin):
    __tablename__ = "notes"
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    owner_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"), nullable=False, index=True
    )
