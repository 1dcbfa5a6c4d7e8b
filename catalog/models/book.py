from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import ForeignKey, String, Text, Uuid
import uuid
from catalog.core.config import settings
from catalog.models.base import Base

#Book
class Book(Base):
    __tablename__: str = "books"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False, default="")
    isbn: Mapped[str | None] = mapped_column(String(20), nullable=True)
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("authors.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    @property
    def url(self) -> str:
        return f"{settings.CATALOG_PREFIX}/book/{self.id}"
