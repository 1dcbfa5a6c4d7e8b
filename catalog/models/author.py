from __future__ import annotations
import datetime
import uuid
from sqlalchemy import String, Date, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from catalog.core.config import settings
from catalog.models.base import Base

NAME_MAX_LENGTH = 100

#Author
class Author(Base):
    __tablename__: str = "authors"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    family_name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    date_of_birth: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)
    date_of_death: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)

    @property
    def url(self) -> str:
        return author_url(self.id)

    @property
    def name(self) -> str:
        # "family, first"; empty when either part is missing
        if not self.first_name or not self.family_name:
            return ""
        return f"{self.family_name}, {self.first_name}"

    @property
    def lifespan(self) -> str:
        birth = self.date_of_birth.isoformat() if self.date_of_birth else ""
        death = self.date_of_death.isoformat() if self.date_of_death else ""
        return f"{birth} - {death}"


def author_url(author_id: uuid.UUID | str) -> str:
    return f"{settings.CATALOG_PREFIX}/author/{author_id}"
