from sqlalchemy.orm import Session, load_only
from catalog.models.book import Book
from catalog.repos.author_repo import parse_id
from sqlalchemy import select
from sqlalchemy.orm.attributes import InstrumentedAttribute
from collections.abc import Sequence
import uuid


class BookRepository:
    @staticmethod
    # List the books of an author, optionally loading only some columns
    def list_by_author(
        db: Session,
        author_id: uuid.UUID | str,
        fields: Sequence[InstrumentedAttribute[str]] | None = None,
    ) -> list[Book]:
        key = parse_id(author_id)
        if key is None:
            return []

        stmt = select(Book).where(Book.author_id == key).order_by(Book.title)
        if fields:
            stmt = stmt.options(load_only(*fields))
        return list(db.scalars(stmt).all())
