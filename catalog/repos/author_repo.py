import uuid
from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog.models.author import Author
from catalog.schemas.author import AuthorCandidate


def parse_id(value: uuid.UUID | str) -> uuid.UUID | None:
    """Malformed ids refer to nothing."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return None


class AuthorRepository:

    @staticmethod
    # Create a new author
    def create(db: Session, data: AuthorCandidate) -> Author:
        author = Author(**data.values())
        db.add(author)
        db.commit()
        db.refresh(author)
        return author

    @staticmethod
    # List authors
    def list(db: Session) -> list[Author]:
        stmt = select(Author).order_by(Author.family_name.asc())
        return list(db.scalars(stmt).all())

    @staticmethod
    # Get an author by ID
    def get(db: Session, author_id: uuid.UUID | str) -> Author | None:
        key = parse_id(author_id)
        if key is None:
            return None
        return db.get(Author, key)

    @staticmethod
    # Replace every stored field of an author
    def update(db: Session, author_id: uuid.UUID | str, data: AuthorCandidate) -> Author | None:
        author = AuthorRepository.get(db, author_id)
        if author is None:
            return None
        for field, value in data.values().items():
            setattr(author, field, value)
        db.commit()
        db.refresh(author)
        return author

    @staticmethod
    # Delete an author by ID
    def delete(db: Session, author_id: uuid.UUID | str) -> bool:
        author = AuthorRepository.get(db, author_id)
        if author is None:
            return False
        db.delete(author)
        db.commit()
        return True
