from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from fastapi import HTTPException
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.attributes import InstrumentedAttribute
from starlette.status import HTTP_404_NOT_FOUND
import uuid

from catalog.db.session import session_scope
from catalog.models.author import Author
from catalog.models.book import Book
from catalog.repos.author_repo import AuthorRepository
from catalog.repos.book_repo import BookRepository
from catalog.schemas.author import AuthorCandidate

AUTHOR_NOT_FOUND = "著者がありません。"

# Columns shown on the author detail page
DETAIL_BOOK_FIELDS: tuple[InstrumentedAttribute[str], ...] = (Book.title, Book.summary)


def _fetch_author(factory: sessionmaker[Session], author_id: uuid.UUID | str) -> Author | None:
    with session_scope(factory) as db:
        return AuthorRepository.get(db, author_id)


def _fetch_books(
    factory: sessionmaker[Session],
    author_id: uuid.UUID | str,
    fields: Sequence[InstrumentedAttribute[str]] | None,
) -> list[Book]:
    with session_scope(factory) as db:
        return BookRepository.list_by_author(db, author_id, fields)


class AuthorService:
    @staticmethod
    # List authors
    def list_authors(db: Session) -> list[Author]:
        return AuthorRepository.list(db)

    @staticmethod
    # Fetch an author and its books concurrently
    def get_author_with_books(
        factory: sessionmaker[Session],
        author_id: uuid.UUID | str,
        book_fields: Sequence[InstrumentedAttribute[str]] | None = None,
    ) -> tuple[Author | None, list[Book]]:
        """
        Both lookups run on their own session and are joined before
        returning. The first lookup to fail raises; nothing partial is
        returned.
        """
        with ThreadPoolExecutor(max_workers=2) as pool:
            author_future = pool.submit(_fetch_author, factory, author_id)
            books_future = pool.submit(_fetch_books, factory, author_id, book_fields)
            for future in as_completed((author_future, books_future)):
                _ = future.result()
            return author_future.result(), books_future.result()

    @staticmethod
    # Author detail: the author plus the title/summary of its books
    def get_author_detail(
        factory: sessionmaker[Session], author_id: uuid.UUID | str
    ) -> tuple[Author, list[Book]]:
        author, books = AuthorService.get_author_with_books(
            factory, author_id, DETAIL_BOOK_FIELDS
        )
        if author is None:
            raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=AUTHOR_NOT_FOUND)
        return author, books

    @staticmethod
    # Get an author or fail with 404
    def get_author(db: Session, author_id: uuid.UUID | str) -> Author:
        author = AuthorRepository.get(db, author_id)
        if author is None:
            raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=AUTHOR_NOT_FOUND)
        return author

    @staticmethod
    # Create author
    def create_author(db: Session, data: AuthorCandidate) -> Author:
        return AuthorRepository.create(db, data)

    @staticmethod
    # Update author (full replace)
    def update_author(db: Session, author_id: uuid.UUID | str, data: AuthorCandidate) -> Author:
        author = AuthorRepository.update(db, author_id, data)
        if author is None:
            raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=AUTHOR_NOT_FOUND)
        return author

    @staticmethod
    # Delete author unless books still reference it
    def delete_author(
        factory: sessionmaker[Session], db: Session, author_id: uuid.UUID | str
    ) -> tuple[bool, Author | None, list[Book]]:
        """
        Returns (deleted, author, books). When books reference the author
        nothing is removed and the blocking books are returned.
        """
        author, books = AuthorService.get_author_with_books(factory, author_id)
        if books:
            return False, author, books
        _ = AuthorRepository.delete(db, author_id)
        return True, author, books
