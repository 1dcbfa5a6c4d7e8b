import os
import tempfile

# Point the app at a throwaway SQLite file before anything reads settings
_TEST_DB_DIR = tempfile.mkdtemp(prefix="catalog-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DB_DIR}/test_catalog.db"
os.environ["CREATE_TABLES"] = "false"

import pytest
from datetime import date
from fastapi.testclient import TestClient
from sqlalchemy import event

from catalog.main import app
from catalog.db.session import engine, SessionLocal
from catalog.models.base import Base
from catalog.models.author import Author
from catalog.models.book import Book


@event.listens_for(engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores FOREIGN KEY clauses unless asked per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture(autouse=True)
def setup_test_database():
    """Create a clean schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Create a fresh database session for each test."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def test_client():
    """Create a test client for FastAPI app."""
    return TestClient(app)


@pytest.fixture
def make_author(db_session):
    """Factory inserting authors straight into the store."""
    def _make(
        first_name: str = "Jane",
        family_name: str = "Austen",
        date_of_birth: date | None = None,
        date_of_death: date | None = None,
    ) -> Author:
        author = Author(
            first_name=first_name,
            family_name=family_name,
            date_of_birth=date_of_birth,
            date_of_death=date_of_death,
        )
        db_session.add(author)
        db_session.commit()
        db_session.refresh(author)
        return author
    return _make


@pytest.fixture
def sample_author(make_author):
    """An author with both dates set."""
    return make_author("Jane", "Austen", date(1775, 12, 16), date(1817, 7, 18))


@pytest.fixture
def make_book(db_session):
    """Factory inserting books straight into the store."""
    def _make(
        author: Author,
        title: str = "Emma",
        summary: str = "",
        isbn: str | None = None,
    ) -> Book:
        book = Book(title=title, summary=summary, isbn=isbn, author_id=author.id)
        db_session.add(book)
        db_session.commit()
        db_session.refresh(book)
        return book
    return _make


@pytest.fixture
def sample_book(make_book, sample_author):
    """A book referencing sample_author."""
    return make_book(
        sample_author,
        title="Pride and Prejudice",
        summary="A novel of manners.",
        isbn="9780141439518",
    )
