from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from sqlalchemy.orm import Session, sessionmaker
from catalog.api.templates import templates
from catalog.core.config import settings
from catalog.core.logging import get_logger
from catalog.db.session import get_db, get_session_factory
from catalog.models.author import Author
from catalog.models.book import Book
from catalog.repos.author_repo import parse_id
from catalog.schemas.author import AuthorCandidate, FieldError, validate_author_form
from catalog.services.author_service import AuthorService
from typing import Annotated
from starlette.status import HTTP_302_FOUND

router = APIRouter(tags=["authors"])

AUTHOR_LIST_URL = f"{settings.CATALOG_PREFIX}/authors"

LIST_TITLE = "著者リスト"
DETAIL_TITLE = "著者詳細"
CREATE_TITLE = "著者登録フォーム"
UPDATE_TITLE = "著者更新"
DELETE_TITLE = "著者削除"

Db = Annotated[Session, Depends(get_db)]
SessionFactory = Annotated[sessionmaker[Session], Depends(get_session_factory)]
FormField = Annotated[str, Form()]


def _render_form(
    request: Request,
    title: str,
    author: Author | AuthorCandidate | None = None,
    errors: list[FieldError] | None = None,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "author_form.html",
        {"title": title, "author": author, "errors": errors or []},
    )


def _render_delete(
    request: Request, author: Author | None, books: list[Book]
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "author_delete.html",
        {"title": DELETE_TITLE, "author": author, "author_books": books},
    )


def _submitted(
    first_name: str, family_name: str, date_of_birth: str, date_of_death: str
) -> dict[str, object]:
    return {
        "first_name": first_name,
        "family_name": family_name,
        "date_of_birth": date_of_birth,
        "date_of_death": date_of_death,
    }


# Display list of all authors
@router.get("/authors", response_class=HTMLResponse)
def author_list(request: Request, db: Db):
    authors = AuthorService.list_authors(db)
    return templates.TemplateResponse(
        request,
        "author_list.html",
        {"title": LIST_TITLE, "author_list": authors},
    )


# Display author create form
@router.get("/author/create", response_class=HTMLResponse)
def author_create_get(request: Request):
    return _render_form(request, CREATE_TITLE)


# Handle author create
@router.post("/author/create")
def author_create_post(
    request: Request,
    db: Db,
    first_name: FormField = "",
    family_name: FormField = "",
    date_of_birth: FormField = "",
    date_of_death: FormField = "",
) -> Response:
    logger = get_logger(__name__, request)
    candidate, result = validate_author_form(
        _submitted(first_name, family_name, date_of_birth, date_of_death)
    )
    if not result.is_empty():
        logger.info("Author create rejected: %d invalid field(s)", len(result.array()))
        return _render_form(request, CREATE_TITLE, candidate, result.array())

    author = AuthorService.create_author(db, candidate)
    logger.info("Author created: %s", author.id)
    return RedirectResponse(author.url, status_code=HTTP_302_FOUND)


# Display author delete form
@router.get("/author/{author_id}/delete")
def author_delete_get(
    request: Request, author_id: str, factory: SessionFactory
) -> Response:
    author, books = AuthorService.get_author_with_books(factory, author_id)
    if author is None:
        return RedirectResponse(AUTHOR_LIST_URL, status_code=HTTP_302_FOUND)
    return _render_delete(request, author, books)


# Handle author delete
@router.post("/author/{author_id}/delete")
def author_delete_post(
    request: Request, author_id: str, db: Db, factory: SessionFactory
) -> Response:
    logger = get_logger(__name__, request)
    deleted, author, books = AuthorService.delete_author(factory, db, author_id)
    if not deleted:
        logger.info("Author delete blocked: %s has %d book(s)", author_id, len(books))
        return _render_delete(request, author, books)

    logger.info("Author deleted: %s", author_id)
    return RedirectResponse(AUTHOR_LIST_URL, status_code=HTTP_302_FOUND)


# Display author update form
@router.get("/author/{author_id}/update", response_class=HTMLResponse)
def author_update_get(request: Request, author_id: str, db: Db):
    author = AuthorService.get_author(db, author_id)
    return _render_form(request, UPDATE_TITLE, author)


# Handle author update
@router.post("/author/{author_id}/update")
def author_update_post(
    request: Request,
    author_id: str,
    db: Db,
    first_name: FormField = "",
    family_name: FormField = "",
    date_of_birth: FormField = "",
    date_of_death: FormField = "",
) -> Response:
    logger = get_logger(__name__, request)
    candidate, result = validate_author_form(
        _submitted(first_name, family_name, date_of_birth, date_of_death)
    )
    # the path decides the identity, whatever the form carried
    candidate.id = parse_id(author_id)

    if not result.is_empty():
        logger.info("Author update rejected: %d invalid field(s)", len(result.array()))
        return _render_form(request, UPDATE_TITLE, candidate, result.array())

    author = AuthorService.update_author(db, author_id, candidate)
    logger.info("Author updated: %s", author.id)
    return RedirectResponse(author.url, status_code=HTTP_302_FOUND)


# Display detail page for a specific author
@router.get("/author/{author_id}", response_class=HTMLResponse)
def author_detail(request: Request, author_id: str, factory: SessionFactory):
    author, books = AuthorService.get_author_detail(factory, author_id)
    return templates.TemplateResponse(
        request,
        "author_detail.html",
        {"title": DETAIL_TITLE, "author": author, "author_books": books},
    )
