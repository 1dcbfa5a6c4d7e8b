import uuid
from fastapi import status

from catalog.db.session import SessionLocal
from catalog.models.book import Book


class TestAuthorLifecycle:
    """Create, read, update, guard and delete an author through HTTP."""

    def test_full_author_workflow(self, test_client):
        # 1. Create
        response = test_client.post(
            "/catalog/author/create",
            data={"first_name": "Jane", "family_name": "Austen", "date_of_birth": "1775-12-16"},
            follow_redirects=False,
        )
        assert response.status_code == status.HTTP_302_FOUND
        author_url = response.headers["location"]
        author_id = author_url.rsplit("/", 1)[-1]

        # 2. Detail
        response = test_client.get(author_url)
        assert response.status_code == status.HTTP_200_OK
        assert "Austen, Jane" in response.text

        # 3. Update
        response = test_client.post(
            f"{author_url}/update",
            data={"first_name": "Jane", "family_name": "Austen", "date_of_death": "1817-07-18"},
            follow_redirects=False,
        )
        assert response.status_code == status.HTTP_302_FOUND
        assert response.headers["location"] == author_url
        assert "1817-07-18" in test_client.get(author_url).text

        # 4. A referencing book blocks deletion
        with SessionLocal() as s:
            book = Book(title="Emma", author_id=uuid.UUID(author_id))
            s.add(book)
            s.commit()
            book_id = book.id
        response = test_client.post(f"{author_url}/delete", follow_redirects=False)
        assert response.status_code == status.HTTP_200_OK
        assert "Emma" in response.text

        # 5. Without books the author goes away
        with SessionLocal() as s:
            s.delete(s.get(Book, book_id))
            s.commit()
        response = test_client.post(f"{author_url}/delete", follow_redirects=False)
        assert response.status_code == status.HTTP_302_FOUND
        assert response.headers["location"] == "/catalog/authors"

        # 6. Gone
        assert test_client.get(author_url).status_code == status.HTTP_404_NOT_FOUND
        assert test_client.get("/catalog/authors").context["author_list"] == []
