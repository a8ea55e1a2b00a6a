# /tests/test_catalog_routes.py

"""
Endpoint tests through the FastAPI TestClient. Redirects are not followed so
that the 303 and its Location header can be asserted directly.
"""

from sqlalchemy.exc import OperationalError

from app.services.database_helpers.catalog_repository_sql import CatalogRepositorySQL


def test_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "Catalog backend is running!"


def test_catalog_summary(client, seeded):
    response = client.get("/catalog")

    assert response.status_code == 200
    assert response.json() == {
        "title": "Local Library Home",
        "book_count": 2,
        "book_instance_count": 2,
        "book_instance_available_count": 1,
        "author_count": 2,
        "genre_count": 2,
    }


def test_listings_are_sorted(client, seeded):
    books = client.get("/catalog/books").json()["book_list"]
    authors = client.get("/catalog/authors").json()["author_list"]
    genres = client.get("/catalog/genres").json()["genre_list"]

    assert [b["title"] for b in books] == ["Roverandom", "The Hobbit"]
    assert [a["name"] for a in authors] == ["Le Guin, Ursula", "Tolkien, John"]
    assert [g["name"] for g in genres] == ["Fantasy", "Poetry"]


def test_book_detail_includes_copies(client, seeded):
    response = client.get("/catalog/book/B1")

    body = response.json()
    assert response.status_code == 200
    assert body["title"] == "The Hobbit"
    assert body["book"]["author"]["name"] == "Tolkien, John"
    assert sorted(i["id"] for i in body["book_instances"]) == ["bki_1", "bki_2"]


def test_unknown_entity_is_404(client, seeded):
    for path in ("/catalog/book/nope", "/catalog/author/nope", "/catalog/genre/nope", "/catalog/bookinstance/nope"):
        response = client.get(path)
        assert response.status_code == 404, path


def test_create_genre_redirects_to_the_new_genre(client, seeded):
    response = client.post("/catalog/genre/create", data={"name": "Science Fiction"}, follow_redirects=False)

    assert response.status_code == 303
    location = response.headers["location"]
    assert location.startswith("/catalog/genre/gen_")
    assert client.get(location).json()["genre"]["name"] == "Science Fiction"


def test_create_book_with_several_genres(client, seeded):
    response = client.post(
        "/catalog/book/create",
        data={
            "title": "The Lord of the Rings",
            "author": "aut_tolkien",
            "summary": "One ring.",
            "isbn": "9780261103252",
            "genre": ["gen_fantasy", "gen_poetry"],
        },
        follow_redirects=False,
    )

    assert response.status_code == 303
    book = client.get(response.headers["location"]).json()["book"]
    assert sorted(g["id"] for g in book["genre"]) == ["gen_fantasy", "gen_poetry"]


def test_invalid_book_form_is_422_with_every_error(client, seeded):
    response = client.post(
        "/catalog/book/create",
        data={"title": "", "author": "aut_tolkien", "summary": "s", "isbn": ""},
        follow_redirects=False,
    )

    body = response.json()
    assert response.status_code == 422
    assert body["title"] == "Create Book"
    assert {e["field"] for e in body["errors"]} == {"title", "isbn"}
    assert client.get("/catalog").json()["book_count"] == 2


def test_blocked_delete_is_409_and_lists_dependents(client, seeded):
    response = client.post("/catalog/author/aut_tolkien/delete", follow_redirects=False)

    body = response.json()
    assert response.status_code == 409
    assert body["title"] == "Delete Author"
    assert sorted(b["id"] for b in body["author_books"]) == ["B1", "B2"]
    assert client.get("/catalog/author/aut_tolkien").status_code == 200


def test_unblocked_delete_redirects_to_listing(client, seeded):
    response = client.post("/catalog/genre/gen_poetry/delete", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/catalog/genres"
    assert client.get("/catalog/genre/gen_poetry").status_code == 404


def test_copy_delete_redirects_to_copy_listing(client, seeded):
    response = client.post("/catalog/bookinstance/bki_1/delete", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/catalog/bookinstances"


def test_delete_of_missing_entity_is_404(client, seeded):
    response = client.post("/catalog/book/nope/delete", follow_redirects=False)
    assert response.status_code == 404


def test_update_form_and_update_round_trip(client, seeded):
    form = client.get("/catalog/genre/gen_poetry/update").json()
    assert form["entity"] == {"id": "gen_poetry", "name": "Poetry"}

    response = client.post("/catalog/genre/gen_poetry/update", data={"name": "Verse"}, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/catalog/genre/gen_poetry"
    assert client.get("/catalog/genre/gen_poetry").json()["genre"]["name"] == "Verse"


def test_copy_create_form_offers_every_book(client, seeded):
    body = client.get("/catalog/bookinstance/create").json()

    assert body["title"] == "Create BookInstance"
    assert [b["id"] for b in body["choices"]["books"]] == ["B2", "B1"]


def test_store_error_during_a_write_is_500_with_the_catalog_body(client, seeded, mocker):
    mocker.patch.object(
        CatalogRepositorySQL, "get_instance_by_id",
        side_effect=OperationalError("SELECT", {}, Exception("disk I/O error")),
    )

    response = client.post(
        "/catalog/bookinstance/bki_1/update",
        data={"book": "B1", "imprint": "Penguin", "status": "Available"},
        follow_redirects=False,
    )

    assert response.status_code == 500
    assert response.json() == {"detail": "The catalog store could not complete the request."}
