"""
Movie Blog API - HTTP Endpoint Tests
=====================================

What:  End-to-end tests of the HTTP contract: status codes, bodies and the
       guarantee that rejected requests never reach the database.
How:   HTTPX AsyncClient over ASGITransport against an app backed by an
       in-memory SQLite engine.
"""

import logging
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from movie_blog.config import settings
from movie_blog.main import create_app
from movie_blog.services.post_repository import PostRepository, get_post_repository


async def _create(client, payload) -> int:
    response = await client.post("/posts", json=payload)
    assert response.status_code == 200
    return response.json()["insertId"]


class TestHome:

    @pytest.mark.asyncio
    async def test_home_returns_plain_text_greeting(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == settings.greeting

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("supplied", ["x" * 65, "two words", "<b>id</b>"])
    async def test_unsafe_request_id_is_replaced(self, test_client, supplied):
        response = await test_client.get("/", headers={"X-Request-ID": supplied})

        rid = response.headers["X-Request-ID"]
        assert rid != supplied
        assert len(rid) == 8


class TestListAndGet:

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/posts")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_create_then_get_returns_array_with_post(self, test_client, sample_post_payload):
        response = await test_client.post("/posts", json=sample_post_payload)

        assert response.status_code == 200
        body = response.json()
        assert body["affectedRows"] == 1
        post_id = body["insertId"]

        response = await test_client.get(f"/posts/{post_id}")
        assert response.status_code == 200
        assert response.json() == [{"id": post_id, **sample_post_payload}]

    @pytest.mark.asyncio
    async def test_get_unknown_id_returns_empty_array(self, test_client):
        response = await test_client.get("/posts/999999")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_list_returns_every_post(self, test_client, sample_post_payload):
        first = await _create(test_client, sample_post_payload)
        second = await _create(test_client, {**sample_post_payload, "title": "Second"})

        response = await test_client.get("/posts")

        assert response.status_code == 200
        assert sorted(post["id"] for post in response.json()) == sorted([first, second])

    @pytest.mark.asyncio
    async def test_list_with_trailing_slash(self, test_client, sample_post_payload):
        post_id = await _create(test_client, sample_post_payload)

        response = await test_client.get("/posts/")

        assert response.status_code == 200
        assert [post["id"] for post in response.json()] == [post_id]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/", "/posts", "/posts/1"])
    async def test_head_is_answered_like_get(self, test_client, path):
        response = await test_client.head(path)

        assert response.status_code == 200


class TestCreate:

    @pytest.mark.asyncio
    async def test_trailing_slash_is_accepted(self, test_client, sample_post_payload):
        response = await test_client.post("/posts/", json=sample_post_payload)

        assert response.status_code == 200
        assert response.json()["affectedRows"] == 1

    @pytest.mark.asyncio
    async def test_empty_title_is_rejected_without_writing(self, test_client, sample_post_payload):
        response = await test_client.post("/posts", json={**sample_post_payload, "title": ""})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert [e["field"] for e in body["errors"]] == ["title"]

        assert (await test_client.get("/posts")).json() == []

    @pytest.mark.asyncio
    async def test_all_missing_fields_are_listed(self, test_client):
        response = await test_client.post("/posts", json={})

        assert response.status_code == 400
        assert [e["field"] for e in response.json()["errors"]] == [
            "title", "imgSrc", "pelicula", "content",
        ]

    @pytest.mark.asyncio
    async def test_empty_body_lists_every_field(self, test_client):
        response = await test_client.post("/posts")

        assert response.status_code == 400
        assert len(response.json()["errors"]) == 4

    @pytest.mark.asyncio
    async def test_invalid_url_is_rejected(self, test_client, sample_post_payload):
        response = await test_client.post("/posts", json={**sample_post_payload, "imgSrc": "a.png"})

        assert response.status_code == 400
        assert response.json()["errors"] == [
            {"field": "imgSrc", "message": "must be a valid absolute URL"},
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "img_src",
        ["http://x.test/a\nb.png", " http://x.test/a.png", "http://x.test/<img>.png"],
    )
    async def test_url_with_whitespace_or_markup_is_not_stored(
        self, test_client, sample_post_payload, img_src
    ):
        response = await test_client.post("/posts", json={**sample_post_payload, "imgSrc": img_src})

        assert response.status_code == 400
        assert [e["field"] for e in response.json()["errors"]] == ["imgSrc"]
        assert (await test_client.get("/posts")).json() == []

    @pytest.mark.asyncio
    async def test_malformed_json_is_rejected(self, test_client):
        response = await test_client.post(
            "/posts",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "body"


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_replaces_fields(self, test_client, sample_post_payload):
        post_id = await _create(test_client, sample_post_payload)
        new_values = {
            "title": "New",
            "imgSrc": "https://x.test/new.png",
            "pelicula": "Other",
            "content": "Rewritten",
        }

        response = await test_client.put(f"/posts/{post_id}", json=new_values)

        assert response.status_code == 200
        assert response.json() == {"affectedRows": 1}
        assert (await test_client.get(f"/posts/{post_id}")).json() == [{"id": post_id, **new_values}]

    @pytest.mark.asyncio
    async def test_partial_update_is_rejected(self, test_client, sample_post_payload):
        post_id = await _create(test_client, sample_post_payload)

        response = await test_client.put(f"/posts/{post_id}", json={"title": "Only title"})

        assert response.status_code == 400
        assert [e["field"] for e in response.json()["errors"]] == ["imgSrc", "pelicula", "content"]
        assert (await test_client.get(f"/posts/{post_id}")).json() == [
            {"id": post_id, **sample_post_payload}
        ]

    @pytest.mark.asyncio
    async def test_update_unknown_id_is_not_an_error(self, test_client, sample_post_payload):
        response = await test_client.put("/posts/999999", json=sample_post_payload)

        assert response.status_code == 200
        assert response.json() == {"affectedRows": 0}


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_existing_post(self, test_client, sample_post_payload):
        post_id = await _create(test_client, sample_post_payload)

        response = await test_client.delete(f"/posts/{post_id}")

        assert response.status_code == 200
        assert response.json() == {"affectedRows": 1}
        assert (await test_client.get(f"/posts/{post_id}")).json() == []

    @pytest.mark.asyncio
    async def test_delete_unknown_id_reports_zero_rows(self, test_client):
        response = await test_client.delete("/posts/999999")

        assert response.status_code == 200
        assert response.json() == {"affectedRows": 0}


class TestFallback:

    @pytest.mark.asyncio
    async def test_unknown_route_is_400_plain_text(self, test_client):
        response = await test_client.get("/unknown/route")

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("text/plain")
        assert "not implemented" in response.text

    @pytest.mark.asyncio
    async def test_unsupported_method_on_known_path(self, test_client):
        response = await test_client.patch("/posts/1", json={"title": "x"})

        assert response.status_code == 400
        assert "not implemented" in response.text

    @pytest.mark.asyncio
    async def test_docs_are_not_shadowed(self, test_client):
        response = await test_client.get("/openapi.json")

        assert response.status_code == 200
        assert "/posts/{postId}" in response.json()["paths"]


class TestStoreFailures:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path, send_body",
        [
            ("GET", "/posts", False),
            ("GET", "/posts/1", False),
            ("POST", "/posts", True),
            ("PUT", "/posts/1", True),
            ("DELETE", "/posts/1", False),
        ],
    )
    async def test_store_error_is_500_without_driver_details(
        self, broken_client, sample_post_payload, method, path, send_body
    ):
        kwargs = {"json": sample_post_payload} if send_body else {}

        response = await broken_client.request(method, path, **kwargs)

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "store_error"
        assert "no such table" not in response.text
        assert "blog_posts" not in response.text

    @pytest.mark.asyncio
    async def test_validation_failure_never_reaches_repository(self, engine, sample_post_payload):
        repository = AsyncMock(spec=PostRepository)
        app = create_app(engine=engine)
        app.dependency_overrides[get_post_repository] = lambda: repository

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            create = await client.post("/posts", json={**sample_post_payload, "content": ""})
            update = await client.put("/posts/1", json={**sample_post_payload, "imgSrc": "nope"})

        assert create.status_code == 400
        assert update.status_code == 400
        repository.create_from_payload.assert_not_awaited()
        repository.update_from_payload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_app_without_engine_answers_500(self):
        app = create_app()

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/posts")

        assert response.status_code == 500
        assert response.json()["error"] == "store_error"


class TestAccessLog:

    @pytest.mark.asyncio
    async def test_line_names_route_template_and_post_id(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="movie_blog.access")

        await test_client.get("/posts/42", headers={"X-Request-ID": "trace-1"})

        [record] = [r for r in caplog.records if r.name == "movie_blog.access"]
        assert record.route == "/posts/{postId}"
        assert record.post_id == "42"
        assert record.request_id == "trace-1"
        assert record.levelno == logging.INFO

    @pytest.mark.asyncio
    async def test_fallback_hit_is_logged_as_unmatched_warning(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="movie_blog.access")

        await test_client.get("/nowhere/17")

        [record] = [r for r in caplog.records if r.name == "movie_blog.access"]
        assert record.route == "unmatched"
        assert record.post_id is None
        assert record.levelno == logging.WARNING
