"""
Notekeeper Backend — Notes API Tests
======================================

What:  End-to-end tests of the /api/notes routes.
How:   HTTPX AsyncClient → FastAPI app → SqlAlchemyNoteStore → SQLite file
       (one fresh database per test). Callers authenticate with real
       bearer tokens.
"""

import asyncio
import uuid
from datetime import datetime

import pytest

BASE = "/api/notes"


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def _create(client, headers, title="T", content=None):
    body = {"title": title}
    if content is not None:
        body["content"] = content
    response = await client.post(f"{BASE}/create", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCreateNote:

    @pytest.mark.asyncio
    async def test_create_returns_201_with_data(self, test_client, auth_headers):
        response = await test_client.post(
            f"{BASE}/create", json={"title": "T", "content": "C"}, headers=auth_headers(),
        )

        assert response.status_code == 201
        body = response.json()
        assert set(body) == {"data"}
        note = body["data"]
        assert note["title"] == "T"
        assert note["content"] == "C"
        assert uuid.UUID(note["id"]).version == 4
        assert set(note) == {"id", "title", "content", "createdAt", "updatedAt"}

    @pytest.mark.asyncio
    async def test_create_without_content(self, test_client, auth_headers):
        note = await _create(test_client, auth_headers(), title="No body")
        assert note["content"] == ""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"title": ""}, {"title": "   "}, {"title": 7}, {"content": "x"}])
    async def test_create_requires_title(self, test_client, auth_headers, body):
        response = await test_client.post(f"{BASE}/create", json=body, headers=auth_headers())

        assert response.status_code == 400
        assert response.json() == {"message": "Title is required"}

    @pytest.mark.asyncio
    async def test_create_title_too_long(self, test_client, auth_headers):
        response = await test_client.post(
            f"{BASE}/create", json={"title": "a" * 256}, headers=auth_headers(),
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Title is too long"}

    @pytest.mark.asyncio
    async def test_create_with_malformed_body(self, test_client, auth_headers):
        response = await test_client.post(
            f"{BASE}/create",
            content=b"{not json",
            headers={**auth_headers(), "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid request body"}


class TestGetNote:

    @pytest.mark.asyncio
    async def test_round_trip(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers(), title="T", content="C")

        response = await test_client.get(f"{BASE}/{created['id']}", headers=auth_headers())

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["id"] == created["id"]
        assert body["data"]["title"] == "T"
        assert body["data"]["content"] == "C"
        assert body["data"]["createdAt"] is not None
        assert _ts(body["data"]["createdAt"]) <= _ts(body["data"]["updatedAt"])

    @pytest.mark.asyncio
    async def test_get_by_unhyphenated_id(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers())
        bare = uuid.UUID(created["id"]).hex.upper()

        response = await test_client.get(f"{BASE}/{bare}", headers=auth_headers())

        assert response.status_code == 200
        assert response.json()["data"]["id"] == created["id"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", ["123", "not-a-uuid", "3f2b8c1e-9d4a-1b7e-8c2d-1a2b3c4d5e6f"])
    async def test_invalid_id_is_400(self, test_client, auth_headers, bad_id):
        response = await test_client.get(f"{BASE}/{bad_id}", headers=auth_headers())

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid note ID format"}

    @pytest.mark.asyncio
    async def test_unknown_id_is_404(self, test_client, auth_headers):
        response = await test_client.get(f"{BASE}/{uuid.uuid4()}", headers=auth_headers())

        assert response.status_code == 404
        assert response.json() == {"message": "Note not found"}


class TestUpdateNote:

    @pytest.mark.asyncio
    async def test_update_content_only(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers(), title="Keep", content="old")
        await asyncio.sleep(0.01)

        response = await test_client.patch(
            f"{BASE}/update/{created['id']}", json={"content": "x"}, headers=auth_headers(),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["title"] == "Keep"
        assert body["data"]["content"] == "x"
        assert _ts(body["data"]["updatedAt"]) > _ts(created["updatedAt"])
        assert _ts(body["data"]["createdAt"]) == _ts(created["createdAt"])

    @pytest.mark.asyncio
    async def test_update_title_only(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers(), title="Old", content="body")

        response = await test_client.patch(
            f"{BASE}/update/{created['id']}", json={"title": "New"}, headers=auth_headers(),
        )

        assert response.status_code == 200
        fetched = (await test_client.get(f"{BASE}/{created['id']}", headers=auth_headers())).json()
        assert fetched["data"]["title"] == "New"
        assert fetched["data"]["content"] == "body"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title,message", [("", "Title is required"), ("b" * 256, "Title is too long")])
    async def test_update_rejects_bad_title(self, test_client, auth_headers, title, message):
        created = await _create(test_client, auth_headers(), title="Old")

        response = await test_client.patch(
            f"{BASE}/update/{created['id']}", json={"title": title}, headers=auth_headers(),
        )

        assert response.status_code == 400
        assert response.json() == {"message": message}

    @pytest.mark.asyncio
    async def test_update_invalid_id(self, test_client, auth_headers):
        response = await test_client.patch(
            f"{BASE}/update/nope", json={"title": "New"}, headers=auth_headers(),
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid note ID format"}

    @pytest.mark.asyncio
    async def test_update_unknown_id(self, test_client, auth_headers):
        response = await test_client.patch(
            f"{BASE}/update/{uuid.uuid4()}", json={"title": "New"}, headers=auth_headers(),
        )

        assert response.status_code == 404


class TestListNotes:

    @pytest.mark.asyncio
    async def test_second_page_of_25(self, test_client, auth_headers):
        headers = auth_headers()
        for i in range(25):
            await _create(test_client, headers, title=f"Note {i}")

        response = await test_client.get(f"{BASE}/all?page=2&limit=10", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert len(body["data"]) == 10
        assert body["pagination"] == {
            "total": 25,
            "page": 2,
            "limit": 10,
            "totalPages": 3,
            "hasNextPage": True,
            "hasPreviousPage": True,
        }

    @pytest.mark.asyncio
    async def test_most_recently_updated_first(self, test_client, auth_headers):
        headers = auth_headers()
        first = await _create(test_client, headers, title="first")
        await asyncio.sleep(0.01)
        await _create(test_client, headers, title="second")
        await asyncio.sleep(0.01)
        await test_client.patch(f"{BASE}/update/{first['id']}", json={"content": "bump"}, headers=headers)

        body = (await test_client.get(f"{BASE}/all", headers=headers)).json()

        assert [n["title"] for n in body["data"]] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_defaults_and_empty(self, test_client, auth_headers):
        body = (await test_client.get(f"{BASE}/all", headers=auth_headers())).json()

        assert body["data"] == []
        assert body["pagination"]["page"] == 1
        assert body["pagination"]["limit"] == 20
        assert body["pagination"]["totalPages"] == 0
        assert body["pagination"]["hasNextPage"] is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw,expected", [("1000", 100), ("0", 1), ("-3", 1)])
    async def test_limit_clamped(self, test_client, auth_headers, raw, expected):
        response = await test_client.get(f"{BASE}/all?limit={raw}", headers=auth_headers())

        assert response.status_code == 200
        assert response.json()["pagination"]["limit"] == expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["page=abc", "limit=lots", "page=x&limit=10"])
    async def test_non_numeric_pagination_is_400(self, test_client, auth_headers, query):
        response = await test_client.get(f"{BASE}/all?{query}", headers=auth_headers())

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid pagination parameters"}


class TestOwnership:

    @pytest.mark.asyncio
    async def test_other_user_cannot_see_or_touch_note(self, test_client, auth_headers):
        note = await _create(test_client, auth_headers("alice"), title="private", content="secret")
        bob = auth_headers("bob")

        get_response = await test_client.get(f"{BASE}/{note['id']}", headers=bob)
        patch_response = await test_client.patch(
            f"{BASE}/update/{note['id']}", json={"title": "mine now"}, headers=bob,
        )
        list_response = await test_client.get(f"{BASE}/all", headers=bob)

        assert get_response.status_code == 404
        assert patch_response.status_code == 404
        assert get_response.json() == patch_response.json() == {"message": "Note not found"}
        assert list_response.json()["data"] == []
        assert list_response.json()["pagination"]["total"] == 0

        # Alice's note is unchanged
        alice_view = await test_client.get(f"{BASE}/{note['id']}", headers=auth_headers("alice"))
        assert alice_view.json()["data"]["title"] == "private"


class TestAuthentication:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method,path", [
        ("POST", "/create"),
        ("PATCH", f"/update/{uuid.uuid4()}"),
        ("GET", "/all"),
        ("GET", f"/{uuid.uuid4()}"),
    ])
    async def test_missing_credentials_is_401(self, test_client, method, path):
        response = await test_client.request(method, f"{BASE}{path}", json={"title": "T"})

        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized"}
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_garbage_token_is_401(self, test_client):
        response = await test_client.get(f"{BASE}/all", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid or expired token"}

    @pytest.mark.asyncio
    async def test_unauthenticated_invalid_id_is_still_401(self, test_client):
        """The gate runs before identifier validation."""
        response = await test_client.get(f"{BASE}/not-a-uuid")

        assert response.status_code == 401


class TestPlumbing:

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client, auth_headers):
        response = await test_client.get(
            f"{BASE}/all", headers={**auth_headers(), "X-Request-ID": "trace-123"},
        )

        assert response.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, test_client):
        response = await test_client.get(f"{BASE}/all")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"


class TestHardening:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("secret", ["", "change_me"])
    async def test_token_signed_with_unset_secret_is_rejected(self, test_client, monkeypatch, secret):
        from jose import jwt

        from app.config import settings

        monkeypatch.setattr(settings, "jwt_secret", secret)
        forged = jwt.encode({"sub": "victim"}, secret, algorithm="HS256")

        response = await test_client.get(f"{BASE}/all", headers={"Authorization": f"Bearer {forged}"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_id_with_trailing_newline_is_400(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers())

        get_response = await test_client.get(f"{BASE}/{created['id']}%0A", headers=auth_headers())
        patch_response = await test_client.patch(
            f"{BASE}/update/{created['id']}%0A", json={"title": "New"}, headers=auth_headers(),
        )

        assert get_response.status_code == 400
        assert patch_response.status_code == 400
        assert get_response.json() == {"message": "Invalid note ID format"}

    @pytest.mark.asyncio
    async def test_huge_page_is_an_empty_page(self, test_client, auth_headers):
        headers = auth_headers()
        await _create(test_client, headers)

        response = await test_client.get(f"{BASE}/all?page=99999999999999999999", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["data"] == []
        assert body["pagination"]["total"] == 1
        assert body["pagination"]["hasNextPage"] is False
        assert body["pagination"]["hasPreviousPage"] is True
