"""Integration tests for the BookFlix HTTP API."""

import pytest
from httpx import ASGITransport, AsyncClient

from bookflix.core.app import app
from bookflix.core.errors import LoadError

BASE = "http://test"


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE) as c:
        yield c
    for attr in ("library", "home"):
        if hasattr(app.state, attr):
            delattr(app.state, attr)


@pytest.fixture
async def library(make_library):
    library = make_library()
    await library.load_all()
    app.state.library = library
    return library


@pytest.fixture
async def session_client(client, library):
    resp = await client.put("/session/user", json={"user_id": "user_1"})
    assert resp.status_code == 200
    return client


async def test_health_while_loading(client, make_library):
    app.state.library = make_library()

    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["load_state"] == "loading"

    resp = await client.get("/recommendations")
    assert resp.status_code == 503


async def test_health_reports_failed_load(client, make_library):
    library = make_library(routes={})
    app.state.library = library
    with pytest.raises(LoadError):
        await library.load_all()

    data = (await client.get("/health")).json()
    assert data["load_state"] == "failed"
    assert "Failed to fetch resources" in data["detail"]
    assert (await client.get("/search", params={"q": "dune"})).status_code == 503


async def test_health_ready(client, library):
    data = (await client.get("/health")).json()
    assert data["load_state"] == "ready"
    assert data["books"] == 200
    assert data["users"] == 4


async def test_profiles(client, library):
    resp = await client.get("/profiles", params={"count": 3})
    assert resp.status_code == 200
    assert sorted(resp.json()["profiles"]) == ["user_1", "user_2", "user_3"]


async def test_select_user(client, library):
    resp = await client.put("/session/user", json={"user_id": "user_2"})
    assert resp.status_code == 200
    assert resp.json() == {"user_id": "user_2", "user_index": 2, "liked": []}


async def test_select_unknown_user(client, library):
    resp = await client.put("/session/user", json={"user_id": "ghost"})
    assert resp.status_code == 404

    resp = await client.get("/session")
    assert resp.json()["user_id"] is None


async def test_recommendations(session_client):
    data = (await session_client.get("/recommendations")).json()

    assert data["user_id"] == "user_1"
    assert data["item_ids"] == list(range(100, 160))
    assert len(data["items"]) == 60
    assert data["items"][0] == {"id": 100, "title": "Book 100", "image": "https://covers.example/100.jpg"}
    assert data["top_pick_scores"] == [98, 96, 94, 92, 90, 88, 86, 85, 85, 85]


async def test_toggle_like(session_client):
    resp = await session_client.post("/likes/3")
    assert resp.status_code == 200
    assert resp.json()["liked"] is True

    data = (await session_client.get("/recommendations")).json()
    assert 3 not in data["item_ids"]
    assert data["item_ids"][:3] == [121, 122, 123]

    resp = await session_client.post("/likes/3")
    assert resp.json()["liked"] is False
    assert (await session_client.get("/likes")).json() == {"liked": []}


async def test_toggle_like_unknown_book(session_client):
    resp = await session_client.post("/likes/99999")
    assert resp.status_code == 404


async def test_similar(session_client):
    resp = await session_client.get("/recommendations/similar/3", params={"count": 4})
    assert resp.status_code == 200
    assert [book["id"] for book in resp.json()] == [131, 132, 133, 134]

    assert (await session_client.get("/recommendations/similar/99999")).status_code == 404


async def test_search(client, library):
    data = (await client.get("/search", params={"q": "DUNE"})).json()
    assert data["active"] is True
    assert [book["id"] for book in data["items"]] == [0, 1]
    assert data["items"][0]["title"] == "Dune"

    data = (await client.get("/search", params={"q": "  "})).json()
    assert data["active"] is False
    assert data["items"] == []

    data = (await client.get("/search", params={"q": "book"})).json()
    assert len(data["items"]) == 50
    assert data["total_matches"] == 197
    assert data["truncated"] is True


async def test_books(client, library):
    resp = await client.get("/books/1")
    assert resp.json()["title"] == "Dune Messiah"
    assert (await client.get("/books/200")).status_code == 404

    books = (await client.get("/books/random", params={"count": 5})).json()
    assert len({book["id"] for book in books}) == 5


async def test_home_feed(session_client):
    await session_client.post("/likes/3")

    rows = (await session_client.get("/home")).json()
    ids = [row["id"] for row in rows]
    assert ids == ["top_picks", "saved", "liked-3", "popular", "trending"]

    by_id = {row["id"]: row for row in rows}
    assert len(by_id["top_picks"]["items"]) == 10
    assert by_id["top_picks"]["match_scores"][0] == 98
    assert [book["id"] for book in by_id["saved"]["items"]] == [3]
    assert by_id["liked-3"]["title"] == "Because you liked Book 3"
    assert len(by_id["liked-3"]["items"]) == 12
    assert len(by_id["popular"]["items"]) == 20
    assert len(by_id["trending"]["items"]) == 15

    # popular/trending rows are drawn once
    again = {row["id"]: row for row in (await session_client.get("/home")).json()}
    assert again["popular"] == by_id["popular"]
