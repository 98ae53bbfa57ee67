PLAYERS = "/api/players"


def _create(client, headers, pid, name, **extra):
    resp = client.post(PLAYERS, json={"id": pid, "name": name, **extra}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_and_list_players(client, headers):
    created = _create(client, headers, "bob", "Bob", nickname="The Wall", avatar_emoji="🧱")
    _create(client, headers, "alice", "Alice")

    assert created == {
        "id": "bob",
        "name": "Bob",
        "nickname": "The Wall",
        "avatar_emoji": "🧱",
    }

    resp = client.get(PLAYERS)
    assert resp.status_code == 200
    players = resp.json()
    assert [p["id"] for p in players] == ["alice", "bob"]
    assert players[0]["avatar_emoji"] == "🏓"
    assert players[0]["nickname"] == ""


def test_create_trims_fields(client, headers):
    created = _create(client, headers, "  carol ", "  Carol  ", nickname="  Lefty ")
    assert (created["id"], created["name"], created["nickname"]) == ("carol", "Carol", "Lefty")


def test_create_requires_session(client):
    resp = client.post(PLAYERS, json={"id": "alice", "name": "Alice"})

    assert resp.status_code == 401
    assert resp.headers["content-type"].startswith("application/problem+json")
    assert resp.json()["code"] == "auth_not_authenticated"


def test_create_accepts_session_cookie(client):
    from scoreboard.routers.auth import create_session_token

    client.cookies.set("session", create_session_token("cookie-user"))
    resp = client.post(PLAYERS, json={"id": "alice", "name": "Alice"})
    assert resp.status_code == 201


def test_duplicate_player_conflicts(client, headers):
    _create(client, headers, "alice", "Alice")
    resp = client.post(PLAYERS, json={"id": "alice", "name": "Other"}, headers=headers)

    assert resp.status_code == 409
    body = resp.json()
    assert body["code"] == "player_exists"
    assert body["status"] == 409
    assert client.get(f"{PLAYERS}/alice").json()["name"] == "Alice"


def test_invalid_player_payloads(client, headers):
    for payload in (
        {"id": "two words", "name": "X"},
        {"id": "", "name": "X"},
        {"id": "x", "name": "   "},
        {"id": "x", "name": "X", "rating": 1500},
    ):
        resp = client.post(PLAYERS, json=payload, headers=headers)
        assert resp.status_code == 422, payload
        assert resp.json()["code"] == "validation_error"


def test_get_missing_player(client):
    resp = client.get(f"{PLAYERS}/nobody")

    assert resp.status_code == 404
    assert resp.json()["code"] == "player_not_found"


def test_partial_update_keeps_other_fields(client, headers):
    _create(client, headers, "dave", "Dave", nickname="Smash", avatar_emoji="💥")

    resp = client.patch(f"{PLAYERS}/dave", json={"nickname": "Big Smash"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {
        "id": "dave",
        "name": "Dave",
        "nickname": "Big Smash",
        "avatar_emoji": "💥",
    }

    resp = client.put(f"{PLAYERS}/dave", json={"name": "David", "nickname": None}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["name"] == "David"
    assert resp.json()["nickname"] == "Big Smash"


def test_update_rejects_id_change(client, headers):
    _create(client, headers, "dave", "Dave")
    resp = client.patch(f"{PLAYERS}/dave", json={"id": "david"}, headers=headers)
    assert resp.status_code == 422


def test_update_missing_player(client, headers):
    resp = client.patch(f"{PLAYERS}/ghost", json={"name": "Ghost"}, headers=headers)
    assert resp.status_code == 404


def test_update_requires_session(client, headers):
    _create(client, headers, "dave", "Dave")
    assert client.patch(f"{PLAYERS}/dave", json={"name": "X"}).status_code == 401


def test_delete_player(client, headers):
    _create(client, headers, "erin", "Erin")

    resp = client.delete(f"{PLAYERS}/erin", headers=headers)
    assert resp.status_code == 204
    assert client.get(f"{PLAYERS}/erin").status_code == 404

    resp = client.delete(f"{PLAYERS}/erin", headers=headers)
    assert resp.status_code == 404


def test_delete_requires_session(client, headers):
    _create(client, headers, "erin", "Erin")
    assert client.delete(f"{PLAYERS}/erin").status_code == 401
    assert client.get(f"{PLAYERS}/erin").status_code == 200
