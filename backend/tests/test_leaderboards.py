from datetime import datetime, timedelta, timezone

import pytest

BASE = datetime(2024, 2, 10, 20, 0, tzinfo=timezone.utc)


def _seed_roster(client, headers, *ids):
    for pid in ids:
        resp = client.post(
            "/api/players", json={"id": pid, "name": pid.title()}, headers=headers
        )
        assert resp.status_code == 201


def _play(client, headers, w1, w2, l1, l2, minutes):
    resp = client.post(
        "/api/matches",
        json={
            "winner1_id": w1,
            "winner2_id": w2,
            "loser1_id": l1,
            "loser2_id": l2,
            "played_at": (BASE + timedelta(minutes=minutes)).isoformat(),
        },
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


@pytest.fixture
def scenario(client, headers):
    _seed_roster(client, headers, "alice", "bob", "carol", "dave")
    first = _play(client, headers, "alice", "bob", "carol", "dave", 0)
    second = _play(client, headers, "alice", "carol", "bob", "dave", 30)
    return first, second


def test_leaderboard_endpoint(client, scenario):
    resp = client.get("/api/leaderboard")
    assert resp.status_code == 200
    board = resp.json()

    assert [e["player_id"] for e in board] == ["alice", "bob", "carol", "dave"]
    alice = board[0]
    assert alice == {
        "player_id": "alice",
        "player_name": "Alice",
        "avatar_emoji": "🏓",
        "nickname": "",
        "wins": 2,
        "losses": 0,
        "total_games": 2,
        "win_rate": 1.0,
        "streak": 2,
    }
    assert board[1]["streak"] == -1
    assert board[3]["streak"] == -2


def test_leaderboard_empty_roster(client):
    resp = client.get("/api/leaderboard")
    assert resp.status_code == 200
    assert resp.json() == []


def test_rivalries_endpoint(client, scenario):
    resp = client.get("/api/rivalries")
    assert resp.status_code == 200

    assert resp.json() == [
        {
            "player1_id": "alice",
            "player1_name": "Alice",
            "player2_id": "dave",
            "player2_name": "Dave",
            "player1_wins": 2,
            "player2_wins": 0,
        },
        {
            "player1_id": "bob",
            "player1_name": "Bob",
            "player2_id": "carol",
            "player2_name": "Carol",
            "player1_wins": 1,
            "player2_wins": 1,
        },
    ]


def test_player_stats_endpoint(client, headers, scenario):
    first, second = scenario
    _play(client, headers, "bob", "alice", "dave", "carol", 60)

    resp = client.get("/api/players/dave/stats")
    assert resp.status_code == 200
    stats = resp.json()

    assert (stats["wins"], stats["losses"], stats["total_games"]) == (0, 3, 3)
    assert stats["win_rate"] == 0.0
    assert stats["streak"] == -3
    assert stats["nemesis"] == {
        "opponent_id": "alice",
        "opponent_name": "Alice",
        "wins_against": 0,
        "losses_against": 3,
    }
    assert stats["best_partner"] == {
        "partner_id": "carol",
        "partner_name": "Carol",
        "wins": 0,
        "losses": 2,
    }
    assert [m["id"] for m in stats["recent_matches"]][1:] == [second, first]


def test_player_stats_unknown_player(client):
    resp = client.get("/api/players/ghost/stats")
    assert resp.status_code == 404
    assert resp.json()["code"] == "player_not_found"


def test_deleted_players_still_count_as_unknown(client, headers):
    _seed_roster(client, headers, "alice", "bob", "carol", "dave")
    _play(client, headers, "alice", "bob", "carol", "dave", 0)
    _play(client, headers, "alice", "bob", "carol", "dave", 1)

    assert client.delete("/api/players/bob", headers=headers).status_code == 204

    stats = client.get("/api/players/alice/stats").json()
    assert stats["best_partner"]["partner_id"] == "bob"
    assert stats["best_partner"]["partner_name"] == "Unknown"

    board = client.get("/api/leaderboard").json()
    assert "bob" not in [e["player_id"] for e in board]

    rivalries = client.get("/api/rivalries").json()
    assert {"bob"} <= {r["player1_id"] for r in rivalries}
    assert all(
        r["player1_name"] == "Unknown" for r in rivalries if r["player1_id"] == "bob"
    )


def test_deleting_a_match_updates_aggregates(client, headers, scenario):
    first, _ = scenario

    assert client.delete(f"/api/matches/{first}", headers=headers).status_code == 204

    board = {e["player_id"]: e for e in client.get("/api/leaderboard").json()}
    assert (board["alice"]["wins"], board["alice"]["losses"]) == (1, 0)
    assert (board["bob"]["wins"], board["bob"]["losses"]) == (0, 1)
    assert client.get("/api/rivalries").json() == []
