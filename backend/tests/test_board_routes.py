"""Tests for board and formation API routes."""

import httpx
import pytest

from pitchside.main import app
from pitchside.repositories.formation_repository import FormationRepository
from pitchside.services.board_manager import BoardManager

pytestmark = pytest.mark.anyio


def roster_payload(roster):
    return [
        {
            "id": p.id,
            "name": p.name,
            "role": p.role,
            "attributes": {
                "speed": 60, "passing": 60, "tackling": 60, "shooting": 60,
                "dribbling": 60, "positioning": 60, "stamina": 60,
            },
        }
        for p in roster
    ]


def formation_payload(formation):
    return {
        "id": formation.id,
        "name": formation.name,
        "slots": [
            {
                "id": s.id,
                "role": s.role,
                "x": s.position.x,
                "y": s.position.y,
                "player_id": s.player_id,
            }
            for s in formation.slots
        ],
    }


CHEMISTRY_PAYLOAD = {
    "relationships": [
        {"player_a": "p7", "player_b": "p8", "type": "friendship"},
        {"player_a": "p10", "player_b": "p11", "type": "rivalry"},
    ],
    "mentoring_groups": [{"mentor_id": "p3", "mentee_ids": ["p4"]}],
    "familiarity": [{"player_a": "p7", "player_b": "p8", "shared_time": 10}],
}


@pytest.fixture
async def client(settings):
    """Create async test client with fresh state (mimics lifespan startup)."""
    app.state.formation_repository = FormationRepository()
    app.state.board_manager = BoardManager(settings)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def board_id(client, formation, roster):
    response = await client.post(
        "/api/boards",
        json={
            "formation": formation_payload(formation),
            "roster": roster_payload(roster),
            "chemistry": CHEMISTRY_PAYLOAD,
        },
    )
    assert response.status_code == 201
    return response.json()["board_id"]


async def drop(client, board_id, player_id, x, y, mode="snap"):
    response = await client.post(
        f"/api/boards/{board_id}/drags",
        json={"player_id": player_id, "x": x, "y": y, "mode": mode},
    )
    session_id = response.json()["session"]["session_id"]
    await client.post(f"/api/boards/{board_id}/drags/{session_id}/move", json={"x": x, "y": y})
    return await client.post(f"/api/boards/{board_id}/drags/{session_id}/release")


class TestFormations:
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.json()["status"] == "healthy"

    async def test_list_formations(self, client):
        response = await client.get("/api/formations")
        assert response.status_code == 200
        assert len(response.json()["formations"]) == 5

    async def test_get_formation(self, client):
        response = await client.get("/api/formations/4-3-3")
        assert response.status_code == 200
        assert len(response.json()["slots"]) == 11

    async def test_get_unknown_formation(self, client):
        response = await client.get("/api/formations/2-3-5")
        assert response.status_code == 404

    async def test_stateless_chemistry(self, client, formation):
        response = await client.post(
            "/api/chemistry",
            json={"formation": formation_payload(formation), "chemistry": CHEMISTRY_PAYLOAD},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["pair_count"] == 55
        assert data["formation_average"] == pytest.approx(1.33)


class TestCreateBoard:
    async def test_from_template_with_auto_assign(self, client, roster):
        response = await client.post(
            "/api/boards",
            json={"template_id": "4-4-2", "roster": roster_payload(roster), "auto_assign": True},
        )
        assert response.status_code == 201
        data = response.json()
        bound = [s["player_id"] for s in data["formation"]["slots"] if s["player_id"]]
        assert len(bound) == 11
        assert len(set(bound)) == 11

    async def test_unknown_template(self, client, roster):
        response = await client.post(
            "/api/boards", json={"template_id": "2-3-5", "roster": roster_payload(roster)}
        )
        assert response.status_code == 404

    async def test_requires_template_or_formation(self, client, roster):
        response = await client.post("/api/boards", json={"roster": roster_payload(roster)})
        assert response.status_code == 400

    async def test_rejects_duplicate_bindings(self, client, formation, roster):
        payload = formation_payload(formation)
        payload["slots"][7]["player_id"] = "p7"
        response = await client.post(
            "/api/boards", json={"formation": payload, "roster": roster_payload(roster)}
        )
        assert response.status_code == 422

    async def test_get_and_delete(self, client, board_id):
        assert (await client.get(f"/api/boards/{board_id}")).status_code == 200
        assert (await client.delete(f"/api/boards/{board_id}")).status_code == 204
        assert (await client.get(f"/api/boards/{board_id}")).status_code == 404


class TestDragFlow:
    async def test_swap_through_api(self, client, board_id):
        response = await drop(client, board_id, "p7", 62, 48)
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "conflict"
        conflict = data["conflict"]
        assert conflict["occupant_player_id"] == "p8"
        assert [o["kind"] for o in conflict["options"]] == ["swap", "replace", "cancel"]

        response = await client.post(
            f"/api/boards/{board_id}/conflicts/{conflict['conflict_id']}/resolve",
            json={"outcome": "swap"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "committed"
        assert data["resolution"] == "swap"
        bindings = {s["id"]: s["player_id"] for s in data["formation"]["slots"]}
        assert bindings["s7"] == "p8"
        assert bindings["s8"] == "p7"

    async def test_move_returns_candidate(self, client, board_id):
        response = await client.post(
            f"/api/boards/{board_id}/drags", json={"player_id": "p7", "x": 38, "y": 48}
        )
        session_id = response.json()["session"]["session_id"]
        response = await client.post(
            f"/api/boards/{board_id}/drags/{session_id}/move", json={"x": 61, "y": 47}
        )
        data = response.json()
        assert data["phase"] == "dragging"
        assert data["candidate_slot_id"] == "s8"
        assert data["has_pending_conflict"] is True

    async def test_free_mode_commit(self, client, board_id):
        response = await drop(client, board_id, "p10", 45, 70, mode="free")
        data = response.json()
        assert data["status"] == "committed"
        slot = next(s for s in data["formation"]["slots"] if s["id"] == "s10")
        assert slot["position"] == {"x": 45, "y": 70}

    async def test_cancel_drag(self, client, board_id):
        response = await client.post(
            f"/api/boards/{board_id}/drags", json={"player_id": "p7", "x": 38, "y": 48}
        )
        session_id = response.json()["session"]["session_id"]
        response = await client.post(
            f"/api/boards/{board_id}/drags/{session_id}/cancel", json={"reason": "escape"}
        )
        assert response.json()["status"] == "cancelled"
        assert response.json()["reason"] == "escape"

    async def test_short_long_press_picks_nothing(self, client, board_id):
        response = await client.post(
            f"/api/boards/{board_id}/drags",
            json={"player_id": "p7", "x": 38, "y": 48, "gesture": "long_press", "press_duration_ms": 100},
        )
        assert response.status_code == 201
        assert response.json()["session"] is None


class TestErrors:
    async def test_busy_board_returns_409(self, client, board_id):
        await drop(client, board_id, "p7", 62, 48)
        response = await client.post(
            f"/api/boards/{board_id}/drags", json={"player_id": "p2", "x": 15, "y": 25}
        )
        assert response.status_code == 409

    async def test_invalid_swap_returns_422(self, client, board_id):
        response = await drop(client, board_id, "p1", 38, 22)
        conflict_id = response.json()["conflict"]["conflict_id"]
        response = await client.post(
            f"/api/boards/{board_id}/conflicts/{conflict_id}/resolve", json={"outcome": "swap"}
        )
        assert response.status_code == 422

    async def test_no_alternative_returns_409(self, client, board_id):
        response = await drop(client, board_id, "p13", 38, 48)
        conflict_id = response.json()["conflict"]["conflict_id"]
        response = await client.post(
            f"/api/boards/{board_id}/conflicts/{conflict_id}/resolve",
            json={"outcome": "find_alternative"},
        )
        assert response.status_code == 409

    async def test_unknown_session_returns_404(self, client, board_id):
        response = await client.post(f"/api/boards/{board_id}/drags/drag_missing/release")
        assert response.status_code == 404

    async def test_unknown_player_returns_404(self, client, board_id):
        response = await client.post(
            f"/api/boards/{board_id}/drags", json={"player_id": "p99", "x": 50, "y": 50}
        )
        assert response.status_code == 404

    async def test_unknown_outcome_rejected(self, client, board_id):
        response = await client.post(
            f"/api/boards/{board_id}/conflicts/c1/resolve", json={"outcome": "teleport"}
        )
        assert response.status_code == 422


class TestAdvisory:
    async def test_chemistry(self, client, board_id):
        response = await client.get(f"/api/boards/{board_id}/chemistry")
        assert response.status_code == 200
        assert response.json()["formation_average"] == pytest.approx(1.33)

    async def test_analysis(self, client, board_id):
        response = await client.get(f"/api/boards/{board_id}/analysis")
        assert response.status_code == 200
        assert response.json()["is_complete"] is True

    async def test_auto_assign(self, client, board_id):
        response = await client.post(f"/api/boards/{board_id}/auto-assign")
        assert response.status_code == 200
        assert response.json()["status"] == "committed"
