import pytest

from app.config import settings
from app.core.exceptions import ValidationError
from app.database.supabase_client import SupabaseClient
from app.modules.maintenance.service import RepairService
from app.scripts import fix_relationships as fix_script

ADMIN_KEY = "test-admin-key"


@pytest.fixture
def seeded(db):
    db.rows("places").extend([
        {"id": "p1", "name": "A", "lat": 0, "lng": 0, "created_by": "wrong"},
        {"id": "p2", "name": "B", "lat": 0, "lng": 0, "created_by": "wrong"},
        {"id": "p3", "name": "C", "lat": 0, "lng": 0, "created_by": "someone"},
    ])
    db.rows("lists").extend([
        {"id": "l1", "title": "L", "owner_id": "wrong", "visibility": "private"},
    ])
    db.rows("list_places").extend([
        {"id": "m1", "list_id": "l1", "place_id": "p1", "added_by": "wrong"},
        {"id": "m2", "list_id": "l1", "place_id": "p2", "added_by": "someone"},
    ])
    return db


@pytest.fixture
def admin_headers(monkeypatch):
    monkeypatch.setattr(settings, "admin_api_key", ADMIN_KEY)
    return {"X-Admin-Key": ADMIN_KEY}


def test_fix_relationships_counts_per_table(seeded):
    report = RepairService(seeded).fix_relationships("wrong", "right")

    assert report.success is True
    counts = {u.table: u.updated for u in report.updates}
    assert counts == {"places": 2, "list_places": 1, "lists": 1}
    assert [p["created_by"] for p in seeded.rows("places")] == ["right", "right", "someone"]
    assert seeded.rows("lists")[0]["owner_id"] == "right"


def test_fix_relationships_is_safe_to_rerun(seeded):
    service = RepairService(seeded)
    service.fix_relationships("wrong", "right")
    report = service.fix_relationships("wrong", "right")
    assert report.success is True
    assert all(u.updated == 0 for u in report.updates)


def test_fix_relationships_continues_after_a_table_fails(seeded):
    seeded.failing_tables.add("list_places")

    report = RepairService(seeded).fix_relationships("wrong", "right")

    assert report.success is False
    assert "list_places" in report.message
    by_table = {u.table: u for u in report.updates}
    assert by_table["list_places"].error
    assert by_table["places"].updated == 2
    assert by_table["lists"].updated == 1


@pytest.mark.parametrize("wrong_id, correct_id", [("", "right"), ("wrong", ""), ("same", "same")])
def test_fix_relationships_validates_ids(db, wrong_id, correct_id):
    with pytest.raises(ValidationError):
        RepairService(db).fix_relationships(wrong_id, correct_id)


def test_prune_orphaned_memberships(seeded):
    seeded.rows("list_places").extend([
        {"id": "m3", "list_id": "gone", "place_id": "p1"},
        {"id": "m4", "list_id": "l1", "place_id": "gone"},
    ])

    report = RepairService(seeded).prune_orphaned_memberships()

    assert report.success is True
    assert report.updates[0].updated == 2
    assert sorted(m["id"] for m in seeded.rows("list_places")) == ["m1", "m2"]


def test_admin_routes_disabled_without_key(client, seeded, monkeypatch):
    monkeypatch.setattr(settings, "admin_api_key", None)
    response = client.post("/api/v1/admin/fix-relationships", json={"wrongId": "wrong", "correctId": "right"})
    assert response.status_code == 403
    assert seeded.rows("lists")[0]["owner_id"] == "wrong"


def test_admin_routes_reject_wrong_key(client, seeded, admin_headers):
    response = client.post(
        "/api/v1/admin/fix-relationships",
        json={"wrongId": "wrong", "correctId": "right"},
        headers={"X-Admin-Key": "guess"},
    )
    assert response.status_code == 403


def test_fix_relationships_route(client, seeded, admin_headers):
    response = client.post(
        "/api/v1/admin/fix-relationships",
        json={"wrongId": "wrong", "correctId": "right"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert {u["table"]: u["updated"] for u in body["updates"]}["places"] == 2


def test_fix_relationships_route_requires_ids(client, admin_headers):
    response = client.post("/api/v1/admin/fix-relationships", json={"wrongId": "wrong"}, headers=admin_headers)
    assert response.status_code == 400


def test_prune_orphans_route(client, seeded, admin_headers):
    seeded.rows("list_places").append({"id": "m3", "list_id": "gone", "place_id": "p1"})
    response = client.post("/api/v1/admin/prune-orphans", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["updates"][0]["updated"] == 1


def test_fix_relationships_script(seeded, monkeypatch):
    monkeypatch.setattr(SupabaseClient, "get_service_client", classmethod(lambda cls: seeded))

    assert fix_script.main(["wrong", "right"]) == 0
    assert seeded.rows("lists")[0]["owner_id"] == "right"

    seeded.failing_tables.add("places")
    assert fix_script.main(["right", "other"]) == 1


def test_fix_relationships_script_requires_ids():
    with pytest.raises(SystemExit):
        fix_script.main([])
