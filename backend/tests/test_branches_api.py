from __future__ import annotations

import pytest

from branchgate.models import AccessPoint, BranchAddress, Device
from conftest import bearer, login, make_user


@pytest.fixture()
def admin(client, db) -> dict[str, str]:
    make_user(db, "root", role="admin")
    return bearer(login(client, "root"))


def _branch_payload(commune_id: int, **overrides) -> dict:
    payload = {
        "name": "Central",
        "code": "CEN",
        "address": {"commune_id": commune_id, "street": "Alameda", "number": "100", "apartment": "2", "extra": "Lobby"},
        "access_points": ["Main gate", "Garage", "main gate", " "],
    }
    payload.update(overrides)
    return payload


def test_create_branch_with_address_and_access_points(client, admin, catalog) -> None:
    response = client.post("/api/v1/branches", json=_branch_payload(catalog["commune"]), headers=admin)

    assert response.status_code == 201
    body = response.json()
    assert body["code"] == "CEN"
    assert body["address"]["extra"] == "Lobby"
    assert body["address"]["commune"]["city"]["name"] == "Santiago"
    assert [ap["name"] for ap in body["access_points"]] == ["Garage", "Main gate"]


def test_branch_reads_need_a_session_and_writes_need_admin(client, db, admin, catalog) -> None:
    make_user(db, "ana")
    ana = bearer(login(client, "ana"))

    assert client.get("/api/v1/branches").status_code == 401
    assert client.get("/api/v1/branches", headers=ana).status_code == 200
    forbidden = client.post("/api/v1/branches", json=_branch_payload(catalog["commune"]), headers=ana)
    assert forbidden.status_code == 403
    assert forbidden.json()["error_code"] == "INSUFFICIENT_PERMISSIONS"


def test_list_shows_only_active_branches_by_name(client, admin, catalog) -> None:
    for name, code, active in (("Zeta", "Z", True), ("Alpha", "A", True), ("Closed", "C", False)):
        client.post(
            "/api/v1/branches",
            json=_branch_payload(catalog["commune"], name=name, code=code, is_active=active, access_points=[]),
            headers=admin,
        )

    names = [b["name"] for b in client.get("/api/v1/branches", headers=admin).json()]

    assert names == ["Alpha", "Zeta"]


def test_create_branch_validation_and_conflicts(client, admin, catalog) -> None:
    blank = client.post("/api/v1/branches", json=_branch_payload(catalog["commune"], name="  "), headers=admin)
    bad_commune = client.post("/api/v1/branches", json=_branch_payload(9999), headers=admin)
    first = client.post("/api/v1/branches", json=_branch_payload(catalog["commune"]), headers=admin)
    duplicate_code = client.post("/api/v1/branches", json=_branch_payload(catalog["commune"]), headers=admin)

    assert blank.status_code == 400
    assert bad_commune.status_code == 400
    assert first.status_code == 201
    assert duplicate_code.status_code == 409


def test_patch_branch_clears_optional_fields(client, admin, catalog) -> None:
    branch = client.post("/api/v1/branches", json=_branch_payload(catalog["commune"]), headers=admin).json()

    patched = client.patch(
        f"/api/v1/branches/{branch['id']}",
        json={"code": "", "address": {"apartment": "", "extra": "", "commune_id": catalog["other_commune"]}},
        headers=admin,
    )

    assert patched.status_code == 200
    body = patched.json()
    assert body["code"] is None
    assert body["address"]["apartment"] is None
    assert body["address"]["extra"] is None
    assert body["address"]["commune"]["name"] == "Nunoa"
    assert body["address"]["street"] == "Alameda"


def test_patch_branch_rejections(client, admin, catalog) -> None:
    branch = client.post("/api/v1/branches", json=_branch_payload(catalog["commune"]), headers=admin).json()
    url = f"/api/v1/branches/{branch['id']}"

    assert client.patch(url, json={}, headers=admin).status_code == 400
    assert client.patch(url, json={"address": {"commune_id": 9999}}, headers=admin).status_code == 400
    assert client.patch(url, json={"name": ""}, headers=admin).status_code == 400
    assert client.patch("/api/v1/branches/9999", json={"name": "x"}, headers=admin).status_code == 404
    assert client.get(url, headers=admin).json()["name"] == "Central"


def test_delete_branch_removes_whole_tree(client, db, admin, catalog) -> None:
    branch = client.post("/api/v1/branches", json=_branch_payload(catalog["commune"]), headers=admin).json()
    access_point_id = branch["access_points"][0]["id"]
    client.post(
        f"/api/v1/access-points/{access_point_id}/devices",
        json={"name": "Turnstile", "serial": "SN-1", "direction": "in"},
        headers=admin,
    )

    assert client.delete(f"/api/v1/branches/{branch['id']}", headers=admin).status_code == 204
    assert client.get(f"/api/v1/branches/{branch['id']}", headers=admin).status_code == 404
    db.expire_all()
    assert db.query(BranchAddress).count() == 0
    assert db.query(AccessPoint).count() == 0
    assert db.query(Device).count() == 0
