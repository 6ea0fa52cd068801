from __future__ import annotations

import pytest

from conftest import bearer, login, make_user


@pytest.fixture()
def admin(client, db) -> dict[str, str]:
    make_user(db, "root", role="admin")
    return bearer(login(client, "root"))


@pytest.fixture()
def access_point_id(client, admin, catalog) -> int:
    branch = client.post(
        "/api/v1/branches",
        json={
            "name": "Central",
            "address": {"commune_id": catalog["commune"], "street": "Alameda", "number": "100"},
            "access_points": ["Main gate"],
        },
        headers=admin,
    ).json()
    return branch["access_points"][0]["id"]


def _create(client, admin, access_point_id: int, **fields):
    payload = {"name": "Turnstile", "serial": "SN-1", "direction": "in"}
    payload.update(fields)
    return client.post(f"/api/v1/access-points/{access_point_id}/devices", json=payload, headers=admin)


def test_devices_listed_by_direction_then_name(client, admin, access_point_id) -> None:
    assert _create(client, admin, access_point_id, name="Reader exit", serial="SN-2", direction="OUT").status_code == 201
    assert _create(client, admin, access_point_id, name="Reader entry", serial="SN-1", direction="in").status_code == 201

    devices = client.get(f"/api/v1/access-points/{access_point_id}/devices", headers=admin).json()

    assert [(d["direction"], d["name"]) for d in devices] == [("in", "Reader entry"), ("out", "Reader exit")]


def test_device_constraints(client, admin, access_point_id) -> None:
    assert _create(client, admin, access_point_id).status_code == 201

    same_direction = _create(client, admin, access_point_id, serial="SN-9")
    same_serial = _create(client, admin, access_point_id, direction="out")
    bad_direction = _create(client, admin, access_point_id, serial="SN-3", direction="sideways")
    missing_access_point = _create(client, admin, 9999, serial="SN-4")

    assert same_direction.status_code == 409
    assert same_serial.status_code == 409
    assert bad_direction.status_code == 400
    assert missing_access_point.status_code == 404


def test_patch_and_delete_device(client, db, admin, access_point_id) -> None:
    device = _create(client, admin, access_point_id).json()
    url = f"/api/v1/devices/{device['id']}"

    patched = client.patch(url, json={"direction": "out", "is_active": False}, headers=admin)
    assert patched.status_code == 200
    assert patched.json()["direction"] == "out"
    assert patched.json()["is_active"] is False

    assert client.patch(url, json={}, headers=admin).status_code == 400
    assert client.patch(url, json={"direction": "up"}, headers=admin).status_code == 400

    make_user(db, "ana")
    ana = bearer(login(client, "ana"))
    assert client.delete(url, headers=ana).status_code == 403
    assert client.delete(url, headers=admin).status_code == 204
    assert client.delete(url, headers=admin).status_code == 404
