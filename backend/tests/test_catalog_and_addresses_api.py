from __future__ import annotations

from conftest import bearer, login, make_user


def test_catalog_is_public_and_ordered(client, db, catalog) -> None:
    regions = client.get("/api/v1/regions")
    cities = client.get(f"/api/v1/regions/{catalog['region']}/cities")
    communes = client.get(f"/api/v1/cities/{catalog['city']}/communes")

    assert [r["code"] for r in regions.json()] == ["RM"]
    assert [c["name"] for c in cities.json()] == ["Santiago"]
    assert [c["name"] for c in communes.json()] == ["Nunoa", "Providencia"]
    assert client.get("/api/v1/cities/9999/communes").json() == []


def test_address_lifecycle_is_owner_scoped(client, db, catalog) -> None:
    make_user(db, "ana")
    make_user(db, "bob")
    ana = bearer(login(client, "ana"))
    bob = bearer(login(client, "bob"))

    created = client.post(
        "/api/v1/addresses",
        json={"commune_id": catalog["commune"], "street": " Av.  Providencia ", "number": "1234", "apartment": "5B"},
        headers=ana,
    )
    assert created.status_code == 201
    address = created.json()
    assert address["street"] == "Av. Providencia"
    assert address["commune"]["name"] == "Providencia"

    assert client.get("/api/v1/addresses", headers=bob).json() == []
    other = client.patch(f"/api/v1/addresses/{address['id']}", json={"number": "1"}, headers=bob)
    assert other.status_code == 404
    assert client.delete(f"/api/v1/addresses/{address['id']}", headers=bob).status_code == 404

    patched = client.patch(
        f"/api/v1/addresses/{address['id']}",
        json={"apartment": "", "commune_id": catalog["other_commune"]},
        headers=ana,
    )
    assert patched.status_code == 200
    assert patched.json()["apartment"] is None
    assert patched.json()["commune"]["name"] == "Nunoa"

    assert client.delete(f"/api/v1/addresses/{address['id']}", headers=ana).status_code == 204
    assert client.get("/api/v1/addresses", headers=ana).json() == []


def test_address_validation(client, db, catalog) -> None:
    make_user(db, "ana")
    ana = bearer(login(client, "ana"))

    unknown_commune = client.post(
        "/api/v1/addresses", json={"commune_id": 9999, "street": "x", "number": "1"}, headers=ana
    )
    blank_street = client.post(
        "/api/v1/addresses", json={"commune_id": catalog["commune"], "street": "  ", "number": "1"}, headers=ana
    )
    created = client.post(
        "/api/v1/addresses", json={"commune_id": catalog["commune"], "street": "x", "number": "1"}, headers=ana
    ).json()
    empty_patch = client.patch(f"/api/v1/addresses/{created['id']}", json={}, headers=ana)

    assert unknown_commune.status_code == 400
    assert blank_street.status_code == 400
    assert empty_patch.status_code == 400
    assert empty_patch.json()["error_code"] == "BAD_REQUEST"


def test_addresses_listed_newest_first(client, db, catalog) -> None:
    make_user(db, "ana")
    ana = bearer(login(client, "ana"))
    for number in ("1", "2"):
        client.post(
            "/api/v1/addresses",
            json={"commune_id": catalog["commune"], "street": "Main", "number": number},
            headers=ana,
        )

    assert [a["number"] for a in client.get("/api/v1/addresses", headers=ana).json()] == ["2", "1"]
