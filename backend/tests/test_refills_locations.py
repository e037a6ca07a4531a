import uuid


def test_refill_lifecycle(client, admin_auth, user_auth):
    headers = admin_auth.headers()
    r = client.post("/refill", json={"name": "Ten", "price": 10, "credit": 12}, headers=headers)
    assert r.status_code == 201
    refill_id = r.json()

    body = client.get(f"/refill/{refill_id}", headers=user_auth.headers()).json()
    assert body["price"] == 10.0
    assert body["price_currency"] == "euro"
    assert body["credit"] == 12.0
    assert body["credit_currency"] == "epicoin"

    assert client.put(f"/refill/{refill_id}", json={"credit": 15}, headers=headers).status_code == 200
    assert client.get(f"/refill/{refill_id}").json()["credit"] == 15.0

    assert client.delete(f"/refill/{refill_id}", headers=headers).status_code == 200
    assert client.get(f"/refill/{refill_id}", headers=user_auth.headers()).status_code == 404
    assert client.get(f"/refill/{refill_id}", headers=headers).json()["disabled"] is True


def test_hiding_a_refill_disables_it(client, admin_auth):
    headers = admin_auth.headers()
    refill_id = client.post("/refill", json={"price": 5, "credit": 5}, headers=headers).json()

    assert client.put(f"/refill/{refill_id}", json={"hidden": True}, headers=headers).status_code == 200

    body = client.get(f"/refill/{refill_id}", headers=headers).json()
    assert body["hidden"] is True
    assert body["disabled"] is True


def test_list_refills_hides_disabled_for_non_admins(client, admin_auth):
    headers = admin_auth.headers()
    client.post("/refill", json={"name": "On", "price": 5, "credit": 5}, headers=headers)
    client.post("/refill", json={"name": "Off", "price": 5, "credit": 5, "hidden": True}, headers=headers)

    r = client.get("/refill", params={"disabled_eq": "true"})
    assert [refill["name"] for refill in r.json()["refills"]] == ["On"]

    r = client.get("/refill", params={"sort": "name_asc"}, headers=headers)
    assert [refill["name"] for refill in r.json()["refills"]] == ["Off", "On"]


def test_refill_validation(client, admin_auth):
    r = client.post("/refill", json={"price": 0, "credit": 5}, headers=admin_auth.headers())
    assert r.status_code == 400
    assert r.json()["kind"] == "PriceCannotBeNegativeOrNull"

    r = client.put(f"/refill/{uuid.uuid4()}", json={"price": 1}, headers=admin_auth.headers())
    assert r.status_code == 404


def test_location_lifecycle(client, admin_auth, user_auth):
    headers = admin_auth.headers()
    r = client.post("/location", json={"name": "Hall", "category": "room"}, headers=headers)
    assert r.status_code == 201
    location_id = r.json()

    body = client.get(f"/location/{location_id}").json()
    assert body["name"] == "Hall"
    assert body["category"] == "room"

    r = client.put(f"/location/{location_id}", json={"category": "dispenser", "hidden": True}, headers=headers)
    assert r.status_code == 200
    assert client.get(f"/location/{location_id}", headers=user_auth.headers()).status_code == 404
    assert client.get(f"/location/{location_id}", headers=headers).json()["category"] == "dispenser"

    assert client.delete(f"/location/{location_id}", headers=headers).status_code == 200
    assert client.get(f"/location/{location_id}", headers=headers).json()["disabled"] is True


def test_list_locations(client, admin_auth):
    headers = admin_auth.headers()
    client.post("/location", json={"name": "Dispenser 1", "category": "dispenser"}, headers=headers)
    client.post("/location", json={"name": "Backroom", "hidden": True}, headers=headers)

    r = client.get("/location")
    assert [location["name"] for location in r.json()["locations"]] == ["Dispenser 1"]

    r = client.get("/location", params={"category_eq": "dispenser"}, headers=headers)
    assert [location["name"] for location in r.json()["locations"]] == ["Dispenser 1"]

    r = client.get("/location", params={"category_eq": "kitchen"}, headers=headers)
    assert r.status_code == 400
    assert r.json()["kind"] == "InvalidFilter"


def test_location_name_is_required(client, admin_auth):
    r = client.post("/location", json={"name": "x" * 33}, headers=admin_auth.headers())
    assert r.status_code == 400
    assert r.json()["kind"] == "NameCannotBeLongerThan"
