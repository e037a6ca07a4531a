import uuid


def test_warehouse_lifecycle(client, admin_auth, user_auth):
    headers = admin_auth.headers()
    r = client.post("/warehouse", json={"name": "Central"}, headers=headers)
    assert r.status_code == 201
    warehouse_id = r.json()

    assert client.get(f"/warehouse/{warehouse_id}", headers=user_auth.headers()).status_code == 403

    body = client.get(f"/warehouse/{warehouse_id}", headers=headers).json()
    assert body["name"] == "Central"
    assert body["disabled"] is False

    assert client.put(f"/warehouse/{warehouse_id}", json={"name": "North"}, headers=headers).status_code == 200
    assert client.get(f"/warehouse/{warehouse_id}", headers=headers).json()["name"] == "North"

    r = client.put(f"/warehouse/{warehouse_id}", json={"name": ""}, headers=headers)
    assert r.status_code == 400
    assert r.json()["kind"] == "NameCannotBeEmpty"

    assert client.delete(f"/warehouse/{warehouse_id}", headers=headers).status_code == 200
    assert client.get(f"/warehouse/{warehouse_id}", headers=headers).json()["disabled"] is True

    r = client.get("/warehouse", params={"disabled_eq": "false"}, headers=headers)
    assert r.json()["warehouses"] == []


def test_warehouse_stock(client, admin_auth, create_product):
    headers = admin_auth.headers()
    warehouse_id = client.post("/warehouse", json={"name": "Central"}, headers=headers).json()
    other_id = client.post("/warehouse", json={"name": "Other"}, headers=headers).json()
    flour = create_product("Flour", unit="gram")
    sugar = create_product("Sugar", unit="gram")

    r = client.post(f"/warehouse/{warehouse_id}/product/{flour}", json={"quantity": 1.4}, headers=headers)
    assert r.status_code == 201
    r = client.post(f"/warehouse/{warehouse_id}/product/{sugar}", json={"quantity": 0}, headers=headers)
    assert r.status_code == 201
    r = client.post(f"/warehouse/{other_id}/product/{sugar}", json={"quantity": 7}, headers=headers)
    assert r.status_code == 201

    r = client.get(f"/warehouse/{warehouse_id}/product", params={"sort": "quantity_desc"}, headers=headers)
    body = r.json()
    assert body["total_page"] == 1
    assert [(p["product"], p["quantity"]) for p in body["products"]] == [(flour, 1.4), (sugar, 0.0)]

    r = client.put(f"/warehouse/{warehouse_id}/product/{sugar}", json={"quantity": 3}, headers=headers)
    assert r.status_code == 200
    r = client.get(f"/warehouse/{warehouse_id}/product", params={"quantity_gt": 2}, headers=headers)
    assert [p["product"] for p in r.json()["products"]] == [sugar]

    r = client.delete(f"/warehouse/{warehouse_id}/product/{flour}", headers=headers)
    assert r.status_code == 200
    r = client.delete(f"/warehouse/{warehouse_id}/product/{flour}", headers=headers)
    assert r.status_code == 404

    r = client.get(f"/warehouse/{warehouse_id}/product", headers=headers)
    assert [p["product"] for p in r.json()["products"]] == [sugar]


def test_warehouse_stock_rejections(client, admin_auth, create_product):
    headers = admin_auth.headers()
    warehouse_id = client.post("/warehouse", json={"name": "Central"}, headers=headers).json()
    flour = create_product("Flour", unit="gram")

    r = client.post(f"/warehouse/{uuid.uuid4()}/product/{flour}", json={"quantity": 1}, headers=headers)
    assert r.status_code == 404
    r = client.post(f"/warehouse/{warehouse_id}/product/{uuid.uuid4()}", json={"quantity": 1}, headers=headers)
    assert r.status_code == 404

    r = client.post(f"/warehouse/{warehouse_id}/product/{flour}", json={"quantity": -1}, headers=headers)
    assert r.status_code == 400
    assert r.json()["kind"] == "QuantityCannotBeNegative"

    assert client.post(f"/warehouse/{warehouse_id}/product/{flour}", json={"quantity": 1}, headers=headers).status_code == 201
    r = client.post(f"/warehouse/{warehouse_id}/product/{flour}", json={"quantity": 1}, headers=headers)
    assert r.status_code == 400
    assert r.json()["kind"] == "ProductAlreadyInWarehouse"

    r = client.put(f"/warehouse/{warehouse_id}/product/{uuid.uuid4()}", json={"quantity": 1}, headers=headers)
    assert r.status_code == 404

    assert client.get(f"/warehouse/{uuid.uuid4()}/product", headers=headers).status_code == 404
