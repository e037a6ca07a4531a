import uuid


def test_create_and_get_product(client, admin_auth, user_auth):
    r = client.post(
        "/product",
        json={"name": "Cookie", "price": 1.2, "max_quantity_per_command": 4, "sma_code": "SMA-1"},
        headers=admin_auth.headers(),
    )
    assert r.status_code == 201
    product_id = r.json()
    uuid.UUID(product_id)

    r = client.get(f"/product/{product_id}", headers=user_auth.headers())
    assert r.status_code == 200
    body = r.json()
    assert body["name"] == "Cookie"
    assert body["price"] == 1.2
    assert body["currency"] == "euro"
    assert body["unit"] == "unit"
    assert body["max_quantity_per_command"] == 4
    assert body["purchasable"] is True
    assert body["disabled"] is False


def test_create_product_requires_admin(client, user_auth):
    r = client.post("/product", json={"name": "Cookie", "price": 1}, headers=user_auth.headers())
    assert r.status_code == 403
    assert client.post("/product", json={"name": "Cookie", "price": 1}).status_code == 401


def test_create_product_validation_error_body(client, admin_auth):
    r = client.post("/product", json={"name": "", "price": 1}, headers=admin_auth.headers())
    assert r.status_code == 400
    assert r.json() == {
        "status": 400,
        "error": "Bad Request",
        "kind": "NameCannotBeEmpty",
        "message": "Name cannot be empty",
    }


def test_create_product_with_missing_image(client, admin_auth):
    r = client.post("/product", json={"name": "Cookie", "price": 1, "image": "nope.png"}, headers=admin_auth.headers())
    assert r.status_code == 400
    assert r.json()["kind"] == "ImageDoesNotExist"


def test_hidden_product_is_only_visible_to_admins(client, create_product, admin_auth, user_auth):
    product_id = create_product("Secret", hidden=True)

    assert client.get(f"/product/{product_id}").status_code == 404
    assert client.get(f"/product/{product_id}", headers=user_auth.headers()).status_code == 404
    assert client.get(f"/product/{product_id}", headers=admin_auth.headers()).status_code == 200


def test_list_products_filters_for_non_admins(client, create_product, admin_auth):
    create_product("Visible", price=1)
    create_product("Hidden", price=2, hidden=True)
    create_product("Ingredient", price=3, purchasable=False)

    r = client.get("/product", params={"hidden_eq": "true"})
    assert r.status_code == 200
    assert [p["name"] for p in r.json()["products"]] == ["Visible"]

    r = client.get("/product", params={"sort": "price_desc"}, headers=admin_auth.headers())
    assert [p["name"] for p in r.json()["products"]] == ["Ingredient", "Hidden", "Visible"]


def test_list_products_price_range(client, create_product, admin_auth):
    create_product("A", price=1)
    create_product("B", price=5)
    create_product("C", price=9)

    r = client.get(
        "/product",
        params={"price_gt": 2, "price_lte": 9, "sort": "name_asc"},
        headers=admin_auth.headers(),
    )
    body = r.json()
    assert [p["name"] for p in body["products"]] == ["B", "C"]
    assert body["total_page"] == 1


def test_edit_product(client, create_product, admin_auth):
    product_id = create_product("Cookie", price=1)

    r = client.put(f"/product/{product_id}", json={"price": 2.5, "unit": "gram"}, headers=admin_auth.headers())
    assert r.status_code == 200
    assert r.content == b""

    body = client.get(f"/product/{product_id}", headers=admin_auth.headers()).json()
    assert body["price"] == 2.5
    assert body["unit"] == "gram"
    assert body["name"] == "Cookie"


def test_edit_product_rejections(client, create_product, admin_auth):
    product_id = create_product("Cookie")

    r = client.put(f"/product/{product_id}", json={"max_quantity_per_command": 12}, headers=admin_auth.headers())
    assert r.status_code == 400
    assert r.json()["kind"] == "MaxQuantityPerCommandCannotBeBiggerThan"

    r = client.put(f"/product/{uuid.uuid4()}", json={"name": "x"}, headers=admin_auth.headers())
    assert r.status_code == 404


def test_delete_product_is_soft(client, create_product, admin_auth):
    product_id = create_product("Cookie")

    r = client.delete(f"/product/{product_id}", headers=admin_auth.headers())
    assert r.status_code == 200

    body = client.get(f"/product/{product_id}", headers=admin_auth.headers()).json()
    assert body["disabled"] is True

    assert client.delete(f"/product/{uuid.uuid4()}", headers=admin_auth.headers()).status_code == 404
