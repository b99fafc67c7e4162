import pytest

from support import auth_header


@pytest.fixture
def product(client, make_seller):
    _, token = make_seller("seller@example.com", "08011111111")
    category = client.post("/seller/categories", json={"name": "Electronics"}, headers=auth_header(token)).json()["data"]
    return client.post(
        "/seller/products",
        json={"name": "Phone", "price": 500, "category_id": category["id"], "stock": 10},
        headers=auth_header(token),
    ).json()["data"]


@pytest.fixture
def buyer(register):
    _, token = register("buyer@example.com", "08022222222")
    return auth_header(token)


def test_cart_requires_auth(client):
    assert client.get("/cart").status_code == 401
    assert client.delete("/cart").status_code == 401


def test_add_twice_merges(client, product, buyer):
    first = client.post("/cart", json={"product_id": product["id"]}, headers=buyer)
    assert first.status_code == 201
    assert first.json()["data"]["quantity"] == 1

    second = client.post("/cart", json={"product_id": product["id"], "quantity": 2}, headers=buyer)
    assert second.json()["data"]["quantity"] == 3

    cart = client.get("/cart", headers=buyer).json()
    assert cart["count"] == 1
    line = cart["data"][0]
    assert (line["name"], line["price"], line["quantity"]) == ("Phone", 500, 3)


def test_add_unknown_product_and_bad_quantity(client, product, buyer):
    assert client.post("/cart", json={"product_id": 999}, headers=buyer).status_code == 404
    assert client.post("/cart", json={"product_id": product["id"], "quantity": 0}, headers=buyer).status_code == 400


def test_decrement_floor_leaves_row(client, product, buyer):
    client.post("/cart", json={"product_id": product["id"]}, headers=buyer)

    response = client.patch(f"/cart/{product['id']}/decrement", headers=buyer)
    assert response.status_code == 400
    assert response.json()["message"] == "quantity cannot go below 1; delete the item instead"

    assert client.get(f"/cart/{product['id']}", headers=buyer).json()["data"]["quantity"] == 1


def test_increment_and_decrement(client, product, buyer):
    client.post("/cart", json={"product_id": product["id"]}, headers=buyer)

    assert client.patch(f"/cart/{product['id']}/increment", headers=buyer).json()["data"]["quantity"] == 2
    assert client.patch(f"/cart/{product['id']}/decrement", headers=buyer).json()["data"]["quantity"] == 1
    assert client.patch("/cart/999/increment", headers=buyer).status_code == 404


def test_update_cart(client, product, buyer):
    client.post("/cart", json={"product_id": product["id"]}, headers=buyer)

    missing_id = client.put("/cart", json={"quantity": 4}, headers=buyer)
    assert missing_id.status_code == 400

    updated = client.put("/cart", json={"product_id": product["id"], "quantity": 4, "price": 450}, headers=buyer)
    assert updated.status_code == 200
    assert (updated.json()["data"]["quantity"], updated.json()["data"]["price"]) == (4, 450)

    assert client.put("/cart", json={"product_id": 999, "quantity": 1}, headers=buyer).status_code == 404


def test_delete_and_clear(client, product, buyer):
    client.post("/cart", json={"product_id": product["id"]}, headers=buyer)

    assert client.delete(f"/cart/{product['id']}", headers=buyer).status_code == 200
    assert client.delete(f"/cart/{product['id']}", headers=buyer).status_code == 404
    assert client.get(f"/cart/{product['id']}", headers=buyer).status_code == 404

    client.post("/cart", json={"product_id": product["id"]}, headers=buyer)
    assert client.delete("/cart", headers=buyer).status_code == 200
    assert client.delete("/cart", headers=buyer).status_code == 200
    assert client.get("/cart", headers=buyer).json()["count"] == 0


def test_carts_are_private(client, product, buyer, register):
    client.post("/cart", json={"product_id": product["id"]}, headers=buyer)
    _, other_token = register("other@example.com", "08033333333")

    assert client.get("/cart", headers=auth_header(other_token)).json()["count"] == 0
    assert client.get(f"/cart/{product['id']}", headers=auth_header(other_token)).status_code == 404
