from boutique.utils.owner import CART_SESSION_COOKIE


def test_guest_add_sets_session_cookie_and_lists_cart(client, fake_db):
    fake_db.add_product("p1", "Submariner", 100)

    r = client.post("/api/cart", json={"productId": "p1"})
    assert r.status_code == 200
    set_cookie = r.headers.get("set-cookie", "").lower()
    assert f"{CART_SESSION_COOKIE}=" in set_cookie
    assert "httponly" in set_cookie and "samesite=lax" in set_cookie

    client.post("/api/cart", json={"productId": "p1", "quantity": 2})
    items = client.get("/api/cart").json()["items"]
    assert len(items) == 1
    assert items[0]["quantity"] == 3
    assert items[0]["name"] == "Submariner"


def test_existing_session_cookie_is_not_reissued(client, fake_db):
    fake_db.add_product("p1", "Submariner", 100)
    client.post("/api/cart", json={"productId": "p1"})
    r = client.post("/api/cart", json={"productId": "p1"})
    assert CART_SESSION_COOKIE not in r.headers.get("set-cookie", "")


def test_cart_without_owner_is_empty(client, fake_db):
    assert client.get("/api/cart").json() == {"items": []}


def test_unknown_product_is_404(client, fake_db):
    r = client.post("/api/cart", json={"productId": "missing"})
    assert r.status_code == 404
    assert r.json() == {"error": "Product not found"}


def test_invalid_body_is_400(client, fake_db):
    assert client.post("/api/cart", json={"quantity": 1}).status_code == 400
    assert client.post("/api/cart", json={"productId": "p1", "quantity": 0}).status_code == 400


def test_update_and_delete(client, fake_db):
    fake_db.add_product("p1", "Submariner", 100)
    fake_db.add_product("p2", "Daytona", 200)
    client.post("/api/cart", json={"productId": "p1"})
    client.post("/api/cart", json={"productId": "p2"})
    items = {i["product_id"]: i for i in client.get("/api/cart").json()["items"]}

    assert client.put("/api/cart", json={"itemId": items["p1"]["id"], "quantity": 4}).status_code == 200
    assert client.put("/api/cart", json={"itemId": items["p2"]["id"], "quantity": 0}).status_code == 200
    remaining = client.get("/api/cart").json()["items"]
    assert [(i["product_id"], i["quantity"]) for i in remaining] == [("p1", 4)]

    assert client.delete("/api/cart").status_code == 400
    assert client.delete("/api/cart", params={"itemId": items["p1"]["id"]}).status_code == 200
    assert client.delete("/api/cart", params={"itemId": items["p1"]["id"]}).status_code == 404


def test_clear_all(client, fake_db):
    fake_db.add_product("p1", "Submariner", 100)
    client.post("/api/cart", json={"productId": "p1"})
    assert client.delete("/api/cart/all").json() == {"success": True}
    assert client.get("/api/cart").json()["items"] == []


def test_authenticated_cart_is_keyed_by_user(client, fake_db, login):
    fake_db.add_product("p1", "Submariner", 100)
    login("user-9")
    r = client.post("/api/cart", json={"productId": "p1"})
    assert CART_SESSION_COOKIE not in r.headers.get("set-cookie", "")
    assert fake_db.cart_rows[0]["user_id"] == "user-9"
    assert fake_db.cart_rows[0]["session_id"] is None


def test_cart_responses_are_not_cached(client, fake_db):
    r = client.get("/api/cart")
    assert "no-store" in r.headers["cache-control"]
