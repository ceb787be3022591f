from storefront.crud import category as crud_category


def test_non_admin_cannot_create_category(client, db, user, auth_headers):
    response = client.post("/api/categories", json={"name": "Wheels"}, headers=auth_headers(user))
    assert response.status_code == 403
    assert response.json() == {"status": "error", "message": "Access denied: Insufficient privileges."}
    assert crud_category.get_category_by_name(db, "Wheels") is None


def test_anonymous_admin_route_is_401(client):
    response = client.post("/api/categories", json={"name": "Wheels"})
    assert response.status_code == 401


def test_bad_token_is_401(client):
    response = client.get("/api/orders", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token."


def test_catalog_is_public(client, product):
    assert client.get("/api/products").status_code == 200
    assert client.get(f"/api/products/{product.id}").status_code == 200
    assert client.get("/api/categories").status_code == 200
    assert client.get("/api/products/search", params={"q": "widget"}).json()["data"][0]["id"] == product.id


def test_missing_product_is_404_envelope(client):
    response = client.get("/api/products/9999")
    assert response.status_code == 404
    assert response.json()["status"] == "error"


def test_user_cannot_read_other_users_cart(client, user, other_user, product, auth_headers):
    client.post("/api/cart-items", headers=auth_headers(user), json={"product_id": product.id, "quantity": 1})
    cart = client.get("/api/carts/mine", headers=auth_headers(user)).json()["data"]

    response = client.get(f"/api/cart-items/{cart['cart_id']}", headers=auth_headers(other_user))
    assert response.status_code == 403

    response = client.get("/api/cart-items/9999", headers=auth_headers(other_user))
    assert response.status_code == 404


def test_user_cannot_order_for_someone_else(client, user, other_user, product, auth_headers):
    response = client.post("/api/orders", headers=auth_headers(other_user), json={
        "user_id": user.id,
        "products": [{"product_id": product.id, "quantity": 1}],
    })
    assert response.status_code == 403


def test_order_visibility(client, user, other_user, admin, product, auth_headers):
    response = client.post("/api/orders", headers=auth_headers(user), json={
        "user_id": user.id,
        "products": [{"product_id": product.id, "quantity": 1}],
    })
    order_id = response.json()["data"]["id"]

    assert client.get(f"/api/orders/{order_id}", headers=auth_headers(other_user)).status_code == 403
    assert client.get(f"/api/orders/{order_id}", headers=auth_headers(admin)).status_code == 200
    assert client.get("/api/orders", headers=auth_headers(user)).status_code == 403
    assert len(client.get("/api/orders", headers=auth_headers(admin)).json()["data"]) == 1


def test_admin_changes_role(client, user, admin, auth_headers):
    response = client.patch(f"/api/users/{user.id}/role", json={"role": "admin"}, headers=auth_headers(user))
    assert response.status_code == 403

    response = client.patch(f"/api/users/{user.id}/role", json={"role": "admin"}, headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["data"]["role"] == "admin"

    response = client.patch(f"/api/users/{user.id}/role", json={"role": "root"}, headers=auth_headers(admin))
    assert response.status_code == 400


def test_profile_update_is_owner_only(client, user, other_user, auth_headers):
    response = client.put(f"/api/users/{user.id}", json={"city": "Paris"}, headers=auth_headers(other_user))
    assert response.status_code == 403

    response = client.put(f"/api/users/{user.id}", json={"city": "Paris"}, headers=auth_headers(user))
    assert response.status_code == 200
    assert response.json()["data"]["city"] == "Paris"


def test_dashboard_is_admin_only(client, user, admin, auth_headers):
    assert client.get("/api/dashboard", headers=auth_headers(user)).status_code == 403
    stats = client.get("/api/dashboard", headers=auth_headers(admin)).json()["data"]
    assert stats["users"] == 2


def test_lookup_user_by_email_is_admin_only(client, user, admin, auth_headers):
    response = client.get("/api/users/by-email/user@example.com", headers=auth_headers(user))
    assert response.status_code == 403

    response = client.get("/api/users/by-email/USER@example.com", headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["data"]["id"] == user.id

    response = client.get("/api/users/by-email/ghost@example.com", headers=auth_headers(admin))
    assert response.status_code == 404


def test_single_cart_line(client, user, other_user, product, auth_headers):
    client.post("/api/cart-items", headers=auth_headers(user), json={"product_id": product.id, "quantity": 3})
    cart_id = client.get("/api/carts/mine", headers=auth_headers(user)).json()["data"]["cart_id"]

    response = client.get(f"/api/cart-items/{cart_id}/{product.id}", headers=auth_headers(user))
    assert response.status_code == 200
    assert response.json()["data"]["quantity"] == 3

    response = client.get(f"/api/cart-items/{cart_id}/{product.id}", headers=auth_headers(other_user))
    assert response.status_code == 403
