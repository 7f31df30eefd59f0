import pytest


def cart_url(slug="acme"):
    return f"/api/v1/tenants/{slug}/cart"


def test_empty_cart(client, tenant):
    response = client.get(cart_url())

    assert response.status_code == 200
    assert response.get_json()["data"] == {"tenant_slug": "acme", "product_ids": [], "total_items": 0}


def test_unknown_tenant_returns_404(client):
    response = client.get(cart_url("nobody"))

    assert response.status_code == 404
    assert response.get_json()["error"]["code"] == "NOT_FOUND"


def test_add_item_persists_in_session(client, catalog):
    album_id = catalog["album"]["id"]

    response = client.post(f"{cart_url()}/items", json={"product_id": album_id})
    assert response.status_code == 201
    client.post(f"{cart_url()}/items", json={"product_id": str(album_id)})

    data = client.get(cart_url()).get_json()["data"]
    assert data["product_ids"] == [str(album_id)]
    assert data["total_items"] == 1


def test_add_item_requires_product_id(client, tenant):
    response = client.post(f"{cart_url()}/items", json={})

    assert response.status_code == 400
    assert "product_id" in response.get_json()["error"]["details"]["field_errors"]


def test_add_product_of_another_tenant_is_rejected(client, catalog):
    response = client.post(f"{cart_url()}/items", json={"product_id": catalog["foreign"]["id"]})

    assert response.status_code == 404
    assert client.get(cart_url()).get_json()["data"]["product_ids"] == []


def test_remove_item(client, catalog):
    album_id = catalog["album"]["id"]
    client.post(f"{cart_url()}/items", json={"product_id": album_id})

    response = client.delete(f"{cart_url()}/items/{album_id}")

    assert response.status_code == 200
    assert response.get_json()["data"]["product_ids"] == []


def test_toggle_item(client, catalog):
    album_id = catalog["album"]["id"]

    first = client.post(f"{cart_url()}/items/{album_id}/toggle").get_json()["data"]
    second = client.post(f"{cart_url()}/items/{album_id}/toggle").get_json()["data"]

    assert first["in_cart"] is True
    assert first["product_ids"] == [str(album_id)]
    assert second["in_cart"] is False
    assert second["product_ids"] == []


def test_leading_zeros_name_the_same_product(client, catalog):
    album_id = catalog["album"]["id"]

    client.post(f"{cart_url()}/items", json={"product_id": album_id})
    response = client.post(f"{cart_url()}/items", json={"product_id": f"0{album_id}"})

    assert response.status_code == 201
    assert response.get_json()["data"]["product_ids"] == [str(album_id)]

    toggled = client.post(f"{cart_url()}/items/00{album_id}/toggle").get_json()["data"]
    assert toggled["in_cart"] is False
    assert toggled["product_ids"] == []


@pytest.mark.parametrize("product_id", ["abc", "-1", True, 1.5])
def test_add_item_rejects_malformed_product_id(client, tenant, product_id):
    response = client.post(f"{cart_url()}/items", json={"product_id": product_id})

    assert response.status_code == 400
    assert "product_id" in response.get_json()["error"]["details"]["field_errors"]


def test_clear_cart_only_touches_one_tenant(client, catalog):
    client.post(f"{cart_url()}/items", json={"product_id": catalog["album"]["id"]})
    client.post(f"{cart_url('other-shop')}/items", json={"product_id": catalog["foreign"]["id"]})

    response = client.delete(cart_url())

    assert response.status_code == 200
    assert client.get(cart_url()).get_json()["data"]["product_ids"] == []
    assert client.get(cart_url("other-shop")).get_json()["data"]["total_items"] == 1


def test_clear_all_carts(client, catalog):
    client.post(f"{cart_url()}/items", json={"product_id": catalog["album"]["id"]})
    client.post(f"{cart_url('other-shop')}/items", json={"product_id": catalog["foreign"]["id"]})

    response = client.delete("/api/v1/carts")

    assert response.status_code == 200
    assert client.get(cart_url()).get_json()["data"]["total_items"] == 0
    assert client.get(cart_url("other-shop")).get_json()["data"]["total_items"] == 0
