def test_admin_requires_user_header(client):
    assert client.get("/admin").status_code == 401


def test_admin_rejects_unknown_user(client):
    assert client.get("/admin", headers={"X-User-Id": "999"}).status_code == 401


def test_admin_requires_super_admin_role(client, user):
    response = client.get("/admin", headers={"X-User-Id": str(user["id"])})

    assert response.status_code == 403


def test_admin_dashboard_counts_collections(client, admin_user, catalog):
    response = client.get("/admin", headers={"X-User-Id": str(admin_user["id"])})

    assert response.status_code == 200
    counts = {c["name"]: c["count"] for c in response.get_json()["data"]["collections"]}
    assert counts == {"tenants": 2, "users": 1, "categories": 3, "products": 4, "orders": 0}


def test_admin_collection_listing_hides_password_hashes(client, admin_user, user):
    response = client.get("/admin/collections/users", headers={"X-User-Id": str(admin_user["id"])})

    docs = response.get_json()["data"]["docs"]
    assert {d["email"] for d in docs} == {"admin@demo.com", "buyer@example.com"}
    assert all("hashed_password" not in d for d in docs)


def test_admin_unknown_collection(client, admin_user):
    response = client.get("/admin/collections/widgets", headers={"X-User-Id": str(admin_user["id"])})

    assert response.status_code == 404
