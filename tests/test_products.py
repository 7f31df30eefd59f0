def names(response):
    return [doc["name"] for doc in response.get_json()["data"]["docs"]]


def test_list_all_products_newest_first(client, catalog):
    response = client.get("/api/v1/products")

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["total_docs"] == 4
    assert data["page"] == 1
    assert data["has_next_page"] is False
    assert names(response) == ["Other Album", "Icon Pack", "Lyric Workbook", "Album Stems"]


def test_hot_and_new_is_oldest_first(client, catalog):
    response = client.get("/api/v1/products?sort=hot_and_new")

    assert names(response) == ["Album Stems", "Lyric Workbook", "Icon Pack", "Other Album"]


def test_parent_category_includes_subcategories(client, catalog):
    response = client.get("/api/v1/products?category=music&sort=hot_and_new")

    assert names(response) == ["Album Stems", "Lyric Workbook", "Other Album"]


def test_subcategory_filter(client, catalog):
    assert names(client.get("/api/v1/products?category=songwriting")) == ["Lyric Workbook"]


def test_all_category_disables_filter(client, catalog):
    assert client.get("/api/v1/products?category=all").get_json()["data"]["total_docs"] == 4


def test_unknown_category_matches_nothing(client, catalog):
    assert client.get("/api/v1/products?category=nope").get_json()["data"]["total_docs"] == 0


def test_tenant_and_search_filters(client, catalog):
    response = client.get("/api/v1/products?tenant_slug=acme&search=album")

    assert names(response) == ["Album Stems"]


def test_price_filters_are_in_whole_units(client, catalog):
    response = client.get("/api/v1/products?min_price=10&max_price=25&sort=hot_and_new")

    assert names(response) == ["Album Stems", "Other Album"]


def test_tags_match_any(client, catalog):
    response = client.get("/api/v1/products?tags=writing,design&sort=hot_and_new")

    assert names(response) == ["Lyric Workbook", "Icon Pack"]


def test_pagination(client, catalog):
    first = client.get("/api/v1/products?limit=3&sort=hot_and_new").get_json()["data"]
    second = client.get("/api/v1/products?limit=3&page=2&sort=hot_and_new").get_json()["data"]

    assert first["has_next_page"] is True
    assert [d["name"] for d in second["docs"]] == ["Other Album"]
    assert second["has_next_page"] is False


def test_invalid_filters_return_400(client):
    assert client.get("/api/v1/products?limit=0").status_code == 400
    assert client.get("/api/v1/products?limit=101").status_code == 400
    assert client.get("/api/v1/products?sort=random").status_code == 400
    assert client.get("/api/v1/products?min_price=30&max_price=10").status_code == 400


def test_product_serialization(client, catalog):
    response = client.get(f"/api/v1/products/{catalog['album']['id']}")

    doc = response.get_json()["data"]
    assert doc["price_cents"] == 1999
    assert doc["price"] == 19.99
    assert doc["formatted_price"] == "$20"
    assert doc["category"] == "music"
    assert doc["tags"] == ["audio", "stems"]
    assert doc["tenant"]["slug"] == "acme"
    assert doc["tenant"]["url"] == "http://localhost:3000/tenants/acme"


def test_unknown_product_returns_404(client):
    assert client.get("/api/v1/products/999").status_code == 404
