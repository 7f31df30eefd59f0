def page(response):
    assert response.status_code == 200, response.get_json()
    return response.get_json()["data"]


def test_home_page_model(client, catalog):
    data = page(client.get("/fr/"))

    assert data["locale"] == "fr"
    assert [item["href"] for item in data["navbar"]["items"]] == [
        "/fr", "/fr/about", "/fr/features", "/fr/pricing", "/fr/contact"
    ]
    assert data["language_selector"]["locale"] == "fr"
    assert data["products"]["total_docs"] == 4
    assert {c["slug"] for c in data["categories"]} == {"music", "design"}


def test_static_page_has_localized_title(client, category_tree):
    data = page(client.get("/en/pricing"))

    assert data["page"] == "pricing"
    assert data["title"] == "Pricing"


def test_category_page_filters_products(client, catalog):
    data = page(client.get("/en/music"))

    assert data["search_filters"]["category"] == "music"
    assert data["products"]["total_docs"] == 3


def test_subcategory_page(client, catalog):
    data = page(client.get("/en/music/songwriting"))

    assert [d["name"] for d in data["products"]["docs"]] == ["Lyric Workbook"]


def test_unknown_category_is_404(client, category_tree):
    assert client.get("/en/not-a-category").status_code == 404
    assert client.get("/en/design/songwriting").status_code == 404


def test_tenant_page(client, catalog):
    data = page(client.get("/en/tenants/acme"))

    assert data["tenant"]["slug"] == "acme"
    assert data["tenant"]["url"] == "http://localhost:3000/tenants/acme"
    assert data["products"]["total_docs"] == 3


def test_unknown_tenant_page_is_404(client, category_tree):
    assert client.get("/en/tenants/nobody").status_code == 404


def test_checkout_page_lists_cart_with_total(client, catalog):
    client.post("/api/v1/tenants/acme/cart/items", json={"product_id": catalog["album"]["id"]})
    client.post("/api/v1/tenants/acme/cart/items", json={"product_id": catalog["icons"]["id"]})

    data = page(client.get("/en/tenants/acme/checkout"))

    assert [p["name"] for p in data["products"]] == ["Album Stems", "Icon Pack"]
    assert data["total_cents"] == 13999
    assert data["formatted_total"] == "$140"


def test_checkout_success_clears_the_cart(client, catalog):
    client.post("/api/v1/tenants/acme/cart/items", json={"product_id": catalog["album"]["id"]})

    data = page(client.get("/en/tenants/acme/checkout?success=true"))

    assert data["products"] == []
    assert data["notice"] is not None
    assert client.get("/api/v1/tenants/acme/cart").get_json()["data"]["total_items"] == 0
