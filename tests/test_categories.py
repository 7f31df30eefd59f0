from marketplace.i18n import translate


def test_categories_tree(client, category_tree):
    response = client.get("/api/categories")

    assert response.status_code == 200
    body = response.get_json()
    assert body["total_docs"] == 2
    music = next(doc for doc in body["docs"] if doc["slug"] == "music")
    assert music["name"] == "Music"
    assert [sub["slug"] for sub in music["subcategories"]] == ["songwriting"]


def test_categories_are_localized(client, category_tree):
    body = client.get("/api/categories?locale=fr").get_json()

    music = next(doc for doc in body["docs"] if doc["slug"] == "music")
    assert music["name"] == translate("fr", "categories.music")
    assert music["subcategories"][0]["name"] == translate("fr", "subcategories.songwriting")


def test_unsupported_locale_falls_back_to_default(client, category_tree):
    body = client.get("/api/categories?locale=de").get_json()

    assert {doc["name"] for doc in body["docs"]} == {"Music", "Design"}
