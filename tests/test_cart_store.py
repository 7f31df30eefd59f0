import json

import pytest

from marketplace.cart import CART_STORAGE_KEY, CartStore, JSONFileStorage, MemoryStorage, SessionStorage
from marketplace.cart.storage import Storage


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return CartStore(storage)


def persisted(storage):
    return json.loads(storage.get_item(CART_STORAGE_KEY))


def test_storage_backends_must_implement_every_operation():
    class ReadOnlyStorage(Storage):
        def get_item(self, key):
            return None

    with pytest.raises(TypeError):
        ReadOnlyStorage()


def test_add_keeps_insertion_order_and_ignores_duplicates(store):
    store.add_product("acme", "3")
    store.add_product("acme", "1")
    store.add_product("acme", "3")

    assert store.get_cart_by_tenant("acme") == ["3", "1"]
    assert store.get_total_items("acme") == 2


def test_add_twice_then_remove_once_leaves_cart_empty(store):
    store.add_product("acme", "1")
    store.add_product("acme", "1")
    store.remove_product("acme", "1")

    assert store.get_cart_by_tenant("acme") == []
    assert not store.is_product_in_cart("acme", "1")


def test_integer_and_string_ids_are_the_same_product(store):
    store.add_product("acme", 7)

    assert store.is_product_in_cart("acme", "7")
    assert store.get_cart_by_tenant("acme") == ["7"]


def test_remove_absent_product_is_a_noop(store, storage):
    store.remove_product("acme", "1")

    assert store.get_cart_by_tenant("acme") == []
    assert storage.get_item(CART_STORAGE_KEY) is None


def test_toggle_adds_then_removes(store):
    assert store.toggle_product("acme", "1") is True
    assert store.is_product_in_cart("acme", "1")

    assert store.toggle_product("acme", "1") is False
    assert not store.is_product_in_cart("acme", "1")


def test_tenant_carts_are_independent(store):
    store.add_product("acme", "1")
    store.add_product("other", "1")
    store.remove_product("acme", "1")

    assert store.get_cart_by_tenant("acme") == []
    assert store.get_cart_by_tenant("other") == ["1"]


def test_clear_cart_keeps_the_tenant_key(store, storage):
    store.add_product("acme", "1")
    store.add_product("other", "2")

    store.clear_cart("acme")

    assert persisted(storage)["state"]["tenantCarts"] == {
        "acme": {"productIds": []},
        "other": {"productIds": ["2"]},
    }


def test_clear_all_carts_drops_every_tenant(store, storage):
    store.add_product("acme", "1")
    store.add_product("other", "2")

    store.clear_all_carts()

    assert store.get_cart_by_tenant("other") == []
    assert persisted(storage) == {"state": {"tenantCarts": {}}, "version": 0}


def test_every_change_is_persisted_synchronously(store, storage):
    store.add_product("acme", "1")

    assert persisted(storage) == {
        "state": {"tenantCarts": {"acme": {"productIds": ["1"]}}},
        "version": 0,
    }


def test_new_store_rehydrates_from_storage(store, storage):
    store.add_product("acme", "1")
    store.add_product("acme", "2")

    rehydrated = CartStore(storage)

    assert rehydrated.get_cart_by_tenant("acme") == ["1", "2"]


def test_corrupt_state_is_discarded(caplog):
    storage = MemoryStorage({CART_STORAGE_KEY: '{"state": {"tenantCarts": "nope"}}'})

    store = CartStore(storage)

    assert store.tenant_carts == {}
    assert "corrupt cart state" in caplog.text


def test_invalid_json_is_discarded():
    store = CartStore(MemoryStorage({CART_STORAGE_KEY: "{not json"}))

    assert store.tenant_carts == {}


def test_for_tenant_view(store):
    cart = store.for_tenant("acme")
    cart.add_product("1")
    cart.add_product("2")
    cart.toggle_product("1")

    assert cart.product_ids == ["2"]
    assert cart.total_items == 1
    assert cart.to_dict() == {"tenant_slug": "acme", "product_ids": ["2"], "total_items": 1}

    cart.clear_cart()
    assert cart.product_ids == []


def test_json_file_storage_survives_restart(tmp_path):
    path = str(tmp_path / "cart.json")
    CartStore(JSONFileStorage(path)).add_product("acme", "1")

    assert CartStore(JSONFileStorage(path)).get_cart_by_tenant("acme") == ["1"]


def test_json_file_storage_ignores_unreadable_file(tmp_path):
    path = tmp_path / "cart.json"
    path.write_text("garbage", encoding="utf-8")

    store = CartStore(JSONFileStorage(str(path)))
    store.add_product("acme", "1")

    assert json.loads(path.read_text(encoding="utf-8"))[CART_STORAGE_KEY]


def test_session_storage_marks_session_modified():
    class FakeSession(dict):
        modified = False

    session = FakeSession()
    CartStore(SessionStorage(session)).add_product("acme", "1")

    assert session.modified is True
    assert CART_STORAGE_KEY in session
