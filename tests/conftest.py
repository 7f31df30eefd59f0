from unittest.mock import MagicMock

import pytest

from marketplace.app import create_app
from marketplace.core.config import AppConfig, Config, DatabaseConfig
from marketplace.db import Database
from marketplace.i18n import build_localized_names
from marketplace.integrations import StripeGateway
from marketplace.repositories import (
    CategoryRepository, OrderRepository, ProductRepository, TenantRepository, UserRepository
)


@pytest.fixture
def config():
    return Config(
        database=DatabaseConfig(url="sqlite://"),
        app=AppConfig(environment="test", secret_key="test-secret", log_level="WARNING"),
    )


@pytest.fixture
def gateway():
    return MagicMock(spec=StripeGateway)


@pytest.fixture
def app(config, gateway):
    app = create_app(config, stripe_gateway=gateway)
    app.config["TESTING"] = True
    yield app
    app.extensions["container"].get(Database).dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def container(app):
    return app.extensions["container"]


@pytest.fixture
def tenants(container):
    return container.get(TenantRepository)


@pytest.fixture
def users(container):
    return container.get(UserRepository)


@pytest.fixture
def categories(container):
    return container.get(CategoryRepository)


@pytest.fixture
def products(container):
    return container.get(ProductRepository)


@pytest.fixture
def orders(container):
    return container.get(OrderRepository)


@pytest.fixture
def tenant(tenants):
    return tenants.create(
        name="Acme Studio", slug="acme", stripe_account_id="acct_acme", stripe_details_submitted=True
    )


@pytest.fixture
def other_tenant(tenants):
    return tenants.create(name="Other Shop", slug="other-shop", stripe_account_id="acct_other")


@pytest.fixture
def user(users, tenant):
    return users.create(email="buyer@example.com", username="buyer", password="secret")


@pytest.fixture
def admin_user(users, tenant):
    return users.create(
        email="admin@demo.com", username="admin", password="demo",
        roles=["super-admin"], tenant_ids=[tenant["id"]],
    )


@pytest.fixture
def category_tree(categories):
    music = categories.create(
        name="Music", slug="music", color="#FFD700",
        localized_names=build_localized_names("categories", "music", "Music"),
    )
    songwriting = categories.create(
        name="Songwriting", slug="songwriting", parent_id=music["id"],
        localized_names=build_localized_names("subcategories", "songwriting", "Songwriting"),
    )
    design = categories.create(
        name="Design", slug="design",
        localized_names=build_localized_names("categories", "design", "Design"),
    )
    return {"music": music, "songwriting": songwriting, "design": design}


@pytest.fixture
def catalog(products, tenant, other_tenant, category_tree):
    """Four products across two tenants; created in this order (oldest first)."""
    return {
        "album": products.create(
            tenant_id=tenant["id"], name="Album Stems", price_cents=1999,
            category_id=category_tree["music"]["id"], tag_names=["audio", "stems"],
        ),
        "lyrics": products.create(
            tenant_id=tenant["id"], name="Lyric Workbook", price_cents=500,
            category_id=category_tree["songwriting"]["id"], tag_names=["writing"],
        ),
        "icons": products.create(
            tenant_id=tenant["id"], name="Icon Pack", price_cents=12000,
            category_id=category_tree["design"]["id"], tag_names=["design"],
        ),
        "foreign": products.create(
            tenant_id=other_tenant["id"], name="Other Album", price_cents=2500,
            category_id=category_tree["music"]["id"],
        ),
    }
