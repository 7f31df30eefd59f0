from marketplace.routes.admin import admin_bp
from marketplace.routes.cart import cart_bp
from marketplace.routes.categories import categories_bp
from marketplace.routes.checkout import checkout_bp
from marketplace.routes.products import products_bp
from marketplace.routes.storefront import storefront_bp
from marketplace.routes.stripe_webhooks import stripe_webhooks_bp

__all__ = [
    "admin_bp",
    "cart_bp",
    "categories_bp",
    "checkout_bp",
    "products_bp",
    "storefront_bp",
    "stripe_webhooks_bp",
]
