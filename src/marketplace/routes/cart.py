import logging

from flask import Blueprint, request, session

from marketplace.cart import CartStore, SessionStorage, TenantCart
from marketplace.core.dependencies import get_service
from marketplace.repositories import TenantRepository
from marketplace.routes.schemas import AddCartItemSchema, canonical_product_id
from marketplace.routes.utils import load_or_400, success_response
from marketplace.services import ProductService

logger = logging.getLogger(__name__)

cart_bp = Blueprint("cart", __name__)

_add_schema = AddCartItemSchema()


def cart_store() -> CartStore:
    """The visitor's carts, persisted in the signed session cookie."""
    return CartStore(SessionStorage(session))


def tenant_cart(tenant_slug: str) -> TenantCart:
    # Raises NotFoundError for unknown tenants
    get_service(TenantRepository).get_by_slug(tenant_slug)
    return cart_store().for_tenant(tenant_slug)


@cart_bp.route("/tenants/<tenant_slug>/cart", methods=["GET"])
def get_cart(tenant_slug: str):
    return success_response(tenant_cart(tenant_slug).to_dict())


@cart_bp.route("/tenants/<tenant_slug>/cart", methods=["DELETE"])
def clear_cart(tenant_slug: str):
    cart = tenant_cart(tenant_slug)
    cart.clear_cart()
    logger.info(f"Cleared cart of tenant {tenant_slug}")
    return success_response(cart.to_dict(), message="Cart cleared.")


@cart_bp.route("/tenants/<tenant_slug>/cart/items", methods=["POST"])
def add_cart_item(tenant_slug: str):
    """Add a product of this tenant to the cart; adding it twice changes nothing."""
    data = load_or_400(_add_schema, request.get_json(silent=True) or {})
    cart = tenant_cart(tenant_slug)

    # Only products sold by this tenant can go in its cart
    get_service(ProductService).get_products_by_ids(tenant_slug, [data["product_id"]])

    cart.add_product(data["product_id"])
    return success_response(cart.to_dict(), message="Item added to cart.", status=201)


@cart_bp.route("/tenants/<tenant_slug>/cart/items/<product_id>", methods=["DELETE"])
def remove_cart_item(tenant_slug: str, product_id: str):
    product_id = canonical_product_id(product_id)
    cart = tenant_cart(tenant_slug)
    cart.remove_product(product_id)
    return success_response(cart.to_dict(), message="Item removed from cart.")


@cart_bp.route("/tenants/<tenant_slug>/cart/items/<product_id>/toggle", methods=["POST"])
def toggle_cart_item(tenant_slug: str, product_id: str):
    product_id = canonical_product_id(product_id)
    cart = tenant_cart(tenant_slug)
    if not cart.is_product_in_cart(product_id):
        get_service(ProductService).get_products_by_ids(tenant_slug, [product_id])

    in_cart = cart.toggle_product(product_id)
    return success_response({**cart.to_dict(), "in_cart": in_cart})


@cart_bp.route("/carts", methods=["DELETE"])
def clear_all_carts():
    cart_store().clear_all_carts()
    logger.info("Cleared all carts of the session")
    return success_response({"tenant_carts": {}}, message="All carts cleared.")
