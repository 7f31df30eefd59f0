import logging

from flask import Blueprint, request

from marketplace.core.dependencies import get_service
from marketplace.routes.cart import tenant_cart
from marketplace.routes.schemas import CheckoutSchema
from marketplace.routes.utils import get_current_user_id, load_or_400, success_response
from marketplace.services import CheckoutService

logger = logging.getLogger(__name__)

checkout_bp = Blueprint("checkout", __name__)

_checkout_schema = CheckoutSchema()


@checkout_bp.route("/tenants/<tenant_slug>/checkout", methods=["POST"])
def create_checkout(tenant_slug: str):
    """
    Start a Stripe Checkout for the tenant's cart.

    The body may list product_ids explicitly; otherwise the session cart of
    the tenant is used.
    """
    user_id = get_current_user_id()
    data = load_or_400(_checkout_schema, request.get_json(silent=True) or {})

    product_ids = data["product_ids"]
    if product_ids is None:
        product_ids = tenant_cart(tenant_slug).product_ids

    result = get_service(CheckoutService).create_session(user_id, tenant_slug, product_ids)
    return success_response(result, status=201)
