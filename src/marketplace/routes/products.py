import logging

from flask import Blueprint, request

from marketplace.core.dependencies import get_service
from marketplace.routes.schemas import ProductFilterSchema
from marketplace.routes.utils import load_or_400, success_response
from marketplace.services import ProductService

logger = logging.getLogger(__name__)

products_bp = Blueprint("products", __name__)

_filter_schema = ProductFilterSchema()


@products_bp.route("", methods=["GET"])
def list_products():
    """List products with page-based pagination, category, price and tag filters."""
    filters = load_or_400(_filter_schema, request.args)
    return success_response(get_service(ProductService).list_products(filters))


@products_bp.route("/<int:product_id>", methods=["GET"])
def get_product(product_id: int):
    return success_response(get_service(ProductService).get_product(product_id))
