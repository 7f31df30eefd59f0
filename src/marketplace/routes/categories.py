import logging

from flask import Blueprint, jsonify, request

from marketplace.core.dependencies import get_service
from marketplace.i18n import resolve_locale
from marketplace.services import CategoryService

logger = logging.getLogger(__name__)

categories_bp = Blueprint("categories", __name__)


@categories_bp.route("", methods=["GET"])
def list_categories():
    """Root categories with their subcategories, localized by ?locale=."""
    locale = resolve_locale(request.args.get("locale"))
    docs = get_service(CategoryService).get_tree(locale)
    return jsonify({"docs": docs, "total_docs": len(docs)}), 200
