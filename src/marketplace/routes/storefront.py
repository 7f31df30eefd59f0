import logging
from typing import Any, Dict, Optional

from flask import Blueprint, request

from marketplace.core.config import Config
from marketplace.core.dependencies import get_service
from marketplace.core.exceptions import NotFoundError
from marketplace.i18n import LOCALES, language_selector, translate
from marketplace.repositories import TenantRepository
from marketplace.routes.cart import tenant_cart
from marketplace.routes.schemas import ProductFilterSchema
from marketplace.routes.utils import load_or_400, success_response
from marketplace.services import CategoryService, ProductService
from marketplace.utils.formatting import FormattingUtils
from marketplace.utils.tenants import generate_tenant_url

logger = logging.getLogger(__name__)

storefront_bp = Blueprint(
    "storefront", __name__, url_prefix="/<any(%s):locale>" % ",".join(LOCALES)
)

NAV_ITEMS = (
    ("home", ""),
    ("about", "/about"),
    ("features", "/features"),
    ("pricing", "/pricing"),
    ("contact", "/contact"),
)

STATIC_PAGES = ("about", "features", "pricing", "contact")

_filter_schema = ProductFilterSchema()


def navbar(locale: str) -> Dict[str, Any]:
    return {
        "items": [
            {"key": key, "label": translate(locale, f"navigation.{key}"), "href": f"/{locale}{path}"}
            for key, path in NAV_ITEMS
        ],
        "login_label": translate(locale, "navigation.login"),
        "start_selling_label": translate(locale, "navigation.startSelling"),
    }


def page_model(locale: str, page: str, **content) -> Dict[str, Any]:
    """Shared layout of every storefront page plus its own content."""
    return {
        "locale": locale,
        "page": page,
        "navbar": navbar(locale),
        "categories": get_service(CategoryService).get_tree(locale),
        "language_selector": language_selector(locale, request.path),
        **content,
    }


def product_listing(locale: str, page: str, overrides: Optional[Dict[str, Any]] = None, **content):
    filters = load_or_400(_filter_schema, request.args)
    filters.update(overrides or {})

    listing = get_service(ProductService).list_products(filters)
    search_filters = {
        key: (str(value) if key in ("min_price", "max_price") and value is not None else value)
        for key, value in filters.items()
    }
    search_filters["sort_label"] = translate(locale, f"search.sort.{filters['sort']}")

    return success_response(page_model(
        locale, page, search_filters=search_filters, products=listing, **content
    ))


@storefront_bp.route("/", methods=["GET"])
def home(locale: str):
    return product_listing(locale, "home")


def static_page(locale: str, page: str):
    return success_response(page_model(locale, page, title=translate(locale, f"navigation.{page}")))


for _page in STATIC_PAGES:
    storefront_bp.add_url_rule(
        f"/{_page}", f"{_page}_page", static_page, methods=["GET"], defaults={"page": _page}
    )


@storefront_bp.route("/<category>", methods=["GET"])
def category_page(locale: str, category: str):
    found = get_service(CategoryService).find_category(category)
    if found is None:
        raise NotFoundError("Category", category)
    return product_listing(locale, "category", {"category": category}, category=category)


@storefront_bp.route("/<category>/<subcategory>", methods=["GET"])
def subcategory_page(locale: str, category: str, subcategory: str):
    found = get_service(CategoryService).find_category(subcategory, parent_slug=category)
    if found is None:
        raise NotFoundError("Category", f"{category}/{subcategory}")
    return product_listing(
        locale, "subcategory", {"category": subcategory},
        category=category, subcategory=subcategory,
    )


@storefront_bp.route("/tenants/<tenant_slug>", methods=["GET"])
def tenant_page(locale: str, tenant_slug: str):
    tenant = get_service(TenantRepository).get_by_slug(tenant_slug)
    return product_listing(
        locale, "tenant", {"tenant_slug": tenant_slug}, tenant=_tenant_summary(tenant)
    )


@storefront_bp.route("/tenants/<tenant_slug>/checkout", methods=["GET"])
def checkout_page(locale: str, tenant_slug: str):
    """
    The tenant's cart resolved to products.

    ?success=true (Stripe's success redirect) empties the cart. A cart that
    references products which no longer exist is emptied too.
    """
    tenant = get_service(TenantRepository).get_by_slug(tenant_slug)
    cart = tenant_cart(tenant_slug)
    notice = None

    if request.args.get("success") == "true":
        cart.clear_cart()
        notice = translate(locale, "checkout.success")
    elif request.args.get("cancel") == "true":
        notice = translate(locale, "checkout.cancel")

    product_service = get_service(ProductService)
    try:
        rows = product_service.get_products_by_ids(tenant_slug, cart.product_ids)
    except NotFoundError:
        logger.warning(f"Cart of tenant {tenant_slug} references missing products, clearing it")
        cart.clear_cart()
        rows = []

    total_cents = sum(row["price_cents"] for row in rows)
    return success_response(page_model(
        locale,
        "checkout",
        title=translate(locale, "checkout.title"),
        tenant=_tenant_summary(tenant),
        products=[product_service.serialize(row) for row in rows],
        total_items=len(rows),
        total_cents=total_cents,
        formatted_total=FormattingUtils.format_cents(total_cents),
        empty_message=None if rows else translate(locale, "checkout.empty"),
        notice=notice,
    ))


def _tenant_summary(tenant: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "slug": tenant["slug"],
        "name": tenant["name"],
        "image_url": tenant["image_url"],
        "url": generate_tenant_url(tenant["slug"], get_service(Config)),
        "can_sell": bool(tenant["stripe_details_submitted"]),
    }
