from typing import Any, Dict, List, Optional
from marketplace.core.config import Config
from marketplace.core.exceptions import NotFoundError, ValidationError
from marketplace.repositories import CategoryRepository, ProductRepository
from marketplace.utils.formatting import FormattingUtils
from marketplace.utils.tenants import generate_tenant_url
import logging

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"


class ProductService:
    """
    Product search and serialization

    Responsibilities:
    - Translate storefront filters into repository queries
    - Expand parent categories to their subcategories
    - Shape product rows for API responses
    """

    def __init__(
        self,
        product_repository: ProductRepository,
        category_repository: CategoryRepository,
        config: Config,
    ):
        self.product_repo = product_repository
        self.category_repo = category_repository
        self.config = config

    def get_product(self, product_id: int) -> Dict[str, Any]:
        logger.info(f"Fetching product {product_id}")
        return self.serialize(self.product_repo.get_by_id(product_id))

    def list_products(self, filters: Dict[str, Any]) -> Dict[str, Any]:
        """
        List products for the storefront search filters

        Business Rules:
        - A parent category slug also matches its subcategories
        - "all" (or no category) disables the category filter
        - Prices are given in whole currency units
        - Page size is capped by the API configuration
        """
        limit = min(
            filters.get("limit") or self.config.api.default_page_size,
            self.config.api.max_page_size,
        )
        page = filters.get("page") or 1

        min_price = filters.get("min_price")
        max_price = filters.get("max_price")
        if min_price is not None and max_price is not None and min_price > max_price:
            raise ValidationError("min_price cannot be greater than max_price")

        rows, total = self.product_repo.list_products(
            limit=limit,
            page=page,
            category_ids=self.resolve_category_ids(filters.get("category")),
            tenant_slug=filters.get("tenant_slug"),
            search_query=(filters.get("search") or "").strip() or None,
            min_price_cents=FormattingUtils.units_to_cents(min_price) if min_price is not None else None,
            max_price_cents=FormattingUtils.units_to_cents(max_price) if max_price is not None else None,
            tag_names=filters.get("tags") or None,
            sort=filters.get("sort") or "curated",
        )

        logger.info(f"Product search matched {total} product(s) (page {page}, limit {limit})")
        return {
            "docs": [self.serialize(row) for row in rows],
            "page": page,
            "limit": limit,
            "total_docs": total,
            "has_next_page": page * limit < total,
        }

    def resolve_category_ids(self, category_slug: Optional[str]) -> Optional[List[int]]:
        """None means no category filter; an unknown slug matches nothing."""
        if not category_slug or category_slug == ALL_CATEGORIES:
            return None

        category = self.category_repo.find_by_slug(category_slug)
        if category is None:
            logger.info(f"Unknown category filter {category_slug!r}")
            return []

        return [category["id"], *self.category_repo.list_child_ids(category["id"])]

    def get_products_by_ids(self, tenant_slug: str, product_ids: List[str]) -> List[Dict[str, Any]]:
        """
        Resolve cart product ids of one tenant, keeping cart order.

        Raises NotFoundError when any id is unknown or sold by another tenant.
        """
        try:
            # A product appears once per checkout however often it is listed
            ids = list(dict.fromkeys(int(pid) for pid in product_ids))
        except (TypeError, ValueError):
            raise NotFoundError("Products")

        rows = {
            row["id"]: row
            for row in self.product_repo.get_many_by_ids(ids)
            if row["tenant_slug"] == tenant_slug
        }
        if len(rows) != len(ids):
            missing = sorted(set(ids) - set(rows))
            logger.warning(f"Products {missing} not found for tenant {tenant_slug}")
            raise NotFoundError("Products")

        return [rows[pid] for pid in ids]

    def serialize(self, row: Dict[str, Any]) -> Dict[str, Any]:
        created_at = row.get("created_at")
        return {
            "id": row["id"],
            "name": row["name"],
            "description": row.get("description"),
            "price": float(FormattingUtils.cents_to_units(row["price_cents"])),
            "price_cents": row["price_cents"],
            "formatted_price": FormattingUtils.format_cents(row["price_cents"]),
            "image_url": row.get("image_url"),
            "refund_policy": row.get("refund_policy"),
            "category": row.get("category_slug"),
            "tags": row.get("tags", []),
            "tenant": {
                "slug": row["tenant_slug"],
                "name": row["tenant_name"],
                "image_url": row.get("tenant_image_url"),
                "url": generate_tenant_url(row["tenant_slug"], self.config),
            },
            "created_at": created_at.isoformat() if created_at else None,
        }
