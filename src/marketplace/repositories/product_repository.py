from typing import List, Optional, Dict, Any, Tuple, Iterable
from sqlalchemy import func, select
from marketplace.repositories.base import BaseRepository
from marketplace.models import Category, Product, Tag, Tenant, product_tags
from marketplace.core.exceptions import NotFoundError
import logging

logger = logging.getLogger(__name__)

products = Product.__table__
tenants = Tenant.__table__
categories = Category.__table__
tags = Tag.__table__

# Sort keys exposed by the search filters
SORT_ORDERS = {
    "curated": (products.c.created_at.desc(), products.c.id.desc()),
    "trending": (products.c.created_at.desc(), products.c.id.desc()),
    "hot_and_new": (products.c.created_at.asc(), products.c.id.asc()),
}


class ProductRepository(BaseRepository[Dict[str, Any]]):
    """Repository for tenant products, their tags and search filters"""

    @property
    def table(self):
        return products

    def _base_select(self):
        return (
            select(
                products,
                tenants.c.slug.label("tenant_slug"),
                tenants.c.name.label("tenant_name"),
                tenants.c.image_url.label("tenant_image_url"),
                categories.c.slug.label("category_slug"),
            )
            .join(tenants, tenants.c.id == products.c.tenant_id)
            .outerjoin(categories, categories.c.id == products.c.category_id)
        )

    def get_by_id(self, product_id: int) -> Dict[str, Any]:
        row = self.execute_single_query(self._base_select().where(products.c.id == product_id))
        if not row:
            raise NotFoundError("Product", str(product_id))
        self._attach_tags([row])
        return row

    def get_many_by_ids(self, product_ids: Iterable[int]) -> List[Dict[str, Any]]:
        ids = list(product_ids)
        if not ids:
            return []
        rows = self.execute_query(
            self._base_select().where(products.c.id.in_(ids)).order_by(products.c.id)
        )
        self._attach_tags(rows)
        return rows

    def list_all(self) -> List[Dict[str, Any]]:
        rows = self.execute_query(self._base_select().order_by(products.c.id))
        self._attach_tags(rows)
        return rows

    def list_products(
        self,
        limit: int,
        page: int = 1,
        category_ids: Optional[List[int]] = None,
        tenant_slug: Optional[str] = None,
        search_query: Optional[str] = None,
        min_price_cents: Optional[int] = None,
        max_price_cents: Optional[int] = None,
        tag_names: Optional[List[str]] = None,
        sort: str = "curated",
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        List products matching the storefront search filters.

        Returns the requested page of rows and the total number of matches.
        """
        conditions = []

        if category_ids is not None:
            conditions.append(products.c.category_id.in_(category_ids))

        if tenant_slug:
            conditions.append(tenants.c.slug == tenant_slug)

        if search_query:
            conditions.append(products.c.name.ilike(f"%{search_query}%"))

        if min_price_cents is not None:
            conditions.append(products.c.price_cents >= min_price_cents)

        if max_price_cents is not None:
            conditions.append(products.c.price_cents <= max_price_cents)

        if tag_names:
            tagged = (
                select(product_tags.c.product_id)
                .join(tags, tags.c.id == product_tags.c.tag_id)
                .where(tags.c.name.in_(tag_names))
            )
            conditions.append(products.c.id.in_(tagged))

        query = self._base_select().where(*conditions)

        total = self.execute_scalar(
            select(func.count()).select_from(query.subquery())
        ) or 0

        order_by = SORT_ORDERS.get(sort, SORT_ORDERS["curated"])
        rows = self.execute_query(
            query.order_by(*order_by).limit(limit).offset((page - 1) * limit)
        )
        self._attach_tags(rows)

        logger.debug(f"list_products matched {total} rows, returning {len(rows)}")
        return rows, int(total)

    def _attach_tags(self, rows: List[Dict[str, Any]]) -> None:
        if not rows:
            return
        by_id = {row["id"]: row for row in rows}
        for row in rows:
            row["tags"] = []

        tag_rows = self.execute_query(
            select(product_tags.c.product_id, tags.c.name)
            .join(tags, tags.c.id == product_tags.c.tag_id)
            .where(product_tags.c.product_id.in_(list(by_id)))
            .order_by(tags.c.name)
        )
        for tag_row in tag_rows:
            by_id[tag_row["product_id"]]["tags"].append(tag_row["name"])

    def get_or_create_tag(self, name: str, conn=None) -> int:
        existing = select(tags.c.id).where(tags.c.name == name)
        if conn is not None:
            tag_id = conn.execute(existing).scalar()
            if tag_id is None:
                tag_id = conn.execute(tags.insert().values(name=name)).inserted_primary_key[0]
            return tag_id

        with self.transaction() as own_conn:
            return self.get_or_create_tag(name, conn=own_conn)

    def create(
        self,
        tenant_id: int,
        name: str,
        price_cents: int,
        category_id: Optional[int] = None,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
        refund_policy: str = "30-day",
        tag_names: Iterable[str] = (),
    ) -> Dict[str, Any]:
        with self.transaction() as conn:
            product_id = self.insert_returning_id({
                "tenant_id": tenant_id,
                "category_id": category_id,
                "name": name,
                "description": description,
                "price_cents": price_cents,
                "image_url": image_url,
                "refund_policy": refund_policy,
            }, conn=conn)

            for tag_name in tag_names:
                tag_id = self.get_or_create_tag(tag_name, conn=conn)
                conn.execute(product_tags.insert().values(product_id=product_id, tag_id=tag_id))

        logger.info(f"Created product {product_id} ({name}) for tenant {tenant_id}")
        return self.get_by_id(product_id)
