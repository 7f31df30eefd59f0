from typing import Optional, List, Dict, Any
from sqlalchemy import select, update
from marketplace.repositories.base import BaseRepository
from marketplace.models import Category
from marketplace.core.exceptions import NotFoundError
import logging

logger = logging.getLogger(__name__)

categories = Category.__table__


class CategoryRepository(BaseRepository[Dict[str, Any]]):
    """Repository for the two-level category tree"""

    @property
    def table(self):
        return categories

    def get_by_id(self, category_id: int) -> Dict[str, Any]:
        row = self.get_row(category_id)
        if not row:
            raise NotFoundError("Category", str(category_id))
        return row

    def find_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        return self.execute_single_query(select(categories).where(categories.c.slug == slug))

    def list_all(self) -> List[Dict[str, Any]]:
        return self.execute_query(select(categories).order_by(categories.c.name))

    def list_child_ids(self, parent_id: int) -> List[int]:
        rows = self.execute_query(
            select(categories.c.id).where(categories.c.parent_id == parent_id)
        )
        return [int(r["id"]) for r in rows]

    def create(
        self,
        name: str,
        slug: str,
        color: Optional[str] = None,
        parent_id: Optional[int] = None,
        localized_names: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        category_id = self.insert_returning_id({
            "name": name,
            "slug": slug,
            "color": color,
            "parent_id": parent_id,
            "localized_names": localized_names or {},
        })
        logger.info(f"Created category {category_id} ({slug})")
        return self.get_by_id(category_id)

    def set_parent(self, category_id: int, parent_id: int) -> int:
        return self.execute_command(
            update(categories).where(categories.c.id == category_id).values(parent_id=parent_id)
        )

    def set_localized_names(self, category_id: int, localized_names: Dict[str, str]) -> int:
        return self.execute_command(
            update(categories)
            .where(categories.c.id == category_id)
            .values(localized_names=localized_names)
        )
