from typing import Any, Dict, List, Optional
from marketplace.i18n import localized_name, resolve_locale
from marketplace.repositories import CategoryRepository
import logging

logger = logging.getLogger(__name__)


class CategoryService:
    """Localized views of the two-level category tree"""

    def __init__(self, category_repository: CategoryRepository):
        self.category_repo = category_repository

    def get_tree(self, locale: str) -> List[Dict[str, Any]]:
        """Root categories with their subcategories, names in `locale`."""
        locale = resolve_locale(locale)
        rows = self.category_repo.list_all()

        children: Dict[int, List[Dict[str, Any]]] = {}
        for row in rows:
            if row["parent_id"] is not None:
                children.setdefault(row["parent_id"], []).append(row)

        tree = []
        for row in rows:
            if row["parent_id"] is not None:
                continue
            category = self._localize(row, "categories", locale)
            category["subcategories"] = [
                self._localize(child, "subcategories", locale)
                for child in children.get(row["id"], [])
            ]
            tree.append(category)

        logger.debug(f"Built category tree with {len(tree)} root(s) for {locale}")
        return tree

    def find_category(self, slug: str, parent_slug: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        Look a category up by slug.

        With `parent_slug`, the category must be a direct subcategory of it.
        """
        category = self.category_repo.find_by_slug(slug)
        if category is None or parent_slug is None:
            return category

        parent = self.category_repo.find_by_slug(parent_slug)
        if parent is None or category["parent_id"] != parent["id"]:
            return None
        return category

    @staticmethod
    def _localize(row: Dict[str, Any], kind: str, locale: str) -> Dict[str, Any]:
        stored = row.get("localized_names") or {}
        return {
            "id": row["id"],
            "slug": row["slug"],
            "name": stored.get(locale) or localized_name(kind, row["slug"], row["name"], locale),
            "color": row.get("color"),
        }
