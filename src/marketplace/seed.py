"""
Seed script -- populates the database with the admin tenant, the demo admin
user and the category tree.

Run with:
    python -m marketplace.seed

Every step looks records up by slug or email before inserting, so running
it again only fills in what is missing (parents of orphaned subcategories,
localized names).
"""

import logging
import sys
from typing import Any, Dict, List, Optional

from marketplace.app import create_app
from marketplace.core.config import Config
from marketplace.core.dependencies import DependencyContainer
from marketplace.i18n import build_localized_names
from marketplace.integrations import StripeGateway
from marketplace.repositories import CategoryRepository, TenantRepository, UserRepository

logger = logging.getLogger(__name__)

ADMIN_TENANT_SLUG = "admin"
ADMIN_EMAIL = "admin@demo.com"
ADMIN_PASSWORD = "demo"

CATEGORIES: List[Dict[str, Any]] = [
    {"name": "All", "slug": "all"},
    {
        "name": "Business & Money",
        "color": "#FFB347",
        "slug": "business-money",
        "subcategories": [
            {"name": "Accounting", "slug": "accounting"},
            {"name": "Entrepreneurship", "slug": "entrepreneurship"},
            {"name": "Gigs & Side Projects", "slug": "gigs-side-projects"},
            {"name": "Investing", "slug": "investing"},
            {"name": "Management & Leadership", "slug": "management-leadership"},
            {"name": "Marketing & Sales", "slug": "marketing-sales"},
            {"name": "Networking, Careers & Jobs", "slug": "networking-careers-jobs"},
            {"name": "Personal Finance", "slug": "personal-finance"},
            {"name": "Real Estate", "slug": "real-estate"},
        ],
    },
    {
        "name": "Software Development",
        "color": "#7EC8E3",
        "slug": "software-development",
        "subcategories": [
            {"name": "Web Development", "slug": "web-development"},
            {"name": "Mobile Development", "slug": "mobile-development"},
            {"name": "Game Development", "slug": "game-development"},
            {"name": "Programming Languages", "slug": "programming-languages"},
            {"name": "DevOps", "slug": "devops"},
        ],
    },
    {
        "name": "Writing & Publishing",
        "color": "#D8B5FF",
        "slug": "writing-publishing",
        "subcategories": [
            {"name": "Fiction", "slug": "fiction"},
            {"name": "Non-Fiction", "slug": "non-fiction"},
            {"name": "Blogging", "slug": "blogging"},
            {"name": "Copywriting", "slug": "copywriting"},
            {"name": "Self-Publishing", "slug": "self-publishing"},
        ],
    },
    {"name": "Other", "slug": "other"},
    {
        "name": "Education",
        "color": "#FFE066",
        "slug": "education",
        "subcategories": [
            {"name": "Online Courses", "slug": "online-courses"},
            {"name": "Tutoring", "slug": "tutoring"},
            {"name": "Test Preparation", "slug": "test-preparation"},
            {"name": "Language Learning", "slug": "language-learning"},
        ],
    },
    {
        "name": "Self Improvement",
        "color": "#96E6B3",
        "slug": "self-improvement",
        "subcategories": [
            {"name": "Productivity", "slug": "productivity"},
            {"name": "Personal Development", "slug": "personal-development"},
            {"name": "Mindfulness", "slug": "mindfulness"},
            {"name": "Career Growth", "slug": "career-growth"},
        ],
    },
    {
        "name": "Fitness & Health",
        "color": "#FF9AA2",
        "slug": "fitness-health",
        "subcategories": [
            {"name": "Workout Plans", "slug": "workout-plans"},
            {"name": "Nutrition", "slug": "nutrition"},
            {"name": "Mental Health", "slug": "mental-health"},
            {"name": "Yoga", "slug": "yoga"},
        ],
    },
    {
        "name": "Design",
        "color": "#B5B9FF",
        "slug": "design",
        "subcategories": [
            {"name": "UI/UX", "slug": "ui-ux"},
            {"name": "Graphic Design", "slug": "graphic-design"},
            {"name": "3D Modeling", "slug": "3d-modeling"},
            {"name": "Typography", "slug": "typography"},
        ],
    },
    {
        "name": "Drawing & Painting",
        "color": "#FFCAB0",
        "slug": "drawing-painting",
        "subcategories": [
            {"name": "Watercolor", "slug": "watercolor"},
            {"name": "Acrylic", "slug": "acrylic"},
            {"name": "Oil", "slug": "oil"},
            {"name": "Pastel", "slug": "pastel"},
            {"name": "Charcoal", "slug": "charcoal"},
        ],
    },
    {
        "name": "Music",
        "color": "#FFD700",
        "slug": "music",
        "subcategories": [
            {"name": "Songwriting", "slug": "songwriting"},
            {"name": "Music Production", "slug": "music-production"},
            {"name": "Music Theory", "slug": "music-theory"},
            {"name": "Music History", "slug": "music-history"},
        ],
    },
    {
        "name": "Photography",
        "color": "#FF6B6B",
        "slug": "photography",
        "subcategories": [
            {"name": "Portrait", "slug": "portrait"},
            {"name": "Landscape", "slug": "landscape"},
            {"name": "Street Photography", "slug": "street-photography"},
            {"name": "Nature", "slug": "nature"},
            {"name": "Macro", "slug": "macro"},
        ],
    },
]


def ensure_admin_tenant(tenants: TenantRepository, gateway: StripeGateway) -> Dict[str, Any]:
    tenant = tenants.find_by_slug(ADMIN_TENANT_SLUG)
    if tenant:
        return tenant

    # A tenant cannot exist without its connected account
    account = gateway.create_account()
    return tenants.create(name=ADMIN_TENANT_SLUG, slug=ADMIN_TENANT_SLUG, stripe_account_id=account.id)


def ensure_admin_user(users: UserRepository, tenant: Dict[str, Any]) -> Dict[str, Any]:
    user = users.find_by_email(ADMIN_EMAIL)
    if user:
        return user
    return users.create(
        email=ADMIN_EMAIL,
        username="admin",
        password=ADMIN_PASSWORD,
        roles=["super-admin"],
        tenant_ids=[tenant["id"]],
    )


def ensure_category(
    categories: CategoryRepository,
    data: Dict[str, Any],
    kind: str,
    parent_id: Optional[int] = None,
) -> Dict[str, Any]:
    localized_names = build_localized_names(kind, data["slug"], data["name"])
    category = categories.find_by_slug(data["slug"])

    if category is None:
        return categories.create(
            name=data["name"],
            slug=data["slug"],
            color=data.get("color"),
            parent_id=parent_id,
            localized_names=localized_names,
        )

    if parent_id is not None and category["parent_id"] is None:
        logger.info(f"Attaching orphaned subcategory {data['slug']} to parent {parent_id}")
        categories.set_parent(category["id"], parent_id)

    if category["localized_names"] != localized_names:
        categories.set_localized_names(category["id"], localized_names)

    return category


def seed(container: DependencyContainer) -> None:
    tenants = container.get(TenantRepository)
    users = container.get(UserRepository)
    categories = container.get(CategoryRepository)

    admin_tenant = ensure_admin_tenant(tenants, container.get(StripeGateway))
    ensure_admin_user(users, admin_tenant)

    for data in CATEGORIES:
        parent = ensure_category(categories, data, "categories")
        for sub in data.get("subcategories", []):
            ensure_category(categories, sub, "subcategories", parent_id=parent["id"])

    logger.info(f"Seeded {categories.count()} categories, {tenants.count()} tenant(s), {users.count()} user(s)")


def main() -> int:
    try:
        app = create_app(Config.from_env())
        seed(app.extensions["container"])
    except Exception:
        logger.exception("Error during seeding")
        return 1

    logger.info("Seeding completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
