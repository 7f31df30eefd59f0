import logging
from typing import Any, Dict

from flask import Blueprint

from marketplace.core.dependencies import get_service
from marketplace.core.exceptions import ForbiddenError, NotFoundError, UnauthorizedError
from marketplace.repositories import (
    CategoryRepository, OrderRepository, ProductRepository, TenantRepository, UserRepository
)
from marketplace.routes.utils import get_current_user_id, success_response

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__)

SUPER_ADMIN_ROLE = "super-admin"

COLLECTIONS = {
    "tenants": TenantRepository,
    "users": UserRepository,
    "categories": CategoryRepository,
    "products": ProductRepository,
    "orders": OrderRepository,
}


def require_super_admin() -> Dict[str, Any]:
    user_id = get_current_user_id()
    user = get_service(UserRepository).find_by_id(user_id)
    if user is None:
        raise UnauthorizedError("Unknown user.")
    if not UserRepository.has_role(user, SUPER_ADMIN_ROLE):
        logger.warning(f"User {user_id} tried to open the admin without the {SUPER_ADMIN_ROLE} role")
        raise ForbiddenError("Admin access requires the super-admin role.")
    return user


@admin_bp.route("", methods=["GET"])
def dashboard():
    """Every collection with its document count."""
    require_super_admin()
    collections = [
        {"name": name, "count": get_service(repository).count(), "href": f"/admin/collections/{name}"}
        for name, repository in COLLECTIONS.items()
    ]
    return success_response({"collections": collections})


@admin_bp.route("/collections/<name>", methods=["GET"])
def collection(name: str):
    require_super_admin()
    repository = COLLECTIONS.get(name)
    if repository is None:
        raise NotFoundError("Collection", name)

    docs = get_service(repository).list_all()
    return success_response({"collection": name, "docs": docs, "total_docs": len(docs)})
