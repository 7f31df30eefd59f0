from marketplace.repositories.category_repository import CategoryRepository
from marketplace.repositories.order_repository import OrderRepository
from marketplace.repositories.product_repository import ProductRepository
from marketplace.repositories.tenant_repository import TenantRepository
from marketplace.repositories.user_repository import UserRepository

__all__ = [
    "CategoryRepository",
    "OrderRepository",
    "ProductRepository",
    "TenantRepository",
    "UserRepository",
]
