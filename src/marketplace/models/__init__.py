# Re-export all models from a single entry point so the rest of the app
# can import cleanly:
#   from marketplace.models import Tenant, Product, Order
#
# Importing all models here also ensures they are registered with Base.metadata
# before any call to Base.metadata.create_all().

from marketplace.models.tenant import Tenant
from marketplace.models.user import User, user_tenants
from marketplace.models.catalog import (
    REFUND_POLICIES, Category, Product, Tag, product_tags
)
from marketplace.models.order import Order

__all__ = [
    "Tenant",
    "User",
    "user_tenants",
    "Category",
    "Tag",
    "Product",
    "product_tags",
    "REFUND_POLICIES",
    "Order",
]
