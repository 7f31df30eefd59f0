from marketplace.cart.storage import JSONFileStorage, MemoryStorage, SessionStorage, Storage
from marketplace.cart.store import CART_STORAGE_KEY, CartStore, TenantCart

__all__ = [
    "CART_STORAGE_KEY",
    "CartStore",
    "TenantCart",
    "Storage",
    "MemoryStorage",
    "JSONFileStorage",
    "SessionStorage",
]
