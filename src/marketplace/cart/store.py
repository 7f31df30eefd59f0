import logging
from typing import Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from marketplace.cart.storage import Storage

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = "reserv-cart"

ProductId = Union[str, int]


class TenantCartState(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_ids: List[str] = Field(default_factory=list, alias="productIds")


class CartState(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tenant_carts: Dict[str, TenantCartState] = Field(default_factory=dict, alias="tenantCarts")


class PersistedCart(BaseModel):
    """Envelope written to storage: {"state": {"tenantCarts": ...}, "version": 0}"""

    state: CartState = Field(default_factory=CartState)
    version: int = 0


class CartStore:
    """
    Per-tenant shopping carts persisted synchronously to a Storage backend.

    Each tenant cart is an ordered set of product ids: insertion order is
    kept and adding an id that is already present changes nothing. Carts
    never interact across tenants.
    """

    def __init__(self, storage: Storage, key: str = CART_STORAGE_KEY):
        self.storage = storage
        self.key = key
        self.tenant_carts: Dict[str, List[str]] = self._hydrate()

    def _hydrate(self) -> Dict[str, List[str]]:
        raw = self.storage.get_item(self.key)
        if not raw:
            return {}
        try:
            persisted = PersistedCart.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.warning(f"Discarding corrupt cart state under {self.key!r}: {e.error_count()} error(s)")
            return {}
        return {
            tenant: list(dict.fromkeys(cart.product_ids))
            for tenant, cart in persisted.state.tenant_carts.items()
        }

    def _persist(self) -> None:
        persisted = PersistedCart(
            state=CartState(
                tenant_carts={
                    tenant: TenantCartState(product_ids=ids)
                    for tenant, ids in self.tenant_carts.items()
                }
            )
        )
        self.storage.set_item(self.key, persisted.model_dump_json(by_alias=True))

    def get_cart_by_tenant(self, tenant_slug: str) -> List[str]:
        return list(self.tenant_carts.get(tenant_slug, []))

    def is_product_in_cart(self, tenant_slug: str, product_id: ProductId) -> bool:
        return str(product_id) in self.tenant_carts.get(tenant_slug, [])

    def get_total_items(self, tenant_slug: str) -> int:
        return len(self.tenant_carts.get(tenant_slug, []))

    def add_product(self, tenant_slug: str, product_id: ProductId) -> None:
        product_ids = self.tenant_carts.setdefault(tenant_slug, [])
        if str(product_id) not in product_ids:
            product_ids.append(str(product_id))
        self._persist()

    def remove_product(self, tenant_slug: str, product_id: ProductId) -> None:
        product_ids = self.tenant_carts.get(tenant_slug)
        if product_ids is None or str(product_id) not in product_ids:
            return
        product_ids.remove(str(product_id))
        self._persist()

    def toggle_product(self, tenant_slug: str, product_id: ProductId) -> bool:
        """Add the product if absent, remove it if present; returns whether it is now in the cart."""
        if self.is_product_in_cart(tenant_slug, product_id):
            self.remove_product(tenant_slug, product_id)
            return False
        self.add_product(tenant_slug, product_id)
        return True

    def clear_cart(self, tenant_slug: str) -> None:
        self.tenant_carts[tenant_slug] = []
        self._persist()

    def clear_all_carts(self) -> None:
        self.tenant_carts = {}
        self._persist()

    def for_tenant(self, tenant_slug: str) -> "TenantCart":
        return TenantCart(self, tenant_slug)


class TenantCart:
    """A CartStore view bound to one tenant."""

    def __init__(self, store: CartStore, tenant_slug: str):
        self.store = store
        self.tenant_slug = tenant_slug

    @property
    def product_ids(self) -> List[str]:
        return self.store.get_cart_by_tenant(self.tenant_slug)

    @property
    def total_items(self) -> int:
        return self.store.get_total_items(self.tenant_slug)

    def add_product(self, product_id: ProductId) -> None:
        self.store.add_product(self.tenant_slug, product_id)

    def remove_product(self, product_id: ProductId) -> None:
        self.store.remove_product(self.tenant_slug, product_id)

    def toggle_product(self, product_id: ProductId) -> bool:
        return self.store.toggle_product(self.tenant_slug, product_id)

    def is_product_in_cart(self, product_id: ProductId) -> bool:
        return self.store.is_product_in_cart(self.tenant_slug, product_id)

    def clear_cart(self) -> None:
        self.store.clear_cart(self.tenant_slug)

    def clear_all_carts(self) -> None:
        self.store.clear_all_carts()

    def to_dict(self) -> Dict[str, object]:
        return {
            "tenant_slug": self.tenant_slug,
            "product_ids": self.product_ids,
            "total_items": self.total_items,
        }
