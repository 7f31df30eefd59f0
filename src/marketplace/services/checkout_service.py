from typing import Any, Dict, List
from marketplace.core.config import Config
from marketplace.core.exceptions import (
    BusinessLogicError, NotFoundError, UnauthorizedError, ValidationError
)
from marketplace.integrations.stripe_gateway import StripeGateway
from marketplace.repositories import TenantRepository, UserRepository
from marketplace.services.product_service import ProductService
from marketplace.utils.tenants import generate_tenant_url
import logging

logger = logging.getLogger(__name__)


class CheckoutService:
    """
    Creates Stripe Checkout Sessions for a tenant's cart

    Business Rules:
    - Only existing users can check out
    - The tenant must have finished Stripe onboarding
    - Every product must belong to the tenant
    - The platform keeps a percentage of the total as application fee
    """

    def __init__(
        self,
        gateway: StripeGateway,
        user_repository: UserRepository,
        tenant_repository: TenantRepository,
        product_service: ProductService,
        config: Config,
    ):
        self.gateway = gateway
        self.user_repo = user_repository
        self.tenant_repo = tenant_repository
        self.product_service = product_service
        self.config = config

    def create_session(self, user_id: int, tenant_slug: str, product_ids: List[str]) -> Dict[str, str]:
        user = self.user_repo.find_by_id(user_id)
        if user is None:
            raise UnauthorizedError()

        tenant = self.tenant_repo.get_by_slug(tenant_slug)
        if not tenant["stripe_details_submitted"]:
            raise BusinessLogicError(
                "Tenant not allowed to sell products",
                rule="tenant_must_complete_onboarding",
            )

        if not product_ids:
            raise ValidationError("Cart is empty", {"product_ids": ["At least one product is required."]})

        products = self.product_service.get_products_by_ids(tenant_slug, product_ids)
        account_id = tenant["stripe_account_id"]

        line_items = [self._line_item(product, account_id) for product in products]
        total_cents = sum(product["price_cents"] for product in products)
        application_fee = total_cents * self.config.stripe.platform_fee_percent // 100

        tenant_url = generate_tenant_url(tenant_slug, self.config)
        session = self.gateway.create_checkout_session(
            line_items=line_items,
            metadata={"userId": str(user["id"])},
            success_url=f"{tenant_url}/checkout?success=true",
            cancel_url=f"{tenant_url}/checkout?cancel=true",
            stripe_account=account_id,
            application_fee_amount=application_fee,
            customer_email=user["email"],
        )

        if not session.url:
            raise BusinessLogicError("Failed to create checkout session", rule="session_url_required")

        logger.info(
            f"Created checkout session {session.id} for user {user['id']} on tenant {tenant_slug} "
            f"({len(line_items)} item(s), total {total_cents}, fee {application_fee})"
        )
        return {"url": session.url}

    def _line_item(self, product: Dict[str, Any], account_id: str) -> Dict[str, Any]:
        return {
            "quantity": 1,
            "price_data": {
                "unit_amount": product["price_cents"],
                "currency": self.config.stripe.currency,
                "product_data": {
                    "name": product["name"],
                    "metadata": {
                        "stripeAccountId": account_id,
                        "id": str(product["id"]),
                        "name": product["name"],
                        "price": str(product["price_cents"]),
                    },
                },
            },
        }
