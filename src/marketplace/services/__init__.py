from marketplace.services.category_service import CategoryService
from marketplace.services.checkout_service import CheckoutService
from marketplace.services.product_service import ProductService
from marketplace.services.webhook_service import StripeWebhookService

__all__ = ["CategoryService", "CheckoutService", "ProductService", "StripeWebhookService"]
