from marketplace.integrations.stripe_gateway import StripeGateway

__all__ = ["StripeGateway"]
