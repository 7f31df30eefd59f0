"""Thin wrapper around the Stripe SDK calls the marketplace makes."""

import logging
from typing import Any, Dict, List, Optional

import stripe

from marketplace.core.config import StripeConfig
from marketplace.core.exceptions import ExternalServiceError, WebhookSignatureError

logger = logging.getLogger(__name__)


class StripeGateway:
    """
    Stripe + Stripe Connect operations.

    Calls that act on a seller's connected account take `stripe_account`,
    which the SDK sends as the Stripe-Account header.
    """

    def __init__(self, config: StripeConfig):
        self._config = config
        stripe.api_key = config.secret_key
        logger.info(f"Stripe gateway initialized (live={config.secret_key.startswith('sk_live')})")

    @property
    def webhook_secret(self) -> str:
        return self._config.webhook_secret

    def construct_event(self, payload: bytes, signature: str) -> stripe.Event:
        """
        Verify a webhook payload against STRIPE_WEBHOOK_SECRET and parse it.

        Raises:
            WebhookSignatureError: bad signature, stale timestamp or a body
            that is not valid JSON.
        """
        try:
            return stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as e:
            logger.warning(f"Webhook signature verification failed: {e}")
            raise WebhookSignatureError(str(e) or e.__class__.__name__)

    def retrieve_checkout_session(
        self,
        session_id: str,
        stripe_account: Optional[str] = None,
    ) -> stripe.checkout.Session:
        """Fetch a checkout session with its line items and their products expanded."""
        params: Dict[str, Any] = {"expand": ["line_items.data.price.product"]}
        if stripe_account:
            params["stripe_account"] = stripe_account
        return stripe.checkout.Session.retrieve(session_id, **params)

    def create_checkout_session(
        self,
        line_items: List[Dict[str, Any]],
        metadata: Dict[str, str],
        success_url: str,
        cancel_url: str,
        stripe_account: str,
        application_fee_amount: int,
        customer_email: Optional[str] = None,
    ) -> stripe.checkout.Session:
        try:
            return stripe.checkout.Session.create(
                mode="payment",
                line_items=line_items,
                metadata=metadata,
                success_url=success_url,
                cancel_url=cancel_url,
                customer_email=customer_email,
                invoice_creation={"enabled": True},
                payment_intent_data={"application_fee_amount": application_fee_amount},
                stripe_account=stripe_account,
            )
        except stripe.StripeError as e:
            logger.error(f"Checkout session creation failed on {stripe_account}: {e}")
            raise ExternalServiceError("stripe", "Failed to create checkout session")

    def create_account(self) -> stripe.Account:
        """Create a connected account for a new tenant."""
        try:
            account = stripe.Account.create()
        except stripe.StripeError as e:
            logger.error(f"Connected account creation failed: {e}")
            raise ExternalServiceError("stripe", "Failed to create Stripe account")
        logger.info(f"Created Stripe connected account {account.id}")
        return account
