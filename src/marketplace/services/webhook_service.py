from typing import Any, Dict, List, Optional
from marketplace.integrations.stripe_gateway import StripeGateway
from marketplace.repositories import OrderRepository, TenantRepository, UserRepository
from marketplace.core.exceptions import WebhookProcessingError
import logging

logger = logging.getLogger(__name__)

RECEIVED = {"message": "Received"}


def _field(obj: Any, *path: str) -> Any:
    """
    Walk nested keys of a Stripe object or plain dict.

    Returns None as soon as a key is missing, mirroring optional chaining on
    the event payload.
    """
    current = obj
    for key in path:
        if current is None:
            return None
        try:
            current = current[key]
        except (KeyError, TypeError, IndexError, AttributeError):
            return None
    return current


class StripeWebhookService:
    """
    Applies verified Stripe events to the marketplace data.

    Responsibilities:
    - Verify event signatures
    - Turn completed checkouts into orders
    - Track tenant onboarding through account updates
    """

    def __init__(
        self,
        gateway: StripeGateway,
        user_repository: UserRepository,
        tenant_repository: TenantRepository,
        order_repository: OrderRepository,
    ):
        self.gateway = gateway
        self.user_repo = user_repository
        self.tenant_repo = tenant_repository
        self.order_repo = order_repository
        self.handlers = {
            "checkout.session.completed": self.handle_checkout_session_completed,
            "account.updated": self.handle_account_updated,
        }

    def process(self, payload: bytes, signature: str) -> Dict[str, str]:
        """
        Verify and dispatch one webhook delivery.

        Signature failures propagate as WebhookSignatureError (400). Every
        failure after verification collapses into WebhookProcessingError
        (500) so Stripe retries the delivery.
        """
        event = self.gateway.construct_event(payload, signature)
        event_type = _field(event, "type")
        event_id = _field(event, "id")

        handler = self.handlers.get(event_type)
        if handler is None:
            logger.info(f"Acknowledging unhandled event {event_id} ({event_type})")
            return RECEIVED

        logger.info(f"Processing event {event_id} ({event_type})")
        try:
            handler(event)
        except WebhookProcessingError:
            raise
        except Exception as e:
            logger.exception(f"Webhook handler failed for event {event_id} ({event_type})")
            raise WebhookProcessingError(str(e), event_type)

        return RECEIVED

    def handle_checkout_session_completed(self, event: Any) -> List[int]:
        session_id = _field(event, "data", "object", "id")
        user_id = _field(event, "data", "object", "metadata", "userId")
        account_id = _field(event, "account")

        if not session_id or not user_id:
            raise WebhookProcessingError(
                "checkout.session.completed without session id or userId metadata",
                "checkout.session.completed",
            )

        user = self._find_user(user_id)
        if user is None:
            raise WebhookProcessingError(
                f"User {user_id} referenced by checkout session {session_id} does not exist",
                "checkout.session.completed",
            )

        session = self.gateway.retrieve_checkout_session(session_id, stripe_account=account_id)
        line_items = _field(session, "line_items", "data") or []

        orders = []
        for item in line_items:
            product = _field(item, "price", "product")
            # An unexpanded product is just its id string
            if isinstance(product, str):
                product = None
            product_id = _field(product, "metadata", "id")
            product_name = _field(product, "name")

            if not product_id or not product_name:
                logger.warning(f"Skipping line item without product id or name in session {session_id}")
                continue

            orders.append({
                "user_id": user["id"],
                "product_id": int(product_id),
                "name": product_name,
                "stripe_checkout_session_id": session_id,
                "stripe_account_id": account_id,
            })

        order_ids = self.order_repo.create_many(orders)
        logger.info(f"Checkout session {session_id} produced {len(order_ids)} order(s) for user {user['id']}")
        return order_ids

    def handle_account_updated(self, event: Any) -> int:
        # Connect events carry the account on the envelope; platform events
        # only have it as the object id
        account_id = _field(event, "account") or _field(event, "data", "object", "id")
        details_submitted = bool(_field(event, "data", "object", "details_submitted"))

        if not account_id:
            raise WebhookProcessingError("account.updated without account", "account.updated")

        return self.tenant_repo.set_details_submitted(account_id, details_submitted)

    def _find_user(self, user_id: Any) -> Optional[Dict[str, Any]]:
        try:
            return self.user_repo.find_by_id(int(user_id))
        except (TypeError, ValueError):
            logger.warning(f"Checkout metadata carries a malformed userId: {user_id!r}")
            return None
