import logging

from flask import Blueprint, jsonify, request

from marketplace.core.dependencies import get_service
from marketplace.services import StripeWebhookService

logger = logging.getLogger(__name__)

stripe_webhooks_bp = Blueprint("stripe_webhooks", __name__)


@stripe_webhooks_bp.route("/webhooks", methods=["POST"])
def receive_webhook():
    """Verify a Stripe delivery and apply it; the signature covers the raw body."""
    payload = request.get_data()
    signature = request.headers.get("Stripe-Signature", "")

    result = get_service(StripeWebhookService).process(payload, signature)
    return jsonify(result), 200
