import hashlib
import hmac
import json
import time
from unittest.mock import patch

import pytest
import stripe

from marketplace.core.config import StripeConfig
from marketplace.core.exceptions import ExternalServiceError, WebhookSignatureError
from marketplace.integrations import StripeGateway

SECRET = "whsec_test_secret"


def sign(payload: bytes, secret: str = SECRET, timestamp=None) -> str:
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload.decode('utf-8')}".encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


@pytest.fixture
def real_gateway():
    return StripeGateway(StripeConfig(secret_key="sk_test_123", webhook_secret=SECRET))


def test_construct_event_accepts_valid_signature(real_gateway):
    payload = json.dumps({
        "id": "evt_1", "object": "event", "type": "account.updated",
        "data": {"object": {"id": "acct_1", "details_submitted": True}},
    }).encode("utf-8")

    event = real_gateway.construct_event(payload, sign(payload))

    assert event["type"] == "account.updated"
    assert event["data"]["object"]["details_submitted"] is True


def test_construct_event_rejects_wrong_secret(real_gateway):
    payload = b'{"id": "evt_1", "object": "event"}'

    with pytest.raises(WebhookSignatureError) as exc_info:
        real_gateway.construct_event(payload, sign(payload, secret="whsec_other"))

    assert exc_info.value.status_code == 400
    assert exc_info.value.message.startswith("Webhook Error: ")


def test_construct_event_rejects_invalid_json(real_gateway):
    payload = b"not json"

    with pytest.raises(WebhookSignatureError):
        real_gateway.construct_event(payload, sign(payload))


def test_retrieve_checkout_session_expands_products(real_gateway):
    with patch("stripe.checkout.Session.retrieve") as retrieve:
        real_gateway.retrieve_checkout_session("cs_1", stripe_account="acct_1")

    retrieve.assert_called_once_with(
        "cs_1", expand=["line_items.data.price.product"], stripe_account="acct_1"
    )


def test_create_checkout_session_wraps_stripe_errors(real_gateway):
    with patch("stripe.checkout.Session.create", side_effect=stripe.StripeError("boom")):
        with pytest.raises(ExternalServiceError) as exc_info:
            real_gateway.create_checkout_session(
                line_items=[], metadata={}, success_url="s", cancel_url="c",
                stripe_account="acct_1", application_fee_amount=0,
            )

    assert exc_info.value.status_code == 503
