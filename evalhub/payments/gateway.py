"""Thin wrapper over the Stripe SDK so the rest of the app never touches it directly."""
import json
import logging

import stripe

from evalhub.shared.config import settings

logger = logging.getLogger(__name__)

# seconds a signed webhook stays valid
WEBHOOK_TOLERANCE = 300

class PaymentGatewayError(Exception):
    pass

class InvalidSignature(PaymentGatewayError):
    pass

def _configure():
    if not settings.STRIPE_SECRET_KEY:
        raise PaymentGatewayError("Stripe not configured")
    stripe.api_key = settings.STRIPE_SECRET_KEY

def create_payment_intent(amount: int, currency: str, metadata: dict) -> dict:
    _configure()
    try:
        intent = stripe.PaymentIntent.create(
            amount=amount,
            currency=currency,
            metadata=metadata,
            automatic_payment_methods={"enabled": True},
        )
    except stripe.StripeError as e:
        logger.error("stripe payment intent failed: %s", e.user_message or e)
        raise PaymentGatewayError(str(e)) from e
    return {"id": intent.id, "client_secret": intent.client_secret, "amount": amount}

def verify_webhook(payload: bytes, sig_header: str) -> dict:
    """Check the Stripe-Signature header and return the decoded event."""
    if not settings.STRIPE_WEBHOOK_SECRET:
        raise PaymentGatewayError("Stripe webhook secret not configured")
    body = payload.decode("utf-8")
    try:
        stripe.WebhookSignature.verify_header(body, sig_header, settings.STRIPE_WEBHOOK_SECRET, WEBHOOK_TOLERANCE)
    except stripe.SignatureVerificationError as e:
        raise InvalidSignature(str(e)) from e
    try:
        event = json.loads(body)
    except ValueError as e:
        raise InvalidSignature("payload is not JSON") from e
    if not isinstance(event, dict) or "type" not in event:
        raise InvalidSignature("payload is not a Stripe event")
    return event
