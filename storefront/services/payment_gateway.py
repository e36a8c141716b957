"""
Stripe gateway: checkout sessions and webhook verification
"""
import json
import logging
from functools import lru_cache
from typing import Dict, List, Optional

import stripe

from storefront.config import settings
from storefront.exceptions import InternalFailureError, NotFoundError, WebhookSignatureError

logger = logging.getLogger(__name__)


def _field(obj, name: str, default=None):
    """Read a field from a Stripe object or a plain dict"""
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


class StripeGateway:
    """Thin wrapper around StripeClient used by the checkout and order services"""

    def __init__(self, client, webhook_secret: str):
        self.client = client
        self.webhook_secret = webhook_secret

    def create_checkout_session(
        self,
        line_items: List[Dict],
        metadata: Dict[str, str],
        success_url: str,
        cancel_url: str,
        allowed_countries: Optional[List[str]] = None
    ) -> Dict[str, str]:
        """
        Create a hosted Checkout session

        Returns:
            {"id": ..., "url": ...}

        Raises:
            InternalFailureError: If Stripe rejects the request or is unreachable
        """
        params = {
            "payment_method_types": ["card"],
            "mode": "payment",
            "line_items": line_items,
            "metadata": metadata,
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        if allowed_countries:
            params["shipping_address_collection"] = {"allowed_countries": allowed_countries}

        try:
            session = self.client.v1.checkout.sessions.create(params=params)
        except stripe.StripeError as e:
            logger.error("Stripe checkout session creation failed: %s", e)
            raise InternalFailureError("Failed to create checkout session") from e

        return {"id": session.id, "url": session.url}

    def retrieve_session(self, session_id: str) -> Dict:
        """
        Fetch a Checkout session and flatten the fields orders care about

        Raises:
            NotFoundError: If Stripe has no such session
            InternalFailureError: On any other Stripe fault
        """
        try:
            session = self.client.v1.checkout.sessions.retrieve(session_id)
        except stripe.InvalidRequestError as e:
            if e.http_status == 404 or e.code == "resource_missing":
                raise NotFoundError(f"Order {session_id} not found") from e
            logger.error("Stripe rejected session lookup %s: %s", session_id, e)
            raise InternalFailureError("Failed to retrieve order") from e
        except stripe.StripeError as e:
            logger.error("Stripe session lookup %s failed: %s", session_id, e)
            raise InternalFailureError("Failed to retrieve order") from e

        details = _field(session, "customer_details")
        return {
            "id": _field(session, "id", session_id),
            "customer_email": _field(details, "email") or _field(session, "customer_email"),
            "customer_name": _field(details, "name"),
            "amount_total": _field(session, "amount_total") or 0,
            "payment_status": _field(session, "payment_status") or "unknown",
        }

    def construct_event(self, payload: bytes, signature_header: Optional[str]) -> Dict:
        """
        Verify a webhook delivery and return the event as a plain dict

        The signature covers the raw body, so the payload must be passed
        exactly as received.

        Raises:
            WebhookSignatureError: If the signature, timestamp or payload is invalid
        """
        try:
            stripe.Webhook.construct_event(payload, signature_header, self.webhook_secret)
        except stripe.SignatureVerificationError as e:
            raise WebhookSignatureError(f"Webhook Error: {e.user_message or e}") from e
        except ValueError as e:
            raise WebhookSignatureError("Webhook Error: invalid payload") from e

        return json.loads(payload)


def build_stripe_client(api_key: str, timeout: float):
    """StripeClient over httpx; retries are left to the caller"""
    return stripe.StripeClient(
        api_key,
        http_client=stripe.HTTPXClient(timeout=timeout, allow_sync_methods=True),
        max_network_retries=0,
    )


@lru_cache(maxsize=1)
def get_payment_gateway() -> StripeGateway:
    """Dependency to get the process-wide StripeGateway"""
    client = build_stripe_client(settings.STRIPE_SECRET_KEY, settings.STRIPE_TIMEOUT)
    return StripeGateway(client, settings.STRIPE_WEBHOOK_SECRET)
