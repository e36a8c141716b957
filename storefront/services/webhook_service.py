"""
Webhook Service - records paid orders from Stripe events
"""
import logging
from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.models.order import Order
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.schemas.order import CartSnapshot
from storefront.services.payment_gateway import StripeGateway

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"
ORDER_STATUS_PAID = "paid"


def _shipping_address(session: Dict) -> Optional[Dict]:
    """Shipping details moved between Stripe API versions; accept either shape"""
    shipping = session.get("shipping_details")
    if not shipping:
        shipping = (session.get("collected_information") or {}).get("shipping_details")
    if shipping:
        return shipping

    address = (session.get("customer_details") or {}).get("address")
    return {"address": address} if address else None


class WebhookService:
    """Sole writer of the order store"""

    def __init__(self, db: Session, gateway: StripeGateway):
        self.db = db
        self.gateway = gateway
        self.order_repository = OrderRepository(db)
        self.product_repository = ProductRepository(db)

    def handle_webhook(self, payload: bytes, signature: Optional[str]) -> Dict:
        """
        Process one webhook delivery

        Args:
            payload: Raw request body, exactly as received
            signature: Value of the Stripe-Signature header

        Returns:
            Acknowledgement for Stripe

        Raises:
            WebhookSignatureError: If verification fails; nothing is written
        """
        event = self.gateway.construct_event(payload, signature)
        event_id = event.get("id")
        event_type = event.get("type")

        logger.info("Received webhook event: %s (ID: %s)", event_type, event_id)

        if event_type == CHECKOUT_COMPLETED:
            session = (event.get("data") or {}).get("object") or {}
            try:
                self.process_completed_session(session)
            except SQLAlchemyError as e:
                # Signature was valid; Stripe must not keep retrying this delivery
                self.db.rollback()
                logger.error(
                    "Error recording order for session %s: %s", session.get("id"), e
                )
        else:
            logger.info("Ignoring webhook event type %s", event_type)

        return {"received": True}

    def process_completed_session(self, session: Dict) -> Optional[Order]:
        """
        Record the order for a completed checkout session

        Redeliveries of an already recorded session are skipped, and stock
        is only decremented for the delivery that inserted the order.

        Returns:
            Created order, or None if the session was already recorded
        """
        session_id = session.get("id")
        if not session_id:
            logger.error("Completed session event without session id")
            return None

        if self.order_repository.exists_for_session(session_id):
            logger.info("Session %s already recorded. Skipping.", session_id)
            return None

        try:
            snapshot = CartSnapshot.from_metadata(session.get("metadata"))
        except ValueError as e:
            logger.error("Session %s: %s", session_id, e)
            snapshot = CartSnapshot(lines=[])

        details = session.get("customer_details") or {}
        order_data = {
            "stripe_session_id": session_id,
            "customer_email": details.get("email") or session.get("customer_email") or "",
            "customer_name": details.get("name"),
            "amount": Decimal(session.get("amount_total") or 0) / 100,
            "status": ORDER_STATUS_PAID,
            "shipping_address": _shipping_address(session),
            "items": snapshot.to_items(),
        }

        try:
            order = self.order_repository.create(order_data)
        except IntegrityError:
            # Concurrent redelivery inserted the same session first
            self.db.rollback()
            logger.info("Session %s already recorded. Skipping.", session_id)
            return None

        logger.info(
            "✓ Order %s recorded for session %s: %s", order.id, session_id, order.amount
        )

        self._decrement_inventory(snapshot)
        return order

    def _decrement_inventory(self, snapshot: CartSnapshot):
        """Best-effort stock decrement; failures are logged, not raised"""
        products = {
            p.id: p for p in self.product_repository.get_by_ids(
                line.product_id for line in snapshot.lines
            )
        }

        for line in snapshot.lines:
            product = products.get(line.product_id)
            if product is None:
                logger.warning("Product %s from order no longer exists", line.product_id)
                continue
            if product.inventory is None:
                continue

            try:
                updated = self.product_repository.decrement_inventory(
                    line.product_id, line.quantity
                )
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error("Error updating inventory for product %s: %s", line.product_id, e)
                continue

            if not updated:
                logger.warning(
                    "Oversell: product %s has less than %d in stock",
                    line.product_id,
                    line.quantity,
                )
