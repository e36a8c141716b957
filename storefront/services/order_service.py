"""
Order Service - order lookup and admin listing
"""
import logging
from decimal import Decimal
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.exceptions import InternalFailureError
from storefront.repositories.order_repository import OrderRepository
from storefront.schemas.order import OrderResponse, OrderListResponse
from storefront.services.payment_gateway import StripeGateway

logger = logging.getLogger(__name__)


class OrderService:
    """Service layer for reading orders"""
    
    def __init__(self, db: Session, gateway: StripeGateway):
        self.repository = OrderRepository(db)
        self.gateway = gateway
    
    def get_order(self, session_id: str) -> OrderResponse:
        """
        Get order by checkout session ID
        
        The customer is redirected back before the webhook may have been
        processed, so a missing row falls back to the live Stripe session.
        The fallback view is not persisted and has no order ID.
        
        Raises:
            NotFoundError: If neither the database nor Stripe knows the session
            InternalFailureError: Stripe fault during fallback
        """
        try:
            order = self.repository.get_by_session_id(session_id)
        except SQLAlchemyError as e:
            logger.error("Error fetching order %s: %s", session_id, e)
            order = None
        
        if order:
            return OrderResponse.model_validate(order)
        
        logger.info("Order for session %s not recorded yet, asking Stripe", session_id)
        session = self.gateway.retrieve_session(session_id)
        return OrderResponse(
            id=None,
            stripe_session_id=session["id"],
            customer_email=session["customer_email"],
            customer_name=session["customer_name"],
            amount=Decimal(session["amount_total"]) / 100,
            status=session["payment_status"],
            persisted=False,
        )
    
    def get_recent_orders(self, limit: int = 100) -> OrderListResponse:
        """Get the most recent orders"""
        try:
            orders = self.repository.get_recent(limit=limit)
        except SQLAlchemyError as e:
            logger.error("Error fetching orders: %s", e)
            raise InternalFailureError("Failed to fetch orders") from e
        
        return OrderListResponse(
            orders=[OrderResponse.model_validate(o) for o in orders]
        )
