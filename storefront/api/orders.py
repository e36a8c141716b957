"""
Order API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.database import get_db
from storefront.schemas.order import OrderEnvelope
from storefront.services.order_service import OrderService
from storefront.services.payment_gateway import StripeGateway, get_payment_gateway

router = APIRouter(prefix="/api/order", tags=["orders"])


def get_order_service(
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway)
) -> OrderService:
    """Dependency to get OrderService instance"""
    return OrderService(db, gateway)


@router.get("/{session_id}", response_model=OrderEnvelope, summary="Get order by checkout session")
def get_order(
    session_id: str,
    service: OrderService = Depends(get_order_service)
):
    """
    Retrieve the order for a checkout session
    
    Falls back to the live Stripe session when the webhook has not been
    processed yet; such orders have `persisted: false` and no `id`.
    
    - **session_id**: Stripe checkout session ID
    """
    return OrderEnvelope(order=service.get_order(session_id))
