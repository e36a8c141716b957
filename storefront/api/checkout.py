"""
Checkout API endpoint
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.database import get_db
from storefront.schemas.checkout import CheckoutRequest, CheckoutSessionResponse
from storefront.services.checkout_service import CheckoutService
from storefront.services.payment_gateway import StripeGateway, get_payment_gateway

router = APIRouter(prefix="/api", tags=["checkout"])


def get_checkout_service(
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway)
) -> CheckoutService:
    """Dependency to get CheckoutService instance"""
    return CheckoutService(db, gateway, settings)


@router.post(
    "/create-checkout-session",
    response_model=CheckoutSessionResponse,
    summary="Create Stripe checkout session"
)
def create_checkout_session(
    request: CheckoutRequest,
    service: CheckoutService = Depends(get_checkout_service)
):
    """
    Create a hosted checkout session for a cart
    
    Process:
    1. Validate every product exists, is active and has enough stock
    2. Price line items from the catalog (client prices are ignored)
    3. Create the Stripe session with the cart snapshot in metadata
    
    - **items**: List of {productId, quantity}
    """
    return service.create_session(request.items)
