"""
Checkout Service - turns a cart into a Stripe Checkout session
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.config import Settings
from storefront.exceptions import InternalFailureError, InvalidRequestError
from storefront.models.product import Product
from storefront.repositories.product_repository import ProductRepository
from storefront.schemas.order import CartLine, CartSnapshot
from storefront.schemas.checkout import CheckoutSessionResponse
from storefront.services.payment_gateway import StripeGateway

logger = logging.getLogger(__name__)


def to_minor_units(amount: Decimal) -> int:
    """Convert a currency amount to integer cents"""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def merge_cart_lines(items: List[CartLine]) -> List[CartLine]:
    """Collapse repeated lines for the same product, keeping first-seen order"""
    quantities: Dict[int, int] = {}
    for item in items:
        quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity
    return [CartLine(product_id=pid, quantity=qty) for pid, qty in quantities.items()]


class CheckoutService:
    """Validates carts against the catalog and opens payment sessions"""
    
    def __init__(self, db: Session, gateway: StripeGateway, settings: Settings):
        self.repository = ProductRepository(db)
        self.gateway = gateway
        self.settings = settings
    
    def create_session(self, items: List[CartLine]) -> CheckoutSessionResponse:
        """
        Create a checkout session for a cart
        
        Steps:
        1. Reject empty carts
        2. Load every referenced product in one query
        3. Validate each line (exists, active, enough stock)
        4. Build Stripe line items from server-side prices
        5. Create the session with the cart snapshot in metadata
        
        Any invalid line aborts the whole checkout before Stripe is called.
        
        Raises:
            InvalidRequestError: Empty cart, unknown/inactive product, insufficient stock
            InternalFailureError: Database or Stripe fault
        """
        if not items:
            raise InvalidRequestError("Cart is empty")
        
        lines = merge_cart_lines(items)
        
        try:
            products = self.repository.get_by_ids(line.product_id for line in lines)
        except SQLAlchemyError as e:
            logger.error("Error loading cart products: %s", e)
            raise InternalFailureError("Failed to create checkout session") from e
        
        by_id = {p.id: p for p in products}
        line_items = [self._line_item(line, by_id.get(line.product_id)) for line in lines]
        
        try:
            metadata = CartSnapshot(lines=lines).to_metadata()
        except ValueError as e:
            logger.warning("Cart with %d line(s) rejected: %s", len(lines), e)
            raise InvalidRequestError("Cart has too many items") from e

        frontend = self.settings.FRONTEND_URL.rstrip("/")
        session = self.gateway.create_checkout_session(
            line_items=line_items,
            metadata=metadata,
            success_url=f"{frontend}/success.html?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{frontend}/cart.html",
            allowed_countries=self.settings.SHIPPING_ALLOWED_COUNTRIES,
        )
        
        logger.info("Checkout session %s created for %d line(s)", session["id"], len(lines))
        return CheckoutSessionResponse(session_id=session["id"], url=session["url"])
    
    def _line_item(self, line: CartLine, product: Optional[Product]) -> Dict:
        """Validate one cart line and build its Stripe line item"""
        if product is None:
            raise InvalidRequestError(f"Product {line.product_id} not found")
        if not product.active:
            raise InvalidRequestError(f"Product {product.name} is unavailable")
        if product.inventory is not None and product.inventory < line.quantity:
            raise InvalidRequestError(f"Insufficient stock for {product.name}")
        
        product_data = {"name": product.name}
        if product.description:
            product_data["description"] = product.description
        if product.image_url:
            product_data["images"] = [product.image_url]
        
        return {
            "price_data": {
                "currency": self.settings.STRIPE_CURRENCY,
                "product_data": product_data,
                "unit_amount": to_minor_units(product.price),
            },
            "quantity": line.quantity,
        }
