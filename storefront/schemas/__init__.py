"""
Schemas package
"""
from storefront.schemas.product import (
    ProductBase,
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductEnvelope,
    ProductListResponse
)
from storefront.schemas.order import (
    CartLine,
    CartSnapshot,
    OrderResponse,
    OrderEnvelope,
    OrderListResponse
)
from storefront.schemas.checkout import CheckoutRequest, CheckoutSessionResponse

__all__ = [
    "ProductBase",
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "ProductEnvelope",
    "ProductListResponse",
    "CartLine",
    "CartSnapshot",
    "OrderResponse",
    "OrderEnvelope",
    "OrderListResponse",
    "CheckoutRequest",
    "CheckoutSessionResponse"
]
