"""
Services package
"""
from storefront.services.checkout_service import CheckoutService
from storefront.services.order_service import OrderService
from storefront.services.payment_gateway import StripeGateway, get_payment_gateway
from storefront.services.product_service import ProductService
from storefront.services.webhook_service import WebhookService

__all__ = [
    "CheckoutService",
    "OrderService",
    "ProductService",
    "StripeGateway",
    "WebhookService",
    "get_payment_gateway"
]
