"""
Storefront error taxonomy

Every error carries the HTTP status it maps to; handlers in main.py turn
them into ``{"error": ...}`` responses.
"""


class StorefrontError(Exception):
    """Base exception for storefront errors"""
    status_code = 500
    
    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class InvalidRequestError(StorefrontError):
    """Malformed cart, missing fields or unavailable products"""
    status_code = 400


class NotFoundError(StorefrontError):
    """Unknown product or order"""
    status_code = 404


class WebhookSignatureError(StorefrontError):
    """Webhook payload failed signature verification"""
    status_code = 400


class InternalFailureError(StorefrontError):
    """Storage or payment provider fault. The message is always generic."""
    status_code = 500
