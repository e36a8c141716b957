"""
Stripe webhook endpoint
"""
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from storefront.database import get_db
from storefront.services.payment_gateway import StripeGateway, get_payment_gateway
from storefront.services.webhook_service import WebhookService

router = APIRouter(prefix="/api", tags=["webhooks"])


def get_webhook_service(
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway)
) -> WebhookService:
    """Dependency to get WebhookService instance"""
    return WebhookService(db, gateway)


@router.post("/webhook", summary="Receive Stripe webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="stripe-signature"),
    service: WebhookService = Depends(get_webhook_service)
):
    """
    Receive Stripe events
    
    The raw body is verified against the `stripe-signature` header before
    anything is parsed. Returns 400 on a bad signature, otherwise
    `{"received": true}` even if recording the order failed.
    """
    payload = await request.body()
    return await run_in_threadpool(service.handle_webhook, payload, stripe_signature)
