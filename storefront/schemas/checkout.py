"""
Pydantic schemas for checkout session creation
"""
from pydantic import BaseModel, Field, ConfigDict

from storefront.schemas.order import CartLine


class CheckoutRequest(BaseModel):
    """Cart submitted by the client; prices are never accepted from it"""
    items: list[CartLine] = Field(default_factory=list)


class CheckoutSessionResponse(BaseModel):
    """Hosted checkout session to redirect the customer to"""
    session_id: str = Field(..., alias="sessionId")
    url: str
    
    model_config = ConfigDict(populate_by_name=True)
