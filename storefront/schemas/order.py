"""
Pydantic schemas for orders and the cart snapshot stored in Stripe metadata
"""
import json
from pydantic import BaseModel, Field, ConfigDict, ValidationError
from typing import Any, Optional
from datetime import datetime

CART_SNAPSHOT_VERSION = "1"

# Stripe caps metadata at 50 keys with values of at most 500 characters
METADATA_VALUE_LIMIT = 500
MAX_CART_CHUNKS = 49


class CartLine(BaseModel):
    """One {productId, quantity} pair as sent by the client"""
    product_id: int = Field(..., alias="productId", gt=0)
    quantity: int = Field(..., gt=0)
    
    model_config = ConfigDict(populate_by_name=True)


class CartSnapshot(BaseModel):
    """
    Cart snapshot round-tripped through checkout session metadata

    Stripe metadata values are short strings, so the lines are serialized as
    compact JSON and split across ``cart_0``, ``cart_1``, ... with the schema
    version under ``cart_version``. A single ``cart`` key is also accepted
    when reading.
    """
    version: str = CART_SNAPSHOT_VERSION
    lines: list[CartLine]

    def to_metadata(self) -> dict:
        """
        Raises:
            ValueError: If the cart does not fit in session metadata
        """
        lines = [line.model_dump(by_alias=True) for line in self.lines]
        raw = json.dumps(lines, separators=(",", ":"))
        chunks = [
            raw[start:start + METADATA_VALUE_LIMIT]
            for start in range(0, len(raw), METADATA_VALUE_LIMIT)
        ]
        if len(chunks) > MAX_CART_CHUNKS:
            raise ValueError(f"Cart snapshot needs {len(chunks)} metadata keys")

        metadata = {f"cart_{i}": chunk for i, chunk in enumerate(chunks)}
        metadata["cart_version"] = self.version
        return metadata

    @classmethod
    def from_metadata(cls, metadata: Optional[dict]) -> "CartSnapshot":
        """
        Parse a snapshot out of session metadata

        Raises:
            ValueError: If the cart is missing, malformed or of an unknown version
        """
        metadata = metadata or {}
        version = metadata.get("cart_version", CART_SNAPSHOT_VERSION)
        if version != CART_SNAPSHOT_VERSION:
            raise ValueError(f"Unsupported cart snapshot version: {version}")

        if "cart_0" in metadata:
            chunks = []
            while f"cart_{len(chunks)}" in metadata:
                chunks.append(metadata[f"cart_{len(chunks)}"])
            raw = "".join(chunks)
        else:
            raw = metadata.get("cart")
        if not raw:
            raise ValueError("Session metadata has no cart")
        
        try:
            return cls(version=version, lines=json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            raise ValueError(f"Malformed cart snapshot: {e}") from e
    
    def to_items(self) -> list[dict]:
        """Snapshot as stored in orders.items"""
        return [line.model_dump(by_alias=True) for line in self.lines]


class OrderResponse(BaseModel):
    """Schema for order response, persisted or synthesized from Stripe"""
    id: Optional[int] = None
    stripe_session_id: str
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    amount: float
    status: str
    shipping_address: Optional[dict[str, Any]] = None
    items: list[dict[str, Any]] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    persisted: bool = True
    
    model_config = ConfigDict(from_attributes=True)


class OrderEnvelope(BaseModel):
    """Single order response"""
    order: OrderResponse


class OrderListResponse(BaseModel):
    """Schema for list of orders response"""
    orders: list[OrderResponse]
