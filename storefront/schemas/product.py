"""
Pydantic schemas for product request/response validation
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal


class ProductBase(BaseModel):
    """Base Product schema with common fields"""
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Unit price")
    image_url: Optional[str] = Field(None, description="Product image URL")
    inventory: Optional[int] = Field(None, ge=0, description="Stock quantity, null for unlimited")
    active: bool = Field(True, description="Whether the product can be purchased")


class ProductCreate(ProductBase):
    """Schema for creating a new product"""
    pass


class ProductUpdate(BaseModel):
    """Schema for updating a product (all fields optional)"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = None
    inventory: Optional[int] = Field(None, ge=0)
    active: Optional[bool] = None
    
    @field_validator("name", "price", "active")
    @classmethod
    def reject_null(cls, value, info):
        # Omit a field to leave it unchanged; only inventory may be cleared
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class ProductResponse(BaseModel):
    """Schema for product response"""
    id: int
    name: str
    description: Optional[str]
    price: float
    image_url: Optional[str]
    inventory: Optional[int]
    active: bool
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class ProductEnvelope(BaseModel):
    """Single product response"""
    product: ProductResponse


class ProductListResponse(BaseModel):
    """Schema for list of products response"""
    products: list[ProductResponse]
