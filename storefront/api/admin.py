"""
Admin API endpoints
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.database import get_db
from storefront.schemas.order import OrderListResponse
from storefront.schemas.product import ProductCreate, ProductUpdate, ProductEnvelope
from storefront.services.order_service import OrderService
from storefront.services.payment_gateway import StripeGateway, get_payment_gateway
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/api/admin", tags=["admin"])


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    """Dependency to get ProductService instance"""
    return ProductService(db)


def get_order_service(
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway)
) -> OrderService:
    """Dependency to get OrderService instance"""
    return OrderService(db, gateway)


@router.get("/orders", response_model=OrderListResponse, summary="Get recent orders")
def get_orders(service: OrderService = Depends(get_order_service)):
    """
    Retrieve the most recent orders, newest first
    """
    return service.get_recent_orders(limit=settings.ADMIN_ORDERS_LIMIT)


@router.post(
    "/products",
    response_model=ProductEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create product"
)
def create_product(
    product_data: ProductCreate,
    service: ProductService = Depends(get_product_service)
):
    """
    Create a new product
    
    - **name**: Product name (required)
    - **description**: Product description (optional)
    - **price**: Product price (required, non-negative)
    - **image_url**: Product image URL (optional)
    - **inventory**: Stock quantity (optional, null for unlimited)
    - **active**: Whether the product is for sale (default: true)
    """
    return ProductEnvelope(product=service.create_product(product_data))


@router.put("/products/{product_id}", response_model=ProductEnvelope, summary="Update product")
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    service: ProductService = Depends(get_product_service)
):
    """
    Update an existing product
    
    All fields are optional. Only provided fields will be updated.
    
    - **product_id**: Product ID
    """
    return ProductEnvelope(product=service.update_product(product_id, product_data))


@router.delete("/products/{product_id}", response_model=ProductEnvelope, summary="Deactivate product")
def deactivate_product(
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    """
    Deactivate a product
    
    Products are never removed so historical orders keep their reference.
    
    - **product_id**: Product ID
    """
    return ProductEnvelope(product=service.deactivate_product(product_id))
