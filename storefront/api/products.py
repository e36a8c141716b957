"""
Product API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.database import get_db
from storefront.services.product_service import ProductService
from storefront.schemas.product import ProductEnvelope, ProductListResponse

router = APIRouter(prefix="/api/products", tags=["products"])


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    """Dependency to get ProductService instance"""
    return ProductService(db)


@router.get("", response_model=ProductListResponse, summary="Get active products")
def get_products(service: ProductService = Depends(get_product_service)):
    """
    Retrieve all active products, newest first
    """
    return service.list_active()


@router.get("/{product_id}", response_model=ProductEnvelope, summary="Get product by ID")
def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    """
    Retrieve a specific product by ID
    
    - **product_id**: Product ID
    """
    return ProductEnvelope(product=service.get_product(product_id))
