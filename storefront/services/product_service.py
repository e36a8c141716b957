"""
Product Service - Business Logic Layer
"""
import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.exceptions import InternalFailureError, NotFoundError
from storefront.repositories.product_repository import ProductRepository
from storefront.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse
)

logger = logging.getLogger(__name__)


class ProductService:
    """Service layer for catalog reads and admin mutations"""
    
    def __init__(self, db: Session):
        self.db = db
        self.repository = ProductRepository(db)
    
    def list_active(self) -> ProductListResponse:
        """Get active products, newest first"""
        try:
            products = self.repository.get_active()
        except SQLAlchemyError as e:
            logger.error("Error fetching products: %s", e)
            raise InternalFailureError("Failed to fetch products") from e
        
        return ProductListResponse(
            products=[ProductResponse.model_validate(p) for p in products]
        )
    
    def get_product(self, product_id: int) -> ProductResponse:
        """
        Get product by ID
        
        Raises:
            NotFoundError: If no product has this ID
        """
        try:
            product = self.repository.get_by_id(product_id)
        except SQLAlchemyError as e:
            logger.error("Error fetching product %s: %s", product_id, e)
            raise InternalFailureError("Failed to fetch product") from e
        
        if not product:
            raise NotFoundError("Product not found")
        return ProductResponse.model_validate(product)
    
    def create_product(self, product_data: ProductCreate) -> ProductResponse:
        """Create new product"""
        try:
            product = self.repository.create(product_data)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Error creating product: %s", e)
            raise InternalFailureError("Failed to create product") from e
        
        logger.info("Product %s created: %s", product.id, product.name)
        return ProductResponse.model_validate(product)
    
    def update_product(self, product_id: int, product_data: ProductUpdate) -> ProductResponse:
        """Update existing product, only the provided fields"""
        try:
            product = self.repository.update(product_id, product_data)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Error updating product %s: %s", product_id, e)
            raise InternalFailureError("Failed to update product") from e
        
        if not product:
            raise NotFoundError("Product not found")
        return ProductResponse.model_validate(product)
    
    def deactivate_product(self, product_id: int) -> ProductResponse:
        """Soft-delete product"""
        try:
            product = self.repository.deactivate(product_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Error deactivating product %s: %s", product_id, e)
            raise InternalFailureError("Failed to deactivate product") from e
        
        if not product:
            raise NotFoundError("Product not found")
        logger.info("Product %s deactivated", product_id)
        return ProductResponse.model_validate(product)
