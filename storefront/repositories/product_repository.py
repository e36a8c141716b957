"""
Product Repository - Data Access Layer
"""
from typing import Iterable, List, Optional
from sqlalchemy import desc, update
from sqlalchemy.orm import Session

from storefront.models.product import Product
from storefront.schemas.product import ProductCreate, ProductUpdate


class ProductRepository:
    """Repository for Product CRUD operations"""
    
    def __init__(self, db: Session):
        self.db = db
    
    def get_active(self) -> List[Product]:
        """Get active products, newest first"""
        return self.db.query(Product).filter(
            Product.active.is_(True)
        ).order_by(desc(Product.created_at), desc(Product.id)).all()
    
    def get_by_id(self, product_id: int) -> Optional[Product]:
        """Get product by ID"""
        return self.db.query(Product).filter(Product.id == product_id).first()
    
    def get_by_ids(self, product_ids: Iterable[int]) -> List[Product]:
        """Get all products matching the given IDs in a single query"""
        ids = set(product_ids)
        if not ids:
            return []
        return self.db.query(Product).filter(Product.id.in_(ids)).all()
    
    def create(self, product_data: ProductCreate) -> Product:
        """Create new product"""
        product = Product(**product_data.model_dump())
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product
    
    def update(self, product_id: int, product_data: ProductUpdate) -> Optional[Product]:
        """Update existing product"""
        product = self.get_by_id(product_id)
        if not product:
            return None
        
        # Update only provided fields
        update_data = product_data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(product, field, value)
        
        self.db.commit()
        self.db.refresh(product)
        return product
    
    def deactivate(self, product_id: int) -> Optional[Product]:
        """Soft-delete a product so past orders keep their reference"""
        product = self.get_by_id(product_id)
        if not product:
            return None
        
        product.active = False
        self.db.commit()
        self.db.refresh(product)
        return product
    
    def decrement_inventory(self, product_id: int, quantity: int) -> bool:
        """
        Subtract quantity from a product's finite inventory

        The availability check and the decrement happen in one conditional
        UPDATE, so stock never goes negative.

        Args:
            product_id: Product ID
            quantity: Quantity to subtract

        Returns:
            True if a row was updated, False if the product is missing, has
            unlimited inventory or not enough stock left
        """
        result = self.db.execute(
            update(Product)
            .where(
                Product.id == product_id,
                Product.inventory.is_not(None),
                Product.inventory >= quantity,
            )
            .values(inventory=Product.inventory - quantity)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount == 1
