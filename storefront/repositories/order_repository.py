"""
Order Repository - Data Access Layer
"""
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc

from storefront.models.order import Order


class OrderRepository:
    """Repository for Order persistence"""
    
    def __init__(self, db: Session):
        self.db = db
    
    def get_recent(self, limit: int = 100) -> List[Order]:
        """Get the most recent orders"""
        return self.db.query(Order).order_by(
            desc(Order.created_at), desc(Order.id)
        ).limit(limit).all()
    
    def get_by_session_id(self, session_id: str) -> Optional[Order]:
        """Get order by Stripe checkout session ID"""
        return self.db.query(Order).filter(
            Order.stripe_session_id == session_id
        ).first()
    
    def exists_for_session(self, session_id: str) -> bool:
        """Check whether the session was already recorded"""
        return self.get_by_session_id(session_id) is not None
    
    def create(self, order_data: dict) -> Order:
        """
        Create new order
        
        Args:
            order_data: Dictionary with order fields
        
        Returns:
            Created order
        
        Raises:
            IntegrityError: If an order for the session already exists
        """
        order = Order(**order_data)
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order
