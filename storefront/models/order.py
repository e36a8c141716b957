"""
SQLAlchemy Order model
"""
from sqlalchemy import JSON, Column, DateTime, Index, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from storefront.database import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Order(Base):
    """Order database model, written only by the Stripe webhook"""
    
    __tablename__ = "orders"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    stripe_session_id = Column(String(255), unique=True, nullable=False, index=True)
    customer_email = Column(String(255), nullable=False, index=True)
    customer_name = Column(String(255), nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(50), nullable=False)
    shipping_address = Column(JSONType, nullable=True)
    items = Column(JSONType, nullable=False)  # [{productId, quantity}] snapshot, no FK
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    __table_args__ = (
        Index('idx_orders_created', created_at.desc()),
    )
    
    def __repr__(self):
        return f"<Order(id={self.id}, stripe_session_id='{self.stripe_session_id}', amount={self.amount}, status='{self.status}')>"
