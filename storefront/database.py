"""
Database engine, session factory and bootstrap
"""
import logging
from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.config import settings

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    # SQLite is only used for local runs and tests; share one in-memory db across threads
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options
    return {"pool_pre_ping": True}


# Create the SQLAlchemy engine.
engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# Create a configured "Session" class for database interactions.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for declarative ORM models.
Base = declarative_base()


SAMPLE_PRODUCTS = [
    {
        "name": "Water Blob - Small",
        "description": "Perfect for individual use. Compact and portable.",
        "price": Decimal("29.99"),
        "image_url": "https://via.placeholder.com/400x400",
        "inventory": 50,
    },
    {
        "name": "Water Blob - Medium",
        "description": "Great for families. Larger capacity and durability.",
        "price": Decimal("49.99"),
        "image_url": "https://via.placeholder.com/400x400",
        "inventory": 30,
    },
    {
        "name": "Water Blob - Large",
        "description": "Commercial grade. Maximum capacity and performance.",
        "price": Decimal("89.99"),
        "image_url": "https://via.placeholder.com/400x400",
        "inventory": 15,
    },
    {
        "name": "Water Blob Accessories Pack",
        "description": "Everything you need to maintain your Water Blob.",
        "price": Decimal("19.99"),
        "image_url": "https://via.placeholder.com/400x400",
        "inventory": 100,
    },
]


def get_db():
    """FastAPI dependency to get a DB session for a single request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def seed_sample_products(db) -> int:
    """Insert the sample catalog if the products table is empty"""
    from storefront.models.product import Product

    if db.query(Product).count() > 0:
        return 0
    
    db.add_all([Product(**fields) for fields in SAMPLE_PRODUCTS])
    db.commit()
    return len(SAMPLE_PRODUCTS)


def init_db(bind=None, seed: bool = None):
    """Create tables and optionally seed the sample catalog"""
    # Register models on the metadata
    from storefront.models import order, product  # noqa: F401

    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    
    if seed is None:
        seed = settings.SEED_SAMPLE_PRODUCTS
    if not seed:
        return
    
    db = sessionmaker(bind=bind)()
    try:
        inserted = seed_sample_products(db)
        if inserted:
            logger.info("Seeded %d sample products", inserted)
    finally:
        db.close()
