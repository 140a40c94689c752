import logging

from farmdirect.models.user import User, FarmerProfile
from farmdirect.models.product import Product, ProductPhoto
from farmdirect.models.certification import Certification
from farmdirect.models.order import Order, OrderItem
from farmdirect.db.session import engine, Base

logger = logging.getLogger(__name__)


def init_db(bind=None):
    # Create all tables
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ready")
