from sqlalchemy import Column, DateTime, Integer, Numeric, String
from .base import Base, utcnow


class CartItem(Base):
    __tablename__ = "cart_item"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    added_at = Column(DateTime, nullable=False, default=utcnow)
