from sqlalchemy import Column, DateTime, JSON, Numeric, String
from .base import Base, utcnow


class Order(Base):
    __tablename__ = "order"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=False, index=True)
    items = Column(JSON, nullable=False)
    shipping_info = Column(JSON, nullable=False)
    payment_method = Column(String(32), nullable=False)
    payment_info = Column(JSON, nullable=True)
    subtotal = Column(Numeric(12, 2), nullable=False)
    shipping = Column(Numeric(12, 2), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    status = Column(String(32), nullable=False)
    payment_status = Column(String(32), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    request_id = Column(String(128), nullable=True, unique=True)
