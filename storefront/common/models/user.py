from sqlalchemy import Column, DateTime, String
from .base import Base, utcnow


class User(Base):
    __tablename__ = "user"

    id = Column(String(36), primary_key=True)
    username = Column(String(128), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(16), nullable=False, default="user")
    first_name = Column(String(128), nullable=True)
    last_name = Column(String(128), nullable=True)
    phone = Column(String(64), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class RevokedToken(Base):
    __tablename__ = "revoked_token"

    jti = Column(String(64), primary_key=True)
    revoked_at = Column(DateTime, nullable=False, default=utcnow)
