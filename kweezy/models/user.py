"""
User model
"""
from sqlalchemy import Column, String, TIMESTAMP, func
from kweezy.db.database import Base, BigInt


class User(Base):
    __tablename__ = "users"

    id = Column(BigInt, primary_key=True, autoincrement=True)
    username = Column(String(64), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user")  # user | admin
    username_color = Column(String(9), nullable=True)  # hex color, e.g. #818CF8
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
