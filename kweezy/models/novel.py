"""
Novel model
"""
from sqlalchemy import Column, String, Text, TIMESTAMP, func
from kweezy.db.database import Base, BigInt


class Novel(Base):
    __tablename__ = "novels"

    id = Column(BigInt, primary_key=True, autoincrement=True)
    title = Column(String(255), unique=True, nullable=False)
    author_name = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    cover_image_url = Column(String(512), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
