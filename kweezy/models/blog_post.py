"""
Blog post model
"""
from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey, func
from sqlalchemy.orm import relationship
from kweezy.db.database import Base, BigInt


class BlogPost(Base):
    __tablename__ = "blog_posts"

    id = Column(BigInt, primary_key=True, autoincrement=True)
    title = Column(String(255), unique=True, nullable=False)
    content = Column(Text, nullable=False)
    author_id = Column(BigInt, ForeignKey("users.id"), nullable=False)
    published_at = Column(TIMESTAMP(timezone=True), nullable=True)  # null = draft
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    author = relationship("User", lazy="joined")
