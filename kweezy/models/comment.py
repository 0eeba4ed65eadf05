"""
Segment comment model
"""
from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, func
from sqlalchemy.orm import relationship
from kweezy.db.database import Base, BigInt


class Comment(Base):
    __tablename__ = "comments"

    id = Column(BigInt, primary_key=True, autoincrement=True)
    segment_id = Column(BigInt, ForeignKey("chapter_content_segments.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(BigInt, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    parent_comment_id = Column(BigInt, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True)
    comment_text = Column(String(1000), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", lazy="joined")
