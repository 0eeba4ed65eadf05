"""
Segment reaction model
"""
from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, UniqueConstraint, func
from kweezy.db.database import Base, BigInt


class Reaction(Base):
    __tablename__ = "reactions"
    # a user holds at most one reaction of each type per segment
    __table_args__ = (
        UniqueConstraint("user_id", "segment_id", "reaction_type", name="uq_reaction_user_segment_type"),
    )

    id = Column(BigInt, primary_key=True, autoincrement=True)
    user_id = Column(BigInt, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    segment_id = Column(BigInt, ForeignKey("chapter_content_segments.id", ondelete="CASCADE"), nullable=False, index=True)
    reaction_type = Column(String(20), nullable=False)  # heart, fire, surprise, cry, angry
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
