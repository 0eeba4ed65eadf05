"""
Comment like model
"""
from sqlalchemy import Column, TIMESTAMP, ForeignKey, UniqueConstraint, func
from kweezy.db.database import Base, BigInt


class CommentLike(Base):
    __tablename__ = "comment_likes"
    # one like per user per comment
    __table_args__ = (
        UniqueConstraint("user_id", "comment_id", name="uq_comment_like_user_comment"),
    )

    id = Column(BigInt, primary_key=True, autoincrement=True)
    user_id = Column(BigInt, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    comment_id = Column(BigInt, ForeignKey("comments.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
