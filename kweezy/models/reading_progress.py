"""
Per-user novel reading progress model
"""
from sqlalchemy import Column, Float, TIMESTAMP, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from kweezy.db.database import Base, BigInt


class UserNovelProgress(Base):
    __tablename__ = "user_novel_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "novel_id", name="uq_progress_user_novel"),
    )

    id = Column(BigInt, primary_key=True, autoincrement=True)
    user_id = Column(BigInt, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    novel_id = Column(BigInt, ForeignKey("novels.id", ondelete="CASCADE"), nullable=False)
    last_read_chapter_id = Column(BigInt, ForeignKey("chapters.id", ondelete="CASCADE"), nullable=False)
    last_read_scroll_y = Column(Float, nullable=False, default=0.0)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    chapter = relationship("Chapter", lazy="joined")
