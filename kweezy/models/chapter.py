"""
Chapter model
"""
from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey, UniqueConstraint, func
from kweezy.db.database import Base, BigInt


class Chapter(Base):
    __tablename__ = "chapters"
    __table_args__ = (
        UniqueConstraint("novel_id", "chapter_number", name="uq_chapter_novel_number"),
    )

    id = Column(BigInt, primary_key=True, autoincrement=True)
    novel_id = Column(BigInt, ForeignKey("novels.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=True)
    chapter_number = Column(Integer, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
