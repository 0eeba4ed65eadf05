"""
Chapter content segment model
"""
from sqlalchemy import Column, Integer, String, Text, ForeignKey, UniqueConstraint
from kweezy.db.database import Base, BigInt


class ChapterContentSegment(Base):
    __tablename__ = "chapter_content_segments"
    __table_args__ = (
        UniqueConstraint("chapter_id", "segment_index", name="uq_segment_chapter_index"),
    )

    id = Column(BigInt, primary_key=True, autoincrement=True)
    chapter_id = Column(BigInt, ForeignKey("chapters.id", ondelete="CASCADE"), nullable=False, index=True)
    segment_index = Column(Integer, nullable=False)
    segment_type = Column(String(50), nullable=False, default="paragraph")
    text_content = Column(Text, nullable=False)
