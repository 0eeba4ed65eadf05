from .user import User
from .novel import Novel
from .chapter import Chapter
from .segment import ChapterContentSegment
from .comment import Comment
from .comment_like import CommentLike
from .reaction import Reaction
from .reading_progress import UserNovelProgress
from .blog_post import BlogPost

__all__ = [
    "User",
    "Novel",
    "Chapter",
    "ChapterContentSegment",
    "Comment",
    "CommentLike",
    "Reaction",
    "UserNovelProgress",
    "BlogPost"
]
