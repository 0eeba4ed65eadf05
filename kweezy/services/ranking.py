"""
Comment ranking for segment comment lists

Comments are ordered by like count (newest first on ties), then two
randomly chosen lower-ranked comments are pulled up to fixed shallow
positions so that they get a chance to be seen. The whole segment is
ranked before a page is cut.
"""
import math
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Generic, List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

# (target index, first index of the candidate pool), applied in order
INJECTION_PASSES: Tuple[Tuple[int, int], ...] = ((2, 3), (4, 5))


@dataclass
class RankedComment(Generic[T]):
    """A comment with its derived, viewer-dependent fields"""
    comment: T
    like_count: int
    created_at: datetime
    liked_by_viewer: bool = False


@dataclass
class RankedPage(Generic[T]):
    items: List[RankedComment[T]]
    total_pages: int
    current_page: int


def sort_by_popularity(items: Sequence[RankedComment[T]]) -> List[RankedComment[T]]:
    """
    Stable sort: like count descending, then creation time descending.
    """
    ordered = sorted(items, key=lambda item: item.created_at, reverse=True)
    ordered.sort(key=lambda item: item.like_count, reverse=True)
    return ordered


def inject_random(items: List[T], target_index: int, pool_start: int, rng: random.Random) -> bool:
    """
    Move one element picked uniformly from items[pool_start:] to target_index.

    The list is mutated in place. Returns False when the pool is empty.
    """
    pool_start = max(pool_start, target_index + 1)
    if len(items) <= pool_start:
        return False
    picked = rng.randrange(pool_start, len(items))
    items.insert(target_index, items.pop(picked))
    return True


def rank_comments(items: Sequence[RankedComment[T]], rng: Optional[random.Random] = None) -> List[RankedComment[T]]:
    """
    Full ordering of a segment's comments: popularity sort plus the injection passes.

    Args:
        items: every comment of the segment, not a page of them
        rng: random source, a fresh unseeded generator when omitted

    Returns:
        a new list; positions 0 and 1 always hold the two most popular comments
    """
    rng = rng or random.Random()
    ordered = sort_by_popularity(items)
    for target_index, pool_start in INJECTION_PASSES:
        inject_random(ordered, target_index, pool_start, rng)
    return ordered


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit)


def paginate(items: Sequence[T], page: int, limit: int) -> List[T]:
    offset = (page - 1) * limit
    return list(items[offset:offset + limit])


def rank_page(
    items: Sequence[RankedComment[T]],
    page: int,
    limit: int,
    rng: Optional[random.Random] = None
) -> RankedPage[T]:
    """
    Rank all comments, then cut the requested page.

    Args:
        items: every comment of the segment
        page: 1-based page number
        limit: page size
        rng: random source for the injection passes
    """
    if page < 1:
        raise ValueError("page must be a positive integer")
    if limit < 1:
        raise ValueError("limit must be a positive integer")
    ranked = rank_comments(items, rng)
    return RankedPage(
        items=paginate(ranked, page, limit),
        total_pages=total_pages(len(ranked), limit),
        current_page=page
    )
