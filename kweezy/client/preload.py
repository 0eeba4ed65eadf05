"""
First-page comment preloading for a chapter
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from kweezy.client.api import ReaderApiClient
from kweezy.core.config import settings

logger = logging.getLogger(__name__)


async def preload_comments(
    api: ReaderApiClient,
    segment_ids: List[int],
    count: Optional[int] = None
) -> Dict[int, List[Dict[str, Any]]]:
    """
    Fetch page 1 of comments for the first segments of a chapter

    Requests run concurrently. If any of them fails the whole batch is
    dropped and an empty map is returned.

    Args:
        api: reader API client
        segment_ids: segment IDs in reading order
        count: how many segments to preload, defaults to PRELOAD_SEGMENT_COUNT

    Returns:
        segment ID -> list of comments
    """
    if not segment_ids:
        return {}
    limit = settings.PRELOAD_SEGMENT_COUNT if count is None else count
    targets = segment_ids[:limit]

    try:
        pages = await asyncio.gather(*(api.fetch_comments(segment_id, 1) for segment_id in targets))
    except Exception as e:
        logger.error("Failed to preload comments: %s", e)
        return {}

    return {
        segment_id: (page or {}).get("comments", [])
        for segment_id, page in zip(targets, pages)
    }
