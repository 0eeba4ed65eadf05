"""
Client-side reading progress: continue-reading resolution and periodic autosave
"""
import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Union
from pydantic import BaseModel

from kweezy.client.api import ReaderApiClient
from kweezy.client.storage import LocalScrollCache
from kweezy.core.config import settings
from kweezy.schemas.content import ChapterSummary

logger = logging.getLogger(__name__)


class ContinueReadingTarget(BaseModel):
    """Where the reader reopens a novel"""
    novelId: int
    chapterId: int
    chapterNumber: int
    initialScrollY: float = 0.0


async def resolve_continue_reading(
    cache: LocalScrollCache,
    novel_id: int,
    chapters: Iterable[Union[ChapterSummary, Dict[str, Any]]]
) -> Optional[ContinueReadingTarget]:
    """
    Furthest chapter of a novel with a locally recorded scroll offset

    Every chapter key is read in one batch; any stored value counts,
    including an offset of 0. The chapter with the highest number wins and
    its offset becomes the initial scroll position. Nothing is cached, so
    callers re-run this whenever the novel screen regains focus.

    Args:
        cache: local scroll cache
        novel_id: novel ID
        chapters: the novel's chapters, as models or API dicts

    Returns:
        ContinueReadingTarget or None when no chapter has a recorded offset
    """
    summaries: List[ChapterSummary] = [
        chapter if isinstance(chapter, ChapterSummary) else ChapterSummary.model_validate(chapter)
        for chapter in chapters
    ]
    if not summaries:
        return None

    try:
        recorded = await cache.recorded_chapters(novel_id, [chapter.id for chapter in summaries])
    except Exception:
        logger.exception("Error reading local scroll positions for novel %s", novel_id)
        return None

    latest: Optional[ChapterSummary] = None
    for chapter in summaries:
        if recorded.get(chapter.id) is None:
            continue
        if latest is None or chapter.chapterNumber > latest.chapterNumber:
            latest = chapter

    if latest is None:
        logger.debug("No local scroll positions found for novel %s", novel_id)
        return None

    scroll_y = 0.0
    try:
        scroll_y = await cache.load(novel_id, latest.id) or 0.0
    except Exception:
        logger.exception("Failed to read local scroll position for continue")

    return ContinueReadingTarget(
        novelId=novel_id,
        chapterId=latest.id,
        chapterNumber=latest.chapterNumber,
        initialScrollY=scroll_y
    )


class ChapterAutosaver:
    """
    Saves the open chapter's scroll offset on a fixed interval

    The reader updates `scroll_y` as the user scrolls; the timer writes the
    current value every interval whether or not it changed, and `close`
    writes once more. Each save goes to the local cache first, then a server
    upsert is fired in the background when the API client is authenticated.
    Storage and server failures are logged and never raised.
    """

    def __init__(
        self,
        cache: LocalScrollCache,
        novel_id: int,
        chapter_id: int,
        api: Optional[ReaderApiClient] = None,
        interval: Optional[float] = None,
        initial_scroll_y: float = 0.0
    ):
        self.cache = cache
        self.novel_id = novel_id
        self.chapter_id = chapter_id
        self.api = api
        self.interval = settings.AUTOSAVE_INTERVAL_SECONDS if interval is None else interval
        self.scroll_y = initial_scroll_y
        self._task: Optional[asyncio.Task] = None
        self._syncs: Set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def update_position(self, scroll_y: float) -> None:
        self.scroll_y = scroll_y

    def start(self) -> None:
        if self.running:
            return
        logger.debug("Starting scroll autosave every %ss for chapter %s", self.interval, self.chapter_id)
        self._task = asyncio.create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.save_now()

    async def save_now(self) -> bool:
        """
        Write the current offset

        Returns:
            bool: True when the local write succeeded
        """
        scroll_y = self.scroll_y
        if scroll_y is None or scroll_y < 0:
            return False

        try:
            await self.cache.save(self.novel_id, self.chapter_id, scroll_y)
        except Exception:
            logger.exception("Failed to save local scroll position for chapter %s", self.chapter_id)
            return False

        if self.api is not None and self.api.is_authenticated:
            task = asyncio.create_task(self._sync(scroll_y))
            self._syncs.add(task)
            task.add_done_callback(self._syncs.discard)
        return True

    async def _sync(self, scroll_y: float) -> None:
        try:
            await self.api.update_progress(self.novel_id, self.chapter_id, scroll_y)
        except Exception as e:
            logger.error("Background save scroll to backend failed: %s", e)

    async def close(self) -> None:
        """Stop the timer, save one last time and wait for pending syncs"""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        await self.save_now()

        if self._syncs:
            await asyncio.gather(*list(self._syncs), return_exceptions=True)
