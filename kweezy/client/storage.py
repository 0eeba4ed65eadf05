"""
Device key-value storage and the local scroll cache
"""
import asyncio
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple, Union

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Async string key-value store, the shape of the mobile device storage"""

    async def get_item(self, key: str) -> Optional[str]:
        ...

    async def set_item(self, key: str, value: str) -> None:
        ...

    async def multi_get(self, keys: List[str]) -> List[Tuple[str, Optional[str]]]:
        ...


class MemoryStore:
    """Process-local store, used by tests and short-lived sessions"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    async def multi_get(self, keys: List[str]) -> List[Tuple[str, Optional[str]]]:
        return [(key, self._data.get(key)) for key in keys]


class JsonFileStore:
    """
    Store persisted as one JSON object on disk

    The file is read lazily and rewritten on every set, so values survive
    restarts of the reader.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._data: Optional[Dict[str, str]] = None
        self._lock = asyncio.Lock()

    def _load(self) -> Dict[str, str]:
        if self._data is None:
            if self.path.exists():
                with self.path.open("r", encoding="utf-8") as f:
                    self._data = json.load(f)
            else:
                self._data = {}
        return self._data

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(self._data, f, ensure_ascii=False)
        tmp_path.replace(self.path)

    async def get_item(self, key: str) -> Optional[str]:
        async with self._lock:
            return self._load().get(key)

    async def set_item(self, key: str, value: str) -> None:
        async with self._lock:
            self._load()[key] = value
            self._flush()

    async def multi_get(self, keys: List[str]) -> List[Tuple[str, Optional[str]]]:
        async with self._lock:
            data = self._load()
            return [(key, data.get(key)) for key in keys]


def scroll_key(novel_id: int, chapter_id: int) -> str:
    return f"scrollPos_novel_{novel_id}_chapter_{chapter_id}"


class LocalScrollCache:
    """Per-chapter scroll offsets, stored as JSON-encoded numbers"""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def save(self, novel_id: int, chapter_id: int, scroll_y: float) -> None:
        await self.store.set_item(scroll_key(novel_id, chapter_id), json.dumps(scroll_y))

    async def load(self, novel_id: int, chapter_id: int) -> Optional[float]:
        """
        Stored offset for a chapter

        Returns None when nothing is stored; an undecodable value reads as 0.
        """
        raw = await self.store.get_item(scroll_key(novel_id, chapter_id))
        if raw is None:
            return None
        return _decode_offset(raw)

    async def recorded_chapters(self, novel_id: int, chapter_ids: List[int]) -> Dict[int, Optional[str]]:
        """Raw stored values for the given chapters, keyed by chapter ID"""
        keys = [scroll_key(novel_id, chapter_id) for chapter_id in chapter_ids]
        pairs = await self.store.multi_get(keys)
        return {chapter_id: value for chapter_id, (_, value) in zip(chapter_ids, pairs)}


def _decode_offset(raw: str) -> float:
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Unreadable scroll offset %r, using 0", raw)
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        logger.warning("Non-numeric scroll offset %r, using 0", raw)
        return 0.0
    return float(value)
