"""
Reader display preferences
"""
import logging
from typing import List, Literal
from pydantic import BaseModel, ConfigDict, field_validator

from kweezy.client.storage import KeyValueStore

logger = logging.getLogger(__name__)

ThemeName = Literal["light", "dark", "oled"]

THEME_NAMES: List[str] = ["light", "dark", "oled"]
FONT_SIZES: List[int] = [16, 18, 20, 22]
DEFAULT_FONT_SIZE_LEVEL = 1

THEME_KEY = "theme"
FONT_SIZE_KEY = "fontSizeLevel"


class ReaderPreferences(BaseModel):
    """Immutable theme and font size choice; updates return a new instance"""
    model_config = ConfigDict(frozen=True)

    themeName: ThemeName = "light"
    fontSizeLevel: int = DEFAULT_FONT_SIZE_LEVEL

    @field_validator("fontSizeLevel")
    @classmethod
    def check_level(cls, value: int) -> int:
        if not 0 <= value < len(FONT_SIZES):
            raise ValueError(f"Font size level must be between 0 and {len(FONT_SIZES) - 1}.")
        return value

    @property
    def font_size(self) -> int:
        return FONT_SIZES[self.fontSizeLevel]

    def with_theme(self, theme_name: str) -> "ReaderPreferences":
        return ReaderPreferences(themeName=theme_name, fontSizeLevel=self.fontSizeLevel)

    def cycle_theme(self) -> "ReaderPreferences":
        """light -> dark -> oled -> light"""
        index = THEME_NAMES.index(self.themeName)
        return self.with_theme(THEME_NAMES[(index + 1) % len(THEME_NAMES)])

    def cycle_font_size(self) -> "ReaderPreferences":
        next_level = (self.fontSizeLevel + 1) % len(FONT_SIZES)
        return ReaderPreferences(themeName=self.themeName, fontSizeLevel=next_level)


async def load_preferences(store: KeyValueStore) -> ReaderPreferences:
    """
    Stored preferences, falling back to defaults for missing or bad values
    """
    try:
        pairs = dict(await store.multi_get([THEME_KEY, FONT_SIZE_KEY]))
    except Exception:
        logger.exception("Failed to load reader preferences")
        return ReaderPreferences()

    theme_name = pairs.get(THEME_KEY)
    if theme_name not in THEME_NAMES:
        theme_name = "light"

    level = DEFAULT_FONT_SIZE_LEVEL
    raw_level = pairs.get(FONT_SIZE_KEY)
    if raw_level is not None:
        try:
            level = int(raw_level)
        except ValueError:
            logger.warning("Ignoring bad font size level %r", raw_level)
        if not 0 <= level < len(FONT_SIZES):
            level = DEFAULT_FONT_SIZE_LEVEL

    return ReaderPreferences(themeName=theme_name, fontSizeLevel=level)


async def save_preferences(store: KeyValueStore, preferences: ReaderPreferences) -> None:
    try:
        await store.set_item(THEME_KEY, preferences.themeName)
        await store.set_item(FONT_SIZE_KEY, str(preferences.fontSizeLevel))
    except Exception:
        logger.exception("Failed to save reader preferences")
