"""Typed access to persisted user state on top of a key-value store."""
from __future__ import annotations

import json
from typing import List, Optional

from weathercore.domain import UnitSystem
from weathercore.kv_store import KeyValueStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="preferences")

LAST_CITY_KEY = "weather_last_city"
FAVORITES_KEY = "weather_favorites"
THEME_KEY = "weather_theme"
UNIT_KEY = "weather_unit"
SNAPSHOT_KEY = "weather_cache_current"

THEMES = ("light", "dark")


class Preferences:
    """Last city, unit system, favorites and theme, stored as plain strings."""

    def __init__(self, store: KeyValueStore, default_unit: UnitSystem = UnitSystem.METRIC):
        self.store = store
        self.default_unit = default_unit

    def get_last_city(self) -> Optional[str]:
        return self.store.get(LAST_CITY_KEY)

    def set_last_city(self, city: str) -> None:
        self.store.set(LAST_CITY_KEY, city)

    def get_unit(self) -> UnitSystem:
        return UnitSystem.parse(self.store.get(UNIT_KEY), default=self.default_unit)

    def set_unit(self, unit: UnitSystem | str) -> None:
        self.store.set(UNIT_KEY, UnitSystem(unit).value)

    def get_theme(self) -> str:
        theme = self.store.get(THEME_KEY)
        return theme if theme in THEMES else "light"

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme '{theme}'")
        self.store.set(THEME_KEY, theme)

    @property
    def dark_mode_active(self) -> bool:
        return self.get_theme() == "dark"

    def get_favorites(self) -> List[str]:
        """Favorite city names in insertion order; corrupt data reads as empty."""
        raw = self.store.get(FAVORITES_KEY)
        if not raw:
            return []
        try:
            favs = json.loads(raw)
        except ValueError as exc:
            logger.warning("Discarding unreadable favorites list: %s", exc)
            return []
        if not isinstance(favs, list):
            return []
        return [str(f) for f in favs]

    def add_favorite(self, city: str) -> List[str]:
        favs = self.get_favorites()
        if city not in favs:
            favs.append(city)
            self.store.set(FAVORITES_KEY, json.dumps(favs))
        return favs

    def remove_favorite(self, city: str) -> List[str]:
        favs = [c for c in self.get_favorites() if c != city]
        self.store.set(FAVORITES_KEY, json.dumps(favs))
        return favs

    def is_favorite(self, city: str) -> bool:
        return city in self.get_favorites()
