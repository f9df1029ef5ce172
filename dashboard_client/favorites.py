import json
import logging
from typing import List, Optional

from .errors import DashboardError, FavoritesFull
from .storage import LocalStorage


logger = logging.getLogger(__name__)

FAVORITES_KEY = "weatherAppFavorites"
MAX_FAVORITES = 10
DEFAULT_FAVORITES = ("Seoul", "Tokyo", "New York")


def normalize_city(name: str) -> str:
    """'sEOUL' -> 'Seoul'; only the first character keeps upper case."""
    name = name.strip()
    return name[:1].upper() + name[1:].lower()


class FavoritesStore:
    def __init__(self, storage: LocalStorage, limit: int = MAX_FAVORITES) -> None:
        self.storage = storage
        self.limit = limit
        self._favorites: Optional[List[str]] = None

    @property
    def favorites(self) -> List[str]:
        if self._favorites is None:
            return self.load()
        return list(self._favorites)

    def load(self) -> List[str]:
        try:
            raw = self.storage.get_item(FAVORITES_KEY)
            loaded = json.loads(raw) if raw is not None else None
        except json.JSONDecodeError as e:
            logger.error("Error reading favorites from storage: %s", e)
            loaded = None
        if not self._well_formed(loaded):
            loaded = list(DEFAULT_FAVORITES)
        self._favorites = loaded
        return list(loaded)

    def _well_formed(self, loaded: object) -> bool:
        if not isinstance(loaded, list) or not all(isinstance(x, str) and x.strip() for x in loaded):
            return False
        if len(loaded) > self.limit:
            logger.error("Stored favorites exceed the limit of %d; using defaults", self.limit)
            return False
        if len({x.lower() for x in loaded}) != len(loaded):
            logger.error("Stored favorites contain duplicates; using defaults")
            return False
        return True

    def _persist(self, favorites: List[str]) -> None:
        self._favorites = favorites
        self.storage.set_item(FAVORITES_KEY, json.dumps(favorites, ensure_ascii=False))

    def contains(self, name: str) -> bool:
        target = name.strip().lower()
        return any(fav.lower() == target for fav in self.favorites)

    def toggle(self, name: str) -> List[str]:
        """Remove ``name`` if it is a favorite, otherwise append it.

        Raises FavoritesFull (leaving the list untouched) when adding would
        exceed the limit, and DashboardError for a blank name.
        """
        city = normalize_city(name)
        if not city:
            raise DashboardError("City name is required.")
        current = self.favorites
        if any(fav.lower() == city.lower() for fav in current):
            updated = [fav for fav in current if fav.lower() != city.lower()]
        else:
            if len(current) >= self.limit:
                raise FavoritesFull(current, self.limit)
            updated = current + [city]
        self._persist(updated)
        return list(updated)

    def neighbor(self, current: str, step: int) -> Optional[str]:
        """Favorite ``step`` places away from ``current``, wrapping around."""
        favorites = self.favorites
        if len(favorites) < 2:
            return None
        lowered = [fav.lower() for fav in favorites]
        try:
            index = lowered.index(current.strip().lower())
        except ValueError:
            return None
        return favorites[(index + step) % len(favorites)]
