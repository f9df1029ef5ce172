from typing import List


class DashboardError(Exception):
    """A failure that is shown to the user as a single notification line."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class CityNotFound(DashboardError):
    pass


class LocationNotFound(DashboardError):
    def __init__(self, message: str = "Could not determine city from your location.") -> None:
        super().__init__(message)


class FavoritesFull(DashboardError):
    def __init__(self, favorites: List[str], limit: int) -> None:
        super().__init__(f"You can only have up to {limit} favorites.")
        self.favorites = list(favorites)
        self.limit = limit
