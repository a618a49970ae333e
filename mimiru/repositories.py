"""Abstract repositories the domain services and use cases depend on."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any

from .entities import (
    AudioContent,
    PlaybackHistory,
    RecommendationSet,
    User,
    UserPreference,
)


class CacheMissError(LookupError):
    """Raised by a cache when a key holds no value."""


class UserRepository(ABC):
    @abstractmethod
    def get_by_id(self, user_id: int) -> User | None:
        """Return the user, or None when there is none with that id."""

    @abstractmethod
    def get_similar_users(self, user_id: int, limit: int) -> list[User]:
        """Return up to limit users whose listening resembles the given user's."""

    @abstractmethod
    def save(self, user: User) -> None:
        """Store the user."""


class UserPreferenceRepository(ABC):
    @abstractmethod
    def get_user_preferences(self, user_id: int) -> list[UserPreference]:
        """Return the user's category preferences."""

    @abstractmethod
    def save_user_preference(self, preference: UserPreference) -> None:
        """Store one preference."""

    @abstractmethod
    def update_user_preferences(self, user_id: int, preferences: list[UserPreference]) -> None:
        """Replace all of the user's preferences."""


class AudioContentRepository(ABC):
    @abstractmethod
    def get_by_id(self, content_id: int) -> AudioContent:
        """Return one piece of content."""

    @abstractmethod
    def get_by_ids(self, content_ids: list[int]) -> list[AudioContent]:
        """Return the content with the given ids."""

    @abstractmethod
    def get_similar_content(
        self, category_id: int, author_id: int, exclude_ids: list[int], limit: int
    ) -> list[AudioContent]:
        """Return content sharing the category or author, leaving out exclude_ids."""

    @abstractmethod
    def get_new_content(self, days: int, limit: int) -> list[AudioContent]:
        """Return the newest content."""

    @abstractmethod
    def get_popular_content(self, days: int, limit: int) -> list[AudioContent]:
        """Return the most played content of recent days."""

    @abstractmethod
    def save(self, content: AudioContent) -> None:
        """Store the content."""


class PlaybackRepository(ABC):
    @abstractmethod
    def get_user_history(self, user_id: int, limit: int) -> list[PlaybackHistory]:
        """Return the user's latest playbacks, newest first."""

    @abstractmethod
    def save_playback(self, history: PlaybackHistory) -> None:
        """Store one playback."""

    @abstractmethod
    def get_recent_playbacks(self, user_id: int, days: int) -> list[PlaybackHistory]:
        """Return the user's playbacks of the last days."""


class RecommendationRepository(ABC):
    @abstractmethod
    def save_recommendation_set(self, rec_set: RecommendationSet) -> None:
        """Store a set of recommendations."""

    @abstractmethod
    def get_recommendation_set(self, user_id: int) -> RecommendationSet | None:
        """Return the stored set for the user."""


class CacheRepository(ABC):
    @abstractmethod
    def get(self, key: str) -> Any:
        """Return the JSON-decoded value under key; raise CacheMissError if absent."""

    @abstractmethod
    def set(self, key: str, value: Any, expiration: timedelta) -> None:
        """Store value as JSON under key for the given time."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Tell whether key holds a value."""