"""Drops cached recommendations when a user's listening changes."""

from __future__ import annotations

import logging
import re

from .monitor import DatabaseEvent, DatabaseMonitorService
from .repositories import CacheRepository

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _user_id_of(event: DatabaseEvent) -> int | None:
    value = event.data.get("user_id")
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        try:
            return int(value)
        except (ValueError, OverflowError):
            return None
    if isinstance(value, str) and _INTEGER.fullmatch(value):
        return int(value)
    return None


class RecommendationUpdaterService:
    """Invalidates a user's cached recommendations on playback or rating events."""

    def __init__(self, cache_repo: CacheRepository):
        self._cache_repo = cache_repo

    def handle_playback_event(self, event: DatabaseEvent) -> None:
        user_id = _user_id_of(event)
        if user_id is None:
            return
        try:
            self._cache_repo.delete(f"recommendations:user:{user_id}")
        except Exception:
            logger.warning("could not drop cached recommendations of user %d", user_id, exc_info=True)

    def handle_user_rating_event(self, event: DatabaseEvent) -> None:
        self.handle_playback_event(event)

    def start_recommendation_updater(self, monitor_service: DatabaseMonitorService) -> None:
        monitor_service.register_event_handler("playback_sessions", self.handle_playback_event)
        monitor_service.register_event_handler("user_ratings", self.handle_user_rating_event)