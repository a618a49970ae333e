"""Domain entities: users, audio content, playback history and recommendations."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

_ZERO_TIME = "0001-01-01T00:00:00Z"
_FRACTION = re.compile(r"\.(\d+)")


def _elapsed_since(moment: datetime) -> timedelta:
    return datetime.now(moment.tzinfo) - moment


def _format_time(moment: datetime | None) -> str:
    if moment is None:
        return _ZERO_TIME
    return moment.isoformat()


def _parse_time(text: str | None) -> datetime | None:
    if not text or text == _ZERO_TIME:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # fromisoformat on older interpreters accepts at most microseconds.
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return datetime.fromisoformat(text)


@dataclass
class AudioContent:
    """A piece of audio content with its play and like counts."""

    id: int = 0
    title: str = ""
    description: str = ""
    category_id: int = 0
    author_id: int = 0
    duration: int = 0
    created_at: datetime | None = None
    play_count: int = 0
    like_count: int = 0

    def is_valid(self) -> bool:
        return self.id > 0 and self.title != "" and self.duration > 0

    def is_popular(self) -> bool:
        return self.play_count > 100 or self.like_count > 50

    def is_new(self) -> bool:
        """True when the content was created within the last seven days."""
        if self.created_at is None:
            return False
        return _elapsed_since(self.created_at) <= timedelta(days=7)

    def calculate_popularity_score(self) -> float:
        play_score = self.play_count * 0.7
        like_score = self.like_count * 1.5
        recency_bonus = 10.0 if self.is_new() else 0.0
        return play_score + like_score + recency_bonus


@dataclass
class PlaybackHistory:
    """One playback of a piece of content by a user."""

    user_id: int = 0
    audio_content_id: int = 0
    played_at: datetime | None = None
    duration: int = 0
    completed: bool = False

    def is_valid(self) -> bool:
        return self.user_id > 0 and self.audio_content_id > 0 and self.played_at is not None

    def is_recent_play(self, days: int) -> bool:
        if self.played_at is None:
            return False
        return _elapsed_since(self.played_at) <= timedelta(days=days)

    def calculate_engagement_score(self) -> float:
        score = 1.0
        if self.completed:
            score *= 2.0
        elif self.duration > 60:
            score *= 1.5
        if self.is_recent_play(7):
            score *= 1.2
        return score


@dataclass
class UserPreference:
    """How strongly a user prefers a category, from 0.0 to 1.0."""

    user_id: int = 0
    category_id: int = 0
    score: float = 0.0
    updated_at: datetime | None = None

    def is_strong(self) -> bool:
        return self.score >= 0.7

    def is_weak(self) -> bool:
        return self.score < 0.3


class RecommendationReason(str, Enum):
    SIMILAR_USERS = "similar_users"
    CONTENT_BASED = "content_based"
    POPULAR = "popular"
    NEW_CONTENT = "new_content"


@dataclass
class Recommendation:
    """A scored suggestion of one piece of content for one user."""

    user_id: int = 0
    audio_content_id: int = 0
    score: float = 0.0
    reason: RecommendationReason | None = None
    generated_at: datetime | None = None

    def is_valid(self) -> bool:
        return self.user_id > 0 and self.audio_content_id > 0 and self.score > 0

    def is_high_quality(self) -> bool:
        return self.score >= 3.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "UserID": self.user_id,
            "AudioContentID": self.audio_content_id,
            "Score": self.score,
            "Reason": self.reason.value if self.reason is not None else "",
            "GeneratedAt": _format_time(self.generated_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Recommendation:
        reason = data.get("Reason") or None
        return cls(
            user_id=int(data.get("UserID", 0)),
            audio_content_id=int(data.get("AudioContentID", 0)),
            score=float(data.get("Score", 0.0)),
            reason=RecommendationReason(reason) if reason else None,
            generated_at=_parse_time(data.get("GeneratedAt")),
        )


@dataclass
class RecommendationSet:
    """The recommendations gathered for one user."""

    user_id: int = 0
    recommendations: list[Recommendation] = field(default_factory=list)
    generated_at: datetime | None = None

    def add_recommendation(self, rec: Recommendation) -> None:
        """Add the recommendation if it is valid; drop it otherwise."""
        if rec.is_valid():
            self.recommendations.append(rec)

    def sort_by_score(self) -> None:
        self.recommendations.sort(key=lambda rec: rec.score, reverse=True)

    def filter_high_quality(self) -> list[Recommendation]:
        return [rec for rec in self.recommendations if rec.is_high_quality()]

    def limit(self, count: int) -> list[Recommendation]:
        if count < 0:
            raise ValueError(f"limit must not be negative: {count}")
        return self.recommendations[:count]


@dataclass
class User:
    """A registered listener."""

    id: int = 0
    email: str = ""
    created_at: datetime | None = None
    preferred_categories: list[int] = field(default_factory=list)

    def is_valid(self) -> bool:
        return self.id > 0 and self.email != ""

    def has_preference_for(self, category_id: int) -> bool:
        return category_id in self.preferred_categories


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)