"""The use case that assembles a user's recommendations."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Protocol

from .entities import Recommendation, RecommendationSet, utc_now
from .repositories import CacheRepository, UserRepository

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20
CACHE_TTL = timedelta(hours=1)


class _RecommendationGenerator(Protocol):
    def generate_collaborative_recommendations(
        self, target_user_id: int, limit: int
    ) -> list[Recommendation]: ...

    def generate_content_based_recommendations(
        self, user_id: int, limit: int
    ) -> list[Recommendation]: ...

    def generate_popularity_based_recommendations(
        self, user_id: int, limit: int
    ) -> list[Recommendation]: ...

    def generate_new_content_recommendations(
        self, user_id: int, limit: int
    ) -> list[Recommendation]: ...


class RecommendationError(Exception):
    """Raised when recommendations cannot be produced for the request."""


@dataclass
class GetRecommendationsInput:
    user_id: int
    limit: int = DEFAULT_LIMIT


@dataclass
class GetRecommendationsOutput:
    user_id: int
    recommendations: list[Recommendation] = field(default_factory=list)
    timestamp: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "recommendations": [rec.to_dict() for rec in self.recommendations],
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GetRecommendationsOutput:
        return cls(
            user_id=int(data.get("userId", 0)),
            recommendations=[
                Recommendation.from_dict(item) for item in data.get("recommendations") or []
            ],
            timestamp=int(data.get("timestamp", 0)),
        )


class GetRecommendationsUsecase:
    """Serves cached recommendations or blends the four algorithms into new ones."""

    def __init__(
        self,
        algorithm_service: _RecommendationGenerator,
        cache_repo: CacheRepository,
        user_repo: UserRepository,
    ):
        self._algorithms = algorithm_service
        self._cache = cache_repo
        self._users = user_repo

    def _cached(self, key: str) -> GetRecommendationsOutput | None:
        try:
            value = self._cache.get(key)
            if isinstance(value, GetRecommendationsOutput):
                return value
            return GetRecommendationsOutput.from_dict(value)
        except Exception:
            return None

    def execute(self, request: GetRecommendationsInput) -> GetRecommendationsOutput:
        if request.user_id <= 0:
            raise RecommendationError(f"無効なユーザーID: {request.user_id}")
        limit = request.limit if request.limit > 0 else DEFAULT_LIMIT

        try:
            user = self._users.get_by_id(request.user_id)
        except Exception as err:
            raise RecommendationError(f"ユーザー情報の取得に失敗しました: {err}") from err
        if user is None:
            raise RecommendationError(f"ユーザーが見つかりません: {request.user_id}")

        cache_key = f"recommendations:user:{request.user_id}"
        cached = self._cached(cache_key)
        if cached is not None:
            return cached

        rec_set = RecommendationSet(user_id=request.user_id, generated_at=utc_now())
        generators = [
            (self._algorithms.generate_collaborative_recommendations, limit // 2),
            (self._algorithms.generate_content_based_recommendations, limit // 3),
            (self._algorithms.generate_popularity_based_recommendations, limit // 5),
            (self._algorithms.generate_new_content_recommendations, limit // 10),
        ]
        for generate, share in generators:
            try:
                recommendations = generate(request.user_id, share)
            except Exception:
                logger.debug("%s failed", generate.__name__, exc_info=True)
                continue
            for rec in recommendations:
                rec.generated_at = utc_now()
                rec_set.add_recommendation(rec)

        rec_set.sort_by_score()
        output = GetRecommendationsOutput(
            user_id=request.user_id,
            recommendations=rec_set.limit(limit),
            timestamp=int(time.time()),
        )

        try:
            self._cache.set(cache_key, output.to_dict(), CACHE_TTL)
        except Exception:
            logger.warning("could not cache recommendations for %s", cache_key, exc_info=True)

        return output