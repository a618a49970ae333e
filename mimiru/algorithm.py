"""Recommendation algorithms: collaborative, content-based, popularity and recency."""

from __future__ import annotations

import logging

from .entities import Recommendation, RecommendationReason
from .repositories import (
    AudioContentRepository,
    PlaybackRepository,
    UserPreferenceRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

_SIMILAR_USER_COUNT = 10
_TARGET_HISTORY_LIMIT = 100
_SIMILAR_USER_HISTORY_LIMIT = 20
_MIN_COLLABORATIVE_SCORE = 2.0
_COLLABORATIVE_WEIGHT = 0.4

_CONTENT_BASED_HISTORY_LIMIT = 50
_SIMILAR_CONTENT_LIMIT = 5
_CONTENT_BASED_WEIGHT = 0.3

_POPULAR_DAYS = 7
_POPULAR_EXTRA = 10
_POPULARITY_WEIGHT = 0.2

_NEW_CONTENT_DAYS = 3
_NEW_CONTENT_SCORE = 0.1


class RecommendationAlgorithmService:
    """Builds recommendations for a user from the repositories it is given."""

    def __init__(
        self,
        user_repo: UserRepository,
        audio_content_repo: AudioContentRepository,
        playback_repo: PlaybackRepository,
        user_pref_repo: UserPreferenceRepository,
    ):
        self._user_repo = user_repo
        self._audio_content_repo = audio_content_repo
        self._playback_repo = playback_repo
        self._user_pref_repo = user_pref_repo

    def _watched_ids(self, user_id: int, limit: int) -> set[int]:
        history = self._playback_repo.get_user_history(user_id, limit)
        return {playback.audio_content_id for playback in history}

    def generate_collaborative_recommendations(
        self, target_user_id: int, limit: int
    ) -> list[Recommendation]:
        """Recommend what similar users engaged with and the target has not heard."""
        similar_users = self._user_repo.get_similar_users(target_user_id, _SIMILAR_USER_COUNT)
        if not similar_users:
            return []

        watched = self._watched_ids(target_user_id, _TARGET_HISTORY_LIMIT)

        content_scores: dict[int, float] = {}
        for similar_user in similar_users:
            try:
                history = self._playback_repo.get_user_history(
                    similar_user.id, _SIMILAR_USER_HISTORY_LIMIT
                )
            except Exception:
                logger.debug("history of user %d unavailable", similar_user.id, exc_info=True)
                continue
            for playback in history:
                content_id = playback.audio_content_id
                if content_id in watched:
                    continue
                content_scores[content_id] = (
                    content_scores.get(content_id, 0.0) + playback.calculate_engagement_score()
                )

        recommendations: list[Recommendation] = []
        for content_id, score in content_scores.items():
            if score >= _MIN_COLLABORATIVE_SCORE:
                recommendations.append(
                    Recommendation(
                        user_id=target_user_id,
                        audio_content_id=content_id,
                        score=score * _COLLABORATIVE_WEIGHT,
                        reason=RecommendationReason.SIMILAR_USERS,
                    )
                )
            if len(recommendations) >= limit:
                break
        return recommendations

    def generate_content_based_recommendations(
        self, user_id: int, limit: int
    ) -> list[Recommendation]:
        """Recommend unheard content from the user's strongly preferred categories."""
        preferences = self._user_pref_repo.get_user_preferences(user_id)
        if not preferences:
            return []

        history = self._playback_repo.get_user_history(user_id, _CONTENT_BASED_HISTORY_LIMIT)
        exclude_ids = [playback.audio_content_id for playback in history]

        recommendations: list[Recommendation] = []
        for preference in preferences:
            if not preference.is_strong():
                continue
            try:
                similar = self._audio_content_repo.get_similar_content(
                    preference.category_id, 0, exclude_ids, _SIMILAR_CONTENT_LIMIT
                )
            except Exception:
                logger.debug(
                    "similar content for category %d unavailable",
                    preference.category_id,
                    exc_info=True,
                )
                continue
            recommendations.extend(
                Recommendation(
                    user_id=user_id,
                    audio_content_id=content.id,
                    score=preference.score * _CONTENT_BASED_WEIGHT,
                    reason=RecommendationReason.CONTENT_BASED,
                )
                for content in similar
            )
        return recommendations

    def generate_popularity_based_recommendations(
        self, user_id: int, limit: int
    ) -> list[Recommendation]:
        """Recommend popular content the user has not heard, scored by rank."""
        popular = self._audio_content_repo.get_popular_content(
            _POPULAR_DAYS, limit + _POPULAR_EXTRA
        )
        watched = self._watched_ids(user_id, _TARGET_HISTORY_LIMIT)

        recommendations: list[Recommendation] = []
        for rank, content in enumerate(popular):
            if content.id in watched:
                continue
            recommendations.append(
                Recommendation(
                    user_id=user_id,
                    audio_content_id=content.id,
                    score=(limit - rank) * _POPULARITY_WEIGHT,
                    reason=RecommendationReason.POPULAR,
                )
            )
            if len(recommendations) >= limit:
                break
        return recommendations

    def generate_new_content_recommendations(
        self, user_id: int, limit: int
    ) -> list[Recommendation]:
        """Recommend the newest content with a small fixed score."""
        new_content = self._audio_content_repo.get_new_content(_NEW_CONTENT_DAYS, limit)
        return [
            Recommendation(
                user_id=user_id,
                audio_content_id=content.id,
                score=_NEW_CONTENT_SCORE,
                reason=RecommendationReason.NEW_CONTENT,
            )
            for content in new_content
        ]