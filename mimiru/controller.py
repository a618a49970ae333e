"""HTTP handling of recommendation requests."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, Protocol

from .errors import USER_ID_REQUIRED, bad_request_error, internal_server_error
from .response import respond_with_error, respond_with_success
from .usecase import DEFAULT_LIMIT, GetRecommendationsInput, GetRecommendationsOutput

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1


class _RecommendationsUsecase(Protocol):
    def execute(self, request: GetRecommendationsInput) -> GetRecommendationsOutput: ...


def _parse_int(text: str) -> int:
    """Parse a signed decimal that fits in 64 bits, or raise ValueError."""
    if not _INTEGER.fullmatch(text):
        raise ValueError(f'strconv.Atoi: parsing "{text}": invalid syntax')
    value = int(text)
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f'strconv.Atoi: parsing "{text}": value out of range')
    return value


def _param(query: Mapping[str, Any], name: str) -> str:
    value = query.get(name, "")
    if isinstance(value, (list, tuple)):
        value = value[0] if value else ""
    return str(value) if value is not None else ""


class RecommendationController:
    """Turns query parameters into a recommendation request and answers it."""

    def __init__(self, get_recommendations_uc: _RecommendationsUsecase):
        self._usecase = get_recommendations_uc

    def get_recommendations(self, query: Mapping[str, Any]) -> tuple[int, dict[str, Any]]:
        """Answer a request with user_id and optional limit; return status and body."""
        user_id_text = _param(query, "user_id")
        if user_id_text == "":
            return respond_with_error(USER_ID_REQUIRED)
        try:
            user_id = _parse_int(user_id_text)
        except ValueError as err:
            return respond_with_error(
                bad_request_error("ユーザーIDの形式が正しくありません", str(err))
            )

        limit = DEFAULT_LIMIT
        limit_text = _param(query, "limit")
        if limit_text:
            try:
                parsed = _parse_int(limit_text)
            except ValueError:
                parsed = 0
            if parsed > 0:
                limit = parsed

        try:
            output = self._usecase.execute(GetRecommendationsInput(user_id=user_id, limit=limit))
        except Exception as err:
            logger.debug("recommendations for user %d failed", user_id, exc_info=True)
            return respond_with_error(
                internal_server_error("レコメンド取得に失敗しました", str(err))
            )
        return respond_with_success(output)