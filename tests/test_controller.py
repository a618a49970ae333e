from http import HTTPStatus

import pytest

from mimiru.controller import RecommendationController
from mimiru.entities import Recommendation, RecommendationReason
from mimiru.usecase import GetRecommendationsOutput, RecommendationError


class StubUsecase:
    def __init__(self, output=None, error=None):
        self.output = output
        self.error = error
        self.requests = []

    def execute(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.output


def _output(user_id):
    return GetRecommendationsOutput(
        user_id=user_id,
        recommendations=[
            Recommendation(
                user_id=user_id,
                audio_content_id=1,
                score=4.5,
                reason=RecommendationReason.SIMILAR_USERS,
            )
        ],
        timestamp=7,
    )


def test_missing_user_id_is_bad_request():
    usecase = StubUsecase(output=_output(1))
    status, body = RecommendationController(usecase).get_recommendations({})
    assert status == HTTPStatus.BAD_REQUEST
    assert body["success"] is False
    assert body["code"] == "BAD_REQUEST"
    assert body["message"] == "ユーザーIDが必要です"
    assert usecase.requests == []


@pytest.mark.parametrize("raw", ["abc", "1.5", "12x", " 3"])
def test_malformed_user_id_is_bad_request(raw):
    usecase = StubUsecase(output=_output(1))
    status, body = RecommendationController(usecase).get_recommendations({"user_id": raw})
    assert status == HTTPStatus.BAD_REQUEST
    assert body["message"] == "ユーザーIDの形式が正しくありません"
    assert raw in body["details"]
    assert usecase.requests == []


def test_user_id_out_of_range_is_bad_request():
    usecase = StubUsecase(output=_output(1))
    status, body = RecommendationController(usecase).get_recommendations(
        {"user_id": "99999999999999999999"}
    )
    assert status == HTTPStatus.BAD_REQUEST
    assert usecase.requests == []


def test_default_limit_is_twenty():
    usecase = StubUsecase(output=_output(123))
    RecommendationController(usecase).get_recommendations({"user_id": "123"})
    assert usecase.requests[0].user_id == 123
    assert usecase.requests[0].limit == 20


def test_positive_limit_is_used():
    usecase = StubUsecase(output=_output(123))
    RecommendationController(usecase).get_recommendations({"user_id": "123", "limit": "5"})
    assert usecase.requests[0].limit == 5


@pytest.mark.parametrize("raw", ["0", "-3", "many"])
def test_unusable_limit_falls_back_to_default(raw):
    usecase = StubUsecase(output=_output(123))
    RecommendationController(usecase).get_recommendations({"user_id": "123", "limit": raw})
    assert usecase.requests[0].limit == 20


def test_success_wraps_output():
    usecase = StubUsecase(output=_output(123))
    status, body = RecommendationController(usecase).get_recommendations({"user_id": "123"})
    assert status == HTTPStatus.OK
    assert body["success"] is True
    assert body["service"] == "mimiru-recommendation"
    assert body["data"] == _output(123).to_dict()


def test_list_valued_query_parameters():
    usecase = StubUsecase(output=_output(123))
    RecommendationController(usecase).get_recommendations({"user_id": ["123"], "limit": ["4"]})
    assert usecase.requests[0].user_id == 123
    assert usecase.requests[0].limit == 4


def test_usecase_failure_is_internal_error():
    usecase = StubUsecase(error=RecommendationError("ユーザーが見つかりません: 999"))
    status, body = RecommendationController(usecase).get_recommendations({"user_id": "999"})
    assert status == HTTPStatus.INTERNAL_SERVER_ERROR
    assert body["code"] == "INTERNAL_SERVER_ERROR"
    assert body["message"] == "レコメンド取得に失敗しました"
    assert body["details"] == "ユーザーが見つかりません: 999"