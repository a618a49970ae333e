"""Application and repository errors."""

from __future__ import annotations

from enum import Enum
from http import HTTPStatus


class ErrorCode(str, Enum):
    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_SERVER = "INTERNAL_SERVER_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class AppError(Exception):
    """An error that carries an error code and the HTTP status to answer with."""

    def __init__(self, code: ErrorCode, message: str, details: str = "", http_status: int = 500):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details
        self.http_status = http_status

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"AppError({self.code.value!r}, {self.message!r}, {self.details!r}, {self.http_status})"


def bad_request_error(message: str, details: str = "") -> AppError:
    return AppError(ErrorCode.BAD_REQUEST, message, details, int(HTTPStatus.BAD_REQUEST))


def not_found_error(message: str, details: str = "") -> AppError:
    return AppError(ErrorCode.NOT_FOUND, message, details, int(HTTPStatus.NOT_FOUND))


def internal_server_error(message: str, details: str = "") -> AppError:
    return AppError(
        ErrorCode.INTERNAL_SERVER, message, details, int(HTTPStatus.INTERNAL_SERVER_ERROR)
    )


def service_unavailable_error(message: str, details: str = "") -> AppError:
    return AppError(
        ErrorCode.SERVICE_UNAVAILABLE, message, details, int(HTTPStatus.SERVICE_UNAVAILABLE)
    )


USER_ID_REQUIRED = bad_request_error("ユーザーIDが必要です")
INVALID_USER_ID_FORMAT = bad_request_error("ユーザーIDの形式が正しくありません")
INVALID_EVENT_DATA = bad_request_error("イベントデータが正しくありません")
USER_NOT_FOUND = not_found_error("ユーザーが見つかりません")
RECOMMENDATION_FAILED = internal_server_error("レコメンド取得に失敗しました")
EVENT_TRACKING_FAILED = internal_server_error("イベント追跡に失敗しました")
DATABASE_CONNECTION = service_unavailable_error("データベース接続に失敗しました")


def as_app_error(err: BaseException | None) -> AppError | None:
    """Return the first AppError in the exception's cause chain, or None."""
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, AppError):
            return err
        seen.add(id(err))
        err = err.__cause__ or err.__context__
    return None


class RepositoryError(Exception):
    """Base class for errors raised by repositories."""

    default_message = "repository error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class InvalidEntityError(RepositoryError):
    default_message = "無効なエンティティ"


class EntityNotFoundError(RepositoryError):
    default_message = "エンティティが見つかりません"


class DuplicateEntryError(RepositoryError):
    default_message = "重複エントリ"