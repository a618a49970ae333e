"""The JSON envelope every HTTP answer is wrapped in."""

from __future__ import annotations

import time
from dataclasses import dataclass, field, fields, is_dataclass
from http import HTTPStatus
from typing import Any

from .errors import AppError, ErrorCode, as_app_error, internal_server_error

SERVICE_NAME = "mimiru-recommendation"


def _jsonable(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _jsonable(getattr(value, f.name)) for f in fields(value)}
    return value


@dataclass
class ResponseWidget:
    """Response envelope; empty optional fields are left out of the JSON."""

    success: bool
    data: Any = None
    error: str = ""
    message: str = ""
    details: str = ""
    code: ErrorCode | None = None
    timestamp: int = field(default_factory=lambda: int(time.time()))
    service: str = SERVICE_NAME

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            result["data"] = _jsonable(self.data)
        if self.error:
            result["error"] = self.error
        if self.message:
            result["message"] = self.message
        if self.details:
            result["details"] = self.details
        if self.code is not None:
            result["code"] = self.code.value
        result["timestamp"] = self.timestamp
        result["service"] = self.service
        return result


def success_response(data: Any) -> ResponseWidget:
    return ResponseWidget(success=True, data=data)


def error_response(app_err: AppError) -> ResponseWidget:
    return ResponseWidget(
        success=False,
        error=app_err.code.value,
        message=app_err.message,
        details=app_err.details,
        code=app_err.code,
    )


def respond_with_success(data: Any) -> tuple[int, dict[str, Any]]:
    """Return the HTTP status and JSON body of a successful answer."""
    return int(HTTPStatus.OK), success_response(data).to_dict()


def respond_with_error(app_err: AppError) -> tuple[int, dict[str, Any]]:
    """Return the HTTP status and JSON body for an application error."""
    return app_err.http_status, error_response(app_err).to_dict()


def respond_with_exception(err: BaseException) -> tuple[int, dict[str, Any]]:
    """Answer with the AppError behind err, or with a generic internal error."""
    app_err = as_app_error(err)
    if app_err is None:
        app_err = internal_server_error("内部サーバーエラー", str(err))
    return respond_with_error(app_err)