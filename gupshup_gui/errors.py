"""Structured REST errors returned by the HTTP handlers."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Iterable


@dataclass(frozen=True)
class Cause:
    """One reason behind an error, tied to a request field."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class RestError(Exception):
    """An error carrying an HTTP status, a short code and optional causes."""

    def __init__(
        self,
        message: str,
        error: str,
        code: int,
        causes: Iterable[Cause] = (),
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error = error
        self.code = code
        self.causes = list(causes)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"RestError(message={self.message!r}, error={self.error!r}, "
            f"code={self.code!r}, causes={self.causes!r})"
        )

    def to_dict(self) -> dict:
        body: dict = {"message": self.message, "error": self.error, "code": self.code}
        if self.causes:
            body["causes"] = [cause.to_dict() for cause in self.causes]
        return body


def bad_request(message: str) -> RestError:
    return RestError(message, "bad_request", HTTPStatus.BAD_REQUEST.value)


def bad_request_validation(message: str, causes: Iterable[Cause]) -> RestError:
    return RestError(message, "bad_request", HTTPStatus.BAD_REQUEST.value, causes)


def internal_server_error(message: str, causes: Iterable[Cause]) -> RestError:
    return RestError(
        message, "internal_server_error", HTTPStatus.INTERNAL_SERVER_ERROR.value, causes
    )


def not_found(message: str) -> RestError:
    return RestError(message, "not_found", HTTPStatus.NOT_FOUND.value)


def forbidden(message: str) -> RestError:
    return RestError(message, "forbidden", HTTPStatus.FORBIDDEN.value)