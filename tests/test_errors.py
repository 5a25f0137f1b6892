from http import HTTPStatus

import pytest

from gupshup_gui.errors import (
    Cause,
    RestError,
    bad_request,
    bad_request_validation,
    forbidden,
    internal_server_error,
    not_found,
)


def test_cause_to_dict():
    cause = Cause(field="app_id", message="O ID do app é obrigatório na URL")
    assert cause.to_dict() == {
        "field": "app_id",
        "message": "O ID do app é obrigatório na URL",
    }


def test_bad_request_omits_causes():
    err = bad_request("falhou")
    assert err.code == HTTPStatus.BAD_REQUEST
    assert err.error == "bad_request"
    assert err.to_dict() == {
        "message": "falhou",
        "error": "bad_request",
        "code": HTTPStatus.BAD_REQUEST.value,
    }


def test_bad_request_validation_includes_causes():
    causes = [Cause("app_id", "O ID do app é obrigatório na URL")]
    err = bad_request_validation("App ID não informado", causes)
    body = err.to_dict()
    assert body["code"] == HTTPStatus.BAD_REQUEST
    assert body["causes"] == [c.to_dict() for c in causes]


def test_internal_server_error_with_empty_causes_omits_key():
    err = internal_server_error("boom", [])
    body = err.to_dict()
    assert body["error"] == "internal_server_error"
    assert body["code"] == HTTPStatus.INTERNAL_SERVER_ERROR
    assert "causes" not in body


@pytest.mark.parametrize(
    "factory, error, status",
    [
        (not_found, "not_found", HTTPStatus.NOT_FOUND),
        (forbidden, "forbidden", HTTPStatus.FORBIDDEN),
    ],
)
def test_simple_factories(factory, error, status):
    err = factory("msg")
    assert (err.error, err.code, err.causes) == (error, status.value, [])


def test_rest_error_is_raisable_and_str_is_message():
    err = not_found("algo deu errado")
    assert str(err) == "algo deu errado"
    assert err.message == "algo deu errado"
    with pytest.raises(RestError, match="algo deu errado"):
        raise err