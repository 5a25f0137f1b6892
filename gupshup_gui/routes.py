"""HTTP routes for authentication and partner apps, plus the JSON not-found reply."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Flask, jsonify, request

from .apps import PartnerApiError
from .auth import AuthenticationError
from .errors import Cause, RestError, bad_request_validation, internal_server_error

_SERVICE_ERRORS = (PartnerApiError, AuthenticationError)


def _reply(error: RestError):
    return jsonify(error.to_dict()), error.code


def _missing_app_id() -> RestError:
    return bad_request_validation(
        "App ID não informado",
        [Cause("app_id", "O ID do app é obrigatório na URL")],
    )


def create_auth_blueprint(controller) -> Blueprint:
    """Routes under ``/auth`` exposing the current partner token."""
    blueprint = Blueprint("auth", __name__, url_prefix="/auth")

    @blueprint.get("/token")
    def get_token():
        token = controller.fetch_token()
        if token is None:
            return (
                jsonify({"error": "Token não encontrado ou expirado"}),
                HTTPStatus.NOT_FOUND,
            )
        return jsonify(token.to_dict()), HTTPStatus.OK

    return blueprint


def create_apps_blueprint(controller) -> Blueprint:
    """Routes under ``/partner`` listing apps and returning app tokens."""
    blueprint = Blueprint("partner_apps", __name__, url_prefix="/partner")

    @blueprint.get("/apps")
    def get_apps():
        try:
            apps = controller.get_apps()
        except _SERVICE_ERRORS as exc:
            return _reply(internal_server_error(str(exc), []))
        return jsonify(apps.to_dict()), HTTPStatus.OK

    @blueprint.get("/apps/<app_id>/token")
    def get_app_token(app_id: str):
        if not app_id:
            return _reply(_missing_app_id())
        try:
            app_token = controller.get_app_token(app_id)
        except _SERVICE_ERRORS as exc:
            return _reply(internal_server_error(str(exc), []))
        return jsonify({"token_app": app_token.to_dict()}), HTTPStatus.OK

    return blueprint


def register_not_found(app: Flask) -> None:
    """Answer unmatched routes (and unmatched methods) with a uniform JSON 404."""

    def not_found_reply(_error):
        body = {
            "erro": "Rota não encontrada",
            "status": HTTPStatus.NOT_FOUND.value,
            "path": request.path,
            "method": request.method,
        }
        return jsonify(body), HTTPStatus.NOT_FOUND

    app.register_error_handler(HTTPStatus.NOT_FOUND.value, not_found_reply)
    app.register_error_handler(HTTPStatus.METHOD_NOT_ALLOWED.value, not_found_reply)