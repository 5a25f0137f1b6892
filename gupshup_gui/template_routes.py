"""HTTP routes for message templates and local image uploads."""

from __future__ import annotations

import logging
import os
from http import HTTPStatus
from typing import Any

from flask import Blueprint, jsonify, request

from .apps import PartnerApiError
from .auth import AuthenticationError
from .bindings import BindingError, CreateTemplateInput
from .errors import Cause, RestError, bad_request_validation, internal_server_error
from .examples import fill_example_variables
from .uploads import DEFAULT_UPLOAD_DIR, UploadError, save_uploaded_file

MAX_UPLOAD_SIZE = 5 << 20
MAX_REQUEST_SIZE = 20 << 20

_SERVICE_ERRORS = (PartnerApiError, AuthenticationError)

_log = logging.getLogger(__name__)


def _reply(error: RestError):
    return jsonify(error.to_dict()), error.code


def _missing_app_id() -> RestError:
    return bad_request_validation(
        "App ID não informado",
        [Cause("app_id", "O ID do app é obrigatório na URL")],
    )


def _format_value(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def _binding_causes(error: BindingError) -> list[Cause]:
    if error.violations:
        return [
            Cause(name, f"Campo inválido: {_format_value(value)} (condição: {tag})")
            for name, tag, value in error.violations
        ]
    return [Cause("body", error.message)]


def _stream_size(storage) -> int:
    stream = storage.stream
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def create_templates_blueprint(controller, upload_dir=DEFAULT_UPLOAD_DIR) -> Blueprint:
    """Routes under ``/app`` for templates; uploads are stored in ``upload_dir``."""
    blueprint = Blueprint("templates", __name__, url_prefix="/app")

    @blueprint.get("/apps/<app_id>/templates")
    def get_templates(app_id: str):
        if not app_id:
            return _reply(_missing_app_id())
        try:
            templates = controller.get_templates(app_id)
        except _SERVICE_ERRORS as exc:
            return _reply(internal_server_error(str(exc), []))
        return jsonify([template.to_dict() for template in templates]), HTTPStatus.OK

    @blueprint.get("/apps/<app_id>/templates/<template_id>")
    def get_template_by_id(app_id: str, template_id: str):
        if not app_id:
            return _reply(_missing_app_id())
        if not template_id:
            return _reply(
                bad_request_validation(
                    "Template ID não informado",
                    [Cause("template_id", "O ID do template é obrigatório na URL")],
                )
            )
        try:
            template = controller.get_template_by_id(app_id, template_id)
        except _SERVICE_ERRORS as exc:
            return _reply(internal_server_error(str(exc), []))
        return jsonify(template.to_dict()), HTTPStatus.OK

    @blueprint.post("/apps/<app_id>/templates")
    def create_template(app_id: str):
        if app_id in ("", ":app_id"):
            return _reply(_missing_app_id())

        try:
            payload = CreateTemplateInput.from_json(request.get_data())
        except BindingError as exc:
            return _reply(
                bad_request_validation(
                    "Erro ao validar os campos da requisição", _binding_causes(exc)
                )
            )

        template = payload.to_create_request()
        if not template.example:
            template.example = fill_example_variables(template.content)
        if not template.example_header and template.header:
            template.example_header = fill_example_variables(template.header)

        if template.template_type == "TEXT":
            try:
                created = controller.create_template_text(app_id, template)
            except _SERVICE_ERRORS as exc:
                return _reply(
                    bad_request_validation(
                        "Imagem não enviada", [Cause("controller", str(exc))]
                    )
                )
            return jsonify(created.to_dict()), HTTPStatus.CREATED

        if template.template_type == "IMAGE":
            if len(template.example_media) != 1:
                return _reply(
                    bad_request_validation(
                        "Imagem ausente ou múltiplas imagens enviadas",
                        [
                            Cause(
                                "images",
                                "Você deve informar exatamente 1 imagem salva localmente",
                            )
                        ],
                    )
                )
            image_path = template.example_media[0]
            _log.info("Caminho da imagem: %s", image_path)
            try:
                created = controller.create_template_image(app_id, image_path, template)
            except _SERVICE_ERRORS as exc:
                return _reply(
                    internal_server_error(
                        "Erro ao criar template", [Cause("controller", str(exc))]
                    )
                )
            return jsonify(created.to_dict()), HTTPStatus.CREATED

        return _reply(
            bad_request_validation(
                "Tipo de template não suportado",
                [Cause("templateType", template.template_type)],
            )
        )

    @blueprint.post("/upload/image/<app_id>")
    def upload_image(app_id: str):
        if not app_id:
            return _reply(_missing_app_id())

        def form_error(message: str):
            return _reply(
                bad_request_validation("Erro ao ler arquivos", [Cause("form", message)])
            )

        if request.content_length is not None and request.content_length > MAX_REQUEST_SIZE:
            return form_error("http: request body too large")
        if request.mimetype != "multipart/form-data":
            return form_error("request Content-Type isn't multipart/form-data")
        try:
            files = request.files.getlist("file")
        except ValueError as exc:
            return form_error(str(exc))

        if not files:
            return _reply(
                bad_request_validation(
                    "Nenhum arquivo enviado",
                    [Cause("file", "Envie pelo menos um arquivo")],
                )
            )

        saved_paths = []
        for position, storage in enumerate(files):
            if _stream_size(storage) > MAX_UPLOAD_SIZE:
                return _reply(
                    bad_request_validation(
                        "Arquivo excede o tamanho permitido",
                        [Cause(f"file[{position}]", "Tamanho máximo: 5MB")],
                    )
                )
            try:
                path = save_uploaded_file(storage.filename or "", storage.stream, upload_dir)
            except UploadError as exc:
                return _reply(
                    internal_server_error(
                        "Erro ao salvar arquivo", [Cause("upload", str(exc))]
                    )
                )
            saved_paths.append(path)

        return jsonify({"arquivosSalvos": saved_paths}), HTTPStatus.OK

    return blueprint