"""Message template management for partner apps."""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from collections.abc import Callable, Iterable
from http import HTTPStatus

import requests

from .apps import PartnerApiError, PartnerAppService
from .auth import LoginService
from .config import URL_PARTNER
from .models import PartnerTemplate, PartnerAppToken, TemplateCreateRequest, TemplateResponse

_log = logging.getLogger(__name__)

_CREATED_OK = (HTTPStatus.OK, HTTPStatus.CREATED)


class TemplateService:
    """Lists, reads and creates message templates of partner apps.

    Each operation obtains the app token through a fresh app service, as
    produced by ``app_service_factory``.
    """

    def __init__(
        self,
        auth: LoginService,
        session: requests.Session | None = None,
        base_url: str = URL_PARTNER,
        app_service_factory: Callable[[], PartnerAppService] | None = None,
    ) -> None:
        self._auth = auth
        self._session = session or requests.Session()
        self._base_url = base_url
        self._app_service_factory = app_service_factory or (
            lambda: PartnerAppService(auth, session=self._session, base_url=base_url)
        )

    def _app_token(self, app_id: str) -> PartnerAppToken:
        return self._app_service_factory().get_app_token(app_id)

    def _wrapped_app_token(self, app_id: str) -> PartnerAppToken:
        try:
            return self._app_token(app_id)
        except PartnerApiError as exc:
            raise PartnerApiError(f"erro ao obter token da aplicação: {exc}") from exc

    @staticmethod
    def _json_headers(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}

    def get_templates(self, app_id: str) -> list[PartnerTemplate]:
        """All templates of ``app_id``."""
        app_token = self._app_token(app_id)
        url = f"{self._base_url}partner/app/{app_id}/templates"
        try:
            response = self._session.get(url, headers=self._json_headers(app_token.token))
        except requests.RequestException as exc:
            raise PartnerApiError(f"erro ao enviar requisição: {exc}") from exc
        try:
            return TemplateResponse.from_dict(response.json()).templates
        except (ValueError, TypeError, KeyError) as exc:
            raise PartnerApiError(f"erro ao decodificar resposta: {exc}") from exc

    def get_template_by_id(self, app_id: str, template_id: str) -> PartnerTemplate:
        """The template ``template_id`` of ``app_id``."""
        app_token = self._wrapped_app_token(app_id)
        url = f"{self._base_url}wa/app/{app_id}/template/{template_id}"
        try:
            response = self._session.get(url, headers=self._json_headers(app_token.token))
        except requests.RequestException as exc:
            raise PartnerApiError(f"erro ao enviar requisição HTTP: {exc}") from exc
        if response.status_code != HTTPStatus.OK:
            raise PartnerApiError(
                f"falha ao buscar template. Status: {response.status_code}. "
                f"Resposta: {response.text}"
            )
        try:
            return PartnerTemplate.from_dict(response.json())
        except (ValueError, TypeError, KeyError) as exc:
            raise PartnerApiError(f"erro ao decodificar resposta JSON: {exc}") from exc

    @staticmethod
    def _form(template: TemplateCreateRequest, extra: Iterable[tuple[str, str]] = ()) -> list:
        form = {
            "elementName": template.element_name,
            "languageCode": template.language_code,
            "category": template.category,
            "templateType": template.template_type,
            "vertical": template.vertical,
            "header": template.header,
            "content": template.content,
            "footer": template.footer,
            "example": template.example,
            "exampleHeader": template.example_header,
            "enableSample": "true",
            "allowTemplateCategoryChange": "true",
        }
        form.update(extra)
        if template.buttons:
            form["buttons"] = json.dumps(
                [button.to_dict() for button in template.buttons],
                separators=(",", ":"),
                ensure_ascii=False,
            )
        return sorted(form.items())

    def _post_template(self, app_id: str, token: str, form: list) -> None:
        url = f"{self._base_url}partner/app/{app_id}/templates"
        try:
            response = self._session.post(
                url,
                data=form,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/x-www-form-urlencoded",
                },
            )
        except requests.RequestException as exc:
            raise PartnerApiError(f"erro ao enviar requisição: {exc}") from exc
        if response.status_code not in _CREATED_OK:
            raise PartnerApiError(f"erro na criação do template: {response.text}")

    def create_template_text(
        self, app_id: str, template: TemplateCreateRequest
    ) -> TemplateCreateRequest:
        """Create a text template and return what was sent."""
        app_token = self._wrapped_app_token(app_id)
        sent = dataclasses.replace(
            template, enable_sample=True, allow_template_category_change=True
        )
        self._post_template(app_id, app_token.token, self._form(sent))
        return sent

    def upload_image_for_template(self, app_id: str, file_path: str | os.PathLike[str]) -> str:
        """Upload a local image and return the media handle the API assigns."""
        app_token = self._wrapped_app_token(app_id)
        try:
            image = open(file_path, "rb")
        except OSError as exc:
            raise PartnerApiError(f"erro ao abrir arquivo de imagem: {exc}") from exc

        url = f"{self._base_url}partner/app/{app_id}/upload/media"
        with image:
            try:
                response = self._session.post(
                    url,
                    files={
                        "file": (
                            os.path.basename(os.fspath(file_path)),
                            image,
                            "application/octet-stream",
                        )
                    },
                    data={"file_type": "image/png"},
                    headers={"Authorization": f"Bearer {app_token.token}"},
                )
            except requests.RequestException as exc:
                raise PartnerApiError(f"erro ao enviar requisição: {exc}") from exc

        try:
            body = json.loads(response.content)
        except ValueError as exc:
            raise PartnerApiError(
                f"erro ao decodificar resposta ({response.text}): {exc}"
            ) from exc
        if not isinstance(body, dict):
            raise PartnerApiError(f"erro ao decodificar resposta ({response.text})")
        _log.info("Resposta decodificada: %s", body)

        handle = body.get("handleId")
        handle_id = handle.get("message") if isinstance(handle, dict) else None
        if body.get("status") != "success" or not isinstance(handle_id, str) or not handle_id:
            raise PartnerApiError(f"upload falhou: {body.get('message') or ''}")
        return handle_id

    def create_template_image(
        self,
        app_id: str,
        image_path: str | os.PathLike[str],
        template: TemplateCreateRequest,
    ) -> TemplateCreateRequest:
        """Upload ``image_path``, create an image template with it and return what was sent."""
        app_token = self._wrapped_app_token(app_id)
        try:
            image_id = self.upload_image_for_template(app_id, image_path)
        except PartnerApiError as exc:
            raise PartnerApiError(f"erro ao fazer upload da imagem: {exc}") from exc
        sent = dataclasses.replace(
            template,
            enable_sample=True,
            allow_template_category_change=True,
            example_media=[image_id],
        )
        form = self._form(sent, [("exampleMedia", image_id)])
        self._post_template(app_id, app_token.token, form)
        return sent