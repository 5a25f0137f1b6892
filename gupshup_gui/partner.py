"""The partner domain: aggregated services and the controllers over them."""

from __future__ import annotations

import os

import requests

from .apps import PartnerAppService
from .auth import LoginService
from .config import URL_PARTNER
from .models import PartnerAppsResponse, PartnerAppToken, PartnerTemplate, TemplateCreateRequest
from .templates import TemplateService


class PartnerService:
    """Holds the app and template services of the partner domain."""

    def __init__(
        self,
        auth: LoginService,
        session: requests.Session | None = None,
        base_url: str = URL_PARTNER,
    ) -> None:
        session = session or requests.Session()
        self.app_service = PartnerAppService(auth, session=session, base_url=base_url)
        self.template_service = TemplateService(auth, session=session, base_url=base_url)


class AppController:
    """Operations on the partner's apps."""

    def __init__(self, service: PartnerService) -> None:
        self._service = service

    def get_apps(self) -> PartnerAppsResponse:
        return self._service.app_service.get_apps()

    def get_app_token(self, app_id: str) -> PartnerAppToken:
        return self._service.app_service.get_app_token(app_id)


class TemplateController:
    """Operations on the templates of the partner's apps."""

    def __init__(self, service: PartnerService) -> None:
        self._service = service

    def get_templates(self, app_id: str) -> list[PartnerTemplate]:
        return self._service.template_service.get_templates(app_id)

    def get_template_by_id(self, app_id: str, template_id: str) -> PartnerTemplate:
        return self._service.template_service.get_template_by_id(app_id, template_id)

    def create_template_text(
        self, app_id: str, template: TemplateCreateRequest
    ) -> TemplateCreateRequest:
        return self._service.template_service.create_template_text(app_id, template)

    def create_template_image(
        self,
        app_id: str,
        image_path: str | os.PathLike[str],
        template: TemplateCreateRequest,
    ) -> TemplateCreateRequest:
        return self._service.template_service.create_template_image(
            app_id, image_path, template
        )