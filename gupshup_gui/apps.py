"""Access to the partner's apps and their per-app tokens."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from http import HTTPStatus

import requests

from .auth import AuthenticationError, LoginService
from .config import URL_PARTNER
from .models import PartnerAppsResponse, PartnerAppToken, TokenCache

MAX_RETRIES = 10
RETRY_DELAY = 2.0

_log = logging.getLogger(__name__)


class PartnerApiError(Exception):
    """A call to the partner API failed."""


class PartnerAppService:
    """Lists partner apps and fetches app tokens, caching them per app."""

    def __init__(
        self,
        auth: LoginService,
        session: requests.Session | None = None,
        base_url: str = URL_PARTNER,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._auth = auth
        self._session = session or requests.Session()
        self._base_url = base_url
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._sleep = sleep
        self._tokens: dict[str, PartnerAppToken] = {}
        self._lock = threading.Lock()

    def _get(self, url: str, token: str, context: str) -> requests.Response:
        try:
            return self._session.get(
                url,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                },
            )
        except requests.RequestException as exc:
            raise PartnerApiError(f"erro ao enviar requisição{context}: {exc}") from exc

    def get_apps(self) -> PartnerAppsResponse:
        """All apps of the partner account."""
        token = self._auth.get_cached_token()
        if token is None:
            raise PartnerApiError("token não encontrado ou expirado")

        response = self._get(self._base_url + "partner/account/api/partnerApps", token.token, "")
        try:
            return PartnerAppsResponse.from_dict(response.json())
        except (ValueError, TypeError, KeyError) as exc:
            raise PartnerApiError(f"erro ao decodificar resposta: {exc}") from exc

    def get_app_token(self, app_id: str) -> PartnerAppToken:
        """The token of ``app_id``, from cache when already fetched."""
        with self._lock:
            cached = self._tokens.get(app_id)
        if cached is not None:
            return cached
        return self._fetch_app_token(app_id)

    def refresh_app_token(self, app_id: str) -> PartnerAppToken:
        """Fetch a fresh token for ``app_id`` and replace the cached one."""
        return self._fetch_app_token(app_id)

    def _main_token(self) -> TokenCache:
        token = self._auth.get_cached_token()
        if token is not None:
            return token
        try:
            return self._auth.force_login()
        except AuthenticationError as exc:
            raise PartnerApiError(
                "token principal não encontrado ou expirado, e falha ao logar"
            ) from exc

    def _fetch_app_token(self, app_id: str) -> PartnerAppToken:
        token = self._main_token()
        url = f"{self._base_url}partner/app/{app_id}/token"

        for attempt in range(1, self._max_retries + 1):
            response = self._get(url, token.token, " de token do app")

            if response.status_code == HTTPStatus.TOO_MANY_REQUESTS:
                _log.warning(
                    "[%d/%d] Limite de requisições (429). Tentando renovar token...",
                    attempt,
                    self._max_retries,
                )
                try:
                    token = self._auth.force_login()
                except AuthenticationError as exc:
                    raise PartnerApiError(
                        f"erro ao renovar token principal após 429: {exc}"
                    ) from exc
                self._sleep(self._retry_delay)
                continue

            if response.status_code != HTTPStatus.OK:
                raise PartnerApiError(f"erro na resposta da API: {response.status_code}")

            app_token = PartnerAppToken(app_id=app_id, token=self._extract_token(response))
            with self._lock:
                self._tokens[app_id] = app_token
            return app_token

        raise PartnerApiError("não foi possível obter token do app após múltiplas tentativas")

    @staticmethod
    def _extract_token(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError as exc:
            raise PartnerApiError(
                f"erro ao decodificar resposta do token do app: {exc}"
            ) from exc
        outer = body.get("token") if isinstance(body, dict) else None
        value = outer.get("token") if isinstance(outer, dict) else None
        if not isinstance(value, str) or not value:
            raise PartnerApiError("token do app não encontrado na resposta")
        return value