"""Partner account authentication and the shared in-memory token store."""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Callable
from typing import Any

import requests

from .config import URL_PARTNER, get_email, get_password, load_env
from .models import Partner, TokenCache

TOKEN_KEY = "gupshup_token"
TOKEN_TTL = 3600.0

_log = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Logging in to the partner account failed."""


class TokenStore:
    """A thread-safe key/value store whose entries expire after a time to live."""

    def __init__(
        self,
        default_ttl: float = TOKEN_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_ttl = default_ttl
        self._clock = clock
        self._items: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        """Return the live value stored under ``key``, or None."""
        with self._lock:
            entry = self._items.get(key)
            if entry is None:
                return None
            value, deadline = entry
            if self._clock() > deadline:
                del self._items[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store ``value`` under ``key`` for ``ttl`` seconds (default TTL when None)."""
        lifetime = self._default_ttl if ttl is None else ttl
        with self._lock:
            self._items[key] = (value, self._clock() + lifetime)


_SHARED_STORE = TokenStore()


class LoginService:
    """Obtains the partner access token and keeps it in a token store.

    Services built without an explicit store share one process-wide store.
    """

    def __init__(
        self,
        store: TokenStore | None = None,
        session: requests.Session | None = None,
        base_url: str = URL_PARTNER,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store if store is not None else _SHARED_STORE
        self._session = session or requests.Session()
        self._base_url = base_url
        self._clock = clock

    def authenticate(self, partner: Partner) -> TokenCache:
        """Return the cached token, or log in with ``partner`` and cache the result."""
        cached = self.get_cached_token()
        if cached is not None:
            return cached

        try:
            response = self._session.post(
                self._base_url + "partner/account/login",
                data={"email": partner.email, "password": partner.password},
            )
        except requests.RequestException as exc:
            raise AuthenticationError(str(exc)) from exc

        if response.status_code != 200:
            raise AuthenticationError(f"erro no login: {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise AuthenticationError(f"erro ao decodificar resposta: {exc}") from exc

        token = body.get("token") if isinstance(body, dict) else None
        if not isinstance(token, str):
            raise AuthenticationError("token não encontrado na resposta")

        cache = TokenCache(token=token, expires_at=int(self._clock() + TOKEN_TTL))
        self.store.set(TOKEN_KEY, cache, TOKEN_TTL)
        return cache

    def get_cached_token(self) -> TokenCache | None:
        """The live cached token, or None when absent or expired."""
        return self.store.get(TOKEN_KEY)

    def force_login(self) -> TokenCache:
        """Authenticate with the credentials found in the environment."""
        email, password = get_email(), get_password()
        return self.authenticate(Partner(email=email, password=password))


class LoginController:
    """Performs the startup login and exposes the current token."""

    def __init__(self, service: LoginService, env_path: str | os.PathLike[str] = ".env") -> None:
        self._service = service
        self._env_path = env_path

    def handle_login(self) -> TokenCache:
        """Load credentials from the environment and log in.

        Raises AuthenticationError when credentials are missing or rejected.
        """
        load_env(self._env_path)
        email, password = get_email(), get_password()
        if not email or not password:
            raise AuthenticationError("O usuário e senha não foram informados no .env")
        try:
            token = self._service.authenticate(Partner(email=email, password=password))
        except AuthenticationError as exc:
            raise AuthenticationError(f"Erro ao autenticar: {exc}") from exc
        _log.info("Token atual: %s", token.token)
        return token

    def fetch_token(self) -> TokenCache | None:
        """The current cached token, or None."""
        return self._service.get_cached_token()