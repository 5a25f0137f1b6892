"""Service configuration: partner API location and credentials from the environment."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

URL_PARTNER = "https://partner.gupshup.io/"

_log = logging.getLogger(__name__)


def load_env(path: str | os.PathLike[str] = ".env") -> bool:
    """Load variables from a dotenv file without overriding ones already set.

    Returns True when the file was found and loaded.
    """
    env_path = Path(path)
    if not env_path.is_file():
        _log.warning(".env não encontrado, usando variáveis de ambiente do sistema.")
        return False
    load_dotenv(env_path, override=False)
    return True


def get_email() -> str:
    """Partner account e-mail, or an empty string when unset."""
    return os.environ.get("EMAIL", "")


def get_password() -> str:
    """Partner account password, or an empty string when unset."""
    return os.environ.get("SENHA", "")