import logging
import os
from unittest import mock

from gupshup_gui import config


def _write_env(directory, email, secret):
    env_file = directory / ".env"
    env_file.write_text(f"EMAIL={email}\nSENHA={secret}\n", encoding="utf-8")
    return env_file


def test_load_env_reads_credentials(tmp_path):
    password = "password"
    env_file = _write_env(tmp_path, "user@example.com", password)
    with mock.patch.dict(os.environ, clear=False):
        os.environ.pop("EMAIL", None)
        os.environ.pop("SENHA", None)
        assert config.load_env(env_file) is True
        assert config.get_email() == "user@example.com"
        assert config.get_password() == password


def test_load_env_does_not_override_existing(tmp_path):
    password = "password"
    env_file = _write_env(tmp_path, "other@example.com", password)
    with mock.patch.dict(os.environ, {"EMAIL": "user@example.com"}, clear=False):
        os.environ.pop("SENHA", None)
        config.load_env(env_file)
        assert config.get_email() == "user@example.com"
        assert config.get_password() == password


def test_load_env_missing_file_warns(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="gupshup_gui.config"):
        loaded = config.load_env(tmp_path / "absent.env")
    assert loaded is False
    assert any(".env" in record.getMessage() for record in caplog.records)


def test_getters_empty_when_unset():
    with mock.patch.dict(os.environ, clear=False):
        os.environ.pop("EMAIL", None)
        os.environ.pop("SENHA", None)
        assert config.get_email() == ""
        assert config.get_password() == ""