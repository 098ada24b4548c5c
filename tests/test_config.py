"""Tests for settings."""

import logging

import pytest
from pydantic import ValidationError

from jujurestore.config import Settings, configure_logging, get_settings


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.ssh_user == "ubuntu"
        assert settings.ssh_identity_file is None
        assert not settings.ssh_strict_host_key_checking
        assert settings.command_timeout == 30.0
        assert settings.agent_service_prefix == "jujud-machine-"

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JUJU_RESTORE_SSH_USER", "root")
        monkeypatch.setenv("JUJU_RESTORE_COMMAND_TIMEOUT", "2.5")

        settings = Settings(_env_file=None)

        assert settings.ssh_user == "root"
        assert settings.command_timeout == 2.5

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, command_timeout=0)

    def test_get_settings_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_configure_logging(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[dict] = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        configure_logging("debug")

        assert calls[0]["level"] == "DEBUG"
