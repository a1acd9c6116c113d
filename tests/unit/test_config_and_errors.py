# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from mailprobe import config
from mailprobe.config import DEFAULT_USER_AGENT, EmailSettings, HttpSettings, ServiceConfig
from mailprobe.errors import MailProbeError, PortInUseError


def test_http_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("MAILPROBE_HTTP_TIMEOUT", "5.5")
    monkeypatch.setenv("MAILPROBE_USER_AGENT", "CustomAgent/1.0")
    monkeypatch.setenv("MAILPROBE_HTTP_REDIRECTS", "false")
    monkeypatch.setenv("MAILPROBE_HTTP_VERIFY_SSL", "0")
    monkeypatch.setenv("MAILPROBE_HTTP_MAX_BODY_BYTES", "1024")

    settings = config.load_http_settings()

    assert settings.timeout == 5.5
    assert settings.user_agent == "CustomAgent/1.0"
    assert settings.allow_redirects is False
    assert settings.verify_ssl is False
    assert settings.max_body_bytes == 1024


def test_http_settings_ignore_invalid_values(monkeypatch):
    monkeypatch.setenv("MAILPROBE_HTTP_TIMEOUT", "soon")
    monkeypatch.setenv("MAILPROBE_HTTP_MAX_BODY_BYTES", "-1")
    settings = HttpSettings.from_env()
    assert settings.timeout == 10.0
    assert settings.max_body_bytes == HttpSettings.max_body_bytes
    assert settings.user_agent == DEFAULT_USER_AGENT


def test_service_config_from_env(monkeypatch):
    monkeypatch.setenv("MAILPROBE_PORT", "4444")
    monkeypatch.setenv("MAILPROBE_ALLOWED_ORIGINS", "https://a.example, https://b.example ,")
    cfg = config.load_service_config()
    assert cfg.port == 4444
    assert cfg.allowed_origins == frozenset({"https://a.example", "https://b.example"})
    assert cfg.mount_prefix == "/api/email"


def test_service_config_defaults_without_env(monkeypatch):
    for name in ("MAILPROBE_PORT", "MAILPROBE_ALLOWED_ORIGINS", "MAILPROBE_MOUNT_PREFIX", "MAILPROBE_HOST"):
        monkeypatch.delenv(name, raising=False)
    cfg = ServiceConfig.from_env()
    assert cfg.port == 3333
    assert "http://localhost:3000" in cfg.allowed_origins
    assert ServiceConfig(allowed_origins=["x"]).allowed_origins == frozenset({"x"})


def test_email_settings_from_env(monkeypatch):
    monkeypatch.setenv("RESEND_API_KEY", "re_test")
    monkeypatch.setenv("MAILPROBE_FRONTEND_URL", "https://app.example/")
    settings = EmailSettings.from_env()
    assert settings.provider_configured is True
    assert settings.frontend_url == "https://app.example/"
    assert "re_test" not in repr(settings)


def test_port_in_use_error_message():
    err = PortInUseError("127.0.0.1", 3333, "Address already in use")
    assert isinstance(err, MailProbeError)
    assert str(err) == "Port 3333 on 127.0.0.1 is already in use (Address already in use)"
