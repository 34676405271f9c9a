"""Tests for secret redaction in structured logs"""

from kubeweave.shared.infrastructure import logging as kubeweave_logging
from kubeweave.shared.infrastructure.config import Settings, settings
from kubeweave.shared.infrastructure.logging import secret_redactor
from kubeweave.shared.utils.masking import SECRET_MASK, censor_secret_payload


def test_sensitive_keys_are_masked():
    """value/token/password never reach a renderer"""
    event = secret_redactor(None, "info", {"event": "x", "value": "hunter2", "token": "t", "secret": "API_KEY"})

    assert event["value"] == SECRET_MASK
    assert event["token"] == SECRET_MASK
    assert event["secret"] == "API_KEY"


def test_nested_manifest_data_is_masked():
    """Manifests keep their shape but lose data values"""
    manifest = {"kind": "Secret", "metadata": {"name": "app"}, "data": {"API_KEY": "YWJj"}}

    event = secret_redactor(None, "info", {"event": "x", "manifest": manifest})

    assert event["manifest"]["data"] == {"API_KEY": SECRET_MASK}
    assert event["manifest"]["metadata"] == {"name": "app"}
    assert manifest["data"] == {"API_KEY": "YWJj"}


def test_redaction_can_be_disabled(monkeypatch):
    """log_redaction_enabled=False leaves events untouched"""
    monkeypatch.setattr(kubeweave_logging.settings, "log_redaction_enabled", False)

    event = secret_redactor(None, "info", {"event": "x", "value": "hunter2"})

    assert event["value"] == "hunter2"


def test_censor_secret_payload():
    """Every data and stringData value is masked"""
    payload = {"kind": "Secret", "data": {"a": "1", "b": "2"}, "stringData": {"c": "3"}}

    censored = censor_secret_payload(payload)

    assert censored["data"] == {"a": SECRET_MASK, "b": SECRET_MASK}
    assert censored["stringData"] == {"c": SECRET_MASK}
    assert payload["data"] == {"a": "1", "b": "2"}


def test_settings_from_environment(monkeypatch):
    """KUBEWEAVE_* variables configure the settings"""
    monkeypatch.setenv("KUBEWEAVE_KUBECTL_PATH", "/opt/kubectl")
    monkeypatch.setenv("KUBEWEAVE_APP_ENV", "production")

    loaded = Settings(_env_file=None)

    assert loaded.kubectl_path == "/opt/kubectl"
    assert loaded.is_production
    assert settings.app_name == "kubeweave"
