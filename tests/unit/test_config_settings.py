import pytest

from discourse_admin.config import settings
from discourse_admin.config.settings import AppConfig, load_settings


@pytest.fixture()
def run_secrets(monkeypatch, tmp_path):
    """Redirect /run/secrets to a temporary directory."""
    real_path = settings.Path

    def fake_path(target):
        if str(target) == "/run/secrets":
            return tmp_path
        return real_path(target)

    monkeypatch.setattr(settings, "Path", fake_path)
    return tmp_path


def test_load_settings_from_environment(discourse_env, run_secrets):
    cfg = load_settings()
    assert cfg.discourse_endpoint == "https://forum.example.com"
    assert cfg.discourse_username == "system"
    assert cfg.discourse_api_key == "env-key"
    assert cfg.request_timeout is None
    assert cfg.unknown_fields == "ignore"


def test_api_key_prefers_run_secrets(discourse_env, run_secrets):
    (run_secrets / "discourse_api_key").write_text("file-key\n")
    assert load_settings().discourse_api_key == "file-key"


def test_endpoint_is_required(discourse_env, run_secrets, monkeypatch):
    monkeypatch.delenv("DISCOURSE_ENDPOINT")
    with pytest.raises(RuntimeError, match="DISCOURSE_ENDPOINT"):
        load_settings()


def test_lookup_only_configuration(discourse_env, run_secrets, monkeypatch):
    monkeypatch.delenv("DISCOURSE_USERNAME")
    monkeypatch.delenv("DISCOURSE_API_KEY")
    cfg = load_settings()
    assert not cfg.credentials.is_privileged


def test_timeout_and_unknown_fields(discourse_env, run_secrets, monkeypatch):
    monkeypatch.setenv("DISCOURSE_REQUEST_TIMEOUT", "7.5")
    monkeypatch.setenv("DISCOURSE_UNKNOWN_FIELDS", "ERROR")
    cfg = load_settings()
    assert cfg.request_timeout == 7.5
    assert cfg.unknown_fields == "error"


@pytest.mark.parametrize("value", ["soon", "0", "-3"])
def test_invalid_timeout(discourse_env, run_secrets, monkeypatch, value):
    monkeypatch.setenv("DISCOURSE_REQUEST_TIMEOUT", value)
    with pytest.raises(RuntimeError, match="DISCOURSE_REQUEST_TIMEOUT"):
        load_settings()


def test_invalid_unknown_fields_policy(discourse_env, run_secrets, monkeypatch):
    monkeypatch.setenv("DISCOURSE_UNKNOWN_FIELDS", "warn")
    with pytest.raises(RuntimeError, match="DISCOURSE_UNKNOWN_FIELDS"):
        load_settings()


def test_credentials_property_and_masked_repr():
    cfg = AppConfig(
        discourse_endpoint="https://forum.example.com",
        discourse_username="system",
        discourse_api_key="top-secret",
    )
    assert cfg.credentials.api_key == "top-secret"
    assert cfg.credentials.username == "system"
    assert "top-secret" not in repr(cfg)


def test_client_from_settings(discourse_env, run_secrets, monkeypatch):
    from discourse_admin.core import DiscourseClient

    monkeypatch.setenv("DISCOURSE_REQUEST_TIMEOUT", "3")
    client = DiscourseClient.from_settings()
    assert client.timeout == 3.0
    assert client.credentials.api_key == "env-key"
