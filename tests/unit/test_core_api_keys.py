import pytest

from discourse_admin.core import api_keys as api_keys_module
from discourse_admin.core.api_keys import API_KEY_REVOKED
from discourse_admin.core.client import INTERNAL_SERVER_ERROR, UNEXPECTED_BODY
from discourse_admin.core.exceptions import DiscourseRequestError, DiscourseTransportError

GENERATED = {"api_key": {"id": 7, "key": "0d4f3c2b1a", "user": {"id": 42, "username": "alice"}}}


def test_generate_user_api_key_extracts_key(discourse, session):
    session.respond(GENERATED)

    result = discourse.api_keys.generate_user_api_key(42)

    assert result.is_ok
    assert result.value == "0d4f3c2b1a"
    call = session.last_call
    assert call["method"] == "POST"
    assert call["url"] == "https://forum.example.com/admin/users/42/generate_api_key"
    assert call["data"] == {"api_key": "admin-key", "api_username": "system"}


def test_revoke_user_api_key_accepts_empty_body(discourse, session):
    session.respond(text="")

    result = discourse.api_keys.revoke_user_api_key(42)

    assert result.is_ok
    assert result.value == "API key successfully revoked"
    call = session.last_call
    assert call["method"] == "DELETE"
    assert call["url"] == "https://forum.example.com/admin/users/42/revoke_api_key"
    assert call["data"] == {"api_key": "admin-key", "api_username": "system"}


def test_generate_then_revoke(discourse, session):
    session.respond(GENERATED).respond(text="")
    assert discourse.api_keys.generate_user_api_key_or_raise(42) == "0d4f3c2b1a"
    assert discourse.api_keys.revoke_user_api_key_or_raise(42) == API_KEY_REVOKED


@pytest.mark.parametrize("method", ["generate_user_api_key", "revoke_user_api_key"])
def test_server_error(discourse, session, method):
    session.respond(text="<html>We're sorry, but something went wrong.</html>", status_code=500)
    result = getattr(discourse.api_keys, method)(42)
    assert result.is_err
    assert result.error == INTERNAL_SERVER_ERROR


def test_server_error_raising_variant(discourse, session):
    session.respond(status_code=500, text="")
    with pytest.raises(DiscourseRequestError, match="Internal server error"):
        discourse.api_keys.generate_user_api_key_or_raise(42)


def test_not_found_is_error(discourse, session):
    session.respond({"errors": ["not found"]}, status_code=404)
    result = discourse.api_keys.revoke_user_api_key(999)
    assert result.error == "Unexpected response status 404"


@pytest.mark.parametrize("method", ["generate_user_api_key", "revoke_user_api_key"])
def test_unreachable_endpoint(unreachable, method):
    assert getattr(unreachable.api_keys, method)(42).is_err
    with pytest.raises(DiscourseTransportError):
        getattr(unreachable.api_keys, f"{method}_or_raise")(42)


def test_standalone_functions_use_default_client(monkeypatch, discourse, session):
    monkeypatch.setattr(api_keys_module, "get_default_client", lambda: discourse)
    session.respond(text="")
    assert api_keys_module.revoke_user_api_key(42).value == API_KEY_REVOKED


@pytest.mark.parametrize("text", [
    "",
    "<html>maintenance</html>",
    '{"api_key": "abc"}',
    '{"api_key": {"id": 7}}',
    '{"success": "OK"}',
])
def test_generate_malformed_body_is_error(discourse, session, text):
    session.respond(text=text)
    result = discourse.api_keys.generate_user_api_key(42)
    assert result.is_err
    assert result.error == UNEXPECTED_BODY


def test_generate_strict_mode(credentials, session):
    from discourse_admin.core import DiscourseClient

    strict = DiscourseClient(credentials, session=session, unknown_fields="error")
    session.respond(GENERATED).respond({"api_key": {"key": "x"}, "extra": 1})
    assert strict.api_keys.generate_user_api_key(42).value == "0d4f3c2b1a"
    assert strict.api_keys.generate_user_api_key(42).error == "Unexpected response fields: extra"
