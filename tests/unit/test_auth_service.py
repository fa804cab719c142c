import types

import pytest

from boutique.auth import service as svc
from boutique.utils.errors import AccountCreationError


def test_create_account_returns_new_user_id(monkeypatch):
    calls = {}

    def fake_sign_up_account(email, password, options_data=None, email_redirect_to=None):
        calls.update(email=email, options_data=options_data, redirect=email_redirect_to)
        return types.SimpleNamespace(user=types.SimpleNamespace(id="new-user"), session=None)

    monkeypatch.setattr(svc, "sign_up_account", fake_sign_up_account)

    assert svc.create_account(" new@example.com ", "pw", full_name=" Ada ") == "new-user"
    assert calls["email"] == "new@example.com"
    assert calls["options_data"] == {"full_name": "Ada"}
    assert calls["redirect"].endswith("/auth/callback")


def test_create_account_error_is_account_creation_error(monkeypatch):
    def fake_sign_up(**kw):
        raise Exception("User already registered")
    monkeypatch.setattr(svc, "sign_up_account", fake_sign_up)
    with pytest.raises(AccountCreationError) as exc:
        svc.create_account("x@example.com", "pw")
    assert exc.value.message == "Failed to create account"


def test_create_account_without_user_is_error(monkeypatch):
    monkeypatch.setattr(svc, "sign_up_account", lambda **kw: types.SimpleNamespace(user=None))
    with pytest.raises(AccountCreationError):
        svc.create_account("x@example.com", "pw")


def test_get_user_from_token_normalizes(monkeypatch):
    monkeypatch.setattr(svc, "_repo_get_user_from_token", lambda token: {
        "id": "u1", "email": "a@b.c", "user_metadata": {"full_name": "Ada"},
    })
    assert svc.get_user_from_token("tok") == {
        "id": "u1", "email": "a@b.c", "metadata": {"full_name": "Ada"}, "token": "tok",
    }
