"""Tests for local user profiles."""

import json

import pytest

from jobtracker.accounts import (
    MSG_BAD_CREDENTIALS,
    MSG_EMAIL_TAKEN,
    MSG_PASSWORD_MISMATCH,
    MSG_PASSWORD_TOO_SHORT,
    AccountBook,
)
from jobtracker.models import Severity
from jobtracker.storage import ACCOUNTS_FILE


@pytest.fixture
def book(tmp_path, store):
    return AccountBook(store, tmp_path)


def _last(store):
    return store.notifications.items[-1]


def test_register_signs_in_and_hashes(book, store, tmp_path):
    user = book.register("小明", "Ming@Example.com", "secret123", "secret123")

    assert store.user == user
    assert user.email == "ming@example.com"
    assert _last(store).severity is Severity.SUCCESS

    raw = (tmp_path / ACCOUNTS_FILE).read_text(encoding="utf-8")
    assert "secret123" not in raw
    record = json.loads(raw)["users"][0]
    assert record["nickname"] == "小明"
    assert record["password_hash"]


@pytest.mark.parametrize("password, confirm, message", [
    ("secret123", "secret124", MSG_PASSWORD_MISMATCH),
    ("123", "123", MSG_PASSWORD_TOO_SHORT),
])
def test_register_validation(book, store, tmp_path, password, confirm, message):
    assert book.register("小明", "ming@example.com", password, confirm) is None

    assert store.user is None
    assert _last(store).message == message
    assert _last(store).severity is Severity.ERROR
    assert not (tmp_path / ACCOUNTS_FILE).exists()


def test_duplicate_email_is_rejected(book, store):
    first = book.register("小明", "ming@example.com", "secret123", "secret123")
    assert book.register("冒名", "MING@example.com", "other123", "other123") is None

    assert store.user == first
    assert _last(store).message == MSG_EMAIL_TAKEN


def test_login_and_logout(book, store):
    book.register("小明", "ming@example.com", "secret123", "secret123")
    book.logout()
    assert store.user is None

    assert book.login("ming@example.com", "wrong-pass") is None
    assert _last(store).message == MSG_BAD_CREDENTIALS
    assert store.user is None

    user = book.login("ming@example.com", "secret123")
    assert user is not None
    assert store.user.nickname == "小明"


def test_login_unknown_email(book, store):
    assert book.login("nobody@example.com", "secret123") is None
    assert _last(store).message == MSG_BAD_CREDENTIALS


def test_update_profile_persists(book, store, tmp_path):
    book.register("小明", "ming@example.com", "secret123", "secret123")
    assert book.update_profile(nickname="明明", avatar="data:image/png;base64,AAAA")

    book.logout()
    user = book.login("ming@example.com", "secret123")
    assert user.nickname == "明明"
    assert user.avatar == "data:image/png;base64,AAAA"


def test_update_profile_requires_login(book):
    assert not book.update_profile(nickname="x")


def test_change_password(book, store):
    book.register("小明", "ming@example.com", "secret123", "secret123")

    assert not book.change_password("wrong-old", "newpass1", "newpass1")
    assert not book.change_password("secret123", "newpass1", "newpass2")
    assert _last(store).message == MSG_PASSWORD_MISMATCH
    assert book.change_password("secret123", "newpass1", "newpass1")

    book.logout()
    assert book.login("ming@example.com", "secret123") is None
    assert book.login("ming@example.com", "newpass1") is not None
