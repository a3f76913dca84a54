"""Unit tests for the Account entity."""

from datetime import datetime, timezone

import pytest

from tollgate.domain.entities import Account, NewAccount


def test_defaults():
    account = Account(username="alice", email="alice@example.com", password_hash="h")

    assert account.email_verified is False
    assert account.national_id is None
    assert account.is_deleted is False
    assert account.id


def test_empty_national_id_becomes_none():
    account = Account(username="alice", email="a@example.com", password_hash="h", national_id="")

    assert account.national_id is None


@pytest.mark.parametrize("field", ["username", "email", "password_hash"])
def test_required_fields(field):
    values = {"username": "alice", "email": "a@example.com", "password_hash": "h"}
    values[field] = ""

    with pytest.raises(ValueError):
        Account(**values)


def test_soft_deleted():
    account = Account(
        username="alice",
        email="a@example.com",
        password_hash="h",
        deleted_at=datetime.now(timezone.utc),
    )

    assert account.is_deleted is True


def test_new_account_hides_password_in_repr():
    candidate = NewAccount(username="alice", email="a@example.com", password="S3cret!pass")

    assert "S3cret!pass" not in repr(candidate)
