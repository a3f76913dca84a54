"""Unit tests for FieldValidator."""

import pytest

from tollgate.domain.services import DEFAULT_RULES, FieldValidator


@pytest.fixture
def validator() -> FieldValidator:
    return FieldValidator()


class TestRules:
    """Tests for the individual default rules."""

    @pytest.mark.parametrize("value", ["alice", "bob_42", "A_B", "x" * 20])
    def test_valid_usernames(self, validator, value):
        assert validator.validate("username", value, "username") is None

    @pytest.mark.parametrize("value", ["al", "x" * 21, "has space", "dash-name", "émile"])
    def test_invalid_usernames(self, validator, value):
        error = validator.validate("username", value, "username")

        assert error is not None
        assert error.field == "username"
        assert error.code == "username"
        assert error.message.startswith("username must be 3-20 characters")

    @pytest.mark.parametrize("value", ["0912345678", "+84912345678", "03123456789"])
    def test_valid_phones(self, validator, value):
        assert validator.validate("phone", value, "phone") is None

    @pytest.mark.parametrize("value", ["0112345678", "12345", "+1 555 0100", "091234567a"])
    def test_invalid_phones(self, validator, value):
        assert validator.validate("phone", value, "phone") is not None

    def test_national_id(self, validator):
        assert validator.validate("national_id", "012345678901", "national_id") is None
        assert validator.validate("national_id", "01234567890", "national_id") is not None
        assert validator.validate("national_id", "01234567890a", "national_id") is not None

    @pytest.mark.parametrize(
        "value",
        [
            "Password1",  # upper, lower, digit
            "password1!",  # lower, digit, symbol
            "PASSWORD1!",  # upper, digit, symbol
            "Password!",  # upper, lower, symbol
        ],
    )
    def test_strong_passwords(self, validator, value):
        assert validator.validate("password", value, "strong_password") is None

    @pytest.mark.parametrize("value", ["Pass1!", "password", "password1", "PASSWORDS!"])
    def test_weak_passwords(self, validator, value):
        assert validator.validate("password", value, "strong_password") is not None

    @pytest.mark.parametrize("value", ["Alice", "Mary-Jane O'Neil", "Nguyễn Văn An", "J. Doe"])
    def test_valid_names(self, validator, value):
        assert validator.validate("name", value, "valid_name") is None

    @pytest.mark.parametrize("value", ["R2D2", "alice@home", "<b>"])
    def test_invalid_names(self, validator, value):
        assert validator.validate("name", value, "valid_name") is not None

    @pytest.mark.parametrize(
        "value", ["", "https://example.com", "http://cdn.example.com/a/b.png?x=1"]
    )
    def test_valid_urls(self, validator, value):
        assert validator.validate("avatar_url", value, "url") is None

    @pytest.mark.parametrize("value", ["example.com", "ftp://example.com", "https://localhost"])
    def test_invalid_urls(self, validator, value):
        assert validator.validate("avatar_url", value, "url") is not None

    def test_min_and_max_use_param_in_message(self, validator):
        error = validator.validate("name", "A", "min", "2")

        assert error.message == "name must be at least 2 characters long"
        assert validator.validate("name", "A" * 101, "max", "100").code == "max"

    def test_unknown_rule_raises(self, validator):
        with pytest.raises(KeyError):
            validator.validate("name", "x", "no_such_rule")


class TestCustomisation:
    """Validators own their rules and messages."""

    def test_custom_messages(self):
        validator = FieldValidator(messages={"username": "bad {field}"})

        assert validator.validate("username", "!", "username").message == "bad username"

    def test_custom_rules_do_not_leak(self):
        rules = dict(DEFAULT_RULES)
        rules["username"] = lambda value, _: value == "root"
        custom = FieldValidator(rules=rules)

        assert custom.validate("username", "alice", "username") is not None
        assert FieldValidator().validate("username", "alice", "username") is None


class TestValidateRegistration:
    """Tests for validate_registration()."""

    def test_valid_registration(self, validator):
        errors = validator.validate_registration(
            username="alice",
            password="Password1!",
            confirm_password="Password1!",
            name="Alice Nguyen",
            phone="0912345678",
            national_id="012345678901",
            avatar_url="https://example.com/a.png",
        )

        assert errors == []

    def test_optional_fields_may_be_empty(self, validator):
        errors = validator.validate_registration(
            username="alice", password="Password1!", confirm_password="Password1!"
        )

        assert errors == []

    def test_reports_each_invalid_field_once(self, validator):
        errors = validator.validate_registration(
            username="a",
            password="weak",
            confirm_password="different",
            name="A",
            phone="123",
            national_id="42",
        )

        fields = [e.field for e in errors]
        assert fields == ["username", "password", "confirm_password", "name", "phone", "national_id"]
        assert errors[2].message == "confirm_password must match password"
        assert errors[3].code == "min"

    def test_missing_username(self, validator):
        errors = validator.validate_registration(
            username="", password="Password1!", confirm_password="Password1!"
        )

        assert [(e.field, e.code) for e in errors] == [("username", "required")]


class TestValidatePasswordReset:
    """Tests for validate_password_reset()."""

    def test_strong_password_without_confirmation(self, validator):
        assert validator.validate_password_reset("Password1!") == []

    def test_weak_password(self, validator):
        errors = validator.validate_password_reset("weak")

        assert [e.field for e in errors] == ["new_password"]

    def test_confirmation_mismatch(self, validator):
        errors = validator.validate_password_reset("Password1!", "Password2!")

        assert [e.code for e in errors] == ["eqfield"]


class TestValidateProfileUpdate:
    """Tests for validate_profile_update()."""

    def test_nothing_to_validate(self, validator):
        assert validator.validate_profile_update() == []

    def test_empty_username_rejected(self, validator):
        errors = validator.validate_profile_update(username="")

        assert [(e.field, e.code) for e in errors] == [("username", "required")]

    def test_empty_avatar_url_allowed(self, validator):
        assert validator.validate_profile_update(avatar_url="") == []

    def test_invalid_fields(self, validator):
        errors = validator.validate_profile_update(
            username="x", name="R2D2", phone="1", avatar_url="nope"
        )

        assert [e.field for e in errors] == ["username", "name", "phone", "avatar_url"]
