"""Field validation for account input.

Each rule is a predicate over one string value; messages are templates with
``{field}`` and ``{param}`` placeholders. A validator instance owns its rule
set and message table, so callers can construct variants without touching
shared state.
"""

import re
import unicodedata
from collections.abc import Callable, Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class FieldValidationError:
    """Represents a field validation error.

    Attributes:
        field: The field name as it appears in the request.
        message: Human-readable error message.
        code: Machine-readable error code (the rule name).
    """

    field: str
    message: str
    code: str


Rule = Callable[[str, str | None], bool]

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]{3,20}$")
PHONE_PATTERN = re.compile(r"^(\+84|0)[35789][0-9]{8,9}$")
NATIONAL_ID_PATTERN = re.compile(r"^[0-9]{12}$")
NAME_PATTERN = re.compile(r"^[a-zA-ZÀ-ỹ\s\-'\.]+$")
URL_PATTERN = re.compile(r"^(http|https)://[a-zA-Z0-9\-\.]+\.[a-zA-Z]{2,}(/\S*)?$")

STRONG_PASSWORD_MIN_LENGTH = 8
STRONG_PASSWORD_MIN_CLASSES = 3


def is_strong_password(password: str, param: str | None = None) -> bool:
    """At least 8 characters drawn from at least three character classes.

    The classes are uppercase, lowercase, digits and punctuation or symbols.
    """
    if len(password) < STRONG_PASSWORD_MIN_LENGTH:
        return False
    classes: set[str] = set()
    for char in password:
        category = unicodedata.category(char)
        if category == "Lu":
            classes.add("upper")
        elif category == "Ll":
            classes.add("lower")
        elif category.startswith("N"):
            classes.add("digit")
        elif category[0] in ("P", "S"):
            classes.add("special")
    return len(classes) >= STRONG_PASSWORD_MIN_CLASSES


DEFAULT_RULES: dict[str, Rule] = {
    "required": lambda value, _: bool(value and value.strip()),
    "min": lambda value, param: len(value) >= int(param or 0),
    "max": lambda value, param: len(value) <= int(param or 0),
    "username": lambda value, _: bool(USERNAME_PATTERN.match(value)),
    "phone": lambda value, _: bool(PHONE_PATTERN.match(value)),
    "national_id": lambda value, _: bool(NATIONAL_ID_PATTERN.match(value)),
    "strong_password": is_strong_password,
    "valid_name": lambda value, _: bool(NAME_PATTERN.match(value)),
    "url": lambda value, _: value == "" or bool(URL_PATTERN.match(value)),
}

DEFAULT_MESSAGES: dict[str, str] = {
    "required": "{field} is required",
    "min": "{field} must be at least {param} characters long",
    "max": "{field} must not exceed {param} characters",
    "eqfield": "{field} must match {param}",
    "username": (
        "{field} must be 3-20 characters long and can only contain letters, "
        "numbers, and underscores"
    ),
    "phone": "{field} must be a valid Vietnamese phone number",
    "national_id": "{field} must be a valid 12-digit Citizen Identity Card number",
    "strong_password": (
        "{field} must be at least 8 characters long and contain at least three of: "
        "uppercase letters, lowercase letters, numbers, symbols"
    ),
    "valid_name": "{field} must contain only letters, spaces, and characters like hyphen or apostrophe",
    "url": "{field} must be a valid URL or empty",
}

NAME_MIN_LENGTH = "2"
NAME_MAX_LENGTH = "100"


class FieldValidator:
    """Validates request fields against a named rule set."""

    def __init__(
        self,
        rules: Mapping[str, Rule] | None = None,
        messages: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the validator.

        Args:
            rules: Rule predicates by name; defaults to DEFAULT_RULES.
            messages: Message templates by rule name; defaults to DEFAULT_MESSAGES.
        """
        self._rules = dict(DEFAULT_RULES if rules is None else rules)
        self._messages = dict(DEFAULT_MESSAGES if messages is None else messages)

    def message_for(self, field: str, rule: str, param: str | None = None) -> str:
        template = self._messages.get(rule, "{field} failed validation for rule {rule}")
        return template.format(field=field, param=param or "", rule=rule)

    def _error(self, field: str, rule: str, param: str | None = None) -> FieldValidationError:
        return FieldValidationError(
            field=field,
            message=self.message_for(field, rule, param),
            code=rule,
        )

    def validate(
        self, field: str, value: str, rule: str, param: str | None = None
    ) -> FieldValidationError | None:
        """Check one value against one rule.

        Raises:
            KeyError: The rule is not registered with this validator.
        """
        check = self._rules[rule]
        if check(value, param):
            return None
        return self._error(field, rule, param)

    def validate_match(
        self, field: str, value: str, other_field: str, other_value: str
    ) -> FieldValidationError | None:
        """Check that a confirmation field equals the field it confirms."""
        if value == other_value:
            return None
        return self._error(field, "eqfield", other_field)

    def _first_error(
        self, field: str, value: str, checks: list[tuple[str, str | None]]
    ) -> FieldValidationError | None:
        # One message per field, from the first failing rule
        for rule, param in checks:
            error = self.validate(field, value, rule, param)
            if error is not None:
                return error
        return None

    def _name_checks(self) -> list[tuple[str, str | None]]:
        return [("min", NAME_MIN_LENGTH), ("max", NAME_MAX_LENGTH), ("valid_name", None)]

    def validate_registration(
        self,
        username: str,
        password: str,
        confirm_password: str,
        name: str = "",
        phone: str = "",
        national_id: str | None = None,
        avatar_url: str = "",
    ) -> list[FieldValidationError]:
        """Validate a registration request.

        Username and password are required. Optional fields are checked only
        when they are non-empty.

        Returns:
            List of validation errors. Empty list if the input is valid.
        """
        candidates = [
            self._first_error("username", username, [("required", None), ("username", None)]),
            self._first_error(
                "password", password, [("required", None), ("strong_password", None)]
            ),
            self.validate_match("confirm_password", confirm_password, "password", password),
        ]
        if name:
            candidates.append(self._first_error("name", name, self._name_checks()))
        if phone:
            candidates.append(self.validate("phone", phone, "phone"))
        if national_id:
            candidates.append(self.validate("national_id", national_id, "national_id"))
        if avatar_url:
            candidates.append(self.validate("avatar_url", avatar_url, "url"))
        return [error for error in candidates if error is not None]

    def validate_password_reset(
        self, new_password: str, confirm_password: str | None = None
    ) -> list[FieldValidationError]:
        """Validate a new password, and its confirmation when one is given."""
        candidates = [
            self._first_error(
                "new_password", new_password, [("required", None), ("strong_password", None)]
            )
        ]
        if confirm_password is not None:
            candidates.append(
                self.validate_match(
                    "confirm_password", confirm_password, "new_password", new_password
                )
            )
        return [error for error in candidates if error is not None]

    def validate_profile_update(
        self,
        username: str | None = None,
        name: str | None = None,
        phone: str | None = None,
        avatar_url: str | None = None,
    ) -> list[FieldValidationError]:
        """Validate the fields present in a profile update.

        Empty name and phone mean "unchanged" and are not checked.
        """
        candidates: list[FieldValidationError | None] = []
        if username is not None:
            candidates.append(
                self._first_error("username", username, [("required", None), ("username", None)])
            )
        if name:
            candidates.append(self._first_error("name", name, self._name_checks()))
        if phone:
            candidates.append(self.validate("phone", phone, "phone"))
        if avatar_url is not None:
            candidates.append(self.validate("avatar_url", avatar_url, "url"))
        return [error for error in candidates if error is not None]
