"""Request-shape validators shared by the auth and note schemas."""

from datetime import date

import pytest
from pydantic import ValidationError

from notes_api.api.schemas import rules
from notes_api.api.schemas.auth import EmailPayload, RegisterPayload


@pytest.mark.parametrize(
    "name, message",
    [
        ("A", "Name must be at least 2 characters long"),
        ("A" * 51, "Name must be at most 50 characters"),
        ("Jane-Doe", "Name can only contain letters and spaces"),
    ],
)
def test_check_name_messages(name, message):
    with pytest.raises(ValueError, match=message):
        rules.check_name(name)


def test_check_name_accepts_spaces():
    assert rules.check_name("Mary Jane") == "Mary Jane"


def test_date_of_birth_rules():
    today = date(2024, 6, 15)
    assert rules.check_date_of_birth("15/06/2011", today=today) == "15/06/2011"
    with pytest.raises(ValueError, match="at least 13"):
        rules.check_date_of_birth("16/06/2011", today=today)
    with pytest.raises(ValueError, match="valid date"):
        rules.check_date_of_birth("31/02/1990", today=today)
    with pytest.raises(ValueError, match="DD/MM/YYYY"):
        rules.check_date_of_birth("1/6/1990", today=today)


def test_age_on_birthday_boundary():
    assert rules.age_on(date(2000, 3, 1), date(2013, 2, 28)) == 12
    assert rules.age_on(date(2000, 3, 1), date(2013, 3, 1)) == 13


def test_email_normalized_and_validated():
    assert EmailPayload(email="  Bob@Example.ORG ").email == "bob@example.org"
    with pytest.raises(ValidationError) as exc:
        EmailPayload(email="not-an-email")
    assert "Please enter a valid email address" in str(exc.value)


def test_register_payload_accepts_alias_and_field_name():
    by_alias = RegisterPayload.model_validate(
        {"name": "Alice", "email": "a@example.com", "dateOfBirth": "15/06/1990"}
    )
    by_name = RegisterPayload(name="Alice", email="a@example.com", date_of_birth="15/06/1990")
    assert by_alias == by_name


def test_title_and_content_bounds():
    assert rules.check_title("  hi  ") == "hi"
    assert rules.check_content("x" * 1000) == "x" * 1000
    with pytest.raises(ValueError, match="Title is required"):
        rules.check_title("   ")
    with pytest.raises(ValueError, match="at most 1000"):
        rules.check_content("x" * 1001)


def test_title_length_checked_before_trim():
    with pytest.raises(ValueError, match="at most 100"):
        rules.check_title("x" * 100 + " ")
    assert rules.check_title(" " + "x" * 98 + " ") == "x" * 98
