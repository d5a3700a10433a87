import time
from datetime import date

import pytest

from taskmanager.errors import ValidationError
from taskmanager.validation import (
    ensure_valid,
    parse_due_date,
    validate_login,
    validate_profile_update,
    validate_registration,
    validate_task_input,
    validate_task_query,
)

COMPOSITION_RULE = (
    "Password must contain at least one uppercase letter, one lowercase letter, and one number"
)


def test_registration_accepts_valid_input():
    assert validate_registration("Ann Smith", "ann@example.com", "Secret123") == []


def test_weak_password_reports_length_and_composition_together():
    errors = validate_registration("Ann", "ann@x.com", "abc")
    assert "Password must be at least 6 characters long" in errors
    assert COMPOSITION_RULE in errors


def test_password_without_digit_is_rejected():
    assert validate_registration("Ann", "ann@x.com", "Abcdefgh") == [COMPOSITION_RULE]


def test_password_too_long():
    errors = validate_registration("Ann", "ann@x.com", "Aa1" * 50)
    assert errors == ["Password cannot exceed 128 characters"]


def test_registration_collects_every_violation():
    errors = validate_registration(" A ", "not-an-email", "")
    assert errors == [
        "Name must be at least 2 characters long",
        "Please enter a valid email address",
        "Password is required",
    ]


@pytest.mark.parametrize("name, message", [
    ("A" * 51, "Name cannot exceed 50 characters"),
    ("R2D2", "Name cannot contain numbers"),
    (None, "Name must be at least 2 characters long"),
])
def test_name_rules(name, message):
    assert message in validate_registration(name, "ann@x.com", "Secret123")


@pytest.mark.parametrize("email", ["ann@x.com", "first.last@mail.example.org", "a-b@c-d.io"])
def test_valid_emails(email):
    assert validate_registration("Ann", email, "Secret123") == []


@pytest.mark.parametrize("email", ["ann", "ann@", "@x.com", "ann@x", "ann@x.company"])
def test_invalid_emails(email):
    assert validate_registration("Ann", email, "Secret123") == ["Please enter a valid email address"]


@pytest.mark.parametrize("email", ["a" * 40 + "!", "a" * 40 + "@" + "b" * 40 + "!", "a.a." * 20 + "@x"])
def test_malformed_email_is_rejected_quickly(email):
    started = time.perf_counter()
    assert validate_registration("Ann", email, "Secret123") == ["Please enter a valid email address"]
    assert time.perf_counter() - started < 0.5


def test_overlong_email_is_rejected():
    email = "a" * 250 + "@x.com"
    assert validate_registration("Ann", email, "Secret123") == ["Please enter a valid email address"]
    assert validate_profile_update(email=email) == ["Please enter a valid email address"]


def test_login_requires_both_fields():
    assert validate_login("", None) == ["Email is required", "Password is required"]
    assert validate_login("ann@x.com", "whatever") == []


def test_profile_update_only_checks_present_fields():
    assert validate_profile_update() == []
    assert validate_profile_update(name="Bo") == []
    assert validate_profile_update(name="B") == ["Name must be at least 2 characters long"]
    assert validate_profile_update(email="bad") == ["Please enter a valid email address"]


def test_profile_picture_must_be_http_url():
    assert validate_profile_update(profile_picture="https://img.example.com/me.png") == []
    assert validate_profile_update(profile_picture="javascript:alert(1)") == [
        "Profile picture must be a valid http(s) URL"
    ]


def test_task_input_accepts_valid_task():
    assert validate_task_input("Buy milk", "", "2030-01-15", "Medium") == []
    assert validate_task_input("Buy milk", None, "2030-01-15", "High", "In Progress") == []


def test_task_titles_may_contain_digits():
    assert validate_task_input("Pay 2 invoices", None, "2030-01-15", "Low") == []


def test_task_input_reports_all_errors():
    errors = validate_task_input("   ", "x" * 1001, "not a date", "Urgent", "Done")
    assert errors == [
        "Task title is required",
        "Task description cannot exceed 1000 characters",
        "Invalid due date format",
        "Priority must be one of: Low, Medium, High",
        "Status must be one of: Pending, In Progress, Completed",
    ]


def test_task_input_missing_required_fields():
    assert validate_task_input() == [
        "Task title is required",
        "Due date is required",
        "Priority is required",
    ]


def test_task_title_length_limit():
    assert validate_task_input("t" * 200, None, "2030-01-15", "Low") == []
    assert validate_task_input("t" * 201, None, "2030-01-15", "Low") == [
        "Task title cannot exceed 200 characters"
    ]


def test_parse_due_date():
    assert parse_due_date("2030-01-15") == date(2030, 1, 15)
    assert parse_due_date("2030-01-15T10:30:00.000Z") == date(2030, 1, 15)
    assert parse_due_date("2030-02-30") is None
    assert parse_due_date("") is None
    assert parse_due_date(None) is None


def test_task_query_rejects_unknown_filter_values():
    assert validate_task_query("Pending", "High") == []
    assert validate_task_query(None, None) == []
    assert len(validate_task_query("Done", "Urgent")) == 2


def test_ensure_valid_raises_with_all_messages():
    ensure_valid([])
    with pytest.raises(ValidationError) as excinfo:
        ensure_valid(["first", "second"])
    assert excinfo.value.errors == ["first", "second"]
    assert excinfo.value.status_code == 400
