"""Tests for AuthService registration and login."""

import pytest

from tutorbook.auth import decode_access_token
from tutorbook.core.exceptions import (
    DuplicateEmailException,
    UnauthorizedException,
    ValidationException,
)
from tutorbook.models.tutor import TutorProfile
from tutorbook.models.user import User
from tutorbook.services.auth_service import AuthService


def test_register_student(db):
    user = AuthService(db).register_user(
        name="Sam", email="Sam@Example.com", password="secret123", role="student"
    )

    assert user.role == "student"
    assert user.email == "sam@example.com"
    assert user.hashed_password != "secret123"
    assert user.tutor_profile is None


def test_register_tutor_creates_profile(db):
    user = AuthService(db).register_user(
        name="Tara",
        email="tara@example.com",
        password="secret123",
        role="tutor",
        subjects=["Math", " math ", "Physics", ""],
        bio="Ten years in classrooms",
        experience=10,
        hourly_rate=45,
    )

    profile = user.tutor_profile
    assert profile is not None
    assert profile.subject_names == ["Math", "Physics"]
    assert profile.years_experience == 10
    assert float(profile.hourly_rate) == 45.0
    assert profile.rating is None
    assert profile.total_sessions == 0


def test_duplicate_email_is_case_insensitive(db):
    service = AuthService(db)
    service.register_user(name="A", email="dup@example.com", password="secret123", role="student")

    with pytest.raises(DuplicateEmailException):
        service.register_user(
            name="B", email="DUP@example.com", password="secret123", role="student"
        )


def test_concurrent_duplicate_registration_is_conflict(db, monkeypatch):
    service = AuthService(db)
    service.register_user(name="A", email="race@example.com", password="secret123", role="student")
    # The other registration committed after our pre-insert lookup.
    monkeypatch.setattr(service.user_repository, "email_exists", lambda email: False)

    with pytest.raises(DuplicateEmailException) as exc_info:
        service.register_user(
            name="B", email="race@example.com", password="secret123", role="tutor"
        )

    assert exc_info.value.code == "DUPLICATE_EMAIL"
    assert db.query(User).filter(User.email == "race@example.com").count() == 1
    assert db.query(TutorProfile).count() == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"email": "not-an-email"},
        {"password": "123"},
        {"role": "admin"},
        {"name": "  "},
    ],
)
def test_register_validation(db, overrides):
    kwargs = dict(name="Sam", email="sam@example.com", password="secret123", role="student")
    kwargs.update(overrides)

    with pytest.raises(ValidationException):
        AuthService(db).register_user(**kwargs)


def test_tutor_rate_must_not_be_negative(db):
    with pytest.raises(ValidationException):
        AuthService(db).register_user(
            name="T", email="t@example.com", password="secret123", role="tutor", hourly_rate=-1
        )


def test_authenticate_and_issue_token(db, test_student, test_password):
    service = AuthService(db)

    user = service.authenticate_user("SAM.STUDENT@example.com", test_password)
    payload = decode_access_token(service.create_token_for(user))

    assert user.id == test_student.id
    assert payload["sub"] == test_student.id
    assert payload["role"] == "student"


@pytest.mark.parametrize(
    "email,password",
    [("sam.student@example.com", "wrong-password"), ("nobody@example.com", "whatever")],
)
def test_bad_credentials_share_one_message(db, test_student, email, password):
    with pytest.raises(UnauthorizedException) as exc_info:
        AuthService(db).authenticate_user(email, password)

    assert exc_info.value.message == "Invalid email or password"


def test_inactive_user_cannot_sign_in(db, test_student, test_password):
    test_student.is_active = False
    db.commit()

    with pytest.raises(UnauthorizedException):
        AuthService(db).authenticate_user(test_student.email, test_password)
