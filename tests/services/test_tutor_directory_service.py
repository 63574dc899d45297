"""Tests for TutorDirectoryService filters and ordering."""

import pytest

from tutorbook.core.exceptions import NotFoundException, ValidationException
from tutorbook.services.tutor_directory_service import TutorDirectoryService


@pytest.fixture
def tutors(make_tutor):
    return {
        "ada": make_tutor(
            name="Ada", email="ada@example.com", subjects=["Math"], experience=10,
            hourly_rate="60.00", rating=4.8, total_sessions=3,
        ),
        "bo": make_tutor(
            name="Bo", email="bo@example.com", subjects=["math", "Chemistry"], experience=2,
            hourly_rate="25.00", rating=4.1, total_sessions=40,
        ),
        "cy": make_tutor(
            name="Cy", email="cy@example.com", subjects=["Physics"], experience=6,
            hourly_rate="35.00", rating=None, total_sessions=0, available=False,
        ),
    }


def _names(profiles):
    return [p.user.name for p in profiles]


def test_default_sort_is_rating_with_unrated_last(db, tutors):
    assert _names(TutorDirectoryService(db).list_tutors()) == ["Ada", "Bo", "Cy"]


def test_subject_match_is_exact_and_case_insensitive(db, tutors):
    service = TutorDirectoryService(db)

    assert _names(service.list_tutors(subject="MATH")) == ["Ada", "Bo"]
    assert service.list_tutors(subject="Mat") == []


def test_filters_combine(db, tutors):
    service = TutorDirectoryService(db)

    assert _names(service.list_tutors(min_rating=4.5)) == ["Ada"]
    assert _names(service.list_tutors(min_experience=5)) == ["Ada", "Cy"]
    assert _names(service.list_tutors(max_rate=35)) == ["Bo", "Cy"]
    assert _names(service.list_tutors(available=False)) == ["Cy"]
    assert _names(service.list_tutors(subject="math", max_rate=30)) == ["Bo"]


def test_sort_keys(db, tutors):
    service = TutorDirectoryService(db)

    assert _names(service.list_tutors(sort="experience")) == ["Ada", "Cy", "Bo"]
    assert _names(service.list_tutors(sort="totalSessions")) == ["Bo", "Ada", "Cy"]


@pytest.mark.parametrize("key", ["total_sessions", "TOTAL_SESSIONS", "totalsessions"])
def test_total_sessions_sort_accepts_snake_case(db, tutors, key):
    assert _names(TutorDirectoryService(db).list_tutors(sort=key)) == ["Bo", "Ada", "Cy"]


def test_limit(db, tutors):
    assert len(TutorDirectoryService(db).list_tutors(limit=2)) == 2


@pytest.mark.parametrize(
    "kwargs",
    [
        {"sort": "price"},
        {"min_rating": 6},
        {"min_experience": -1},
        {"max_rate": -5},
        {"limit": 0},
        {"limit": 1000},
    ],
)
def test_invalid_filters(db, tutors, kwargs):
    with pytest.raises(ValidationException):
        TutorDirectoryService(db).list_tutors(**kwargs)


def test_get_tutor(db, tutors):
    service = TutorDirectoryService(db)

    profile = service.get_tutor(tutors["bo"].id)
    assert profile.subject_names == ["math", "Chemistry"]

    with pytest.raises(NotFoundException):
        service.get_tutor("01HZZZZZZZZZZZZZZZZZZZZZZZ")
