"""
Pytest configuration for the TutorBook test suite.

Every test gets a fresh in-memory SQLite database. The app's ``get_db``
dependency is overridden so HTTP tests and direct service tests share the
same session.
"""

import os

# Set test configuration BEFORE any tutorbook imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"

from datetime import date, time, timedelta
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tutorbook import models  # noqa: F401
from tutorbook.api.dependencies.database import get_db
from tutorbook.auth import create_access_token, get_password_hash
from tutorbook.database import Base
from tutorbook.main import app
from tutorbook.models.booking import Booking, BookingOrigin, BookingStatus
from tutorbook.models.tutor import TutorProfile
from tutorbook.models.user import User
from tutorbook.principal import StudentActor, TutorActor

TEST_PASSWORD = "TestPassword123!"


@pytest.fixture(scope="function")
def db():
    """Create a new database (and session) for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )
    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(db: Session):
    """Create a test client with the test database."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


# ============================================================================
# USER FIXTURES
# ============================================================================


@pytest.fixture
def test_password() -> str:
    """Standard test password for all test users."""
    return TEST_PASSWORD


@pytest.fixture
def make_student(db: Session) -> Callable[..., User]:
    def _make(name: str = "Sam Student", email: str = "sam.student@example.com") -> User:
        user = User(
            name=name,
            email=email,
            hashed_password=get_password_hash(TEST_PASSWORD),
            role="student",
            is_active=True,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_tutor(db: Session) -> Callable[..., User]:
    def _make(
        name: str = "Tara Tutor",
        email: str = "tara.tutor@example.com",
        subjects: Optional[List[str]] = None,
        experience: int = 5,
        hourly_rate: str = "40.00",
        available: bool = True,
        rating: Optional[float] = None,
        total_sessions: int = 0,
    ) -> User:
        user = User(
            name=name,
            email=email,
            hashed_password=get_password_hash(TEST_PASSWORD),
            role="tutor",
            is_active=True,
        )
        db.add(user)
        db.flush()
        profile = TutorProfile(
            user_id=user.id,
            bio=f"{name} teaches.",
            years_experience=experience,
            hourly_rate=Decimal(hourly_rate),
            is_available=available,
            rating=rating,
            rating_count=1 if rating is not None else 0,
            total_sessions=total_sessions,
        )
        profile.set_subjects(subjects if subjects is not None else ["Math", "Physics"])
        db.add(profile)
        db.commit()
        return user

    return _make


@pytest.fixture
def test_student(make_student) -> User:
    return make_student()


@pytest.fixture
def test_tutor(make_tutor) -> User:
    return make_tutor()


@pytest.fixture
def student_actor(test_student: User) -> StudentActor:
    return StudentActor(user_id=test_student.id, email=test_student.email)


@pytest.fixture
def tutor_actor(test_tutor: User) -> TutorActor:
    return TutorActor(user_id=test_tutor.id, email=test_tutor.email)


def auth_headers_for(user: User) -> Dict[str, str]:
    token = create_access_token({"sub": user.id, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def student_headers(test_student: User) -> Dict[str, str]:
    return auth_headers_for(test_student)


@pytest.fixture
def tutor_headers(test_tutor: User) -> Dict[str, str]:
    return auth_headers_for(test_tutor)


# ============================================================================
# BOOKING FIXTURES
# ============================================================================


@pytest.fixture
def session_date() -> date:
    return date.today() + timedelta(days=7)


@pytest.fixture
def make_booking(db: Session, session_date: date) -> Callable[..., Booking]:
    """Insert a booking directly in the given state."""

    def _make(
        student: User,
        tutor: User,
        status: BookingStatus = BookingStatus.PENDING,
        start: time = time(10, 0),
        on: Optional[date] = None,
    ) -> Booking:
        booking = Booking(
            student_id=student.id,
            tutor_id=tutor.id,
            subject="Math",
            session_date=on or session_date,
            session_time=start,
            duration_minutes=60,
            hourly_rate=Decimal("40.00"),
            status=status.value,
            origin=BookingOrigin.STUDENT_INITIATED.value,
        )
        db.add(booking)
        db.commit()
        return booking

    return _make


@pytest.fixture
def auth_headers() -> Callable[[User], Dict[str, str]]:
    """Bearer headers for any user, e.g. ``auth_headers(other_tutor)``."""
    return auth_headers_for
