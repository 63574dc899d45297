"""Tests for request parsing and camelCase response shapes."""

from datetime import date, time

from pydantic import ValidationError
import pytest

from tutorbook.schemas.booking import BookingCreate, BookingOut
from tutorbook.schemas.doubt import DoubtCreate, DoubtOut
from tutorbook.schemas.user import RegisterRequest
from tutorbook.services.booking_service import BookingService
from tutorbook.services.doubt_service import DoubtService
from tutorbook.services.feedback_service import FeedbackService


def test_booking_create_accepts_wire_names():
    payload = BookingCreate.model_validate(
        {
            "tutorId": "01HZX3T0000000000000000000",
            "subject": " Math ",
            "date": "2026-11-02",
            "time": "09:30",
            "duration": 60,
        }
    )

    assert payload.session_date == date(2026, 11, 2)
    assert payload.session_time == time(9, 30)
    assert payload.duration_minutes == 60
    assert payload.subject == "Math"


@pytest.mark.parametrize(
    "field,value",
    [
        ("date", "02/11/2026"),
        ("date", "2026-11-02T10:00:00"),
        ("time", "9:30"),
        ("time", "24:00"),
        ("duration", 10),
        ("duration", 600),
    ],
)
def test_booking_create_rejects_malformed(field, value):
    data = {"tutorId": "t", "subject": "Math", "date": "2026-11-02", "time": "09:30", "duration": 60}
    data[field] = value

    with pytest.raises(ValidationError):
        BookingCreate.model_validate(data)


def test_booking_create_forbids_unknown_fields():
    with pytest.raises(ValidationError):
        BookingCreate.model_validate(
            {
                "tutorId": "t",
                "subject": "Math",
                "date": "2026-11-02",
                "time": "09:30",
                "duration": 60,
                "status": "confirmed",
            }
        )


def test_booking_out_serializes_date_and_time(db, test_student, test_tutor, make_booking):
    booking = make_booking(test_student, test_tutor, start=time(14, 5), on=date(2026, 11, 2))

    body = BookingOut.from_model(booking).model_dump(by_alias=True, mode="json")

    assert body["date"] == "2026-11-02"
    assert body["time"] == "14:05"
    assert body["studentId"] == test_student.id
    assert body["tutorName"] == "Tara Tutor"
    assert body["status"] == "pending"
    assert body["studentRating"] is None


def test_register_subjects_from_comma_string():
    payload = RegisterRequest.model_validate(
        {
            "name": "Tara",
            "email": "tara@example.com",
            "password": "secret123",
            "role": "tutor",
            "subjects": "Math, Physics,,",
            "hourlyRate": 40,
        }
    )

    assert payload.subjects == ["Math", "Physics"]
    assert payload.hourly_rate == 40


def test_doubt_urgency_is_constrained():
    with pytest.raises(ValidationError):
        DoubtCreate.model_validate(
            {"tutorId": "t", "subject": "Math", "question": "Why?", "urgency": "asap"}
        )


def test_booking_wire_round_trip(db, student_actor, tutor_actor, test_tutor, session_date):
    service = BookingService(db)
    booking = service.create_booking(
        student_actor,
        tutor_id=test_tutor.id,
        subject="Math",
        topic="Vectors",
        session_date=session_date,
        session_time=time(10, 0),
        duration_minutes=60,
        message="Bring past papers",
    )
    service.accept_booking(tutor_actor, booking.id)
    service.complete_booking(tutor_actor, booking.id)
    FeedbackService(db).submit_tutor_feedback(tutor_actor, booking.id, 4, "Good", strengths="Focus")
    completed = FeedbackService(db).submit_student_rating(student_actor, booking.id, 5, "Thanks")

    original = BookingOut.from_model(completed)
    decoded = BookingOut.model_validate(original.model_dump(by_alias=True, mode="json"))

    assert decoded == original


def test_doubt_wire_round_trip(db, student_actor, tutor_actor, test_tutor):
    service = DoubtService(db)
    doubt = service.submit_doubt(
        student_actor, tutor_id=test_tutor.id, subject="Physics", question="Why?", urgency="urgent"
    )
    answered = service.reply_to_doubt(tutor_actor, doubt.id, "Because.")

    original = DoubtOut.from_model(answered)
    decoded = DoubtOut.model_validate(original.model_dump(by_alias=True, mode="json"))

    assert decoded == original
