"""Tests for BookingRepository conflict checks and conditional updates."""

from datetime import datetime, time, timezone

from tutorbook.models.booking import Booking, BookingStatus
from tutorbook.repositories.booking_repository import BookingRepository
from tutorbook.repositories.tutor_profile_repository import TutorProfileRepository


def _status(db, booking_id):
    db.expire_all()
    return db.query(Booking).filter(Booking.id == booking_id).one().status


class TestSlotConflicts:
    def test_open_statuses_hold_the_slot(
        self, db, test_student, test_tutor, make_booking, session_date
    ):
        repo = BookingRepository(db)
        make_booking(test_student, test_tutor, status=BookingStatus.CONFIRMED)

        assert repo.has_open_booking_at(test_tutor.id, session_date, time(10, 0))
        assert not repo.has_open_booking_at(test_tutor.id, session_date, time(11, 0))

    def test_closed_statuses_do_not(self, db, test_student, test_tutor, make_booking, session_date):
        make_booking(test_student, test_tutor, status=BookingStatus.CANCELLED)
        make_booking(test_student, test_tutor, status=BookingStatus.COMPLETED)

        assert not BookingRepository(db).has_open_booking_at(
            test_tutor.id, session_date, time(10, 0)
        )

    def test_exclude_booking(self, db, test_student, test_tutor, make_booking, session_date):
        booking = make_booking(test_student, test_tutor)

        assert not BookingRepository(db).has_open_booking_at(
            test_tutor.id, session_date, time(10, 0), exclude_booking_id=booking.id
        )


class TestConditionalTransitions:
    def test_transition_applies_from_expected_state(
        self, db, test_student, test_tutor, make_booking
    ):
        booking = make_booking(test_student, test_tutor)
        repo = BookingRepository(db)

        updated = repo.transition(
            booking.id, [BookingStatus.PENDING], {"status": BookingStatus.CONFIRMED.value}
        )
        db.commit()

        assert updated == 1
        assert _status(db, booking.id) == "confirmed"

    def test_second_writer_updates_nothing(self, db, test_student, test_tutor, make_booking):
        booking = make_booking(test_student, test_tutor)
        repo = BookingRepository(db)

        first = repo.transition(
            booking.id, [BookingStatus.PENDING], {"status": BookingStatus.CONFIRMED.value}
        )
        second = repo.transition(
            booking.id, [BookingStatus.PENDING], {"status": BookingStatus.CANCELLED.value}
        )
        db.commit()

        assert (first, second) == (1, 0)
        assert _status(db, booking.id) == "confirmed"

    def test_tutor_feedback_written_once(self, db, test_student, test_tutor, make_booking):
        booking = make_booking(test_student, test_tutor, status=BookingStatus.COMPLETED)
        repo = BookingRepository(db)
        values = {
            "tutor_feedback_rating": 4,
            "tutor_feedback_notes": "Good",
            "tutor_feedback_at": datetime.now(timezone.utc),
        }

        assert repo.record_tutor_feedback(booking.id, values) == 1
        assert repo.record_tutor_feedback(booking.id, {**values, "tutor_feedback_rating": 1}) == 0
        db.commit()

        db.expire_all()
        assert repo.get_by_id(booking.id).tutor_feedback_rating == 4

    def test_tutor_feedback_requires_completed(self, db, test_student, test_tutor, make_booking):
        booking = make_booking(test_student, test_tutor, status=BookingStatus.CONFIRMED)

        assert (
            BookingRepository(db).record_tutor_feedback(
                booking.id,
                {"tutor_feedback_rating": 4, "tutor_feedback_at": datetime.now(timezone.utc)},
            )
            == 0
        )


def test_increment_total_sessions(db, test_tutor):
    repo = TutorProfileRepository(db)

    assert repo.increment_total_sessions(test_tutor.id) == 1
    repo.increment_total_sessions(test_tutor.id)
    db.commit()

    assert repo.get_by_user_id(test_tutor.id).total_sessions == 2
