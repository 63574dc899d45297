"""Tests for student ratings and tutor feedback."""

from datetime import time

import pytest

from tutorbook.core.exceptions import (
    AlreadyRatedException,
    ForbiddenException,
    NotCompletedException,
    ValidationException,
)
from tutorbook.models.booking import BookingStatus
from tutorbook.models.feedback import Feedback
from tutorbook.models.tutor import TutorProfile
from tutorbook.principal import StudentActor
from tutorbook.services.feedback_service import FeedbackService


def _profile(db, tutor):
    db.expire_all()
    return db.query(TutorProfile).filter(TutorProfile.user_id == tutor.id).one()


@pytest.fixture
def completed_booking(test_student, test_tutor, make_booking):
    return make_booking(test_student, test_tutor, status=BookingStatus.COMPLETED)


class TestStudentRating:
    def test_first_rating_sets_tutor_mean(self, db, student_actor, test_tutor, completed_booking):
        booking = FeedbackService(db).submit_student_rating(
            student_actor, completed_booking.id, 4, "  Clear explanations "
        )

        assert booking.student_rating == 4
        assert booking.student_comment == "Clear explanations"
        profile = _profile(db, test_tutor)
        assert profile.rating == pytest.approx(4.0)
        assert profile.rating_count == 1

    def test_mean_over_all_ratings(
        self, db, test_student, test_tutor, make_student, make_booking
    ):
        other = make_student(name="Other", email="other@example.com")
        first = make_booking(test_student, test_tutor, BookingStatus.COMPLETED, time(9, 0))
        second = make_booking(other, test_tutor, BookingStatus.COMPLETED, time(11, 0))
        service = FeedbackService(db)

        service.submit_student_rating(
            StudentActor(user_id=test_student.id, email=test_student.email), first.id, 5
        )
        service.submit_student_rating(StudentActor(user_id=other.id, email=other.email), second.id, 2)

        profile = _profile(db, test_tutor)
        assert profile.rating == pytest.approx(3.5)
        assert profile.rating_count == 2

    def test_second_rating_rejected(self, db, student_actor, test_tutor, completed_booking):
        service = FeedbackService(db)
        service.submit_student_rating(student_actor, completed_booking.id, 5)

        with pytest.raises(AlreadyRatedException):
            service.submit_student_rating(student_actor, completed_booking.id, 1)

        assert db.query(Feedback).count() == 1
        assert _profile(db, test_tutor).rating == pytest.approx(5.0)

    @pytest.mark.parametrize("status", [BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.CANCELLED])
    def test_only_completed_bookings_can_be_rated(
        self, db, student_actor, test_student, test_tutor, make_booking, status
    ):
        booking = make_booking(test_student, test_tutor, status=status)

        with pytest.raises(NotCompletedException) as exc_info:
            FeedbackService(db).submit_student_rating(student_actor, booking.id, 5)

        assert exc_info.value.code == "NOT_COMPLETED"
        assert exc_info.value.details["current_state"] == status.value

    @pytest.mark.parametrize("rating", [0, 6, True])
    def test_rating_must_be_one_to_five(self, db, student_actor, completed_booking, rating):
        with pytest.raises(ValidationException):
            FeedbackService(db).submit_student_rating(student_actor, completed_booking.id, rating)

    def test_tutor_cannot_rate_as_student(self, db, tutor_actor, completed_booking):
        with pytest.raises(ForbiddenException):
            FeedbackService(db).submit_student_rating(tutor_actor, completed_booking.id, 5)

    def test_other_student_cannot_rate(self, db, make_student, completed_booking):
        other = make_student(name="Other", email="other@example.com")

        with pytest.raises(ForbiddenException):
            FeedbackService(db).submit_student_rating(
                StudentActor(user_id=other.id, email=other.email), completed_booking.id, 5
            )

    def test_comment_length_limit(self, db, student_actor, completed_booking):
        with pytest.raises(ValidationException):
            FeedbackService(db).submit_student_rating(
                student_actor, completed_booking.id, 5, "x" * 1001
            )


class TestTutorFeedback:
    def test_feedback_recorded_once(self, db, tutor_actor, completed_booking):
        service = FeedbackService(db)

        booking = service.submit_tutor_feedback(
            tutor_actor,
            completed_booking.id,
            4,
            "Worked hard on algebra",
            strengths="Persistence",
            improvements="Show working",
        )

        assert booking.has_tutor_feedback
        assert booking.tutor_feedback_rating == 4
        assert booking.tutor_feedback_notes == "Worked hard on algebra"
        assert booking.tutor_feedback_strengths == "Persistence"

        with pytest.raises(AlreadyRatedException) as exc_info:
            service.submit_tutor_feedback(tutor_actor, completed_booking.id, 2, "Again")
        assert exc_info.value.details["kind"] == "tutor feedback"

    def test_tutor_feedback_does_not_touch_tutor_rating(
        self, db, tutor_actor, test_tutor, completed_booking
    ):
        FeedbackService(db).submit_tutor_feedback(tutor_actor, completed_booking.id, 1, "Notes")

        profile = _profile(db, test_tutor)
        assert profile.rating is None
        assert profile.rating_count == 0

    def test_notes_required(self, db, tutor_actor, completed_booking):
        with pytest.raises(ValidationException):
            FeedbackService(db).submit_tutor_feedback(tutor_actor, completed_booking.id, 4, "   ")

    def test_not_completed(self, db, tutor_actor, test_student, test_tutor, make_booking):
        booking = make_booking(test_student, test_tutor, status=BookingStatus.CONFIRMED)

        with pytest.raises(NotCompletedException):
            FeedbackService(db).submit_tutor_feedback(tutor_actor, booking.id, 4, "Notes")

    def test_student_cannot_leave_tutor_feedback(self, db, student_actor, completed_booking):
        with pytest.raises(ForbiddenException):
            FeedbackService(db).submit_tutor_feedback(student_actor, completed_booking.id, 4, "N")

    def test_both_sides_are_independent(self, db, student_actor, tutor_actor, completed_booking):
        service = FeedbackService(db)
        service.submit_tutor_feedback(tutor_actor, completed_booking.id, 3, "Solid session")

        booking = service.submit_student_rating(student_actor, completed_booking.id, 5)

        assert booking.student_rating == 5
        assert booking.tutor_feedback_rating == 3
