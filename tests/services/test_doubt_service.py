"""Tests for DoubtService."""

import pytest

from tutorbook.core.exceptions import (
    AlreadyAnsweredException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from tutorbook.models.doubt import DoubtStatus
from tutorbook.principal import TutorActor
from tutorbook.services.doubt_service import DoubtService


def _ask(db, actor, tutor, **overrides):
    kwargs = dict(tutor_id=tutor.id, subject="Math", question="How do I factor x^2 - 1?")
    kwargs.update(overrides)
    return DoubtService(db).submit_doubt(actor, **kwargs)


def test_submit_opens_doubt(db, student_actor, test_tutor):
    doubt = _ask(db, student_actor, test_tutor, urgency="high")

    assert doubt.status == DoubtStatus.OPEN.value
    assert doubt.urgency == "high"
    assert doubt.student_id == student_actor.id
    assert doubt.reply is None


def test_default_urgency_is_normal(db, student_actor, test_tutor):
    assert _ask(db, student_actor, test_tutor).urgency == "normal"


def test_tutor_cannot_submit(db, tutor_actor, test_tutor):
    with pytest.raises(ForbiddenException):
        _ask(db, tutor_actor, test_tutor)


@pytest.mark.parametrize(
    "overrides",
    [{"question": "   "}, {"subject": ""}, {"urgency": "whenever"}, {"question": "q" * 4001}],
)
def test_invalid_submissions(db, student_actor, test_tutor, overrides):
    with pytest.raises(ValidationException):
        _ask(db, student_actor, test_tutor, **overrides)


def test_unknown_tutor(db, student_actor, test_student):
    # A student id is not a tutor
    with pytest.raises(NotFoundException):
        DoubtService(db).submit_doubt(
            student_actor, tutor_id=test_student.id, subject="Math", question="Why?"
        )


def test_reply_answers_once(db, student_actor, tutor_actor, test_tutor):
    doubt = _ask(db, student_actor, test_tutor)
    service = DoubtService(db)

    answered = service.reply_to_doubt(tutor_actor, doubt.id, " (x - 1)(x + 1) ")

    assert answered.status == DoubtStatus.ANSWERED.value
    assert answered.reply == "(x - 1)(x + 1)"
    assert answered.replied_at is not None

    with pytest.raises(AlreadyAnsweredException):
        service.reply_to_doubt(tutor_actor, doubt.id, "Second answer")


def test_only_addressed_tutor_replies(db, student_actor, test_tutor, make_tutor):
    doubt = _ask(db, student_actor, test_tutor)
    other = make_tutor(name="Other", email="other.tutor@example.com")

    with pytest.raises(ForbiddenException):
        DoubtService(db).reply_to_doubt(
            TutorActor(user_id=other.id, email=other.email), doubt.id, "Answer"
        )


def test_empty_reply_rejected(db, student_actor, tutor_actor, test_tutor):
    doubt = _ask(db, student_actor, test_tutor)

    with pytest.raises(ValidationException):
        DoubtService(db).reply_to_doubt(tutor_actor, doubt.id, "  ")


def test_list_for_each_party(db, student_actor, tutor_actor, test_tutor):
    first = _ask(db, student_actor, test_tutor, question="First?")
    _ask(db, student_actor, test_tutor, question="Second?")
    service = DoubtService(db)
    service.reply_to_doubt(tutor_actor, first.id, "Yes")

    assert len(service.list_doubts(student_actor)) == 2
    assert len(service.list_doubts(tutor_actor)) == 2
    open_doubts = service.list_doubts(tutor_actor, "open")
    assert [d.question for d in open_doubts] == ["Second?"]

    with pytest.raises(ValidationException):
        service.list_doubts(tutor_actor, "closed")
