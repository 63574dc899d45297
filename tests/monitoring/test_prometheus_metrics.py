"""Tests for Prometheus metric recording and the service base helpers."""

import pytest
from sqlalchemy.exc import OperationalError

from tutorbook.core.exceptions import NotFoundException, ServiceException
from tutorbook.middleware.prometheus_middleware import normalize_path
from tutorbook.monitoring.prometheus_metrics import REGISTRY, prometheus_metrics
from tutorbook.services.base import BaseService


def _sample(name, labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


class DummyService(BaseService):
    @BaseService.measure_operation("do_work")
    def do_work(self, fail=False):
        if fail:
            raise NotFoundException("missing")
        return "done"


def test_normalize_path_collapses_ids():
    assert normalize_path("/bookings/01HZX3T0ABCDEFGHJKMNPQRSTV/accept") == "/bookings/:id/accept"
    assert normalize_path("/tutors/42") == "/tutors/:id"
    assert normalize_path("/tutors") == "/tutors"


def test_booking_transition_counter():
    labels = {"event": "accept", "to_status": "confirmed"}
    before = _sample("tutorbook_booking_transitions_total", labels)

    prometheus_metrics.record_booking_transition("accept", "confirmed")

    assert _sample("tutorbook_booking_transitions_total", labels) == before + 1
    assert b"tutorbook_booking_transitions_total" in prometheus_metrics.get_metrics()


def test_measure_operation_records_success_and_error(db):
    service = DummyService(db)
    ok = {"service": "DummyService", "operation": "do_work", "status": "success"}
    err = {"service": "DummyService", "operation": "do_work", "status": "error"}
    ok_before = _sample("tutorbook_service_operations_total", ok)
    err_before = _sample("tutorbook_service_operations_total", err)

    assert service.do_work() == "done"
    with pytest.raises(NotFoundException):
        service.do_work(fail=True)

    assert _sample("tutorbook_service_operations_total", ok) == ok_before + 1
    assert _sample("tutorbook_service_operations_total", err) == err_before + 1
    assert service.get_metrics()["do_work"]["failure_count"] >= 1


def test_transaction_wraps_storage_errors(db):
    service = DummyService(db)

    with pytest.raises(ServiceException) as exc_info:
        with service.transaction():
            raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    http_exc = exc_info.value.to_http_exception()
    assert http_exc.status_code == 500
    assert "connection lost" not in http_exc.detail["message"]


def test_transaction_passes_domain_errors_through(db):
    service = DummyService(db)

    with pytest.raises(NotFoundException):
        with service.transaction():
            raise NotFoundException("gone")
