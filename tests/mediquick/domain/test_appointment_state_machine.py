"""Tests for the Appointment aggregate's transitions."""

from datetime import UTC, datetime

import pytest
from mediquick.appointment.appointment import APPOINTMENT_EDGES, Appointment, AppointmentStatus
from mediquick.appointment.events import CheckupAccepted, CheckupClaimed, CheckupCompleted, CheckupRequested
from mediquick.shared.errors import InvalidState

NOW = datetime(2025, 3, 10, 9, 0, tzinfo=UTC)


@pytest.fixture()
def appointment():
    requested = Appointment.request("cust-1", "doc-1", "Chest pain", NOW)
    requested._events.clear()
    return requested


def test_request_starts_pending(appointment):
    assert appointment.status == AppointmentStatus.PENDING.value
    assert appointment.offered_on == NOW
    assert appointment.payment_confirmed is False


def test_request_raises_checkup_requested():
    appointment = Appointment.request("cust-1", "doc-1", "Chest pain", NOW)
    assert isinstance(appointment._events[0], CheckupRequested)


def test_full_lifecycle(appointment):
    appointment.accept(actor_id="doc-1", at=NOW)
    assert appointment.status == AppointmentStatus.ACCEPTED.value
    assert isinstance(appointment._events[-1], CheckupAccepted)

    appointment.claim(actor_id="sp-1", at=NOW)
    assert appointment.status == AppointmentStatus.ASSIGNED_TO_SALESPERSON.value
    assert appointment.salesperson_id == "sp-1"
    assert isinstance(appointment._events[-1], CheckupClaimed)

    appointment.complete(actor_id="cust-1", at=NOW, proof="proof")
    assert appointment.status == AppointmentStatus.COMPLETED.value
    assert appointment.payment_confirmed is True
    assert appointment.qr_content == "proof"
    assert isinstance(appointment._events[-1], CheckupCompleted)


@pytest.mark.parametrize("method", ["claim", "complete"])
def test_pending_appointment_only_accepts(appointment, method):
    with pytest.raises(InvalidState):
        getattr(appointment, method)(actor_id="x", at=NOW)


def test_completed_appointment_is_terminal(appointment):
    appointment.accept(actor_id="doc-1", at=NOW)
    appointment.claim(actor_id="sp-1", at=NOW)
    appointment.complete(actor_id="cust-1", at=NOW)

    for method in ("accept", "claim", "complete"):
        with pytest.raises(InvalidState):
            getattr(appointment, method)(actor_id="x", at=NOW)


def test_edge_table_token_fields():
    fields = {edge.name: edge.token_field for edge in APPOINTMENT_EDGES}
    assert fields == {"accept": None, "claim": "doctor_id", "confirm": "salesperson_id"}
