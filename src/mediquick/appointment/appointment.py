"""Appointment aggregate: a patient's request for a checkup by a doctor.

The doctor accepts, a salesperson claims the appointment with the doctor's
token and escorts the checkup, and the patient confirms completion with the
salesperson's token.

State Machine:
    PENDING → ACCEPTED → ASSIGNED_TO_SALESPERSON → COMPLETED
"""

from datetime import datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text

from mediquick.appointment.events import CheckupAccepted, CheckupClaimed, CheckupCompleted, CheckupRequested
from mediquick.domain import mediquick
from mediquick.handoff.engine import DOCTOR, OWNER, SALESPERSON, Edge, TransitionEngine
from mediquick.shared.errors import InvalidState


class AppointmentStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    ASSIGNED_TO_SALESPERSON = "assigned_to_salesperson"
    COMPLETED = "completed"


_VALID_TRANSITIONS = {
    AppointmentStatus.PENDING: {AppointmentStatus.ACCEPTED},
    AppointmentStatus.ACCEPTED: {AppointmentStatus.ASSIGNED_TO_SALESPERSON},
    AppointmentStatus.ASSIGNED_TO_SALESPERSON: {AppointmentStatus.COMPLETED},
    AppointmentStatus.COMPLETED: set(),  # terminal
}


@mediquick.aggregate
class Appointment:
    patient_id = Identifier(required=True)
    doctor_id = Identifier(required=True)
    reason = Text(required=True)
    status = String(
        choices=AppointmentStatus,
        default=AppointmentStatus.PENDING.value,
    )
    salesperson_id = Identifier()
    offered_on = DateTime()
    accepted_on = DateTime()
    picked_up_at = DateTime()
    completed_on = DateTime()
    payment_confirmed = Boolean(default=False)
    qr_content = Text()

    @classmethod
    def request(cls, patient_id: str, doctor_id: str, reason: str, at: datetime):
        appointment = cls(
            patient_id=patient_id,
            doctor_id=doctor_id,
            reason=reason,
            status=AppointmentStatus.PENDING.value,
            offered_on=at,
        )
        appointment.raise_(
            CheckupRequested(
                appointment_id=str(appointment.id),
                patient_id=patient_id,
                doctor_id=doctor_id,
                reason=reason,
                offered_on=at,
            )
        )
        return appointment

    def _assert_can_transition(self, target_status: AppointmentStatus) -> None:
        current = AppointmentStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidState({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def accept(self, actor_id: str, at: datetime, proof: str | None = None) -> None:
        self._assert_can_transition(AppointmentStatus.ACCEPTED)
        self.status = AppointmentStatus.ACCEPTED.value
        self.accepted_on = at
        self.raise_(
            CheckupAccepted(
                appointment_id=str(self.id),
                doctor_id=actor_id,
                accepted_on=at,
            )
        )

    def claim(self, actor_id: str, at: datetime, proof: str | None = None) -> None:
        self._assert_can_transition(AppointmentStatus.ASSIGNED_TO_SALESPERSON)
        self.status = AppointmentStatus.ASSIGNED_TO_SALESPERSON.value
        self.salesperson_id = actor_id
        self.picked_up_at = at
        self.raise_(
            CheckupClaimed(
                appointment_id=str(self.id),
                salesperson_id=actor_id,
                picked_up_at=at,
            )
        )

    def complete(self, actor_id: str, at: datetime, proof: str | None = None) -> None:
        """The patient confirms the checkup took place; the token is kept as proof."""
        self._assert_can_transition(AppointmentStatus.COMPLETED)
        self.status = AppointmentStatus.COMPLETED.value
        self.completed_on = at
        self.payment_confirmed = True
        self.qr_content = proof
        self.raise_(
            CheckupCompleted(
                appointment_id=str(self.id),
                patient_id=str(self.patient_id),
                salesperson_id=str(self.salesperson_id),
                completed_on=at,
            )
        )


APPOINTMENT_EDGES = [
    Edge(
        name="accept",
        source=AppointmentStatus.PENDING.value,
        target=AppointmentStatus.ACCEPTED.value,
        actor=DOCTOR,
        method="accept",
    ),
    Edge(
        name="claim",
        source=AppointmentStatus.ACCEPTED.value,
        target=AppointmentStatus.ASSIGNED_TO_SALESPERSON.value,
        actor=SALESPERSON,
        method="claim",
        token_field="doctor_id",
        claims=True,
    ),
    Edge(
        name="confirm",
        source=AppointmentStatus.ASSIGNED_TO_SALESPERSON.value,
        target=AppointmentStatus.COMPLETED.value,
        actor=OWNER,
        method="complete",
        token_field="salesperson_id",
        settles=True,
    ),
]

appointment_engine = TransitionEngine(
    Appointment,
    kind="appointment",
    owner_field="patient_id",
    edges=APPOINTMENT_EDGES,
)
