"""Checkup requests: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from mediquick.appointment.appointment import Appointment
from mediquick.domain import mediquick
from mediquick.profile.access import find_profile, require_role
from mediquick.profile.profile import Role
from mediquick.shared.clock import get_clock
from mediquick.shared.concurrency import exclusive
from mediquick.utils.logging import get_logger

logger = get_logger(__name__)


@mediquick.command(part_of="Appointment")
class RequestCheckup:
    """A patient asks a specific doctor for a checkup."""

    patient_id = Identifier(required=True)
    doctor_id = Identifier(required=True)
    reason = Text(required=True)


@mediquick.command_handler(part_of=Appointment)
class RequestCheckupHandler:
    @exclusive
    @handle(RequestCheckup)
    def request_checkup(self, command):
        require_role(command.patient_id, Role.CUSTOMER)

        doctor = find_profile(command.doctor_id)
        if doctor is None or doctor.role != Role.DOCTOR.value:
            raise ValidationError({"doctor_id": [f"User {command.doctor_id} is not a doctor"]})
        if not (command.reason or "").strip():
            raise ValidationError({"reason": ["A reason for the checkup is required"]})

        appointment = Appointment.request(
            command.patient_id,
            command.doctor_id,
            command.reason.strip(),
            get_clock().now(),
        )
        current_domain.repository_for(Appointment).add(appointment)
        logger.info(
            "checkup_requested",
            appointment_id=str(appointment.id),
            patient_id=command.patient_id,
            doctor_id=command.doctor_id,
        )
        return str(appointment.id)
