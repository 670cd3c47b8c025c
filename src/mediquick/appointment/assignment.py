"""Checkup assignment: a salesperson claims an accepted appointment with the doctor's token."""

from protean import handle
from protean.fields import Identifier, Text

from mediquick.appointment.appointment import Appointment, appointment_engine
from mediquick.domain import mediquick
from mediquick.shared.concurrency import exclusive


@mediquick.command(part_of="Appointment")
class ClaimAppointment:
    appointment_id = Identifier(required=True)
    salesperson_id = Identifier(required=True)
    token = Text(required=True)


@mediquick.command_handler(part_of=Appointment)
class ClaimAppointmentHandler:
    @exclusive
    @handle(ClaimAppointment)
    def claim_appointment(self, command):
        appointment = appointment_engine.transition(
            "claim", command.appointment_id, command.salesperson_id, command.token
        )
        return appointment.status
