"""Checkup acceptance: the named doctor accepts and receives the claim token."""

from protean import handle
from protean.fields import Identifier

from mediquick.appointment.appointment import Appointment, appointment_engine
from mediquick.domain import mediquick
from mediquick.handoff.issuance import token_for
from mediquick.shared.concurrency import exclusive


@mediquick.command(part_of="Appointment")
class AcceptCheckup:
    appointment_id = Identifier(required=True)
    doctor_id = Identifier(required=True)


@mediquick.command_handler(part_of=Appointment)
class AcceptCheckupHandler:
    @exclusive
    @handle(AcceptCheckup)
    def accept_checkup(self, command):
        appointment = appointment_engine.transition("accept", command.appointment_id, command.doctor_id)
        return token_for("appointment", appointment, command.doctor_id)
