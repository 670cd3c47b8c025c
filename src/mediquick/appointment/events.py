"""Domain events for the Appointment aggregate."""

from protean.fields import DateTime, Identifier, Text

from mediquick.domain import mediquick


@mediquick.event(part_of="Appointment")
class CheckupRequested:
    __version__ = 1

    appointment_id = Identifier(required=True)
    patient_id = Identifier(required=True)
    doctor_id = Identifier(required=True)
    reason = Text(required=True)
    offered_on = DateTime(required=True)


@mediquick.event(part_of="Appointment")
class CheckupAccepted:
    __version__ = 1

    appointment_id = Identifier(required=True)
    doctor_id = Identifier(required=True)
    accepted_on = DateTime(required=True)


@mediquick.event(part_of="Appointment")
class CheckupClaimed:
    """A salesperson took on escorting the checkup."""

    __version__ = 1

    appointment_id = Identifier(required=True)
    salesperson_id = Identifier(required=True)
    picked_up_at = DateTime(required=True)


@mediquick.event(part_of="Appointment")
class CheckupCompleted:
    __version__ = 1

    appointment_id = Identifier(required=True)
    patient_id = Identifier(required=True)
    salesperson_id = Identifier(required=True)
    completed_on = DateTime(required=True)
