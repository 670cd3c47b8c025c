"""Checkup completion: command, handler and settlement.

The patient confirms with the salesperson's token; the salesperson earns the
fixed checkup reward.
"""

from protean import handle
from protean.fields import Identifier, Text

from mediquick.appointment.appointment import Appointment, appointment_engine
from mediquick.domain import mediquick
from mediquick.ledger.posting import post_coins
from mediquick.ledger.transaction import TransactionType
from mediquick.shared.concurrency import exclusive
from mediquick.shared.settings import checkup_reward_coins


@mediquick.command(part_of="Appointment")
class ConfirmCheckup:
    appointment_id = Identifier(required=True)
    patient_id = Identifier(required=True)
    token = Text(required=True)


@mediquick.command_handler(part_of=Appointment)
class ConfirmCheckupHandler:
    @exclusive
    @handle(ConfirmCheckup)
    def confirm_checkup(self, command):
        appointment = appointment_engine.transition("confirm", command.appointment_id, command.patient_id, command.token)
        return appointment.status


@appointment_engine.on_settle
def pay_for_checkup(appointment) -> None:
    reward = checkup_reward_coins()
    if reward <= 0:
        return
    post_coins(
        TransactionType.CHECKUP_PAYMENT,
        reward,
        source_id=str(appointment.patient_id),
        target_id=str(appointment.salesperson_id),
        description=f"Coins for patient checkup: {appointment.reason}",
        patient_offer_id=str(appointment.id),
    )
