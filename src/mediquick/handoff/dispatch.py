"""Route a presented token to the claim or confirm command of the record it names.

The scanning party only holds the token content; the record kind and id come
from the token itself.
"""

from protean.utils.globals import current_domain

from mediquick.appointment.assignment import ClaimAppointment
from mediquick.appointment.completion import ConfirmCheckup
from mediquick.handoff.token import HandoffToken
from mediquick.order.delivery import ConfirmDelivery
from mediquick.order.pickup import ClaimOrder


def claim_with_token(token_content: str, salesperson_id: str) -> tuple[HandoffToken, str]:
    """Claim the order or appointment named by the token; returns the token and the new status."""
    token = HandoffToken.parse(token_content)
    if token.record_kind == "order":
        command = ClaimOrder(order_id=token.record_id, salesperson_id=salesperson_id, token=token_content)
    else:
        command = ClaimAppointment(appointment_id=token.record_id, salesperson_id=salesperson_id, token=token_content)
    return token, current_domain.process(command, asynchronous=False)


def confirm_with_token(token_content: str, owner_id: str) -> tuple[HandoffToken, str]:
    """Confirm delivery or checkup completion for the record named by the token."""
    token = HandoffToken.parse(token_content)
    if token.record_kind == "order":
        command = ConfirmDelivery(order_id=token.record_id, customer_id=owner_id, token=token_content)
    else:
        command = ConfirmCheckup(appointment_id=token.record_id, patient_id=owner_id, token=token_content)
    return token, current_domain.process(command, asynchronous=False)
