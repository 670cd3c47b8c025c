"""Handoff token issuance.

A token can only be minted while its record waits for a token-bearing edge,
and only by the party expected to hand the record over at that point:

=================================  =====================  ===============================
Record / status                    Issuer                 Embedded actor
=================================  =====================  ===============================
Order pending_salesperson_pickup   customer (owner)       salesperson named by the issuer
Order in_delivery                  assigned salesperson   the record's salesperson
Appointment accepted               named doctor           the record's doctor
Appointment assigned_to_...        assigned salesperson   the record's salesperson
=================================  =====================  ===============================

Issuing never changes the record and may be repeated.
"""

from dataclasses import dataclass

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from mediquick.appointment.appointment import Appointment, AppointmentStatus
from mediquick.handoff.token import HandoffToken
from mediquick.order.order import Order, OrderStatus
from mediquick.profile.access import find_profile
from mediquick.shared.errors import InvalidState, Unauthorized
from mediquick.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class IssuanceRule:
    issuer_field: str
    actor_key: str
    # None when the issuer names the next actor rather than the record
    actor_field: str | None


_RECORD_TYPES = {
    "order": (Order, "order_id"),
    "appointment": (Appointment, "patient_offer_id"),
}

_RULES = {
    ("order", OrderStatus.PENDING_SALESPERSON_PICKUP.value): IssuanceRule("customer_id", "salesperson_id", None),
    ("order", OrderStatus.IN_DELIVERY.value): IssuanceRule("salesperson_id", "salesperson_id", "salesperson_id"),
    ("appointment", AppointmentStatus.ACCEPTED.value): IssuanceRule("doctor_id", "doctor_id", "doctor_id"),
    ("appointment", AppointmentStatus.ASSIGNED_TO_SALESPERSON.value): IssuanceRule(
        "salesperson_id", "salesperson_id", "salesperson_id"
    ),
}


def issue_token(kind: str, record_id: str, requester_id: str, next_actor_id: str | None = None) -> str:
    """Mint the handoff token for the next edge of an order or appointment."""
    record_cls, _ = _RECORD_TYPES[kind]
    record = current_domain.repository_for(record_cls).get(record_id)
    return token_for(kind, record, requester_id, next_actor_id)


def token_for(kind: str, record, requester_id: str, next_actor_id: str | None = None) -> str:
    """Mint the token for an already loaded record."""
    _, record_key = _RECORD_TYPES[kind]
    rule = _RULES.get((kind, record.status))
    if rule is None:
        raise InvalidState({"status": [f"No handoff is pending for a {kind} in status {record.status}"]})

    if str(getattr(record, rule.issuer_field)) != requester_id:
        raise Unauthorized({"requester": [f"User {requester_id} cannot issue a token for this {kind}"]})

    if rule.actor_field is None:
        actor_id = _named_salesperson(next_actor_id)
    else:
        actor_id = str(getattr(record, rule.actor_field))

    token = HandoffToken(**{record_key: str(record.id), rule.actor_key: actor_id})
    logger.info(
        "token_issued",
        record_kind=kind,
        record_id=str(record.id),
        issuer_id=requester_id,
        actor_id=actor_id,
    )
    return token.to_content()


def _named_salesperson(salesperson_id: str | None) -> str:
    if not salesperson_id:
        raise ValidationError({"salesperson_id": ["Name the salesperson who will pick up the order"]})
    profile = find_profile(salesperson_id)
    if profile is None or not profile.is_approved_salesperson:
        raise Unauthorized({"salesperson_id": [f"User {salesperson_id} is not an approved salesperson"]})
    return salesperson_id
