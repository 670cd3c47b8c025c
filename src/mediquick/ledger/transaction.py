"""Transaction aggregate: one immutable entry in the coin ledger.

Entries are append-only: the aggregate is created through ``record`` and
exposes no way to change it afterwards.
"""

from datetime import datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String

from mediquick.domain import mediquick
from mediquick.ledger.events import TransactionRecorded
from mediquick.shared.clock import get_clock


class TransactionType(Enum):
    COIN_TRANSFER = "coin_transfer"
    CHECKUP_PAYMENT = "checkup_payment"
    DONATION = "donation"


@mediquick.aggregate
class Transaction:
    transaction_type = String(required=True, choices=TransactionType)
    amount = Integer(required=True, min_value=1)
    source_id = Identifier(required=True)
    target_id = Identifier(required=True)
    date = DateTime(required=True)
    description = String(max_length=500)
    order_id = Identifier()
    patient_offer_id = Identifier()

    @classmethod
    def record(
        cls,
        transaction_type: TransactionType,
        amount: int,
        source_id: str,
        target_id: str,
        description: str,
        order_id: str | None = None,
        patient_offer_id: str | None = None,
        date: datetime | None = None,
    ):
        if amount is None or amount <= 0:
            raise ValidationError({"amount": ["Transaction amount must be a positive integer"]})

        at = date or get_clock().now()
        transaction = cls(
            transaction_type=transaction_type.value,
            amount=amount,
            source_id=source_id,
            target_id=target_id,
            date=at,
            description=description,
            order_id=order_id,
            patient_offer_id=patient_offer_id,
        )
        transaction.raise_(
            TransactionRecorded(
                transaction_id=str(transaction.id),
                transaction_type=transaction_type.value,
                amount=amount,
                source_id=source_id,
                target_id=target_id,
                recorded_at=at,
            )
        )
        return transaction
