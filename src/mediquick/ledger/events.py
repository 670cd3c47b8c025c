"""Domain events for the coin ledger."""

from protean.fields import DateTime, Identifier, Integer, String

from mediquick.domain import mediquick


@mediquick.event(part_of="Transaction")
class TransactionRecorded:
    __version__ = 1

    transaction_id = Identifier(required=True)
    transaction_type = String(required=True)
    amount = Integer(required=True)
    source_id = Identifier(required=True)
    target_id = Identifier(required=True)
    recorded_at = DateTime(required=True)
