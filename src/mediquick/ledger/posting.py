"""Coin posting: credit a balance and append the matching ledger entry.

Callers run inside a command handler, so the balance write, the ledger append
and whatever status change triggered them commit in one unit of work.
"""

from protean.utils.globals import current_domain

from mediquick.ledger.transaction import Transaction, TransactionType
from mediquick.profile.profile import Profile
from mediquick.shared.concurrency import load_for_update, save_versioned
from mediquick.utils.logging import get_logger

logger = get_logger(__name__)


def post_coins(
    transaction_type: TransactionType,
    amount: int,
    source_id: str,
    target_id: str,
    description: str,
    order_id: str | None = None,
    patient_offer_id: str | None = None,
) -> Transaction:
    profile = load_for_update(Profile, target_id)
    profile.credit(amount)
    save_versioned(profile)

    transaction = Transaction.record(
        transaction_type,
        amount,
        source_id=source_id,
        target_id=target_id,
        description=description,
        order_id=order_id,
        patient_offer_id=patient_offer_id,
    )
    current_domain.repository_for(Transaction).add(transaction)

    logger.info(
        "coins_posted",
        transaction_id=str(transaction.id),
        transaction_type=transaction_type.value,
        amount=amount,
        source_id=source_id,
        target_id=target_id,
        new_balance=profile.coins,
    )
    return transaction
