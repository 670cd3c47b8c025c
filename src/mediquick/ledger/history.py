"""Read side of the ledger and the fulfillment work lists.

All history views share one time window (``HISTORY_WINDOW_DAYS``, 30 by
default) measured back from the clock's "now", and list newest first. The
window, the ordering and the unbounded row count are all part of the query;
Protean's default query limit would otherwise cut results at 100 rows.
"""

from dataclasses import dataclass
from datetime import timedelta

from protean.utils.globals import current_domain

from mediquick.appointment.appointment import Appointment
from mediquick.ledger.transaction import Transaction, TransactionType
from mediquick.order.order import Order
from mediquick.profile.profile import Profile, Role
from mediquick.shared.clock import get_clock
from mediquick.shared.settings import history_window_days


def _window_start():
    return get_clock().now() - timedelta(days=history_window_days())


def _query(aggregate_cls, **filters):
    return current_domain.repository_for(aggregate_cls)._dao.query.filter(**filters).limit(None)


def coin_history(target_id: str, transaction_type: TransactionType | None = None) -> list[Transaction]:
    """Transactions received by ``target_id`` inside the window, newest first."""
    filters = {"target_id": target_id, "date__gte": _window_start()}
    if transaction_type is not None:
        filters["transaction_type"] = transaction_type.value
    return _query(Transaction, **filters).order_by("-date").all().items


def order_history(customer_id: str) -> list[Order]:
    return (
        _query(Order, customer_id=customer_id, order_date__gte=_window_start())
        .order_by("-order_date")
        .all()
        .items
    )


def appointments_for(user_id: str, role: Role) -> list[Appointment]:
    """The appointments a user works on: requested as patient, addressed as doctor, or escorted as salesperson."""
    field = {
        Role.CUSTOMER: "patient_id",
        Role.DOCTOR: "doctor_id",
        Role.SALESPERSON: "salesperson_id",
    }.get(role)
    if field is None:
        return []
    return _query(Appointment, **{field: user_id}).order_by("-offered_on").all().items


@dataclass(frozen=True)
class Reconciliation:
    user_id: str
    balance: int
    ledger_total: int

    @property
    def balanced(self) -> bool:
        return self.balance == self.ledger_total


def reconcile(user_id: str) -> Reconciliation:
    """Compare a profile's balance with everything the ledger says it received, across all time."""
    profile = current_domain.repository_for(Profile).get(user_id)
    transactions = _query(Transaction, target_id=user_id).all().items
    return Reconciliation(
        user_id=user_id,
        balance=profile.coins or 0,
        ledger_total=sum(t.amount for t in transactions),
    )
