"""Donations: a customer gives coins to an approved institution.

The donor's side is not debited: customers hold no balance.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer

from mediquick.domain import mediquick
from mediquick.ledger.posting import post_coins
from mediquick.ledger.transaction import Transaction, TransactionType
from mediquick.profile.access import find_profile, require_role
from mediquick.profile.profile import Role
from mediquick.shared.concurrency import exclusive


@mediquick.command(part_of="Transaction")
class Donate:
    donor_id = Identifier(required=True)
    institution_id = Identifier(required=True)
    amount = Integer(required=True)


@mediquick.command_handler(part_of=Transaction)
class DonateHandler:
    @exclusive
    @handle(Donate)
    def donate(self, command):
        require_role(command.donor_id, Role.CUSTOMER)

        if command.amount is None or command.amount <= 0:
            raise ValidationError({"amount": ["Donation amount must be a positive integer"]})

        institution = find_profile(command.institution_id)
        if institution is None or not institution.is_approved_institution:
            raise ValidationError({"institution_id": [f"User {command.institution_id} is not an approved institution"]})

        transaction = post_coins(
            TransactionType.DONATION,
            command.amount,
            source_id=command.donor_id,
            target_id=command.institution_id,
            description=f"Donation from customer {command.donor_id}",
        )
        return str(transaction.id)
