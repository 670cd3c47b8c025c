"""Profile aggregate: a user's role on the platform and, for earners, their coin balance.

A profile is created the first time a user picks a role (customer, doctor) or
when an admin approves them as a salesperson or an institution. Profiles are
never deleted and a user holds exactly one role for life.

Only salespersons and institutions hold a balance. ``coins`` starts at zero on
approval and changes only through ``credit``.
"""

from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Integer, String

from mediquick.domain import mediquick
from mediquick.profile.events import CoinsCredited, ProfileCreated
from mediquick.shared.clock import get_clock


class Role(Enum):
    CUSTOMER = "customer"
    INSTITUTION = "institution"
    SALESPERSON = "salesperson"
    DOCTOR = "doctor"
    ADMIN = "admin"


# Roles a user may pick for themselves; the rest are granted by an admin
SELF_SELECTABLE_ROLES = {Role.CUSTOMER, Role.DOCTOR}

# Roles that accumulate coins
EARNING_ROLES = {Role.SALESPERSON, Role.INSTITUTION}


@mediquick.aggregate
class Profile:
    user_id = Identifier(identifier=True, required=True)
    role = String(required=True, choices=Role)
    name = String(max_length=255)
    contact_number = String(max_length=50)
    bank_details = String(max_length=255)
    address = String(max_length=500)
    age = Integer(min_value=0)
    cnic = String(max_length=50)
    manager_id = Identifier()
    specialty = String(max_length=255)
    coins = Integer(min_value=0)
    approved = Boolean(default=False)

    @invariant.post
    def only_earning_roles_hold_coins(self):
        if self.coins is not None and Role(self.role) not in EARNING_ROLES:
            raise ValidationError({"coins": [f"A {self.role} profile does not hold a coin balance"]})

    @classmethod
    def create(cls, user_id: str, role: Role, approved: bool = False, **details):
        earns = role in EARNING_ROLES
        profile = cls(
            user_id=user_id,
            role=role.value,
            approved=approved,
            coins=0 if earns else None,
            **details,
        )
        profile.raise_(
            ProfileCreated(
                user_id=user_id,
                role=role.value,
                approved=approved,
                created_at=get_clock().now(),
            )
        )
        return profile

    @property
    def is_approved_salesperson(self) -> bool:
        return self.role == Role.SALESPERSON.value and bool(self.approved)

    @property
    def is_approved_institution(self) -> bool:
        return self.role == Role.INSTITUTION.value and bool(self.approved)

    def credit(self, amount: int) -> None:
        """Add ``amount`` coins to the balance."""
        if Role(self.role) not in EARNING_ROLES:
            raise ValidationError({"role": [f"A {self.role} profile cannot receive coins"]})
        if amount <= 0:
            raise ValidationError({"amount": ["Credit amount must be a positive integer"]})

        self.coins = (self.coins or 0) + amount
        self.raise_(
            CoinsCredited(
                user_id=str(self.user_id),
                amount=amount,
                new_balance=self.coins,
                credited_at=get_clock().now(),
            )
        )
