"""Domain events for the Profile aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from mediquick.domain import mediquick


@mediquick.event(part_of="Profile")
class ProfileCreated:
    """A user took on a role, either by choosing it or through admin approval."""

    __version__ = 1

    user_id = Identifier(required=True)
    role = String(required=True)
    approved = Boolean(default=False)
    created_at = DateTime(required=True)


@mediquick.event(part_of="Profile")
class CoinsCredited:
    """Coins were added to a salesperson's or institution's balance."""

    __version__ = 1

    user_id = Identifier(required=True)
    amount = Integer(required=True)
    new_balance = Integer(required=True)
    credited_at = DateTime(required=True)
