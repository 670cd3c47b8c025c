"""Error taxonomy for fulfillment hand-offs and the coin ledger.

Every error is a Protean ``ValidationError`` and carries a ``messages`` dict
keyed by the offending field. Missing records surface as Protean's own
``ObjectNotFoundError``.
"""

from protean.exceptions import ValidationError


class Unauthorized(ValidationError):
    """The requester is not the party allowed to perform the operation."""


class InvalidState(ValidationError):
    """The record is not in a status that accepts the requested edge."""


class AlreadyAssigned(ValidationError):
    """Another salesperson already holds the record."""


class Conflict(ValidationError):
    """The stored version moved on since the record was loaded."""


class MalformedToken(ValidationError):
    """The handoff token could not be parsed."""
