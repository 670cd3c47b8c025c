"""Transition engine shared by orders and appointments.

Each fulfillment record type publishes an edge table. The engine walks a
transition request through the same checks in the same order for every
record type:

1. parse the token (``MalformedToken``)
2. load the record (``ObjectNotFoundError``)
3. check the requester's identity for the edge (``Unauthorized``)
4. on claim edges, refuse a record held by someone else (``AlreadyAssigned``)
5. check the record is in the edge's source status (``InvalidState``)
6. check the token names this record and the expected actor (``Unauthorized``)
7. apply the edge and persist against the loaded version (``Conflict``/``AlreadyAssigned``)
8. on settling edges, run the settlement registered with ``on_settle``

The record is loaded under ``load_for_update`` and everything, settlement
included, commits in the calling command's unit of work.
"""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError, ValidationError

from mediquick.handoff.token import HandoffToken
from mediquick.profile.access import require_approved_salesperson
from mediquick.shared.clock import get_clock
from mediquick.shared.concurrency import load_for_update, save_versioned
from mediquick.shared.errors import AlreadyAssigned, InvalidState, MalformedToken, Unauthorized
from mediquick.utils.logging import get_logger

logger = get_logger(__name__)

OWNER = "owner"
DOCTOR = "doctor"
SALESPERSON = "salesperson"


@dataclass(frozen=True)
class Edge:
    """One permitted status change of a fulfillment record.

    ``token_field`` names both the token key and the record field that the
    token's embedded actor must match; ``None`` means the edge takes no token.
    """

    name: str
    source: str
    target: str
    actor: str
    method: str
    token_field: str | None = None
    claims: bool = False
    settles: bool = False


class TransitionEngine:
    def __init__(self, record_cls, kind: str, owner_field: str, edges: list[Edge]):
        self.record_cls = record_cls
        self.kind = kind
        self.owner_field = owner_field
        self.edges = {edge.name: edge for edge in edges}
        self._settlement = None

    def edge(self, name: str) -> Edge:
        return self.edges[name]

    def edges_from(self, status: str) -> list[Edge]:
        return [edge for edge in self.edges.values() if edge.source == status]

    def load(self, record_id: str):
        return load_for_update(self.record_cls, record_id)

    def on_settle(self, settlement):
        """Register the side effect of this record type's settling edges.

        ``settlement(record)`` runs after the record is persisted, inside the same
        unit of work.
        """
        self._settlement = settlement
        return settlement

    def transition(self, edge_name: str, record_id: str, requester_id: str, token_content: str | None = None):
        """Run ``edge_name`` on a stored record, returning the persisted record."""
        edge = self.edge(edge_name)
        try:
            token = self._parse_token(edge, token_content)
            record = self.load(record_id)
        except (ValidationError, ObjectNotFoundError) as exc:
            self._log_rejection(edge, record_id, requester_id, exc)
            raise
        return self.advance(edge, record, requester_id, token)

    def advance(self, edge: Edge, record, requester_id: str, token: HandoffToken | None = None):
        """Authorize, apply and persist ``edge`` on an already loaded record."""
        try:
            self.authorize(edge, record, requester_id, token)
            self.apply(edge, record, requester_id, token)
            self.persist(edge, record)
            if edge.settles and self._settlement is not None:
                self._settlement(record)
        except (ValidationError, ObjectNotFoundError) as exc:
            self._log_rejection(edge, str(record.id), requester_id, exc)
            raise

        logger.info(
            "transition_applied",
            record_kind=self.kind,
            record_id=str(record.id),
            edge=edge.name,
            requester_id=requester_id,
            status=record.status,
        )
        return record

    def authorize(self, edge: Edge, record, requester_id: str, token: HandoffToken | None) -> None:
        self._check_identity(edge, record, requester_id)

        if edge.claims and record.salesperson_id and str(record.salesperson_id) != requester_id:
            raise AlreadyAssigned({"salesperson_id": [f"{self.kind.capitalize()} is already assigned"]})

        if record.status != edge.source:
            allowed = ", ".join(e.name for e in self.edges_from(record.status)) or "none"
            raise InvalidState(
                {"status": [f"Cannot {edge.name} a {self.kind} in status {record.status} (allowed: {allowed})"]}
            )

        if edge.token_field is not None:
            self._check_token(edge, record, requester_id, token)

    def apply(self, edge: Edge, record, requester_id: str, token: HandoffToken | None) -> None:
        proof = token.to_content() if token is not None else None
        getattr(record, edge.method)(actor_id=requester_id, at=get_clock().now(), proof=proof)
        if record.status != edge.target:
            raise InvalidState({"status": [f"{edge.name} left the {self.kind} in {record.status}, not {edge.target}"]})

    def persist(self, edge: Edge, record) -> None:
        save_versioned(record, claim=edge.claims)

    # -------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------
    def _parse_token(self, edge: Edge, token_content: str | None) -> HandoffToken | None:
        if edge.token_field is None:
            return None
        if token_content is None:
            raise MalformedToken({"token": [f"A handoff token is required to {edge.name} a {self.kind}"]})
        return HandoffToken.parse(token_content)

    def _check_identity(self, edge: Edge, record, requester_id: str) -> None:
        if edge.actor == SALESPERSON:
            require_approved_salesperson(requester_id)
            return

        field = self.owner_field if edge.actor == OWNER else "doctor_id"
        if str(getattr(record, field)) != requester_id:
            raise Unauthorized({"requester": [f"Only the {self.kind}'s {edge.actor} may {edge.name} it"]})

    def _check_token(self, edge: Edge, record, requester_id: str, token: HandoffToken) -> None:
        if token.record_kind != self.kind or token.record_id != str(record.id):
            raise Unauthorized({"token": [f"Token does not name this {self.kind}"]})

        embedded = getattr(token, edge.token_field)
        expected = getattr(record, edge.token_field) or requester_id
        if embedded is None or str(embedded) != str(expected):
            raise Unauthorized({"token": [f"Token {edge.token_field} does not match the {self.kind}"]})

    def _log_rejection(self, edge: Edge, record_id: str, requester_id: str, exc: Exception) -> None:
        logger.warning(
            "transition_rejected",
            record_kind=self.kind,
            record_id=record_id,
            edge=edge.name,
            requester_id=requester_id,
            error=type(exc).__name__,
        )
