"""HandoffToken value object: the content a party shows to authorize the next hand-off.

A token names exactly one record (an order or an appointment) and exactly one
actor (a salesperson or a doctor). It is unsigned: possession alone is not
enough, the embedded actor must also line up with the record and the
requester. On the wire it is compact JSON with camelCase keys, sorted::

    {"orderId":"...","salespersonId":"..."}
"""

import json

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from mediquick.domain import mediquick
from mediquick.shared.errors import MalformedToken

_WIRE_KEYS = {
    "order_id": "orderId",
    "patient_offer_id": "patientOfferId",
    "salesperson_id": "salespersonId",
    "doctor_id": "doctorId",
}
_FIELDS_BY_WIRE_KEY = {wire: field for field, wire in _WIRE_KEYS.items()}


@mediquick.value_object
class HandoffToken:
    order_id = String(max_length=255)
    patient_offer_id = String(max_length=255)
    salesperson_id = String(max_length=255)
    doctor_id = String(max_length=255)

    @invariant.post
    def names_exactly_one_record(self):
        if (self.order_id is None) == (self.patient_offer_id is None):
            raise ValidationError({"token": ["Token must name exactly one of orderId or patientOfferId"]})

    @invariant.post
    def names_exactly_one_actor(self):
        if (self.salesperson_id is None) == (self.doctor_id is None):
            raise ValidationError({"token": ["Token must name exactly one of salespersonId or doctorId"]})

    @property
    def record_kind(self) -> str:
        return "order" if self.order_id is not None else "appointment"

    @property
    def record_id(self) -> str:
        return str(self.order_id if self.order_id is not None else self.patient_offer_id)

    def to_content(self) -> str:
        payload = {
            wire: str(getattr(self, field)) for field, wire in _WIRE_KEYS.items() if getattr(self, field) is not None
        }
        return json.dumps(payload, separators=(",", ":"), sort_keys=True)

    @classmethod
    def parse(cls, content) -> "HandoffToken":
        """Rebuild a token from its wire form, raising ``MalformedToken`` on anything else."""
        if not isinstance(content, str) or not content.strip():
            raise MalformedToken({"token": ["Token content must be a non-empty string"]})

        try:
            payload = json.loads(content)
        except json.JSONDecodeError:
            raise MalformedToken({"token": ["Token content is not valid JSON"]}) from None

        if not isinstance(payload, dict):
            raise MalformedToken({"token": ["Token content must be a JSON object"]})

        unknown = sorted(set(payload) - set(_FIELDS_BY_WIRE_KEY))
        if unknown:
            raise MalformedToken({"token": [f"Unexpected token keys: {', '.join(unknown)}"]})

        values = {}
        for wire, value in payload.items():
            if not isinstance(value, str) or not value:
                raise MalformedToken({"token": [f"{wire} must be a non-empty string"]})
            values[_FIELDS_BY_WIRE_KEY[wire]] = value

        try:
            return cls(**values)
        except ValidationError as exc:
            raise MalformedToken(exc.messages) from None
