"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from mediquick.domain import mediquick


@mediquick.event(part_of="Product")
class ProductAdded:
    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    coins_assigned = Integer(default=0)
    added_at = DateTime(required=True)
