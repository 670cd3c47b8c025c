"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier

from mediquick.domain import mediquick


@mediquick.event(part_of="Order")
class OrderPlaced:
    """A customer ordered a product; it now waits for a salesperson to pick it up."""

    __version__ = 1

    order_id = Identifier(required=True)
    product_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    price = Float(required=True)
    placed_at = DateTime(required=True)


@mediquick.event(part_of="Order")
class OrderClaimed:
    """A salesperson picked the order up and is delivering it."""

    __version__ = 1

    order_id = Identifier(required=True)
    salesperson_id = Identifier(required=True)
    picked_up_at = DateTime(required=True)


@mediquick.event(part_of="Order")
class DeliveryConfirmed:
    """The customer confirmed receipt against the salesperson's token."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    salesperson_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@mediquick.event(part_of="Order")
class OrderPurchasedByDoctor:
    __version__ = 1

    order_id = Identifier(required=True)
    doctor_id = Identifier(required=True)
    purchased_at = DateTime(required=True)
