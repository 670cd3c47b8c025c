"""Order aggregate: a customer's purchase of a single product.

A salesperson claims the order at pickup and carries it to the customer, who
confirms delivery by presenting the salesperson's handoff token. A doctor
ordering for themselves skips delivery altogether.

State Machine:
    PENDING_SALESPERSON_PICKUP → IN_DELIVERY → DELIVERED
    PENDING_SALESPERSON_PICKUP → PURCHASED_BY_DOCTOR
"""

from datetime import datetime
from enum import Enum

from protean.fields import DateTime, Float, Identifier, String, Text

from mediquick.domain import mediquick
from mediquick.handoff.engine import OWNER, SALESPERSON, Edge, TransitionEngine
from mediquick.order.events import DeliveryConfirmed, OrderClaimed, OrderPlaced, OrderPurchasedByDoctor
from mediquick.shared.errors import InvalidState


class OrderStatus(Enum):
    PENDING_SALESPERSON_PICKUP = "pending_salesperson_pickup"
    IN_DELIVERY = "in_delivery"
    DELIVERED = "delivered"
    PURCHASED_BY_DOCTOR = "purchased_by_doctor"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING_SALESPERSON_PICKUP: {OrderStatus.IN_DELIVERY, OrderStatus.PURCHASED_BY_DOCTOR},
    OrderStatus.IN_DELIVERY: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # terminal
    OrderStatus.PURCHASED_BY_DOCTOR: set(),  # terminal
}


@mediquick.aggregate
class Order:
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    price = Float(min_value=0.0)
    customer_id = Identifier(required=True)
    salesperson_id = Identifier()
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING_SALESPERSON_PICKUP.value,
    )
    order_date = DateTime()
    picked_up_at = DateTime()
    delivered_date = DateTime()
    qr_content = Text()

    @classmethod
    def place(cls, product, customer_id: str, at: datetime):
        order = cls(
            product_id=str(product.id),
            product_name=product.name,
            price=product.price,
            customer_id=customer_id,
            status=OrderStatus.PENDING_SALESPERSON_PICKUP.value,
            order_date=at,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                product_id=str(product.id),
                customer_id=customer_id,
                price=product.price,
                placed_at=at,
            )
        )
        return order

    def _assert_can_transition(self, target_status: OrderStatus) -> None:
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidState({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def claim(self, actor_id: str, at: datetime, proof: str | None = None) -> None:
        """A salesperson takes the order out for delivery."""
        self._assert_can_transition(OrderStatus.IN_DELIVERY)
        self.status = OrderStatus.IN_DELIVERY.value
        self.salesperson_id = actor_id
        self.picked_up_at = at
        self.raise_(
            OrderClaimed(
                order_id=str(self.id),
                salesperson_id=actor_id,
                picked_up_at=at,
            )
        )

    def confirm_delivery(self, actor_id: str, at: datetime, proof: str | None = None) -> None:
        """The customer confirms receipt; the presented token is kept as proof."""
        self._assert_can_transition(OrderStatus.DELIVERED)
        self.status = OrderStatus.DELIVERED.value
        self.delivered_date = at
        self.qr_content = proof
        self.raise_(
            DeliveryConfirmed(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                salesperson_id=str(self.salesperson_id),
                delivered_at=at,
            )
        )

    def purchase_as_doctor(self, actor_id: str, at: datetime, proof: str | None = None) -> None:
        self._assert_can_transition(OrderStatus.PURCHASED_BY_DOCTOR)
        self.status = OrderStatus.PURCHASED_BY_DOCTOR.value
        self.raise_(
            OrderPurchasedByDoctor(
                order_id=str(self.id),
                doctor_id=actor_id,
                purchased_at=at,
            )
        )


ORDER_EDGES = [
    Edge(
        name="claim",
        source=OrderStatus.PENDING_SALESPERSON_PICKUP.value,
        target=OrderStatus.IN_DELIVERY.value,
        actor=SALESPERSON,
        method="claim",
        token_field="salesperson_id",
        claims=True,
    ),
    Edge(
        name="confirm",
        source=OrderStatus.IN_DELIVERY.value,
        target=OrderStatus.DELIVERED.value,
        actor=OWNER,
        method="confirm_delivery",
        token_field="salesperson_id",
        settles=True,
    ),
    Edge(
        name="doctor_purchase",
        source=OrderStatus.PENDING_SALESPERSON_PICKUP.value,
        target=OrderStatus.PURCHASED_BY_DOCTOR.value,
        actor=OWNER,
        method="purchase_as_doctor",
    ),
]

order_engine = TransitionEngine(Order, kind="order", owner_field="customer_id", edges=ORDER_EDGES)
