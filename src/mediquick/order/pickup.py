"""Order pickup: a salesperson claims an order by presenting its handoff token."""

from protean import handle
from protean.fields import Identifier, Text

from mediquick.domain import mediquick
from mediquick.order.order import Order, order_engine
from mediquick.shared.concurrency import exclusive


@mediquick.command(part_of="Order")
class ClaimOrder:
    order_id = Identifier(required=True)
    salesperson_id = Identifier(required=True)
    token = Text(required=True)


@mediquick.command_handler(part_of=Order)
class ClaimOrderHandler:
    @exclusive
    @handle(ClaimOrder)
    def claim_order(self, command):
        order = order_engine.transition("claim", command.order_id, command.salesperson_id, command.token)
        return order.status
