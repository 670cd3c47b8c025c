"""Delivery confirmation: command, handler and settlement.

Confirming delivery settles the order: the product's coins go to the
salesperson who delivered it. Products worth no coins settle without a
ledger entry.
"""

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from mediquick.domain import mediquick
from mediquick.ledger.posting import post_coins
from mediquick.ledger.transaction import TransactionType
from mediquick.order.order import Order, order_engine
from mediquick.product.product import Product
from mediquick.shared.concurrency import exclusive


@mediquick.command(part_of="Order")
class ConfirmDelivery:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    token = Text(required=True)


@mediquick.command_handler(part_of=Order)
class ConfirmDeliveryHandler:
    @exclusive
    @handle(ConfirmDelivery)
    def confirm_delivery(self, command):
        order = order_engine.transition("confirm", command.order_id, command.customer_id, command.token)
        return order.status


@order_engine.on_settle
def pay_for_delivery(order) -> None:
    product = current_domain.repository_for(Product).get(str(order.product_id))
    if not product.coins_assigned:
        return
    post_coins(
        TransactionType.COIN_TRANSFER,
        product.coins_assigned,
        source_id=str(order.customer_id),
        target_id=str(order.salesperson_id),
        description=f"Coins for product delivery: {order.product_name}",
        order_id=str(order.id),
    )
