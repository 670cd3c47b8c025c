"""Order placement and doctor self-purchase: commands and handlers."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from mediquick.domain import mediquick
from mediquick.order.order import Order, order_engine
from mediquick.product.product import Product
from mediquick.profile.access import require_role
from mediquick.profile.profile import Role
from mediquick.shared.clock import get_clock
from mediquick.shared.concurrency import exclusive
from mediquick.utils.logging import get_logger

logger = get_logger(__name__)


@mediquick.command(part_of="Order")
class PlaceOrder:
    """A customer orders a product for delivery."""

    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@mediquick.command(part_of="Order")
class PurchaseAsDoctor:
    """A doctor buys a product for themselves; no delivery is involved."""

    doctor_id = Identifier(required=True)
    product_id = Identifier(required=True)


@mediquick.command_handler(part_of=Order)
class PlacementHandler:
    @exclusive
    @handle(PlaceOrder)
    def place_order(self, command):
        require_role(command.customer_id, Role.CUSTOMER)
        product = current_domain.repository_for(Product).get(command.product_id)

        order = Order.place(product, command.customer_id, get_clock().now())
        current_domain.repository_for(Order).add(order)
        logger.info("order_placed", order_id=str(order.id), customer_id=command.customer_id)
        return str(order.id)

    @exclusive
    @handle(PurchaseAsDoctor)
    def purchase_as_doctor(self, command):
        require_role(command.doctor_id, Role.DOCTOR)
        product = current_domain.repository_for(Product).get(command.product_id)

        # The doctor is both owner and recipient, so the order settles as soon as it is placed
        order = Order.place(product, command.doctor_id, get_clock().now())
        order_engine.advance(order_engine.edge("doctor_purchase"), order, command.doctor_id)
        return str(order.id)
