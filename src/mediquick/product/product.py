"""Product aggregate: an item customers can order, with the coins its delivery earns."""

from protean.fields import DateTime, Float, Integer, String

from mediquick.domain import mediquick
from mediquick.product.events import ProductAdded
from mediquick.shared.clock import get_clock


@mediquick.aggregate
class Product:
    """Immutable once an admin has added it to the catalogue."""

    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    serial_number = String(max_length=100)
    coins_assigned = Integer(default=0, min_value=0)
    created_at = DateTime()

    @classmethod
    def add(cls, name: str, price: float, serial_number: str | None = None, coins_assigned: int = 0):
        now = get_clock().now()
        product = cls(
            name=name,
            price=price,
            serial_number=serial_number,
            coins_assigned=coins_assigned,
            created_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=name,
                price=price,
                coins_assigned=coins_assigned,
                added_at=now,
            )
        )
        return product
