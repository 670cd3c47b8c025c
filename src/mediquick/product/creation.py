"""Product creation: command, handler, and catalogue search."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from mediquick.domain import mediquick
from mediquick.product.product import Product
from mediquick.profile.access import require_admin
from mediquick.shared.concurrency import exclusive
from mediquick.utils.logging import get_logger

logger = get_logger(__name__)


@mediquick.command(part_of="Product")
class AddProduct:
    admin_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    serial_number = String(max_length=100)
    coins_assigned = Integer(default=0, min_value=0)


@mediquick.command_handler(part_of=Product)
class AddProductHandler:
    @exclusive
    @handle(AddProduct)
    def add_product(self, command):
        require_admin(command.admin_id)
        product = Product.add(
            name=command.name,
            price=command.price,
            serial_number=command.serial_number,
            coins_assigned=command.coins_assigned or 0,
        )
        current_domain.repository_for(Product).add(product)
        logger.info("product_added", product_id=str(product.id), coins_assigned=product.coins_assigned)
        return str(product.id)


def search_products(name: str | None = None) -> list[Product]:
    """All products, optionally narrowed to names containing ``name`` (case-insensitive)."""
    products = current_domain.repository_for(Product)._dao.query.limit(None).all().items
    if name:
        needle = name.lower()
        products = [p for p in products if needle in (p.name or "").lower()]
    return sorted(products, key=lambda p: (p.name or "").lower())
