"""MediQuick bounded context: fulfillment hand-offs and the coin ledger.

Customers order products and request checkups, salespersons carry them to
completion against handoff tokens, and every completed hand-off credits coins
to the party who earned them.
"""

from protean.domain import Domain

from mediquick.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

mediquick = Domain(name="mediquick")
