"""MediQuick API package."""

from mediquick.api.errors import register_error_handlers
from mediquick.api.routes import (
    appointment_router,
    handoff_router,
    ledger_router,
    order_router,
    product_router,
    profile_router,
)

ROUTERS = [profile_router, product_router, order_router, appointment_router, handoff_router, ledger_router]

__all__ = ["ROUTERS", "register_error_handlers"]
