"""API route modules."""

from ricestock.api.routes.health import router as health_router
from ricestock.api.routes.ledger import router as ledger_router
from ricestock.api.routes.metrics import router as metrics_router
from ricestock.api.routes.stock import router as stock_router

__all__ = [
    "health_router",
    "stock_router",
    "ledger_router",
    "metrics_router",
]
