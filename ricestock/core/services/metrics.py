"""
Derived metrics over ledger state.

Pure functions, recomputed on every read. Nothing here is cached or stored,
except that the sale operation persists the profit/loss it gets from
profit_loss() as a cost-basis snapshot.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ricestock.core.entities.ledger import SaleRecord
from ricestock.core.entities.stock import StockBalance, StockLevel, Warehouse

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class StockLevelThresholds:
    """Stock level cut-offs, in percent of the minimum stock level."""

    low_pct: Decimal = Decimal("25")
    medium_pct: Decimal = Decimal("50")

    @classmethod
    def from_settings(cls) -> "StockLevelThresholds":
        from ricestock.config import get_settings

        ledger = get_settings().ledger
        return cls(
            low_pct=Decimal(str(ledger.low_stock_pct)),
            medium_pct=Decimal(str(ledger.medium_stock_pct)),
        )


def line_total(quantity: Decimal, price: Decimal) -> Decimal:
    return quantity * price


def profit_loss(sale_price: Decimal, cost_basis: Decimal, quantity: Decimal) -> Decimal:
    """(sale price - unit cost) * quantity. Negative for a loss."""
    return (sale_price - cost_basis) * quantity


def total_value(balance: StockBalance) -> Decimal:
    return balance.quantity * balance.unit_cost


def occupied_quantity(balances: Iterable[StockBalance]) -> Decimal:
    return sum((b.quantity for b in balances), Decimal("0"))


def warehouse_utilization(
    warehouse: Warehouse, balances: Iterable[StockBalance]
) -> Decimal:
    """
    Occupied capacity as a percentage of the warehouse capacity.

    Only lots stored in this warehouse are counted. The result is not
    clamped: an over-filled warehouse reports more than 100.
    """
    if warehouse.capacity <= 0:
        return Decimal("0")
    occupied = occupied_quantity(b for b in balances if b.warehouse_id == warehouse.id)
    return occupied / warehouse.capacity * HUNDRED


def clamp_percentage(
    value: Decimal, lower: Decimal = Decimal("0"), upper: Decimal = HUNDRED
) -> Decimal:
    """Clamp a percentage for display."""
    return max(lower, min(upper, value))


def stock_level_status(
    balance: StockBalance,
    minimum_level: Decimal,
    thresholds: StockLevelThresholds | None = None,
) -> StockLevel:
    """
    Classify a lot against a minimum stock level.

    low if quantity <= low_pct% of the minimum, medium if <= medium_pct%,
    safe otherwise. With a zero minimum only an empty lot is low.
    """
    thresholds = thresholds or StockLevelThresholds.from_settings()
    if balance.quantity <= minimum_level * thresholds.low_pct / HUNDRED:
        return StockLevel.LOW
    if balance.quantity <= minimum_level * thresholds.medium_pct / HUNDRED:
        return StockLevel.MEDIUM
    return StockLevel.SAFE


def aggregate_profit_loss(
    sales: Iterable[SaleRecord],
    start: date | None = None,
    end: date | None = None,
) -> Decimal:
    """
    Sum of stored sale profit/loss for sales dated within [start, end].

    Uses the snapshot taken at sale time, never the lot's current cost.
    """
    total = Decimal("0")
    for sale in sales:
        if start is not None and sale.sale_date < start:
            continue
        if end is not None and sale.sale_date > end:
            continue
        total += sale.profit_loss
    return total


def profit_margin(profit: Decimal, revenue: Decimal) -> Decimal:
    """Profit as a percentage of revenue, 0 when there is no revenue."""
    if revenue == 0:
        return Decimal("0")
    return profit / revenue * HUNDRED
