"""Warehouse and variety metrics use cases, recomputed from current lots on every call."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from ricestock.application.dto.responses import (
    LotStatusResponse,
    VarietyMetricsResponse,
    WarehouseMetricsResponse,
)
from ricestock.application.use_cases.common import parse_iso_date
from ricestock.config import get_logger
from ricestock.core.entities.ledger import SaleRecord
from ricestock.core.entities.stock import RiceVariety, StockBalance, StockLevel, Warehouse
from ricestock.core.exceptions import (
    InvalidInputError,
    VarietyNotFoundError,
    WarehouseNotFoundError,
)
from ricestock.core.interfaces.ledger_store import ILedgerStore
from ricestock.core.interfaces.master_data_store import IMasterDataStore
from ricestock.core.services import metrics

logger = get_logger(__name__)

PAGE_SIZE = 500


async def load_all_balances(
    store: ILedgerStore,
    warehouse_id: int | None = None,
    variety_id: int | None = None,
) -> list[StockBalance]:
    """Page through every lot matching the filters."""
    balances: list[StockBalance] = []
    offset = 0
    while True:
        page = await store.list_balances(
            warehouse_id=warehouse_id,
            variety_id=variety_id,
            include_empty=True,
            limit=PAGE_SIZE,
            offset=offset,
        )
        balances.extend(page)
        if len(page) < PAGE_SIZE:
            return balances
        offset += PAGE_SIZE


class _MetricsUseCase:
    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        master_data_store: IMasterDataStore | None = None,
    ):
        self._ledger_store = ledger_store
        self._master_data_store = master_data_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from ricestock.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def _get_master_data_store(self) -> IMasterDataStore:
        if self._master_data_store is None:
            from ricestock.infrastructure.storage.sqlite import get_master_data_store

            self._master_data_store = await get_master_data_store()
        return self._master_data_store


@dataclass
class WarehouseMetricsResult:
    warehouse: Warehouse
    balances: list[StockBalance]
    total_quantity: Decimal
    total_value: Decimal
    utilization_pct: Decimal


class GetWarehouseMetricsUseCase(_MetricsUseCase):
    """Total quantity, total value and capacity utilization of one warehouse."""

    async def execute(self, warehouse_id: int) -> WarehouseMetricsResult:
        master = await self._get_master_data_store()
        warehouse = await master.get_warehouse(warehouse_id)
        if warehouse is None:
            raise WarehouseNotFoundError(warehouse_id)

        store = await self._get_ledger_store()
        balances = await load_all_balances(store, warehouse_id=warehouse_id)

        result = WarehouseMetricsResult(
            warehouse=warehouse,
            balances=balances,
            total_quantity=metrics.occupied_quantity(balances),
            total_value=sum((metrics.total_value(b) for b in balances), Decimal("0")),
            utilization_pct=metrics.warehouse_utilization(warehouse, balances),
        )
        logger.debug(
            "warehouse_metrics_computed",
            warehouse_id=warehouse_id,
            lots=len(balances),
            utilization_pct=str(result.utilization_pct),
        )
        return result

    def to_response(self, result: WarehouseMetricsResult) -> WarehouseMetricsResponse:
        w = result.warehouse
        return WarehouseMetricsResponse(
            warehouse_id=w.id,  # type: ignore[arg-type]
            name=w.name,
            capacity=w.capacity,
            lot_count=len(result.balances),
            total_quantity=result.total_quantity,
            total_value=result.total_value,
            utilization_pct=result.utilization_pct,
            utilization_display_pct=metrics.clamp_percentage(result.utilization_pct),
        )


@dataclass
class VarietyMetricsResult:
    variety: RiceVariety
    balances: list[StockBalance]
    levels: dict[int, StockLevel]
    total_quantity: Decimal
    total_value: Decimal
    sales: list[SaleRecord] = field(default_factory=list)
    start_date: date | None = None
    end_date: date | None = None
    quantity_sold: Decimal = Decimal("0")
    revenue: Decimal = Decimal("0")
    profit_loss: Decimal = Decimal("0")

    @property
    def profit_margin_pct(self) -> Decimal:
        return metrics.profit_margin(self.profit_loss, self.revenue)


class GetVarietyMetricsUseCase(_MetricsUseCase):
    """
    Stock and sales figures for one variety.

    Each lot is classified against the variety minimum stock level. Profit
    is the sum of the profit/loss stored on each sale in the date range.
    """

    async def execute(
        self,
        variety_id: int,
        start_date: str | date | None = None,
        end_date: str | date | None = None,
    ) -> VarietyMetricsResult:
        start = parse_iso_date("start_date", start_date)
        end = parse_iso_date("end_date", end_date)
        if start is not None and end is not None and start > end:
            raise InvalidInputError("start_date", "must not be after end_date", start_date)

        master = await self._get_master_data_store()
        variety = await master.get_variety(variety_id)
        if variety is None:
            raise VarietyNotFoundError(variety_id)

        store = await self._get_ledger_store()
        balances = await load_all_balances(store, variety_id=variety_id)
        sales = await store.list_sales(start_date=start, end_date=end, variety_id=variety_id)

        thresholds = metrics.StockLevelThresholds.from_settings()
        levels = {
            b.id: metrics.stock_level_status(b, variety.minimum_stock_level, thresholds)  # type: ignore[misc]
            for b in balances
        }

        return VarietyMetricsResult(
            variety=variety,
            balances=balances,
            levels=levels,
            total_quantity=metrics.occupied_quantity(balances),
            total_value=sum((metrics.total_value(b) for b in balances), Decimal("0")),
            sales=sales,
            start_date=start,
            end_date=end,
            quantity_sold=sum((s.quantity for s in sales), Decimal("0")),
            revenue=sum((s.total for s in sales), Decimal("0")),
            profit_loss=metrics.aggregate_profit_loss(sales, start, end),
        )

    def to_response(self, result: VarietyMetricsResult) -> VarietyMetricsResponse:
        v = result.variety
        return VarietyMetricsResponse(
            variety_id=v.id,  # type: ignore[arg-type]
            name=v.name,
            minimum_stock_level=v.minimum_stock_level,
            total_quantity=result.total_quantity,
            total_value=result.total_value,
            lots=[
                LotStatusResponse(
                    balance_id=b.id,  # type: ignore[arg-type]
                    warehouse_id=b.warehouse_id,
                    batch_label=b.batch_label,
                    quantity=b.quantity,
                    stock_level=result.levels[b.id].value,  # type: ignore[index]
                )
                for b in result.balances
            ],
            start_date=result.start_date,
            end_date=result.end_date,
            sales_count=len(result.sales),
            quantity_sold=result.quantity_sold,
            revenue=result.revenue,
            profit_loss=result.profit_loss,
            profit_margin_pct=result.profit_margin_pct,
        )
