"""Record Purchase Use Case: inbound stock always opens a new lot."""

from dataclasses import dataclass

from ricestock.application.dto.requests import RecordPurchaseRequest
from ricestock.application.dto.responses import RecordPurchaseResponse
from ricestock.application.use_cases.common import (
    balance_to_response,
    entry_to_response,
    parse_iso_date,
    purchase_to_response,
    require_actor,
    require_positive,
    require_text,
)
from ricestock.config import get_logger
from ricestock.core.clock import utc_now
from ricestock.core.entities.ledger import LedgerEntry, PurchaseRecord, TransactionKind
from ricestock.core.entities.stock import StockBalance
from ricestock.core.exceptions import (
    SupplierNotFoundError,
    VarietyNotFoundError,
    WarehouseNotFoundError,
)
from ricestock.core.interfaces.ledger_store import ILedgerStore
from ricestock.core.services import metrics

logger = get_logger(__name__)


@dataclass
class RecordPurchaseResult:
    """Result of recording a purchase."""

    balance: StockBalance
    purchase: PurchaseRecord
    entry: LedgerEntry


class RecordPurchaseUseCase:
    """Record a purchase as a new lot plus one ledger entry."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from ricestock.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: RecordPurchaseRequest, actor: str) -> RecordPurchaseResult:
        """
        Execute the purchase.

        Raises:
            InvalidInputError: bad quantity, price, batch label, date or actor
            WarehouseNotFoundError, VarietyNotFoundError, SupplierNotFoundError
            StorageFailureError: the database rejected a write; nothing was kept
        """
        actor = require_actor(actor)
        quantity = require_positive("quantity", request.quantity)
        unit_price = require_positive("unit_price", request.unit_price)
        batch_label = require_text("batch_label", request.batch_label)
        expiry_date = parse_iso_date("expiry_date", request.expiry_date)
        purchase_date = parse_iso_date("purchase_date", request.purchase_date) or utc_now().date()

        logger.info(
            "record_purchase_started",
            warehouse_id=request.warehouse_id,
            variety_id=request.variety_id,
            quantity=str(quantity),
            actor=actor,
        )

        store = await self._get_ledger_store()

        async with store.unit_of_work() as uow:
            if await uow.get_warehouse(request.warehouse_id) is None:
                raise WarehouseNotFoundError(request.warehouse_id)
            if await uow.get_variety(request.variety_id) is None:
                raise VarietyNotFoundError(request.variety_id)
            if request.supplier_id is not None and await uow.get_supplier(request.supplier_id) is None:
                raise SupplierNotFoundError(request.supplier_id)

            now = utc_now()
            balance = await uow.insert_balance(
                StockBalance(
                    warehouse_id=request.warehouse_id,
                    variety_id=request.variety_id,
                    quantity=quantity,
                    unit_cost=unit_price,
                    batch_label=batch_label,
                    expiry_date=expiry_date,
                    notes=request.notes,
                    created_by=actor,
                    created_at=now,
                    updated_at=now,
                )
            )

            purchase = await uow.add_purchase(
                PurchaseRecord(
                    balance_id=balance.id,  # type: ignore[arg-type]
                    warehouse_id=request.warehouse_id,
                    variety_id=request.variety_id,
                    supplier_id=request.supplier_id,
                    invoice_number=request.invoice_number,
                    purchase_date=purchase_date,
                    quantity=quantity,
                    unit_price=unit_price,
                    total=metrics.line_total(quantity, unit_price),
                    notes=request.notes,
                    actor=actor,
                    created_at=now,
                )
            )

            entry = await uow.append_entry(
                LedgerEntry(
                    kind=TransactionKind.PURCHASE,
                    reference_id=purchase.id,  # type: ignore[arg-type]
                    balance_id=balance.id,  # type: ignore[arg-type]
                    quantity_delta=quantity,
                    notes=f"Purchase {request.invoice_number or batch_label}",
                    actor=actor,
                    created_at=now,
                )
            )

        logger.info(
            "record_purchase_complete",
            balance_id=balance.id,
            purchase_id=purchase.id,
            total=str(purchase.total),
        )

        return RecordPurchaseResult(balance=balance, purchase=purchase, entry=entry)

    def to_response(self, result: RecordPurchaseResult) -> RecordPurchaseResponse:
        """Convert result to API response."""
        return RecordPurchaseResponse(
            balance=balance_to_response(result.balance),
            purchase=purchase_to_response(result.purchase),
            entry=entry_to_response(result.entry),
        )
