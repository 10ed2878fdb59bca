"""Record Sale Use Case: OUT of one lot with a profit/loss snapshot."""

from dataclasses import dataclass

from ricestock.application.dto.requests import RecordSaleRequest
from ricestock.application.dto.responses import RecordSaleResponse
from ricestock.application.use_cases.common import (
    balance_to_response,
    entry_to_response,
    parse_iso_date,
    require_actor,
    require_positive,
    require_text,
    sale_to_response,
)
from ricestock.config import get_logger, get_settings
from ricestock.core.clock import utc_now
from ricestock.core.entities.ledger import LedgerEntry, SaleRecord, TransactionKind
from ricestock.core.entities.stock import StockBalance
from ricestock.core.exceptions import (
    InsufficientStockError,
    InvalidInputError,
    StockBalanceNotFoundError,
)
from ricestock.core.interfaces.ledger_store import ILedgerStore
from ricestock.core.services import metrics

logger = get_logger(__name__)


@dataclass
class RecordSaleResult:
    """Result of recording a sale."""

    balance: StockBalance
    sale: SaleRecord
    entry: LedgerEntry


class RecordSaleUseCase:
    """Sell from one lot with a balance check."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from ricestock.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: RecordSaleRequest, actor: str) -> RecordSaleResult:
        """Execute the sale."""
        actor = require_actor(actor)
        quantity = require_positive("quantity", request.quantity)
        sale_price = require_positive("sale_price", request.sale_price)
        customer_name = require_text("customer_name", request.customer_name)
        invoice_number = require_text("invoice_number", request.invoice_number)
        sale_date = parse_iso_date("sale_date", request.sale_date)
        if sale_date is None:
            raise InvalidInputError("sale_date", "is required")
        payment_method = request.payment_method or get_settings().ledger.default_payment_method

        logger.info(
            "record_sale_started",
            balance_id=request.balance_id,
            quantity=str(quantity),
            actor=actor,
        )

        store = await self._get_ledger_store()

        async with store.unit_of_work() as uow:
            # 1. Read the lot under the write lock
            balance = await uow.get_balance(request.balance_id)
            if balance is None:
                raise StockBalanceNotFoundError(request.balance_id)

            # 2. Check sufficient stock
            if quantity > balance.quantity:
                raise InsufficientStockError(
                    balance_id=request.balance_id,
                    requested=quantity,
                    available=balance.quantity,
                )

            # 3. Snapshot cost basis before anything changes
            cost_basis = balance.unit_cost

            balance.quantity -= quantity
            balance = await uow.update_balance_quantity(balance)

            now = utc_now()
            sale = await uow.add_sale(
                SaleRecord(
                    balance_id=request.balance_id,
                    customer_name=customer_name,
                    quantity=quantity,
                    sale_price=sale_price,
                    cost_basis=cost_basis,
                    total=metrics.line_total(quantity, sale_price),
                    profit_loss=metrics.profit_loss(sale_price, cost_basis, quantity),
                    sale_date=sale_date,
                    invoice_number=invoice_number,
                    payment_method=payment_method,
                    notes=request.notes,
                    actor=actor,
                    created_at=now,
                )
            )

            entry = await uow.append_entry(
                LedgerEntry(
                    kind=TransactionKind.SALE,
                    reference_id=sale.id,  # type: ignore[arg-type]
                    balance_id=request.balance_id,
                    quantity_delta=-quantity,
                    notes=f"Sale {invoice_number} to {customer_name}",
                    actor=actor,
                    created_at=now,
                )
            )

        logger.info(
            "record_sale_complete",
            balance_id=balance.id,
            sale_id=sale.id,
            remaining_qty=str(balance.quantity),
            profit_loss=str(sale.profit_loss),
        )

        return RecordSaleResult(balance=balance, sale=sale, entry=entry)

    def to_response(self, result: RecordSaleResult) -> RecordSaleResponse:
        """Convert result to API response."""
        return RecordSaleResponse(
            balance=balance_to_response(result.balance),
            sale=sale_to_response(result.sale),
            entry=entry_to_response(result.entry),
        )
