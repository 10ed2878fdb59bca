"""Transfer Stock Use Case: move quantity from a lot into another warehouse."""

from dataclasses import dataclass

from ricestock.application.dto.requests import TransferStockRequest
from ricestock.application.dto.responses import TransferStockResponse
from ricestock.application.use_cases.common import (
    balance_to_response,
    entry_to_response,
    require_actor,
    require_positive,
    transfer_to_response,
)
from ricestock.config import get_logger, get_settings
from ricestock.core.clock import utc_now
from ricestock.core.entities.ledger import LedgerEntry, TransactionKind, TransferRecord
from ricestock.core.entities.stock import StockBalance
from ricestock.core.exceptions import (
    InsufficientStockError,
    InvalidInputError,
    StockBalanceNotFoundError,
    WarehouseNotFoundError,
)
from ricestock.core.interfaces.ledger_store import ILedgerStore

logger = get_logger(__name__)


@dataclass
class TransferStockResult:
    """Result of a transfer."""

    source: StockBalance
    destination: StockBalance
    transfer: TransferRecord
    entries: list[LedgerEntry]
    destination_created: bool = False


class TransferStockUseCase:
    """
    Move stock between warehouses.

    The destination is the oldest lot of the same variety already held in
    the destination warehouse; its unit cost is kept as is. When there is no
    such lot a new one is opened with the source's unit cost, expiry date
    and a suffixed batch label. Both sides get a ledger entry.
    """

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from ricestock.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: TransferStockRequest, actor: str) -> TransferStockResult:
        """Execute the transfer."""
        actor = require_actor(actor)
        quantity = require_positive("quantity", request.quantity)
        suffix = get_settings().ledger.transfer_batch_suffix

        logger.info(
            "transfer_stock_started",
            balance_id=request.balance_id,
            to_warehouse_id=request.to_warehouse_id,
            quantity=str(quantity),
            actor=actor,
        )

        store = await self._get_ledger_store()

        async with store.unit_of_work() as uow:
            source = await uow.get_balance(request.balance_id)
            if source is None:
                raise StockBalanceNotFoundError(request.balance_id)

            if await uow.get_warehouse(request.to_warehouse_id) is None:
                raise WarehouseNotFoundError(request.to_warehouse_id)

            if request.to_warehouse_id == source.warehouse_id:
                raise InvalidInputError(
                    "to_warehouse_id",
                    "destination warehouse must differ from the source warehouse",
                    request.to_warehouse_id,
                )

            if quantity > source.quantity:
                raise InsufficientStockError(
                    balance_id=request.balance_id,
                    requested=quantity,
                    available=source.quantity,
                )

            source.quantity -= quantity
            source = await uow.update_balance_quantity(source)

            now = utc_now()
            destination = await uow.find_lot(request.to_warehouse_id, source.variety_id)
            destination_created = destination is None
            if destination is None:
                destination = await uow.insert_balance(
                    StockBalance(
                        warehouse_id=request.to_warehouse_id,
                        variety_id=source.variety_id,
                        quantity=quantity,
                        unit_cost=source.unit_cost,
                        batch_label=f"{source.batch_label}{suffix}",
                        expiry_date=source.expiry_date,
                        notes=f"Transferred from lot {source.id}",
                        created_by=actor,
                        created_at=now,
                        updated_at=now,
                    )
                )
            else:
                destination.quantity += quantity
                destination = await uow.update_balance_quantity(destination)

            transfer = await uow.add_transfer(
                TransferRecord(
                    source_balance_id=source.id,  # type: ignore[arg-type]
                    destination_balance_id=destination.id,  # type: ignore[arg-type]
                    from_warehouse_id=source.warehouse_id,
                    to_warehouse_id=request.to_warehouse_id,
                    quantity=quantity,
                    reason=request.reason,
                    actor=actor,
                    created_at=now,
                )
            )

            entries = [
                await uow.append_entry(
                    LedgerEntry(
                        kind=TransactionKind.TRANSFER,
                        reference_id=transfer.id,  # type: ignore[arg-type]
                        balance_id=source.id,  # type: ignore[arg-type]
                        quantity_delta=-quantity,
                        notes=f"Transfer out to warehouse {request.to_warehouse_id}",
                        actor=actor,
                        created_at=now,
                    )
                ),
                await uow.append_entry(
                    LedgerEntry(
                        kind=TransactionKind.TRANSFER,
                        reference_id=transfer.id,  # type: ignore[arg-type]
                        balance_id=destination.id,  # type: ignore[arg-type]
                        quantity_delta=quantity,
                        notes=f"Transfer in from warehouse {source.warehouse_id}",
                        actor=actor,
                        created_at=now,
                    )
                ),
            ]

        logger.info(
            "transfer_stock_complete",
            transfer_id=transfer.id,
            source_balance_id=source.id,
            destination_balance_id=destination.id,
            destination_created=destination_created,
        )

        return TransferStockResult(
            source=source,
            destination=destination,
            transfer=transfer,
            entries=entries,
            destination_created=destination_created,
        )

    def to_response(self, result: TransferStockResult) -> TransferStockResponse:
        """Convert result to API response."""
        return TransferStockResponse(
            source=balance_to_response(result.source),
            destination=balance_to_response(result.destination),
            transfer=transfer_to_response(result.transfer),
            entries=[entry_to_response(e) for e in result.entries],
            destination_created=result.destination_created,
        )
