"""Adjust Stock Use Case: manual correction of one lot."""

from dataclasses import dataclass

from ricestock.application.dto.requests import AdjustStockRequest
from ricestock.application.dto.responses import AdjustStockResponse
from ricestock.application.use_cases.common import (
    adjustment_to_response,
    balance_to_response,
    entry_to_response,
    require_actor,
    require_positive,
    require_text,
)
from ricestock.config import get_logger
from ricestock.core.clock import utc_now
from ricestock.core.entities.ledger import (
    AdjustmentDirection,
    AdjustmentRecord,
    LedgerEntry,
    TransactionKind,
)
from ricestock.core.entities.stock import StockBalance
from ricestock.core.exceptions import InvalidInputError, StockBalanceNotFoundError
from ricestock.core.interfaces.ledger_store import ILedgerStore

logger = get_logger(__name__)


@dataclass
class AdjustStockResult:
    """Result of an adjustment."""

    balance: StockBalance
    adjustment: AdjustmentRecord
    entry: LedgerEntry


class AdjustStockUseCase:
    """Increase or decrease a lot's quantity. Every adjustment is ledgered."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from ricestock.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, request: AdjustStockRequest, actor: str) -> AdjustStockResult:
        """Execute the adjustment."""
        actor = require_actor(actor)
        quantity = require_positive("quantity", request.quantity)
        reason = require_text("reason", request.reason)
        try:
            direction = AdjustmentDirection(request.direction)
        except ValueError:
            raise InvalidInputError("direction", "must be increase or decrease", request.direction)

        logger.info(
            "adjust_stock_started",
            balance_id=request.balance_id,
            direction=direction.value,
            quantity=str(quantity),
            actor=actor,
        )

        store = await self._get_ledger_store()

        async with store.unit_of_work() as uow:
            balance = await uow.get_balance(request.balance_id)
            if balance is None:
                raise StockBalanceNotFoundError(request.balance_id)

            previous = balance.quantity
            if direction == AdjustmentDirection.INCREASE:
                new_quantity = previous + quantity
            else:
                new_quantity = previous - quantity

            if new_quantity < 0:
                raise InvalidInputError(
                    "quantity",
                    f"adjustment would result in negative stock (current {previous})",
                    quantity,
                )

            balance.quantity = new_quantity
            balance = await uow.update_balance_quantity(balance)

            now = utc_now()
            adjustment = await uow.add_adjustment(
                AdjustmentRecord(
                    balance_id=request.balance_id,
                    direction=direction,
                    quantity=quantity,
                    previous_quantity=previous,
                    new_quantity=new_quantity,
                    reason=reason,
                    actor=actor,
                    created_at=now,
                )
            )

            entry = await uow.append_entry(
                LedgerEntry(
                    kind=TransactionKind.ADJUSTMENT,
                    reference_id=adjustment.id,  # type: ignore[arg-type]
                    balance_id=request.balance_id,
                    quantity_delta=adjustment.signed_delta,
                    notes=f"Adjustment ({direction.value}): {reason}",
                    actor=actor,
                    created_at=now,
                )
            )

        logger.info(
            "adjust_stock_complete",
            balance_id=balance.id,
            adjustment_id=adjustment.id,
            previous_qty=str(previous),
            new_qty=str(new_quantity),
        )

        return AdjustStockResult(balance=balance, adjustment=adjustment, entry=entry)

    def to_response(self, result: AdjustStockResult) -> AdjustStockResponse:
        """Convert result to API response."""
        return AdjustStockResponse(
            balance=balance_to_response(result.balance),
            adjustment=adjustment_to_response(result.adjustment),
            entry=entry_to_response(result.entry),
        )
