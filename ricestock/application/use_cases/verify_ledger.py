"""Verify Ledger Use Case: audit every lot quantity against its ledger sum."""

from dataclasses import dataclass, field
from decimal import Decimal

from ricestock.application.dto.responses import LedgerCheckResponse, LedgerMismatchResponse
from ricestock.config import get_logger
from ricestock.core.interfaces.ledger_store import ILedgerStore

logger = get_logger(__name__)


@dataclass
class LedgerMismatch:
    balance_id: int
    balance_quantity: Decimal
    ledger_quantity: Decimal

    @property
    def difference(self) -> Decimal:
        return self.balance_quantity - self.ledger_quantity


@dataclass
class LedgerCheckResult:
    checked: int = 0
    mismatches: list[LedgerMismatch] = field(default_factory=list)

    @property
    def consistent(self) -> bool:
        return not self.mismatches


class VerifyLedgerUseCase:
    """Recompute the ledger sum of every lot and report the lots that disagree."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from ricestock.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, warehouse_id: int | None = None) -> LedgerCheckResult:
        store = await self._get_ledger_store()
        totals = await store.ledger_totals(warehouse_id=warehouse_id)

        result = LedgerCheckResult(checked=len(totals))
        for balance, ledger_qty in totals:
            if ledger_qty != balance.quantity:
                result.mismatches.append(
                    LedgerMismatch(
                        balance_id=balance.id,  # type: ignore[arg-type]
                        balance_quantity=balance.quantity,
                        ledger_quantity=ledger_qty,
                    )
                )

        if result.mismatches:
            logger.warning(
                "ledger_mismatch_found",
                checked=result.checked,
                mismatches=len(result.mismatches),
            )
        else:
            logger.info("ledger_verified", checked=result.checked)

        return result

    def to_response(self, result: LedgerCheckResult) -> LedgerCheckResponse:
        return LedgerCheckResponse(
            checked=result.checked,
            consistent=result.consistent,
            mismatches=[
                LedgerMismatchResponse(
                    balance_id=m.balance_id,
                    balance_quantity=m.balance_quantity,
                    ledger_quantity=m.ledger_quantity,
                    difference=m.difference,
                )
                for m in result.mismatches
            ],
        )
