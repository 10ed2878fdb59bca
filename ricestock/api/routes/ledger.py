"""Transaction ledger endpoints."""

from fastapi import APIRouter, Depends, Query

from ricestock.api.dependencies import get_ledger, get_verify_ledger_use_case
from ricestock.application.dto.responses import (
    ErrorResponse,
    LedgerCheckResponse,
    LedgerEntryListResponse,
)
from ricestock.application.use_cases.common import entry_to_response, parse_iso_date
from ricestock.application.use_cases.verify_ledger import VerifyLedgerUseCase
from ricestock.config import get_settings
from ricestock.core.entities.ledger import TransactionKind
from ricestock.core.exceptions import InvalidInputError
from ricestock.infrastructure.storage.sqlite import SQLiteLedgerStore

router = APIRouter(prefix="/api/ledger", tags=["ledger"])


@router.get(
    "/entries",
    response_model=LedgerEntryListResponse,
    responses={400: {"model": ErrorResponse}},
)
async def list_entries(
    kind: TransactionKind | None = None,
    balance_id: int | None = None,
    start_date: str | None = Query(default=None, description="ISO date, inclusive"),
    end_date: str | None = Query(default=None, description="ISO date, inclusive"),
    limit: int | None = Query(default=None, ge=1),
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> LedgerEntryListResponse:
    """List ledger entries, newest first, filtered by kind and date range."""
    start = parse_iso_date("start_date", start_date)
    end = parse_iso_date("end_date", end_date)
    if start is not None and end is not None and start > end:
        raise InvalidInputError("start_date", "must not be after end_date", start_date)

    entries = await store.list_entries(
        kind=kind,
        balance_id=balance_id,
        start_date=start,
        end_date=end,
        limit=limit or get_settings().ledger.entries_limit,
    )
    return LedgerEntryListResponse(
        items=[entry_to_response(e) for e in entries],
        total=len(entries),
    )


@router.get("/verify", response_model=LedgerCheckResponse)
async def verify_ledger(
    warehouse_id: int | None = None,
    use_case: VerifyLedgerUseCase = Depends(get_verify_ledger_use_case),
) -> LedgerCheckResponse:
    """Compare every lot quantity with the sum of its ledger entries."""
    result = await use_case.execute(warehouse_id=warehouse_id)
    return use_case.to_response(result)
