"""Stock mutation and lot endpoints."""

from fastapi import APIRouter, Depends, Query, status

from ricestock.api.dependencies import (
    get_actor,
    get_adjust_stock_use_case,
    get_ledger,
    get_record_purchase_use_case,
    get_record_sale_use_case,
    get_transfer_stock_use_case,
)
from ricestock.application.dto.requests import (
    AdjustStockRequest,
    RecordPurchaseRequest,
    RecordSaleRequest,
    TransferStockRequest,
)
from ricestock.application.dto.responses import (
    AdjustmentResponse,
    AdjustStockResponse,
    ErrorResponse,
    LedgerEntryListResponse,
    PurchaseResponse,
    RecordPurchaseResponse,
    RecordSaleResponse,
    SaleResponse,
    StockBalanceListResponse,
    StockBalanceResponse,
    TransferResponse,
    TransferStockResponse,
)
from ricestock.application.use_cases.adjust_stock import AdjustStockUseCase
from ricestock.application.use_cases.common import (
    adjustment_to_response,
    balance_to_response,
    entry_to_response,
    purchase_to_response,
    sale_to_response,
    transfer_to_response,
)
from ricestock.application.use_cases.record_purchase import RecordPurchaseUseCase
from ricestock.application.use_cases.record_sale import RecordSaleUseCase
from ricestock.application.use_cases.transfer_stock import TransferStockUseCase
from ricestock.config import get_settings
from ricestock.core.exceptions import RecordNotFoundError, StockBalanceNotFoundError
from ricestock.infrastructure.storage.sqlite import SQLiteLedgerStore

router = APIRouter(prefix="/api/stock", tags=["stock"])

MUTATION_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post(
    "/purchases",
    response_model=RecordPurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    responses=MUTATION_ERRORS,
)
async def record_purchase(
    request: RecordPurchaseRequest,
    actor: str = Depends(get_actor),
    use_case: RecordPurchaseUseCase = Depends(get_record_purchase_use_case),
) -> RecordPurchaseResponse:
    """Record inbound stock as a new lot."""
    result = await use_case.execute(request, actor)
    return use_case.to_response(result)


@router.post(
    "/sales",
    response_model=RecordSaleResponse,
    status_code=status.HTTP_201_CREATED,
    responses=MUTATION_ERRORS,
)
async def record_sale(
    request: RecordSaleRequest,
    actor: str = Depends(get_actor),
    use_case: RecordSaleUseCase = Depends(get_record_sale_use_case),
) -> RecordSaleResponse:
    """Sell from a lot, rejecting quantities above the lot balance."""
    result = await use_case.execute(request, actor)
    return use_case.to_response(result)


@router.post(
    "/transfers",
    response_model=TransferStockResponse,
    status_code=status.HTTP_201_CREATED,
    responses=MUTATION_ERRORS,
)
async def transfer_stock(
    request: TransferStockRequest,
    actor: str = Depends(get_actor),
    use_case: TransferStockUseCase = Depends(get_transfer_stock_use_case),
) -> TransferStockResponse:
    """Move stock from a lot into another warehouse."""
    result = await use_case.execute(request, actor)
    return use_case.to_response(result)


@router.post(
    "/adjustments",
    response_model=AdjustStockResponse,
    status_code=status.HTTP_201_CREATED,
    responses=MUTATION_ERRORS,
)
async def adjust_stock(
    request: AdjustStockRequest,
    actor: str = Depends(get_actor),
    use_case: AdjustStockUseCase = Depends(get_adjust_stock_use_case),
) -> AdjustStockResponse:
    """Correct a lot's quantity by hand."""
    result = await use_case.execute(request, actor)
    return use_case.to_response(result)


@router.get("/balances", response_model=StockBalanceListResponse)
async def list_balances(
    warehouse_id: int | None = None,
    variety_id: int | None = None,
    include_empty: bool = True,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> StockBalanceListResponse:
    """List lots, optionally for one warehouse and/or variety."""
    balances = await store.list_balances(
        warehouse_id=warehouse_id,
        variety_id=variety_id,
        include_empty=include_empty,
        limit=limit,
        offset=offset,
    )
    return StockBalanceListResponse(
        items=[balance_to_response(b) for b in balances],
        total=len(balances),
        limit=limit,
        offset=offset,
    )


@router.get(
    "/balances/{balance_id}",
    response_model=StockBalanceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_balance(
    balance_id: int,
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> StockBalanceResponse:
    """Get one lot."""
    balance = await store.get_balance(balance_id)
    if balance is None:
        raise StockBalanceNotFoundError(balance_id)
    return balance_to_response(balance)


@router.get(
    "/balances/{balance_id}/entries",
    response_model=LedgerEntryListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_balance_entries(
    balance_id: int,
    limit: int | None = Query(default=None, ge=1),
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> LedgerEntryListResponse:
    """Ledger history of one lot, newest first."""
    if await store.get_balance(balance_id) is None:
        raise StockBalanceNotFoundError(balance_id)
    entries = await store.list_entries(
        balance_id=balance_id,
        limit=limit or get_settings().ledger.entries_limit,
    )
    return LedgerEntryListResponse(
        items=[entry_to_response(e) for e in entries],
        total=len(entries),
    )


@router.get(
    "/purchases/{purchase_id}",
    response_model=PurchaseResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_purchase(
    purchase_id: int,
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> PurchaseResponse:
    purchase = await store.get_purchase(purchase_id)
    if purchase is None:
        raise RecordNotFoundError("purchase", purchase_id)
    return purchase_to_response(purchase)


@router.get(
    "/sales/{sale_id}",
    response_model=SaleResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_sale(
    sale_id: int,
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> SaleResponse:
    """Get one sale, including its stored profit/loss snapshot."""
    sale = await store.get_sale(sale_id)
    if sale is None:
        raise RecordNotFoundError("sale", sale_id)
    return sale_to_response(sale)


@router.get(
    "/transfers/{transfer_id}",
    response_model=TransferResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_transfer(
    transfer_id: int,
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> TransferResponse:
    transfer = await store.get_transfer(transfer_id)
    if transfer is None:
        raise RecordNotFoundError("transfer", transfer_id)
    return transfer_to_response(transfer)


@router.get(
    "/adjustments/{adjustment_id}",
    response_model=AdjustmentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_adjustment(
    adjustment_id: int,
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> AdjustmentResponse:
    adjustment = await store.get_adjustment(adjustment_id)
    if adjustment is None:
        raise RecordNotFoundError("adjustment", adjustment_id)
    return adjustment_to_response(adjustment)
