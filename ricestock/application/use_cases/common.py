"""Input checks and entity-to-DTO conversion shared by the ledger use cases."""

from datetime import date
from decimal import Decimal, InvalidOperation

from ricestock.application.dto.responses import (
    AdjustmentResponse,
    LedgerEntryResponse,
    PurchaseResponse,
    SaleResponse,
    StockBalanceResponse,
    TransferResponse,
)
from ricestock.core.entities.ledger import (
    AdjustmentRecord,
    LedgerEntry,
    PurchaseRecord,
    SaleRecord,
    TransferRecord,
)
from ricestock.core.entities.stock import StockBalance
from ricestock.core.exceptions import InvalidInputError


def require_positive(field: str, value) -> Decimal:
    """Coerce to Decimal and reject anything that is not a finite number > 0."""
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidInputError(field, "must be a number", value)
    if not number.is_finite() or number <= 0:
        raise InvalidInputError(field, "must be greater than 0", value)
    return number


def require_text(field: str, value: str | None) -> str:
    if value is None or not str(value).strip():
        raise InvalidInputError(field, "must not be empty", value)
    return str(value).strip()


def require_actor(actor: str | None) -> str:
    return require_text("actor", actor)


def parse_iso_date(field: str, value: str | date | None) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (ValueError, TypeError):
        raise InvalidInputError(field, "must be an ISO date (YYYY-MM-DD)", value)


def balance_to_response(balance: StockBalance) -> StockBalanceResponse:
    return StockBalanceResponse(
        id=balance.id,  # type: ignore[arg-type]
        warehouse_id=balance.warehouse_id,
        variety_id=balance.variety_id,
        quantity=balance.quantity,
        unit_cost=balance.unit_cost,
        total_value=balance.total_value,
        batch_label=balance.batch_label,
        expiry_date=balance.expiry_date,
        notes=balance.notes,
        created_by=balance.created_by,
        created_at=balance.created_at,
        updated_at=balance.updated_at,
    )


def entry_to_response(entry: LedgerEntry) -> LedgerEntryResponse:
    return LedgerEntryResponse(
        id=entry.id,  # type: ignore[arg-type]
        kind=entry.kind.value,
        reference_id=entry.reference_id,
        balance_id=entry.balance_id,
        quantity_delta=entry.quantity_delta,
        notes=entry.notes,
        actor=entry.actor,
        created_at=entry.created_at,
    )


def purchase_to_response(p: PurchaseRecord) -> PurchaseResponse:
    return PurchaseResponse(
        id=p.id,  # type: ignore[arg-type]
        balance_id=p.balance_id,
        warehouse_id=p.warehouse_id,
        variety_id=p.variety_id,
        supplier_id=p.supplier_id,
        invoice_number=p.invoice_number,
        purchase_date=p.purchase_date,
        quantity=p.quantity,
        unit_price=p.unit_price,
        total=p.total,
        notes=p.notes,
        actor=p.actor,
        created_at=p.created_at,
    )


def sale_to_response(s: SaleRecord) -> SaleResponse:
    return SaleResponse(
        id=s.id,  # type: ignore[arg-type]
        balance_id=s.balance_id,
        customer_name=s.customer_name,
        quantity=s.quantity,
        sale_price=s.sale_price,
        cost_basis=s.cost_basis,
        total=s.total,
        profit_loss=s.profit_loss,
        sale_date=s.sale_date,
        invoice_number=s.invoice_number,
        payment_method=s.payment_method,
        notes=s.notes,
        actor=s.actor,
        created_at=s.created_at,
    )


def transfer_to_response(t: TransferRecord) -> TransferResponse:
    return TransferResponse(
        id=t.id,  # type: ignore[arg-type]
        source_balance_id=t.source_balance_id,
        destination_balance_id=t.destination_balance_id,
        from_warehouse_id=t.from_warehouse_id,
        to_warehouse_id=t.to_warehouse_id,
        quantity=t.quantity,
        reason=t.reason,
        actor=t.actor,
        created_at=t.created_at,
    )


def adjustment_to_response(a: AdjustmentRecord) -> AdjustmentResponse:
    return AdjustmentResponse(
        id=a.id,  # type: ignore[arg-type]
        balance_id=a.balance_id,
        direction=a.direction.value,
        quantity=a.quantity,
        previous_quantity=a.previous_quantity,
        new_quantity=a.new_quantity,
        reason=a.reason,
        actor=a.actor,
        created_at=a.created_at,
    )
