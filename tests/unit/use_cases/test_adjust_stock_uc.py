"""Tests for AdjustStockUseCase."""

from decimal import Decimal

import pytest

from ricestock.application.dto.requests import AdjustStockRequest
from ricestock.application.use_cases.adjust_stock import AdjustStockUseCase
from ricestock.core.entities.ledger import AdjustmentDirection, TransactionKind
from ricestock.core.exceptions import InvalidInputError, StockBalanceNotFoundError


@pytest.fixture
def use_case(ledger_store):
    return AdjustStockUseCase(ledger_store=ledger_store)


def _request(direction: str = "increase", quantity: str = "5", **overrides) -> AdjustStockRequest:
    data = {
        "balance_id": 1,
        "direction": direction,
        "quantity": Decimal(quantity),
        "reason": "recount",
    }
    data.update(overrides)
    return AdjustStockRequest(**data)


class TestAdjustStockUseCase:
    async def test_increase(self, use_case, uow, lot):
        uow.get_balance.return_value = lot

        result = await use_case.execute(_request("increase", "5"), actor="auditor")

        assert result.balance.quantity == Decimal("105")
        assert result.adjustment.previous_quantity == Decimal("100")
        assert result.adjustment.new_quantity == Decimal("105")
        assert result.adjustment.direction == AdjustmentDirection.INCREASE

    async def test_decrease(self, use_case, uow, lot):
        uow.get_balance.return_value = lot

        result = await use_case.execute(_request("decrease", "30"), actor="auditor")

        assert result.balance.quantity == Decimal("70")
        assert result.entry.quantity_delta == Decimal("-30")

    async def test_decrease_to_zero(self, use_case, uow, lot):
        uow.get_balance.return_value = lot

        result = await use_case.execute(_request("decrease", "100"), actor="auditor")

        assert result.balance.quantity == Decimal("0")

    async def test_entry_matches_adjustment(self, use_case, uow, lot):
        uow.get_balance.return_value = lot

        result = await use_case.execute(_request("increase", "5"), actor="auditor")

        entry = result.entry
        assert entry.kind == TransactionKind.ADJUSTMENT
        assert entry.quantity_delta == result.adjustment.signed_delta == Decimal("5")
        assert entry.reference_id == result.adjustment.id
        assert entry.notes == "Adjustment (increase): recount"
        assert entry.actor == "auditor"

    async def test_below_zero_rejected(self, use_case, uow, lot):
        uow.get_balance.return_value = lot

        with pytest.raises(InvalidInputError) as exc_info:
            await use_case.execute(_request("decrease", "100.01"), actor="auditor")

        assert exc_info.value.details["field"] == "quantity"
        assert "current 100" in exc_info.value.details["message"]
        uow.update_balance_quantity.assert_not_called()
        uow.append_entry.assert_not_called()

    async def test_lot_not_found(self, use_case, uow):
        uow.get_balance.return_value = None

        with pytest.raises(StockBalanceNotFoundError):
            await use_case.execute(_request(), actor="auditor")


class TestAdjustStockValidation:
    async def test_blank_reason(self, use_case, ledger_store):
        request = _request().model_copy(update={"reason": "  "})
        with pytest.raises(InvalidInputError) as exc_info:
            await use_case.execute(request, actor="auditor")
        assert exc_info.value.details["field"] == "reason"
        ledger_store.unit_of_work.assert_not_called()

    async def test_unknown_direction(self, use_case, ledger_store):
        request = _request().model_copy(update={"direction": "sideways"})
        with pytest.raises(InvalidInputError) as exc_info:
            await use_case.execute(request, actor="auditor")
        assert exc_info.value.details["field"] == "direction"

    async def test_zero_quantity(self, use_case):
        request = _request().model_copy(update={"quantity": Decimal("0")})
        with pytest.raises(InvalidInputError):
            await use_case.execute(request, actor="auditor")

    def test_request_model_rejects_unknown_direction(self):
        with pytest.raises(ValueError):
            AdjustStockRequest(balance_id=1, direction="sideways", quantity=Decimal("1"), reason="x")


class TestAdjustStockResponse:
    async def test_to_response(self, use_case, uow, lot):
        uow.get_balance.return_value = lot
        result = await use_case.execute(_request("decrease", "10"), actor="auditor")

        response = use_case.to_response(result)

        assert response.adjustment.direction == "decrease"
        assert response.balance.quantity == Decimal("90")
        assert response.entry.kind == "adjustment"
