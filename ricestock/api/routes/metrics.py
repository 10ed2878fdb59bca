"""Derived stock metrics endpoints."""

from fastapi import APIRouter, Depends, Query

from ricestock.api.dependencies import (
    get_variety_metrics_use_case,
    get_warehouse_metrics_use_case,
)
from ricestock.application.dto.responses import (
    ErrorResponse,
    VarietyMetricsResponse,
    WarehouseMetricsResponse,
)
from ricestock.application.use_cases.stock_metrics import (
    GetVarietyMetricsUseCase,
    GetWarehouseMetricsUseCase,
)

router = APIRouter(prefix="/api/metrics", tags=["metrics"])


@router.get(
    "/warehouses/{warehouse_id}",
    response_model=WarehouseMetricsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def warehouse_metrics(
    warehouse_id: int,
    use_case: GetWarehouseMetricsUseCase = Depends(get_warehouse_metrics_use_case),
) -> WarehouseMetricsResponse:
    """Quantity, value and utilization of one warehouse."""
    result = await use_case.execute(warehouse_id)
    return use_case.to_response(result)


@router.get(
    "/varieties/{variety_id}",
    response_model=VarietyMetricsResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def variety_metrics(
    variety_id: int,
    start_date: str | None = Query(default=None, description="ISO date, inclusive"),
    end_date: str | None = Query(default=None, description="ISO date, inclusive"),
    use_case: GetVarietyMetricsUseCase = Depends(get_variety_metrics_use_case),
) -> VarietyMetricsResponse:
    """Stock levels and profit/loss of one variety."""
    result = await use_case.execute(variety_id, start_date=start_date, end_date=end_date)
    return use_case.to_response(result)
