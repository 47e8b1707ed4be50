"""Manual triggers for the scheduled order jobs."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...schemas.orders import JobRunRequest
from ...services.jobs import run_daily_orders, run_lookahead_orders, run_order_generation
from ._errors import success, to_http_exception

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post("/orders/daily", status_code=status.HTTP_200_OK)
def run_daily_endpoint() -> dict:
    """Today's orders with Monthly renewal, as the early-morning job does."""
    try:
        summary = run_daily_orders()
    except Exception as exc:
        raise to_http_exception(exc, "run daily order job") from exc
    return success(f"Created {summary.orders_created} orders", summary.as_dict())


@router.post("/orders/lookahead", status_code=status.HTTP_200_OK)
def run_lookahead_endpoint() -> dict:
    try:
        summary = run_lookahead_orders()
    except Exception as exc:
        raise to_http_exception(exc, "run lookahead order job") from exc
    return success(f"Created {summary.orders_created} orders", summary.as_dict())


@router.post("/orders/run", status_code=status.HTTP_200_OK)
def run_for_date_endpoint(payload: JobRunRequest) -> dict:
    try:
        summary = run_order_generation(payload.date, run_date=payload.date, renew=payload.renew)
    except Exception as exc:
        raise to_http_exception(exc, "run order job") from exc
    return success(f"Created {summary.orders_created} orders", summary.as_dict())
