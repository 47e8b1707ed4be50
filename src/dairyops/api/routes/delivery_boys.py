"""Delivery boy endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Path, Query, status

from ...persistence import delivery_boys as delivery_boy_store
from ...schemas.common import Pagination, coerce_date
from ...schemas.delivery_boys import DeliveryBoyCreate, DeliveryBoyModel, DeliveryBoyUpdate
from ...services.delivery_boys import (
    create_delivery_boy,
    deliveries_for_day,
    deliveries_for_range,
    delete_delivery_boy,
    get_delivery_boy_or_raise,
    update_delivery_boy,
)
from ...services.scheduling.dates import today
from ._errors import success, to_http_exception

router = APIRouter(prefix="/delivery-boys", tags=["delivery-boys"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_delivery_boy_endpoint(payload: DeliveryBoyCreate) -> dict:
    try:
        delivery_boy = create_delivery_boy(payload.model_dump())
    except Exception as exc:
        raise to_http_exception(exc, "register delivery boy") from exc
    return success("Delivery boy registered successfully", DeliveryBoyModel.from_domain(delivery_boy).model_dump())


@router.get("", status_code=status.HTTP_200_OK)
def list_delivery_boys_endpoint(
    search: str | None = Query(default=None, description="Case-insensitive name search"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=200),
) -> dict:
    offset = (page - 1) * page_size
    try:
        items, total = delivery_boy_store.list_delivery_boys(search=search, offset=offset, limit=page_size)
    except Exception as exc:
        raise to_http_exception(exc, "list delivery boys") from exc
    return success(
        "Delivery boys fetched successfully",
        {
            "items": [DeliveryBoyModel.from_domain(item).model_dump() for item in items],
            "pagination": Pagination(
                page=page, page_size=page_size, total=total, has_next_page=(offset + len(items)) < total
            ).model_dump(),
        },
    )


@router.get("/{delivery_boy_id}", status_code=status.HTTP_200_OK)
def get_delivery_boy_endpoint(delivery_boy_id: str = Path(...)) -> dict:
    try:
        delivery_boy = get_delivery_boy_or_raise(delivery_boy_id)
    except Exception as exc:
        raise to_http_exception(exc, "fetch delivery boy") from exc
    return success("Delivery boy fetched successfully", DeliveryBoyModel.from_domain(delivery_boy).model_dump())


@router.put("/{delivery_boy_id}", status_code=status.HTTP_200_OK)
def update_delivery_boy_endpoint(payload: DeliveryBoyUpdate, delivery_boy_id: str = Path(...)) -> dict:
    try:
        delivery_boy = update_delivery_boy(delivery_boy_id, payload.model_dump(exclude_unset=True))
    except Exception as exc:
        raise to_http_exception(exc, "update delivery boy") from exc
    return success("Delivery boy updated successfully", DeliveryBoyModel.from_domain(delivery_boy).model_dump())


@router.delete("/{delivery_boy_id}", status_code=status.HTTP_200_OK)
def delete_delivery_boy_endpoint(delivery_boy_id: str = Path(...)) -> dict:
    try:
        delete_delivery_boy(delivery_boy_id)
    except Exception as exc:
        raise to_http_exception(exc, "delete delivery boy") from exc
    return success("Delivery boy deleted successfully")


@router.get("/{delivery_boy_id}/deliveries", status_code=status.HTTP_200_OK)
def deliveries_endpoint(
    delivery_boy_id: str = Path(...),
    date: str | None = Query(default=None, description="Defaults to today in the business timezone"),
) -> dict:
    try:
        day = coerce_date(date, "date") if date else today()
        schedule = deliveries_for_day(delivery_boy_id, day)
    except Exception as exc:
        raise to_http_exception(exc, "fetch deliveries") from exc
    return success(f"Deliveries for {schedule['date']}", schedule)


@router.get("/{delivery_boy_id}/deliveries/range", status_code=status.HTTP_200_OK)
def deliveries_range_endpoint(
    delivery_boy_id: str = Path(...),
    start_date: str = Query(...),
    end_date: str = Query(...),
) -> dict:
    try:
        start = coerce_date(start_date, "start_date")
        end = coerce_date(end_date, "end_date")
        result = deliveries_for_range(delivery_boy_id, start, end)
    except Exception as exc:
        raise to_http_exception(exc, "fetch deliveries") from exc
    return success(f"Deliveries from {result['start_date']} to {result['end_date']}", result)
