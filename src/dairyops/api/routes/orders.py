"""Order endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Path, Query, status

from ...errors import NotFoundError
from ...persistence import orders as order_store
from ...schemas.common import Pagination, coerce_optional_date
from ...schemas.orders import AutomaticOrderRequest, CustomOrderRequest, OrderModel, OrderStatusUpdate
from ...services.orders import create_automatic_orders, create_custom_order, transition_order_status
from ._errors import success, to_http_exception

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/automatic", status_code=status.HTTP_200_OK)
def create_automatic_orders_endpoint(payload: AutomaticOrderRequest) -> dict:
    """Create the subscription order due for a customer on one day."""
    try:
        result = create_automatic_orders(payload.customer_id, payload.delivery_boy_id, payload.delivery_date)
    except Exception as exc:
        raise to_http_exception(exc, "create automatic orders") from exc
    return success(
        result.message,
        {
            "orders": [OrderModel.from_domain(order).model_dump() for order in result.created],
            "skipped": result.skipped,
        },
    )


@router.post("/custom", status_code=status.HTTP_201_CREATED)
def create_custom_order_endpoint(payload: CustomOrderRequest) -> dict:
    try:
        order = create_custom_order(
            payload.customer_id,
            [item.model_dump() for item in payload.items],
            delivery_date=payload.delivery_date,
            delivery_boy_id=payload.delivery_boy_id,
        )
    except Exception as exc:
        raise to_http_exception(exc, "create custom order") from exc
    return success(f"Custom order {order.order_number} created", OrderModel.from_domain(order).model_dump())


@router.get("", status_code=status.HTTP_200_OK)
def list_orders_endpoint(
    status_filter: str | None = Query(default=None, alias="status"),
    customer_id: str | None = Query(default=None),
    delivery_boy_id: str | None = Query(default=None),
    delivery_date: str | None = Query(default=None, description="DD/MM/YYYY or YYYY-MM-DD"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=200),
) -> dict:
    offset = (page - 1) * page_size
    try:
        items, total = order_store.list_orders(
            status=status_filter,
            customer_id=customer_id,
            delivery_boy_id=delivery_boy_id,
            delivery_date=coerce_optional_date(delivery_date, "delivery_date"),
            offset=offset,
            limit=page_size,
        )
    except Exception as exc:
        raise to_http_exception(exc, "list orders") from exc
    return success(
        "Orders fetched successfully",
        {
            "items": [OrderModel.from_domain(order).model_dump() for order in items],
            "pagination": Pagination(
                page=page, page_size=page_size, total=total, has_next_page=(offset + len(items)) < total
            ).model_dump(),
        },
    )


@router.get("/{order_id}", status_code=status.HTTP_200_OK)
def get_order_endpoint(order_id: str = Path(...)) -> dict:
    try:
        order = order_store.get_order(order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
    except Exception as exc:
        raise to_http_exception(exc, "fetch order") from exc
    return success("Order fetched successfully", OrderModel.from_domain(order).model_dump())


@router.put("/{order_id}/status", status_code=status.HTTP_200_OK)
def update_order_status_endpoint(payload: OrderStatusUpdate, order_id: str = Path(...)) -> dict:
    try:
        order = transition_order_status(order_id, payload.status)
    except Exception as exc:
        raise to_http_exception(exc, "update order status") from exc
    return success(f"Order {order.order_number} is now {order.status}", OrderModel.from_domain(order).model_dump())


@router.delete("/{order_id}", status_code=status.HTTP_200_OK)
def delete_order_endpoint(order_id: str = Path(...)) -> dict:
    try:
        if not order_store.delete_order(order_id):
            raise NotFoundError(f"Order {order_id} not found")
    except Exception as exc:
        raise to_http_exception(exc, "delete order") from exc
    return success("Order deleted successfully")
