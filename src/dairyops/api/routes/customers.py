"""Customer subscription endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Path, Query, status

from ...persistence import customers as customer_store
from ...schemas.common import Pagination, coerce_date
from ...schemas.customers import (
    AbsentDaysRequest,
    CustomerCreate,
    CustomerModel,
    CustomerUpdate,
    EligibilityResponse,
    LineEligibilityModel,
    ProductLineInput,
)
from ...schemas.orders import OrderModel
from ...services.customers import (
    add_absent_days,
    add_product_line,
    create_customer,
    customer_eligibility,
    delete_customer,
    get_customer_or_raise,
    remove_absent_days,
    remove_product_line,
    update_customer,
)
from ...services.scheduling.dates import format_ddmmyyyy
from ._errors import success, to_http_exception

router = APIRouter(prefix="/customers", tags=["customers"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_customer_endpoint(payload: CustomerCreate) -> dict:
    try:
        creation = create_customer(payload.model_dump())
    except Exception as exc:
        raise to_http_exception(exc, "create customer") from exc

    data: dict = {"customer": CustomerModel.from_domain(creation.customer).model_dump()}
    message = "Customer created successfully"
    if creation.orders is not None:
        data["orders"] = [OrderModel.from_domain(order).model_dump() for order in creation.orders.created]
        message = f"{message}. {creation.orders.message}"
    if creation.order_error:
        data["order_error"] = creation.order_error
        message = f"{message}, but automatic order creation failed"
    return success(message, data)


@router.get("", status_code=status.HTTP_200_OK)
def list_customers_endpoint(
    status_filter: str | None = Query(default=None, alias="status", description="active or inactive"),
    delivery_boy_id: str | None = Query(default=None, description="Only customers served by this delivery boy"),
    search: str | None = Query(default=None, description="Case-insensitive name search"),
    page: int = Query(default=1, ge=1, description="1-based page index for pagination"),
    page_size: int = Query(default=20, ge=1, le=200, description="Maximum number of records per page"),
) -> dict:
    offset = (page - 1) * page_size
    try:
        items, total = customer_store.list_customers(
            status=status_filter,
            delivery_boy_id=delivery_boy_id,
            search=search,
            offset=offset,
            limit=page_size,
        )
    except Exception as exc:
        raise to_http_exception(exc, "list customers") from exc

    has_next_page = (offset + len(items)) < total
    return success(
        "Customers fetched successfully",
        {
            "items": [CustomerModel.from_domain(customer).model_dump() for customer in items],
            "pagination": Pagination(
                page=page, page_size=page_size, total=total, has_next_page=has_next_page
            ).model_dump(),
        },
    )


@router.get("/{customer_id}", status_code=status.HTTP_200_OK)
def get_customer_endpoint(customer_id: str = Path(..., description="Customer identifier")) -> dict:
    try:
        customer = get_customer_or_raise(customer_id)
    except Exception as exc:
        raise to_http_exception(exc, "fetch customer") from exc
    return success("Customer fetched successfully", CustomerModel.from_domain(customer).model_dump())


@router.put("/{customer_id}", status_code=status.HTTP_200_OK)
def update_customer_endpoint(payload: CustomerUpdate, customer_id: str = Path(...)) -> dict:
    try:
        customer = update_customer(customer_id, payload.model_dump(exclude_unset=True))
    except Exception as exc:
        raise to_http_exception(exc, "update customer") from exc
    return success("Customer updated successfully", CustomerModel.from_domain(customer).model_dump())


@router.delete("/{customer_id}", status_code=status.HTTP_200_OK)
def delete_customer_endpoint(customer_id: str = Path(...)) -> dict:
    try:
        delete_customer(customer_id)
    except Exception as exc:
        raise to_http_exception(exc, "delete customer") from exc
    return success("Customer deleted successfully")


@router.post("/{customer_id}/products", status_code=status.HTTP_200_OK)
def add_product_endpoint(payload: ProductLineInput, customer_id: str = Path(...)) -> dict:
    try:
        customer = add_product_line(customer_id, payload.model_dump())
    except Exception as exc:
        raise to_http_exception(exc, "add product to customer") from exc
    return success("Product added to subscription", CustomerModel.from_domain(customer).model_dump())


@router.delete("/{customer_id}/products/{product_id}", status_code=status.HTTP_200_OK)
def remove_product_endpoint(customer_id: str = Path(...), product_id: str = Path(...)) -> dict:
    try:
        customer = remove_product_line(customer_id, product_id)
    except Exception as exc:
        raise to_http_exception(exc, "remove product from customer") from exc
    return success("Product removed from subscription", CustomerModel.from_domain(customer).model_dump())


@router.post("/{customer_id}/absent-days", status_code=status.HTTP_200_OK)
def add_absent_days_endpoint(payload: AbsentDaysRequest, customer_id: str = Path(...)) -> dict:
    try:
        customer = add_absent_days(customer_id, payload.dates)
    except Exception as exc:
        raise to_http_exception(exc, "add absent days") from exc
    return success("Absent days added", CustomerModel.from_domain(customer).model_dump())


@router.delete("/{customer_id}/absent-days", status_code=status.HTTP_200_OK)
def remove_absent_days_endpoint(payload: AbsentDaysRequest, customer_id: str = Path(...)) -> dict:
    try:
        customer = remove_absent_days(customer_id, payload.dates)
    except Exception as exc:
        raise to_http_exception(exc, "remove absent days") from exc
    return success("Absent days removed", CustomerModel.from_domain(customer).model_dump())


@router.get("/{customer_id}/eligibility", status_code=status.HTTP_200_OK)
def eligibility_endpoint(
    customer_id: str = Path(...),
    date: str = Query(..., description="DD/MM/YYYY, DD-MM-YYYY or YYYY-MM-DD"),
) -> dict:
    try:
        day = coerce_date(date, "date")
        customer, absent, lines = customer_eligibility(customer_id, day)
    except Exception as exc:
        raise to_http_exception(exc, "evaluate delivery eligibility") from exc

    response = EligibilityResponse(
        customer_id=customer.id,
        date=format_ddmmyyyy(day),
        absent=absent,
        lines=[
            LineEligibilityModel(
                product_id=line.product_id,
                product_name=line.product_name,
                cadence=line.cadence,
                eligible=line.eligible,
            )
            for line in lines
        ],
    )
    return success("Eligibility evaluated", response.model_dump())
