"""Customer payment and bottle-tracking endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Path, status

from ...schemas.payments import BottleTransactionModel, BottleTransactionRequest, PaymentModel, PaymentRequest
from ...services.bottles import bottle_balance, record_bottle_transaction
from ...services.payments import customer_balance, list_payments, record_payment
from ._errors import success, to_http_exception

router = APIRouter(prefix="/customers", tags=["payments"])


@router.post("/{customer_id}/payments", status_code=status.HTTP_201_CREATED)
def record_payment_endpoint(payload: PaymentRequest, customer_id: str = Path(...)) -> dict:
    """Record money received and apply it to the oldest unpaid deliveries."""
    try:
        payment, balance = record_payment(
            customer_id, payload.amount, payment_method=payload.payment_method, paid_on=payload.paid_on
        )
    except Exception as exc:
        raise to_http_exception(exc, "record payment") from exc
    return success(
        "Payment recorded successfully",
        {"payment": PaymentModel.from_domain(payment).model_dump(), "balance": balance.as_dict()},
    )


@router.get("/{customer_id}/payments", status_code=status.HTTP_200_OK)
def list_payments_endpoint(customer_id: str = Path(...)) -> dict:
    try:
        payments = list_payments(customer_id)
    except Exception as exc:
        raise to_http_exception(exc, "list payments") from exc
    return success("Payments fetched successfully", [PaymentModel.from_domain(item).model_dump() for item in payments])


@router.get("/{customer_id}/balance", status_code=status.HTTP_200_OK)
def customer_balance_endpoint(customer_id: str = Path(...)) -> dict:
    try:
        balance = customer_balance(customer_id)
    except Exception as exc:
        raise to_http_exception(exc, "fetch customer balance") from exc
    return success("Balance fetched successfully", balance.as_dict())


@router.post("/{customer_id}/bottles", status_code=status.HTTP_201_CREATED)
def record_bottles_endpoint(payload: BottleTransactionRequest, customer_id: str = Path(...)) -> dict:
    try:
        transaction = record_bottle_transaction(
            customer_id,
            payload.bottle_size,
            issued=payload.issued,
            returned=payload.returned,
            day=payload.date,
            delivery_boy_id=payload.delivery_boy_id,
            remarks=payload.remarks,
        )
    except Exception as exc:
        raise to_http_exception(exc, "record bottle transaction") from exc
    return success("Bottle transaction recorded", BottleTransactionModel.from_domain(transaction).model_dump())


@router.get("/{customer_id}/bottles", status_code=status.HTTP_200_OK)
def bottle_balance_endpoint(customer_id: str = Path(...)) -> dict:
    try:
        balance = bottle_balance(customer_id)
    except Exception as exc:
        raise to_http_exception(exc, "fetch bottle balance") from exc
    balance["transactions"] = [
        BottleTransactionModel.from_domain(item).model_dump() for item in balance["transactions"]
    ]
    return success("Bottle balance fetched successfully", balance)
