"""Pydantic models for customer payments and bottle tracking."""

from __future__ import annotations

import datetime as dt
from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..models.domain import BottleTransaction, Payment
from ..services.scheduling.dates import format_ddmmyyyy
from .common import coerce_optional_date


class PaymentRequest(BaseModel):
    amount: float = Field(..., gt=0, description="Amount received, applied to the oldest unpaid deliveries first.")
    payment_method: Literal["COD", "Online"] = "COD"
    paid_on: Optional[date] = Field(default=None, description="Defaults to today.")

    @field_validator("paid_on", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return coerce_optional_date(value, "paid_on")


class PaymentAllocationModel(BaseModel):
    order_id: str
    order_number: str
    amount: float


class PaymentModel(BaseModel):
    id: Optional[str] = None
    customer_id: str
    amount: float
    payment_method: str
    paid_on: Optional[str] = None
    total_billed: float
    balance: float
    payment_status: str
    allocations: List[PaymentAllocationModel]

    @classmethod
    def from_domain(cls, payment: Payment) -> "PaymentModel":
        return cls(
            id=payment.id,
            customer_id=payment.customer_id,
            amount=payment.amount,
            payment_method=payment.payment_method,
            paid_on=format_ddmmyyyy(payment.paid_on),
            total_billed=payment.total_billed,
            balance=payment.balance,
            payment_status=payment.payment_status,
            allocations=[
                PaymentAllocationModel(order_id=item.order_id, order_number=item.order_number, amount=item.amount)
                for item in payment.allocations
            ],
        )


class BottleTransactionRequest(BaseModel):
    bottle_size: Literal["1/2ltr", "1ltr"]
    issued: int = Field(default=0, ge=0)
    returned: int = Field(default=0, ge=0)
    date: Optional[dt.date] = Field(default=None, description="Defaults to today.")
    delivery_boy_id: Optional[str] = None
    remarks: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return coerce_optional_date(value, "date")

    @model_validator(mode="after")
    def _check_counts(self) -> "BottleTransactionRequest":
        if self.issued == 0 and self.returned == 0:
            raise ValueError("Record at least one issued or returned bottle")
        return self


class BottleTransactionModel(BaseModel):
    id: Optional[str] = None
    customer_id: str
    bottle_size: str
    date: Optional[str] = None
    issued: int
    returned: int
    order_id: Optional[str] = None
    delivery_boy_id: Optional[str] = None
    remarks: Optional[str] = None

    @classmethod
    def from_domain(cls, transaction: BottleTransaction) -> "BottleTransactionModel":
        return cls(
            id=transaction.id,
            customer_id=transaction.customer_id,
            bottle_size=transaction.bottle_size,
            date=format_ddmmyyyy(transaction.transaction_date),
            issued=transaction.issued,
            returned=transaction.returned,
            order_id=transaction.order_id,
            delivery_boy_id=transaction.delivery_boy_id,
            remarks=transaction.remarks,
        )
