"""Pydantic request/response models for order, job and report endpoints."""

from __future__ import annotations

import datetime as dt
from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.domain import Order
from ..services.scheduling.dates import format_ddmmyyyy
from .common import coerce_date, coerce_optional_date


class AutomaticOrderRequest(BaseModel):
    customer_id: str
    delivery_boy_id: Optional[str] = Field(
        default=None, description="Overrides the customer's assigned delivery boy."
    )
    delivery_date: Optional[date] = Field(
        default=None, description="Defaults to the customer's subscription start date."
    )

    @field_validator("delivery_date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return coerce_optional_date(value, "delivery_date")


class CustomOrderItem(BaseModel):
    product_id: str
    quantity: int = Field(..., ge=1)
    price: Optional[float] = Field(default=None, ge=0)
    product_size: Optional[str] = None


class CustomOrderRequest(BaseModel):
    customer_id: str
    items: List[CustomOrderItem] = Field(..., min_length=1)
    delivery_boy_id: Optional[str] = None
    delivery_date: Optional[date] = Field(default=None, description="Defaults to today.")

    @field_validator("delivery_date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return coerce_optional_date(value, "delivery_date")


class OrderStatusUpdate(BaseModel):
    status: Literal["Scheduled", "Out for Delivery", "Delivered", "Failed", "Cancelled"]


class OrderLineModel(BaseModel):
    product_id: str
    product_name: str
    price: float
    product_size: str
    quantity: int
    total_price: float


class OrderModel(BaseModel):
    id: Optional[str] = None
    order_number: str
    customer_id: str
    delivery_boy_id: str
    delivery_date: Optional[str] = None
    products: List[OrderLineModel]
    total_amount: float
    status: str
    payment_status: str
    paid_amount: float
    payment_method: str
    order_type: str

    @classmethod
    def from_domain(cls, order: Order) -> "OrderModel":
        return cls(
            id=order.id,
            order_number=order.order_number,
            customer_id=order.customer_id,
            delivery_boy_id=order.delivery_boy_id,
            delivery_date=format_ddmmyyyy(order.delivery_date),
            products=[
                OrderLineModel(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    price=line.price,
                    product_size=line.product_size,
                    quantity=line.quantity,
                    total_price=line.total_price,
                )
                for line in order.lines
            ],
            total_amount=order.total_amount,
            status=order.status,
            payment_status=order.payment_status,
            paid_amount=order.paid_amount,
            payment_method=order.payment_method,
            order_type=order.order_type,
        )


class JobRunRequest(BaseModel):
    date: dt.date = Field(..., description="Calendar day to generate orders for.")
    renew: bool = Field(default=False, description="Extend Monthly subscriptions ending on this day.")

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return coerce_date(value, "date")


class DeliverySheetRequest(BaseModel):
    delivery_boy_id: str
    date: dt.date
    format: Literal["csv", "xlsx"] = "xlsx"

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return coerce_date(value, "date")
