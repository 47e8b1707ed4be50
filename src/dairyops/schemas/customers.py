"""Customer-facing API schemas."""

from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..models.domain import Customer, DeliveryCadence, ProductLine
from ..services.scheduling.dates import format_ddmmyyyy
from .common import coerce_date, coerce_date_list, coerce_optional_date, validate_phone_number

PlanName = Literal["Monthly", "Alternate Days", "Custom Date"]
StatusName = Literal["active", "inactive"]
CadenceName = Literal["Daily", "Alternate Days", "Monday to Friday", "Weekends", "Custom"]


class ProductLineInput(BaseModel):
    product_id: str
    product_size: Optional[str] = Field(default=None, description="Defaults to the product's size.")
    quantity: int = Field(..., ge=1)
    price: Optional[float] = Field(default=None, ge=0, description="Defaults to the product's catalogue price.")
    delivery_days: Optional[CadenceName] = Field(
        default=None, description="Per-line cadence; the customer's plan applies when omitted."
    )
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    custom_delivery_dates: Optional[List[date]] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_dates(cls, value, info):
        return coerce_optional_date(value, info.field_name)

    @field_validator("custom_delivery_dates", mode="before")
    @classmethod
    def _parse_custom_dates(cls, value):
        return None if value is None else coerce_date_list(value, "custom_delivery_dates")

    @model_validator(mode="after")
    def _check_line(self) -> "ProductLineInput":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if self.delivery_days == DeliveryCadence.CUSTOM.value and not self.custom_delivery_dates:
            raise ValueError("custom_delivery_dates are required for Custom delivery days")
        return self


class CustomerCreate(BaseModel):
    name: str = Field(..., min_length=1)
    phone_number: str
    address: str = Field(..., min_length=1)
    subscription_plan: PlanName
    subscription_status: StatusName = "active"
    start_date: date
    end_date: date
    custom_delivery_dates: List[date] = Field(default_factory=list)
    absent_days: List[date] = Field(default_factory=list)
    products: List[ProductLineInput] = Field(default_factory=list)
    delivery_boy_id: Optional[str] = None
    payment_method: Literal["COD", "Online"] = "COD"

    @field_validator("phone_number", mode="before")
    @classmethod
    def _check_phone(cls, value):
        return validate_phone_number(value)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_dates(cls, value, info):
        return coerce_date(value, info.field_name)

    @field_validator("custom_delivery_dates", "absent_days", mode="before")
    @classmethod
    def _parse_date_lists(cls, value, info):
        return coerce_date_list(value, info.field_name)

    @model_validator(mode="after")
    def _check_subscription(self) -> "CustomerCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if self.subscription_plan == "Custom Date" and not self.custom_delivery_dates:
            raise ValueError("custom_delivery_dates are required for the Custom Date plan")
        return self


class CustomerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    phone_number: Optional[str] = None
    address: Optional[str] = Field(default=None, min_length=1)
    subscription_plan: Optional[PlanName] = None
    subscription_status: Optional[StatusName] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    custom_delivery_dates: Optional[List[date]] = None
    delivery_boy_id: Optional[str] = None
    payment_method: Optional[Literal["COD", "Online"]] = None

    @field_validator("phone_number", mode="before")
    @classmethod
    def _check_phone(cls, value):
        return None if value is None else validate_phone_number(value)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_dates(cls, value, info):
        return coerce_optional_date(value, info.field_name)

    @field_validator("custom_delivery_dates", mode="before")
    @classmethod
    def _parse_custom_dates(cls, value):
        return None if value is None else coerce_date_list(value, "custom_delivery_dates")


class AbsentDaysRequest(BaseModel):
    dates: List[date] = Field(..., min_length=1)

    @field_validator("dates", mode="before")
    @classmethod
    def _parse_dates(cls, value):
        return coerce_date_list(value, "dates")


class ProductLineModel(BaseModel):
    product_id: str
    product_name: Optional[str] = None
    product_size: str
    quantity: int
    price: float
    total_price: float
    delivery_days: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    custom_delivery_dates: Optional[List[str]] = None

    @classmethod
    def from_domain(cls, line: ProductLine) -> "ProductLineModel":
        return cls(
            product_id=line.product_id,
            product_name=line.product.product_name if line.product else None,
            product_size=line.product_size,
            quantity=line.quantity,
            price=line.price,
            total_price=line.total_price,
            delivery_days=line.delivery_days,
            start_date=format_ddmmyyyy(line.start_date),
            end_date=format_ddmmyyyy(line.end_date),
            custom_delivery_dates=(
                [format_ddmmyyyy(day) or str(day) for day in line.custom_delivery_dates]
                if line.custom_delivery_dates is not None
                else None
            ),
        )


class CustomerModel(BaseModel):
    id: str
    name: str
    phone_number: str
    address: str
    subscription_plan: str
    subscription_status: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    custom_delivery_dates: List[str]
    absent_days: List[str]
    products: List[ProductLineModel]
    delivery_boy_id: Optional[str] = None
    amount_paid_till_date: float
    amount_due: float
    payment_method: str
    payment_status: str

    @classmethod
    def from_domain(cls, customer: Customer) -> "CustomerModel":
        return cls(
            id=customer.id,
            name=customer.name,
            phone_number=customer.phone_number,
            address=customer.address,
            subscription_plan=customer.subscription_plan,
            subscription_status=customer.subscription_status,
            start_date=format_ddmmyyyy(customer.start_date),
            end_date=format_ddmmyyyy(customer.end_date),
            custom_delivery_dates=[format_ddmmyyyy(day) or str(day) for day in customer.custom_delivery_dates],
            absent_days=[format_ddmmyyyy(day) or str(day) for day in customer.absent_days],
            products=[ProductLineModel.from_domain(line) for line in customer.products],
            delivery_boy_id=customer.delivery_boy_id,
            amount_paid_till_date=customer.amount_paid_till_date,
            amount_due=customer.amount_due,
            payment_method=customer.payment_method,
            payment_status=customer.payment_status,
        )


class LineEligibilityModel(BaseModel):
    product_id: str
    product_name: Optional[str] = None
    cadence: Optional[str] = None
    eligible: bool


class EligibilityResponse(BaseModel):
    customer_id: str
    date: str
    absent: bool
    lines: List[LineEligibilityModel]
