"""Domain models for customers, products, delivery boys and orders."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Union

# Dates arrive from documents and requests in several shapes; they are
# normalised only where a calendar-day comparison is made.
DateLike = Union[date, datetime, str, int, float, None]


class SubscriptionPlan(str, Enum):
    MONTHLY = "Monthly"
    ALTERNATE_DAYS = "Alternate Days"
    CUSTOM_DATE = "Custom Date"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class DeliveryCadence(str, Enum):
    """Per-line delivery rule."""

    DAILY = "Daily"
    ALTERNATE_DAYS = "Alternate Days"
    WEEKDAYS = "Monday to Friday"
    WEEKENDS = "Weekends"
    CUSTOM = "Custom"


class OrderStatus(str, Enum):
    SCHEDULED = "Scheduled"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    FAILED = "Failed"
    CANCELLED = "Cancelled"


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    UNPAID = "Unpaid"
    PARTIALLY_PAID = "Partially Paid"
    PAID = "Paid"


class PaymentMethod(str, Enum):
    COD = "COD"
    ONLINE = "Online"


class OrderType(str, Enum):
    SUBSCRIPTION = "subscription"
    CUSTOM = "custom"


@dataclass(slots=True)
class Product:
    """Catalogue entry referenced by customer product lines."""

    id: str
    product_name: str
    description: str
    size: str
    price: float
    stock: int = 0
    product_code: Optional[str] = None


@dataclass(slots=True)
class DeliveryBoy:
    id: str
    name: str
    email: str
    phone_number: str
    area: str
    is_deleted: bool = False


@dataclass(slots=True)
class ProductLine:
    """A subscribed product embedded in a customer.

    The schedule fields are optional overrides; when unset the customer's
    plan, window and custom dates apply.
    """

    product_id: str
    product_size: str
    quantity: int
    price: float
    product: Optional[Product] = None
    delivery_days: Optional[str] = None
    start_date: DateLike = None
    end_date: DateLike = None
    custom_delivery_dates: Optional[list[Any]] = None

    @property
    def total_price(self) -> float:
        return self.quantity * self.price


@dataclass(slots=True)
class Customer:
    """Subscriber with embedded product lines and absence list."""

    id: str
    name: str
    phone_number: str
    address: str
    subscription_plan: str
    subscription_status: str
    start_date: DateLike
    end_date: DateLike
    custom_delivery_dates: list[Any] = field(default_factory=list)
    absent_days: list[Any] = field(default_factory=list)
    products: list[ProductLine] = field(default_factory=list)
    delivery_boy_id: Optional[str] = None
    delivery_boy: Optional[DeliveryBoy] = None
    amount_paid_till_date: float = 0.0
    amount_due: float = 0.0
    payment_method: str = PaymentMethod.COD.value
    payment_status: str = PaymentStatus.UNPAID.value
    is_deleted: bool = False


@dataclass(slots=True)
class OrderLine:
    """Denormalised copy of a product line taken at materialisation time."""

    product_id: str
    product_name: str
    price: float
    product_size: str
    quantity: int
    total_price: float


@dataclass(slots=True)
class Order:
    id: Optional[str]
    order_number: str
    customer_id: str
    delivery_boy_id: str
    delivery_date: date
    lines: list[OrderLine]
    total_amount: float
    status: str = OrderStatus.SCHEDULED.value
    payment_status: str = PaymentStatus.PENDING.value
    payment_method: str = PaymentMethod.COD.value
    order_type: str = OrderType.SUBSCRIPTION.value
    paid_amount: float = 0.0
    created_at: Optional[datetime] = None

    @property
    def outstanding(self) -> float:
        return max(self.total_amount - self.paid_amount, 0.0)


@dataclass(slots=True)
class PaymentAllocation:
    order_id: str
    order_number: str
    amount: float


@dataclass(slots=True)
class Payment:
    """Money received from a customer, spread over delivered orders oldest first."""

    id: Optional[str]
    customer_id: str
    amount: float
    payment_method: str
    paid_on: date
    total_billed: float = 0.0
    balance: float = 0.0
    payment_status: str = PaymentStatus.UNPAID.value
    allocations: list[PaymentAllocation] = field(default_factory=list)
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class BottleTransaction:
    """Bottles handed to or collected from a customer, counted per bottle size."""

    id: Optional[str]
    customer_id: str
    bottle_size: str
    transaction_date: date
    issued: int = 0
    returned: int = 0
    order_id: Optional[str] = None
    delivery_boy_id: Optional[str] = None
    remarks: Optional[str] = None
