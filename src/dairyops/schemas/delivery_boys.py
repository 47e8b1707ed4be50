"""Pydantic request/response models for delivery boy endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..models.domain import DeliveryBoy
from .common import validate_phone_number

_EMAIL_PATTERN = r"^\S+@\S+\.\S+$"


class DeliveryBoyCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., pattern=_EMAIL_PATTERN)
    phone_number: str
    area: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("phone_number", mode="before")
    @classmethod
    def _check_phone(cls, value):
        return validate_phone_number(value)


class DeliveryBoyUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = Field(default=None, pattern=_EMAIL_PATTERN)
    phone_number: Optional[str] = None
    area: Optional[str] = None

    @field_validator("phone_number", mode="before")
    @classmethod
    def _check_phone(cls, value):
        return None if value is None else validate_phone_number(value)


class DeliveryBoyModel(BaseModel):
    id: str
    name: str
    email: str
    phone_number: str
    area: str

    @classmethod
    def from_domain(cls, delivery_boy: DeliveryBoy) -> "DeliveryBoyModel":
        return cls(
            id=delivery_boy.id,
            name=delivery_boy.name,
            email=delivery_boy.email,
            phone_number=delivery_boy.phone_number,
            area=delivery_boy.area,
        )
