"""Pydantic request/response models for product endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ..models.domain import Product


class ProductCreate(BaseModel):
    product_name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1, description="Pack size, e.g. '1ltr' or '1/2ltr'.")
    price: float = Field(..., ge=0)
    stock: int = Field(default=0, ge=0)


class ProductUpdate(BaseModel):
    product_name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    size: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    stock: Optional[int] = Field(default=None, ge=0)


class StockAdjustment(BaseModel):
    quantity: int = Field(..., ge=1)


class ProductModel(BaseModel):
    id: str
    product_name: str
    description: str
    size: str
    price: float
    stock: int
    product_code: Optional[str] = None

    @classmethod
    def from_domain(cls, product: Product) -> "ProductModel":
        return cls(
            id=product.id,
            product_name=product.product_name,
            description=product.description,
            size=product.size,
            price=product.price,
            stock=product.stock,
            product_code=product.product_code,
        )
