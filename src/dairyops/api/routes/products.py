"""Product catalogue endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Path, Query, status

from ...persistence import products as product_store
from ...schemas.common import Pagination
from ...schemas.products import ProductCreate, ProductModel, ProductUpdate, StockAdjustment
from ...services.products import (
    adjust_stock,
    create_product,
    delete_product,
    get_product_or_raise,
    update_product,
)
from ._errors import success, to_http_exception

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_product_endpoint(payload: ProductCreate) -> dict:
    try:
        product = create_product(payload.model_dump())
    except Exception as exc:
        raise to_http_exception(exc, "create product") from exc
    return success("Product added successfully", ProductModel.from_domain(product).model_dump())


@router.get("", status_code=status.HTTP_200_OK)
def list_products_endpoint(
    search: str | None = Query(default=None, description="Case-insensitive product name search"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=200),
) -> dict:
    offset = (page - 1) * page_size
    try:
        items, total = product_store.list_products(search=search, offset=offset, limit=page_size)
    except Exception as exc:
        raise to_http_exception(exc, "list products") from exc
    return success(
        "Products fetched successfully",
        {
            "items": [ProductModel.from_domain(product).model_dump() for product in items],
            "pagination": Pagination(
                page=page, page_size=page_size, total=total, has_next_page=(offset + len(items)) < total
            ).model_dump(),
        },
    )


@router.get("/{product_id}", status_code=status.HTTP_200_OK)
def get_product_endpoint(product_id: str = Path(...)) -> dict:
    try:
        product = get_product_or_raise(product_id)
    except Exception as exc:
        raise to_http_exception(exc, "fetch product") from exc
    return success("Product fetched successfully", ProductModel.from_domain(product).model_dump())


@router.put("/{product_id}", status_code=status.HTTP_200_OK)
def update_product_endpoint(payload: ProductUpdate, product_id: str = Path(...)) -> dict:
    try:
        product = update_product(product_id, payload.model_dump(exclude_unset=True))
    except Exception as exc:
        raise to_http_exception(exc, "update product") from exc
    return success("Product updated successfully", ProductModel.from_domain(product).model_dump())


@router.delete("/{product_id}", status_code=status.HTTP_200_OK)
def delete_product_endpoint(product_id: str = Path(...)) -> dict:
    try:
        delete_product(product_id)
    except Exception as exc:
        raise to_http_exception(exc, "delete product") from exc
    return success("Product deleted successfully")


@router.post("/{product_id}/stock/add", status_code=status.HTTP_200_OK)
def add_stock_endpoint(payload: StockAdjustment, product_id: str = Path(...)) -> dict:
    try:
        product = adjust_stock(product_id, payload.quantity)
    except Exception as exc:
        raise to_http_exception(exc, "add stock") from exc
    return success(f"Added {payload.quantity} units of stock", ProductModel.from_domain(product).model_dump())


@router.post("/{product_id}/stock/remove", status_code=status.HTTP_200_OK)
def remove_stock_endpoint(payload: StockAdjustment, product_id: str = Path(...)) -> dict:
    try:
        product = adjust_stock(product_id, -payload.quantity)
    except Exception as exc:
        raise to_http_exception(exc, "remove stock") from exc
    return success(f"Removed {payload.quantity} units of stock", ProductModel.from_domain(product).model_dump())
