"""Delivery sheet endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Path, status
from fastapi.responses import FileResponse

from ...schemas.orders import DeliverySheetRequest
from ...services.reports import generate_delivery_sheet, resolve_sheet_file
from ._errors import success, to_http_exception

router = APIRouter(prefix="/reports", tags=["reports"])

_MEDIA_TYPES = {
    ".csv": "text/csv",
    ".json": "application/json",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


@router.post("/delivery-sheets", status_code=status.HTTP_201_CREATED)
def create_delivery_sheet(payload: DeliverySheetRequest) -> dict:
    try:
        result = generate_delivery_sheet(payload.delivery_boy_id, payload.date, payload.format)
    except Exception as exc:
        raise to_http_exception(exc, "generate delivery sheet") from exc
    result["download_url"] = f"/reports/delivery-sheets/{result['run_id']}/{result['file_name']}"
    return success("Delivery sheet generated", result)


@router.get(
    "/delivery-sheets/{run_id}/{file_name}",
    response_class=FileResponse,
    status_code=status.HTTP_200_OK,
)
def download_delivery_sheet(
    run_id: str = Path(..., description="Run directory identifier"),
    file_name: str = Path(..., description="File name within the run directory"),
) -> FileResponse:
    try:
        file_path = resolve_sheet_file(run_id, file_name)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"File not found: {exc}") from exc

    return FileResponse(
        path=file_path,
        filename=file_path.name,
        media_type=_MEDIA_TYPES.get(file_path.suffix.lower(), "application/octet-stream"),
        headers={"Content-Disposition": f'attachment; filename="{file_path.name}"'},
    )
