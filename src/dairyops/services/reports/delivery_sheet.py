"""Printable delivery sheets for a delivery boy's day."""

from __future__ import annotations

import csv
import io
import logging
from datetime import date
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font

from ...persistence.filesystem import FileStorage
from ..delivery_boys.roster import deliveries_for_day

logger = logging.getLogger(__name__)

SHEET_COLUMNS = [
    "customer_name",
    "phone_number",
    "address",
    "product_name",
    "product_size",
    "quantity",
    "price",
    "total_price",
]


def schedule_rows(schedule: dict) -> list[dict]:
    rows: list[dict] = []
    for entry in schedule["customers"]:
        for delivery in entry["deliveries"]:
            rows.append(
                {
                    "customer_name": entry["name"],
                    "phone_number": entry["phone_number"],
                    "address": entry["address"],
                    "product_name": delivery["product_name"],
                    "product_size": delivery["product_size"],
                    "quantity": delivery["quantity"],
                    "price": delivery["price"],
                    "total_price": delivery["total_price"],
                }
            )
    return rows


def schedule_to_csv(schedule: dict) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=SHEET_COLUMNS)
    writer.writeheader()
    writer.writerows(schedule_rows(schedule))
    return buffer.getvalue()


def schedule_to_xlsx(schedule: dict) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Deliveries"
    sheet.append(SHEET_COLUMNS)
    for cell in sheet[1]:
        cell.font = Font(bold=True)
    for row in schedule_rows(schedule):
        sheet.append([row[column] for column in SHEET_COLUMNS])

    summary = workbook.create_sheet("Summary")
    summary.append(["Date", schedule["date"]])
    summary.append(["Customers", schedule["total_customers"]])
    summary.append(["Deliveries", schedule["total_deliveries"]])
    summary.append(["Total bottles", schedule["total_bottles"]])
    summary.append([])
    summary.append(["Size", "Bottles"])
    for size, count in sorted(schedule["bottles_by_size"].items()):
        summary.append([size, count])

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def generate_delivery_sheet(
    delivery_boy_id: str,
    day: date,
    file_format: str = "xlsx",
    storage: Optional[FileStorage] = None,
) -> dict:
    """Write the sheet plus a JSON summary into a new run directory."""
    if file_format not in {"csv", "xlsx"}:
        raise ValueError(f"Unsupported sheet format '{file_format}'")

    schedule = deliveries_for_day(delivery_boy_id, day)
    storage = storage or FileStorage()
    run_dir = storage.make_run_directory(prefix="sheets")
    file_name = f"deliveries_{day.isoformat()}.{file_format}"

    if file_format == "csv":
        storage.write_csv(run_dir / file_name, schedule_to_csv(schedule))
    else:
        storage.write_bytes(run_dir / file_name, schedule_to_xlsx(schedule))
    storage.write_json(run_dir / "summary.json", schedule)

    logger.info(
        f"Wrote delivery sheet {run_dir.name}/{file_name} for delivery boy {delivery_boy_id} "
        f"({schedule['total_deliveries']} deliveries)"
    )
    return {
        "run_id": run_dir.name,
        "file_name": file_name,
        "date": schedule["date"],
        "total_customers": schedule["total_customers"],
        "total_deliveries": schedule["total_deliveries"],
        "total_bottles": schedule["total_bottles"],
    }


def resolve_sheet_file(run_id: str, file_name: str, storage: Optional[FileStorage] = None):
    return (storage or FileStorage()).resolve(run_id, file_name)
