"""File-based persistence helpers for generated delivery sheets."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config import settings

_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%SZ"


class FileStorage:
    """Thin wrapper around the data root for storing JSON, CSV and XLSX outputs."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.output_root = self.root / "outputs"
        self.output_root.mkdir(parents=True, exist_ok=True)

    def make_run_directory(self, prefix: str = "sheets") -> Path:
        timestamp = datetime.now(timezone.utc).strftime(_TIMESTAMP_FORMAT)
        path = self.output_root / f"{prefix}_{timestamp}"
        suffix = 1
        while path.exists():
            suffix += 1
            path = self.output_root / f"{prefix}_{timestamp}-{suffix}"
        path.mkdir(parents=True, exist_ok=False)
        return path

    def resolve(self, run_id: str, filename: str) -> Path:
        candidate = (self.output_root / run_id / filename).resolve()
        if self.output_root not in candidate.parents or not candidate.is_file():
            raise FileNotFoundError(filename)
        return candidate

    def write_json(self, path: Path, data: Any, *, indent: int = 2) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=indent, default=str)

    def write_csv(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)

    def write_bytes(self, path: Path, payload: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as handle:
            handle.write(payload)
