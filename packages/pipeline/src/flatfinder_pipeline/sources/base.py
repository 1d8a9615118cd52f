"""
sources/base.py — Abstract base class for record sources.

Each concrete source must implement:
  extract()    — read raw rows (a list of dicts) from wherever they live
  transform()  — validate raw rows into pydantic models

The run() method orchestrates extract → transform and handles
timing/logging. Callers use run() rather than the individual methods.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

log = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class BaseSource(ABC, Generic[ModelT]):
    """Abstract base for flatfinder record sources."""

    # Override in subclass, used for logging
    name: str = "unknown"
    model: type[ModelT]

    def __init__(self) -> None:
        self._log = log.bind(source_name=self.name)

    @abstractmethod
    def extract(self) -> list[dict[str, Any]]:
        """
        Read raw rows from the source.

        Raises:
            FileNotFoundError / ValueError when the source is missing or
            not in the expected shape.
        """
        ...

    def transform(self, raw: list[dict[str, Any]]) -> list[ModelT]:
        """
        Validate raw rows into models.

        Rows that fail validation are skipped with a warning; the rest are
        returned in source order.
        """
        records: list[ModelT] = []
        for index, row in enumerate(raw):
            try:
                records.append(self.model.model_validate(row))
            except ValidationError as exc:
                self._log.warning(
                    "invalid_record_skipped",
                    index=index,
                    errors=exc.error_count(),
                    detail=exc.errors()[0]["msg"],
                )
        return records

    def run(self) -> list[ModelT]:
        """
        Extract + transform with timing and structured logging.

        Raises:
            Any exception from extract() after logging it.
        """
        self._log.info("source_run_start")
        t0 = time.monotonic()
        try:
            raw = self.extract()
        except Exception as exc:
            self._log.error(
                "source_run_failed",
                error=str(exc),
                duration_ms=int((time.monotonic() - t0) * 1000),
            )
            raise

        records = self.transform(raw)
        self._log.info(
            "source_run_complete",
            raw_rows=len(raw),
            output_rows=len(records),
            skipped=len(raw) - len(records),
            duration_ms=int((time.monotonic() - t0) * 1000),
        )
        return records
