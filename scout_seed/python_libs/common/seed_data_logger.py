"""
Seed Data Generation Logging

This module provides logging for the seed-loader and the mock transaction
generator: per-stage metrics, date column tracking on the generated records and
a run summary.
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pandas as pd

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class DateColumnInfo:
    """Information about a date column in generated records."""

    column_name: str
    min_date: Optional[str] = None
    max_date: Optional[str] = None
    null_count: int = 0
    total_count: int = 0

    @property
    def completeness_percentage(self) -> float:
        """Calculate completeness percentage for the date column."""
        if self.total_count == 0:
            return 0.0
        return ((self.total_count - self.null_count) / self.total_count) * 100


@dataclass
class StageMetrics:
    """Metrics for one seed stage (one table)."""

    stage_name: str
    table_name: str
    rows_generated: int = 0
    rows_persisted: int = 0
    batches: int = 0
    skipped: int = 0
    duration_seconds: float = 0.0
    date_columns: List[DateColumnInfo] = field(default_factory=list)

    @property
    def rows_per_second(self) -> float:
        """Calculate persistence rate in rows per second."""
        if self.duration_seconds <= 0:
            return 0.0
        return self.rows_persisted / self.duration_seconds

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class SeedRunSummary:
    """Summary of a complete seed run."""

    started_at: str
    stage_metrics: List[StageMetrics] = field(default_factory=list)
    total_duration_seconds: float = 0.0
    refresh_procedure: Optional[str] = None
    refresh_succeeded: Optional[bool] = None
    refresh_error: Optional[str] = None

    @property
    def total_rows(self) -> int:
        return sum(metrics.rows_persisted for metrics in self.stage_metrics)

    @property
    def total_tables(self) -> int:
        return len(self.stage_metrics)

    def get_stage(self, table_name: str) -> Optional[StageMetrics]:
        """Get metrics for a specific table."""
        return next((m for m in self.stage_metrics if m.table_name == table_name), None)

    def row_counts(self) -> Dict[str, int]:
        return {m.table_name: m.rows_persisted for m in self.stage_metrics}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "started_at": self.started_at,
            "total_rows": self.total_rows,
            "total_tables": self.total_tables,
            "total_duration_seconds": self.total_duration_seconds,
            "refresh_procedure": self.refresh_procedure,
            "refresh_succeeded": self.refresh_succeeded,
            "refresh_error": self.refresh_error,
            "stages": [m.to_dict() for m in self.stage_metrics],
        }


class SeedDataLogger:
    """Logger for seed and mock data generation with per-stage tracking."""

    def __init__(
        self,
        logger_name: str = "scout_seed",
        log_level: int = logging.INFO,
        enable_console_output: bool = True,
        log_file_path: Optional[str] = None,
    ):
        self.logger = logging.getLogger(logger_name)
        self.logger.setLevel(log_level)

        # Clear existing handlers to avoid duplicates
        self.logger.handlers.clear()

        if enable_console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(log_level)
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            self.logger.addHandler(console_handler)

        if log_file_path:
            file_handler = logging.FileHandler(log_file_path)
            file_handler.setLevel(log_level)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            self.logger.addHandler(file_handler)

    def analyze_records_date_columns(
        self, records: List[Dict[str, Any]], table_name: str, date_columns: List[str]
    ) -> List[DateColumnInfo]:
        """Characterize the date columns of a batch of generated records."""
        if not records or not date_columns:
            return []

        df = pd.DataFrame.from_records(records)
        results = []
        for col_name in date_columns:
            if col_name not in df.columns:
                continue
            col_data = pd.to_datetime(df[col_name], errors="coerce", utc=True, format="ISO8601")
            min_date = col_data.min()
            max_date = col_data.max()
            results.append(
                DateColumnInfo(
                    column_name=col_name,
                    min_date=min_date.strftime("%Y-%m-%d") if pd.notna(min_date) else None,
                    max_date=max_date.strftime("%Y-%m-%d") if pd.notna(max_date) else None,
                    null_count=int(col_data.isnull().sum()),
                    total_count=len(col_data),
                )
            )
        return results

    def log_stage_start(self, stage_name: str, table_name: str, target_rows: int):
        """Log the start of a seed stage."""
        self.logger.info(f"🚀 Generating {target_rows:,} rows for {table_name} ({stage_name})")

    def log_batch_complete(self, table_name: str, batch_number: int, total_batches: int, rows: int):
        """Log the completion of one batch insert."""
        self.logger.info(f"   📊 {table_name}: batch {batch_number}/{total_batches} completed ({rows:,} rows)")

    def log_stage_complete(self, metrics: StageMetrics):
        """Log the completion of a seed stage with its metrics."""
        self.logger.info(f"✅ Persisted {metrics.rows_persisted:,} rows into {metrics.table_name}")
        self.logger.info(f"   ⏱️ Duration: {metrics.duration_seconds:.2f} seconds ({metrics.batches} batches)")
        if metrics.skipped:
            self.logger.info(f"   ⏭️ Skipped: {metrics.skipped:,} rows without a valid reference")

        for date_col in metrics.date_columns:
            completeness = f"{date_col.completeness_percentage:.1f}%"
            if date_col.min_date and date_col.max_date and date_col.min_date != date_col.max_date:
                self.logger.info(
                    f"   📅 {date_col.column_name}: {date_col.min_date} to {date_col.max_date} ({completeness} complete)"
                )
            else:
                self.logger.info(f"   📅 {date_col.column_name}: {date_col.min_date} ({completeness} complete)")

    def log_refresh_result(self, procedure: str, error: Optional[str] = None):
        """Log the outcome of the materialized view refresh."""
        if error:
            self.logger.warning(f"⚠️ Could not refresh materialized views via {procedure}: {error}")
        else:
            self.logger.info(f"✅ Materialized views refreshed via {procedure}")

    def log_run_summary(self, summary: SeedRunSummary):
        """Log a complete seed run summary."""
        self.logger.info("🎉 Seed data generation completed")
        for metrics in summary.stage_metrics:
            self.logger.info(f"   • {metrics.rows_persisted:,} {metrics.table_name}")
        self.logger.info(f"   📈 Total records: {summary.total_rows:,}")
        self.logger.info(f"   ⏱️ Total duration: {summary.total_duration_seconds:.2f} seconds")
        self.logger.debug(f"Run summary: {json.dumps(summary.to_dict(), indent=2, default=str)}")

    def log_mock_summary(self, document_summary: Dict[str, Any], output_path: Optional[str] = None):
        """Log the summary of a generated mock document."""
        self.logger.info(f"✅ Generated {document_summary['total_transactions']:,} transactions")
        self.logger.info(f"   👥 Unique customers: {document_summary['unique_customers']:,}")
        self.logger.info(f"   🏪 Unique stores: {document_summary['unique_stores']:,}")
        self.logger.info(f"   💰 Total revenue: ₱{document_summary['total_revenue']:,.2f}")
        if output_path:
            self.logger.info(f"   📁 Output written to: {output_path}")


def utc_now_iso() -> str:
    """Current UTC time as an ISO string."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
