"""
Seed Loader Pipeline

Runs the entity generators in dependency order and bulk-inserts every batch
into a record store. Rows returned by the store (with their generated ids) are
kept in a SeedContext so later stages can reference them as foreign keys.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from scout_seed.python_libs.common.exceptions import RecordStoreError
from scout_seed.python_libs.common.seed_data_config import SeedDataConfiguration
from scout_seed.python_libs.common.seed_data_logger import (
    SeedDataLogger,
    SeedRunSummary,
    StageMetrics,
    utc_now_iso,
)
from scout_seed.python_libs.interfaces.record_store_interface import IRecordStore
from scout_seed.python_libs.python.entity_generators import SeedEntityGenerator

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


@dataclass
class StageBatch:
    """Records built by a stage plus the number of draws it skipped."""

    records: List[Record]
    skipped: int = 0


@dataclass
class SeedContext:
    """Persisted rows of the stages that later stages reference."""

    brands: List[Record] = field(default_factory=list)
    products: List[Record] = field(default_factory=list)
    customers: List[Record] = field(default_factory=list)
    stores: List[Record] = field(default_factory=list)
    devices: List[Record] = field(default_factory=list)
    transactions: List[Record] = field(default_factory=list)


@dataclass
class SeedStage:
    """One table of the seed run."""

    name: str
    table_name: str
    build: Callable[[SeedContext], StageBatch]
    batch_size: Optional[int] = None  # None inserts everything at once
    context_key: Optional[str] = None
    date_columns: List[str] = field(default_factory=list)


def chunk_records(records: List[Record], batch_size: Optional[int]) -> List[List[Record]]:
    """Split records into consecutive chunks of at most batch_size."""
    if not records:
        return []
    if batch_size is None:
        return [records]
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")
    return [records[i : i + batch_size] for i in range(0, len(records), batch_size)]


class SeedPipeline:
    """Generates and persists the full seed dataset."""

    def __init__(
        self,
        store: IRecordStore,
        config: Optional[SeedDataConfiguration] = None,
        seed_logger: Optional[SeedDataLogger] = None,
        reference_time: Optional[datetime] = None,
    ):
        self.store = store
        self.config = config or SeedDataConfiguration()
        self.seed_logger = seed_logger or SeedDataLogger()
        self.reference_time = reference_time
        self.generator = SeedEntityGenerator(self.config)
        self.context = SeedContext()

    def stages(self) -> List[SeedStage]:
        """The seed stages in dependency order."""
        cfg = self.config
        gen = self.generator

        def substitutions(ctx: SeedContext) -> StageBatch:
            records, skipped = gen.generate_substitutions(ctx.transactions, ctx.products)
            return StageBatch(records, skipped)

        return [
            SeedStage("brands", "brands", lambda ctx: StageBatch(gen.generate_brands(cfg.brand_count)),
                      context_key="brands"),
            SeedStage("products", "products",
                      lambda ctx: StageBatch(gen.generate_products(cfg.product_count, ctx.brands)),
                      context_key="products"),
            SeedStage("customers", "customers",
                      lambda ctx: StageBatch(gen.generate_customers(cfg.customer_count)),
                      context_key="customers"),
            SeedStage("stores", "stores", lambda ctx: StageBatch(gen.generate_stores(cfg.store_count)),
                      context_key="stores"),
            SeedStage("devices", "devices", lambda ctx: StageBatch(gen.generate_devices(ctx.stores)),
                      context_key="devices", date_columns=["installation_date", "last_maintenance"]),
            SeedStage(
                "transactions",
                "transactions",
                lambda ctx: StageBatch(
                    gen.generate_transactions(
                        cfg.transaction_count, ctx.stores, ctx.customers, reference_time=self.reference_time
                    )
                ),
                batch_size=cfg.transaction_batch_size,
                context_key="transactions",
                date_columns=["transaction_date"],
            ),
            SeedStage(
                "transaction items",
                "transaction_items",
                lambda ctx: StageBatch(gen.generate_transaction_items(ctx.transactions, ctx.products)),
                batch_size=cfg.derived_batch_size,
            ),
            SeedStage("substitutions", "substitutions", substitutions, batch_size=cfg.derived_batch_size),
            SeedStage(
                "device health",
                "device_health",
                lambda ctx: StageBatch(gen.generate_device_health(ctx.devices)),
                batch_size=cfg.derived_batch_size,
                date_columns=["last_heartbeat"],
            ),
            SeedStage(
                "request behaviors",
                "request_behaviors",
                lambda ctx: StageBatch(
                    gen.generate_request_behaviors(len(ctx.transactions), ctx.stores, ctx.customers)
                ),
                batch_size=cfg.derived_batch_size,
                date_columns=["timestamp"],
            ),
            SeedStage(
                "customer requests",
                "customer_requests",
                lambda ctx: StageBatch(gen.generate_customer_requests(ctx.customers, ctx.stores, ctx.products)),
                batch_size=cfg.derived_batch_size,
                date_columns=["fulfilled_at"],
            ),
            SeedStage(
                "edge logs",
                "edge_logs",
                lambda ctx: StageBatch(gen.generate_edge_logs(ctx.devices)),
                batch_size=cfg.derived_batch_size,
                date_columns=["timestamp"],
            ),
        ]

    def run(self) -> SeedRunSummary:
        """
        Run every stage, then refresh the analytical views.

        Raises:
            SeedPreconditionError: If a stage has no upstream rows to reference
            RecordStoreError: If an insert fails. Later stages do not run and
                rows already inserted stay in place.
        """
        summary = SeedRunSummary(started_at=utc_now_iso(), refresh_procedure=self.config.refresh_procedure)
        run_start = time.perf_counter()

        for stage in self.stages():
            summary.stage_metrics.append(self.run_stage(stage))

        self.refresh(summary)
        summary.total_duration_seconds = time.perf_counter() - run_start
        self.seed_logger.log_run_summary(summary)
        return summary

    def run_stage(self, stage: SeedStage) -> StageMetrics:
        """Build one stage's records and persist them batch by batch."""
        stage_start = time.perf_counter()
        batch = stage.build(self.context)
        self.seed_logger.log_stage_start(stage.name, stage.table_name, len(batch.records))

        chunks = chunk_records(batch.records, stage.batch_size)
        persisted: List[Record] = []
        for number, chunk in enumerate(chunks, start=1):
            try:
                persisted.extend(self.store.insert_batch(stage.table_name, chunk))
            except RecordStoreError as e:
                logger.error(f"Aborting seed run: batch {number}/{len(chunks)} of {stage.table_name} failed: {e}")
                raise
            if len(chunks) > 1:
                self.seed_logger.log_batch_complete(stage.table_name, number, len(chunks), len(chunk))

        if stage.context_key:
            setattr(self.context, stage.context_key, persisted)

        metrics = StageMetrics(
            stage_name=stage.name,
            table_name=stage.table_name,
            rows_generated=len(batch.records),
            rows_persisted=len(persisted),
            batches=len(chunks),
            skipped=batch.skipped,
            duration_seconds=time.perf_counter() - stage_start,
            date_columns=self.seed_logger.analyze_records_date_columns(
                batch.records, stage.table_name, stage.date_columns
            ),
        )
        self.seed_logger.log_stage_complete(metrics)
        return metrics

    def refresh(self, summary: SeedRunSummary) -> None:
        """Invoke the refresh procedure. A failure is reported, not raised."""
        procedure = self.config.refresh_procedure
        if not procedure:
            return
        try:
            self.store.call_procedure(procedure)
        except RecordStoreError as e:
            summary.refresh_succeeded = False
            summary.refresh_error = str(e)
            self.seed_logger.log_refresh_result(procedure, error=str(e))
            return
        summary.refresh_succeeded = True
        self.seed_logger.log_refresh_result(procedure)
