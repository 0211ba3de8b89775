from datetime import datetime, timezone

import pytest

from scout_seed.python_libs.common.exceptions import RecordStoreError, SeedPreconditionError
from scout_seed.python_libs.python.record_stores import MemoryRecordStore
from scout_seed.python_libs.python.seed_pipeline import SeedPipeline, chunk_records

STAGE_ORDER = [
    "brands",
    "products",
    "customers",
    "stores",
    "devices",
    "transactions",
    "transaction_items",
    "substitutions",
    "device_health",
    "request_behaviors",
    "customer_requests",
    "edge_logs",
]


class FailingStore(MemoryRecordStore):
    """Memory store that fails every insert into one table."""

    def __init__(self, failing_table, **kwargs):
        super().__init__(**kwargs)
        self.failing_table = failing_table

    def insert_batch(self, table_name, records):
        if table_name == self.failing_table:
            raise RecordStoreError(f"insert into {table_name} rejected", table_name=table_name)
        return super().insert_batch(table_name, records)


class TestChunkRecords:
    def test_chunks(self):
        records = [{"n": i} for i in range(5)]
        assert [len(c) for c in chunk_records(records, 2)] == [2, 2, 1]

    def test_single_insert_when_unbatched(self):
        assert len(chunk_records([{"n": 1}, {"n": 2}], None)) == 1

    def test_empty(self):
        assert chunk_records([], 10) == []

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            chunk_records([{"n": 1}], 0)


class TestSeedPipeline:
    """Test the full seed run against the in-memory store."""

    def test_tables_seeded_in_dependency_order(self, memory_store, small_seed_config, quiet_logger):
        summary = SeedPipeline(memory_store, small_seed_config, quiet_logger).run()

        seen = []
        for table, _ in memory_store.insert_calls:
            if table not in seen:
                seen.append(table)
        assert seen == STAGE_ORDER
        assert [m.table_name for m in summary.stage_metrics] == STAGE_ORDER

    def test_row_counts(self, memory_store, small_seed_config, quiet_logger):
        summary = SeedPipeline(memory_store, small_seed_config, quiet_logger).run()
        counts = summary.row_counts()

        assert counts["brands"] == 10
        assert counts["products"] == 40
        assert counts["customers"] == 30
        assert counts["stores"] == 4
        assert 4 <= counts["devices"] <= 12
        assert counts["transactions"] == 60
        assert counts["device_health"] == 3 * counts["devices"]
        assert counts["edge_logs"] == 2 * counts["devices"]
        assert counts["request_behaviors"] == 18
        assert counts["customer_requests"] == 3
        assert counts["substitutions"] + summary.get_stage("substitutions").skipped == 3
        assert summary.total_rows == sum(counts.values())

    def test_transactions_inserted_in_batches(self, memory_store, small_seed_config, quiet_logger):
        summary = SeedPipeline(memory_store, small_seed_config, quiet_logger).run()
        batches = [n for table, n in memory_store.insert_calls if table == "transactions"]
        assert batches == [25, 25, 10]
        assert summary.get_stage("transactions").batches == 3

    def test_foreign_keys_reference_persisted_rows(self, memory_store, small_seed_config, quiet_logger):
        SeedPipeline(memory_store, small_seed_config, quiet_logger).run()
        tables = memory_store.tables
        product_ids = {p["id"] for p in tables["products"]}
        transaction_ids = {t["id"] for t in tables["transactions"]}
        customer_ids = {c["id"] for c in tables["customers"]}

        assert {p["brand_id"] for p in tables["products"]} <= {b["id"] for b in tables["brands"]}
        assert {i["product_id"] for i in tables["transaction_items"]} <= product_ids
        assert {i["transaction_id"] for i in tables["transaction_items"]} <= transaction_ids
        assert {t["customer_id"] for t in tables["transactions"]} - {None} <= customer_ids
        assert {h["device_id"] for h in tables["device_health"]} <= {d["device_id"] for d in tables["devices"]}

    def test_item_count_invariant(self, memory_store, small_seed_config, quiet_logger):
        SeedPipeline(memory_store, small_seed_config, quiet_logger).run()
        for transaction in memory_store.tables["transactions"]:
            items = [i for i in memory_store.tables["transaction_items"] if i["transaction_id"] == transaction["id"]]
            assert len(items) <= min(transaction["total_items"], 10)

    def test_date_columns_are_tracked(self, memory_store, small_seed_config, quiet_logger):
        reference = datetime(2024, 6, 30, tzinfo=timezone.utc)
        summary = SeedPipeline(memory_store, small_seed_config, quiet_logger, reference_time=reference).run()
        date_info = summary.get_stage("transactions").date_columns[0]
        assert date_info.column_name == "transaction_date"
        assert date_info.null_count == 0
        assert "2023-06-29" <= date_info.min_date <= date_info.max_date <= "2024-07-01"

    def test_refresh_procedure_called(self, memory_store, small_seed_config, quiet_logger):
        summary = SeedPipeline(memory_store, small_seed_config, quiet_logger).run()
        assert memory_store.procedure_calls == ["refresh_analytical_views"]
        assert summary.refresh_succeeded is True

    def test_refresh_failure_is_not_fatal(self, small_seed_config, quiet_logger):
        store = MemoryRecordStore()
        summary = SeedPipeline(store, small_seed_config, quiet_logger).run()
        assert summary.refresh_succeeded is False
        assert "refresh_analytical_views" in summary.refresh_error
        assert store.row_count("edge_logs") > 0

    def test_no_refresh_when_disabled(self, memory_store, small_seed_config, quiet_logger):
        config = small_seed_config.apply_runtime_overrides({"refresh_procedure": None})
        summary = SeedPipeline(memory_store, config, quiet_logger).run()
        assert memory_store.procedure_calls == []
        assert summary.refresh_succeeded is None

    def test_insert_failure_aborts_run(self, small_seed_config, quiet_logger):
        store = FailingStore("transactions", procedures={"refresh_analytical_views": lambda: None})
        with pytest.raises(RecordStoreError, match="transactions"):
            SeedPipeline(store, small_seed_config, quiet_logger).run()

        # Earlier stages stay persisted and later ones never run
        assert store.row_count("stores") == 4
        assert "transaction_items" not in store.tables
        assert store.procedure_calls == []

    def test_zero_brands_is_a_precondition_error(self, memory_store, small_seed_config, quiet_logger):
        config = small_seed_config.apply_runtime_overrides({"brand_count": 0})
        with pytest.raises(SeedPreconditionError, match="brands"):
            SeedPipeline(memory_store, config, quiet_logger).run()
