from unittest.mock import Mock, patch

import httpx
import pytest
from postgrest.exceptions import APIError

from scout_seed.python_libs.common.exceptions import ConfigurationError, RecordStoreError
from scout_seed.python_libs.common.seed_data_config import SupabaseSettings
from scout_seed.python_libs.python.record_stores import (
    MemoryRecordStore,
    RecordStoreFactory,
    SupabaseRecordStore,
)


@pytest.fixture
def mock_client():
    """Create a mock supabase client whose inserts echo the rows with ids."""
    client = Mock()

    def insert(records):
        query = Mock()
        query.execute.return_value = Mock(data=[dict(r, id=i + 1) for i, r in enumerate(records)])
        return query

    client.table.return_value.insert.side_effect = insert
    client.rpc.return_value.execute.return_value = Mock(data=None)
    return client


class TestSupabaseRecordStore:
    """Test the Supabase store against a mocked client."""

    def test_insert_returns_rows_with_ids(self, mock_client):
        store = SupabaseRecordStore(client=mock_client)
        rows = store.insert_batch("brands", [{"name": "A"}, {"name": "B"}])

        mock_client.table.assert_called_once_with("brands")
        assert [r["id"] for r in rows] == [1, 2]

    def test_empty_insert_skips_request(self, mock_client):
        store = SupabaseRecordStore(client=mock_client)
        assert store.insert_batch("brands", []) == []
        mock_client.table.assert_not_called()

    def test_api_error_wrapped(self, mock_client):
        mock_client.table.return_value.insert.side_effect = APIError(
            {"message": "duplicate key value", "code": "23505", "hint": None, "details": None}
        )
        store = SupabaseRecordStore(client=mock_client)
        with pytest.raises(RecordStoreError, match="duplicate key value") as exc_info:
            store.insert_batch("products", [{"sku": "X"}])
        assert exc_info.value.table_name == "products"

    def test_http_error_wrapped(self, mock_client):
        mock_client.table.return_value.insert.side_effect = httpx.ConnectError("connection refused")
        store = SupabaseRecordStore(client=mock_client)
        with pytest.raises(RecordStoreError, match="connection refused"):
            store.insert_batch("products", [{"sku": "X"}])

    def test_call_procedure(self, mock_client):
        store = SupabaseRecordStore(client=mock_client)
        store.call_procedure("refresh_analytical_views")
        mock_client.rpc.assert_called_once_with("refresh_analytical_views", {})

    def test_procedure_error_wrapped(self, mock_client):
        mock_client.rpc.return_value.execute.side_effect = APIError(
            {"message": "function does not exist", "code": "42883", "hint": None, "details": None}
        )
        store = SupabaseRecordStore(client=mock_client)
        with pytest.raises(RecordStoreError, match="function does not exist"):
            store.call_procedure("refresh_analytical_views")

    def test_client_created_from_settings(self):
        settings = SupabaseSettings(url="https://example.supabase.co", service_key="key")
        with patch("scout_seed.python_libs.python.record_stores.create_client") as create:
            store = SupabaseRecordStore(settings)
        create.assert_called_once_with("https://example.supabase.co", "key")
        assert store.client is create.return_value

    def test_missing_settings_rejected(self):
        with pytest.raises(ConfigurationError, match="Missing Supabase settings"):
            SupabaseRecordStore(SupabaseSettings(url=None, service_key=None))


class TestMemoryRecordStore:
    def test_sequential_ids_per_table(self):
        store = MemoryRecordStore()
        first = store.insert_batch("brands", [{"name": "A"}, {"name": "B"}])
        second = store.insert_batch("brands", [{"name": "C"}])
        other = store.insert_batch("stores", [{"name": "S"}])

        assert [r["id"] for r in first + second] == [1, 2, 3]
        assert other[0]["id"] == 1
        assert store.row_count("brands") == 3
        assert store.insert_calls == [("brands", 2), ("brands", 1), ("stores", 1)]

    def test_input_records_not_mutated(self):
        store = MemoryRecordStore()
        record = {"name": "A"}
        store.insert_batch("brands", [record])
        assert "id" not in record

    def test_unregistered_procedure_raises(self):
        with pytest.raises(RecordStoreError, match="does not exist"):
            MemoryRecordStore().call_procedure("refresh_analytical_views")

    def test_registered_procedure_runs(self):
        calls = []
        store = MemoryRecordStore(procedures={"refresh": lambda: calls.append(1)})
        store.call_procedure("refresh")
        assert calls == [1]


class TestRecordStoreFactory:
    def test_memory_store_gets_noop_refresh(self):
        store = RecordStoreFactory.create_store("memory", refresh_procedure="refresh_analytical_views")
        assert isinstance(store, MemoryRecordStore)
        store.call_procedure("refresh_analytical_views")

    def test_supabase_store(self):
        with patch("scout_seed.python_libs.python.record_stores.create_client"):
            store = RecordStoreFactory.create_store("Supabase", url="https://x.supabase.co", service_key="k")
        assert isinstance(store, SupabaseRecordStore)

    def test_unsupported_type(self):
        with pytest.raises(ConfigurationError, match="Unsupported record store type: sqlite"):
            RecordStoreFactory.create_store("sqlite")

    def test_supported_types(self):
        assert RecordStoreFactory.get_supported_types() == ["supabase", "memory"]
