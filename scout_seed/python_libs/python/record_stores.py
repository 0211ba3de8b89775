"""Record store implementations and factory."""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Dict, List, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from scout_seed.python_libs.common.exceptions import ConfigurationError, RecordStoreError
from scout_seed.python_libs.common.seed_data_config import SupabaseSettings
from scout_seed.python_libs.interfaces.record_store_interface import IRecordStore

logger = logging.getLogger(__name__)


class SupabaseRecordStore(IRecordStore):
    """Record store backed by a Supabase (PostgREST) project."""

    def __init__(self, settings: Optional[SupabaseSettings] = None, *, client: Optional[Client] = None):
        """
        Initialize the Supabase store.

        Args:
            settings: URL and service key of the project
            client: Pre-built client (takes precedence over settings)
        """
        if client is None:
            settings = settings or SupabaseSettings.resolve()
            settings.validate()
            client = create_client(settings.url, settings.service_key)
        self.client = client

    def insert_batch(self, table_name: str, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Insert a batch and return the inserted rows with generated ids."""
        if not records:
            return []
        try:
            response = self.client.table(table_name).insert(records).execute()
        except APIError as e:
            raise RecordStoreError(f"Insert into {table_name} failed: {e.message}", table_name=table_name) from e
        except httpx.HTTPError as e:
            raise RecordStoreError(f"Insert into {table_name} failed: {e}", table_name=table_name) from e
        logger.debug(f"Inserted {len(response.data)} rows into {table_name}")
        return response.data

    def call_procedure(self, procedure_name: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Invoke a Postgres function through the RPC endpoint."""
        try:
            response = self.client.rpc(procedure_name, params or {}).execute()
        except APIError as e:
            raise RecordStoreError(f"Procedure {procedure_name} failed: {e.message}") from e
        except httpx.HTTPError as e:
            raise RecordStoreError(f"Procedure {procedure_name} failed: {e}") from e
        return response.data


class MemoryRecordStore(IRecordStore):
    """In-memory record store for testing and dry runs."""

    def __init__(self, procedures: Optional[Dict[str, Callable[..., Any]]] = None):
        """
        Initialize in-memory storage.

        Args:
            procedures: Callables to run for named procedures. Calling an
                unregistered procedure raises RecordStoreError.
        """
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.insert_calls: List[tuple] = []
        self.procedure_calls: List[str] = []
        self.procedures = dict(procedures or {})
        self._next_ids: Dict[str, int] = {}

    def insert_batch(self, table_name: str, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Store copies of the records, assigning sequential ids per table."""
        self.insert_calls.append((table_name, len(records)))
        next_id = self._next_ids.get(table_name, 1)
        inserted = []
        for record in records:
            row = copy.deepcopy(record)
            row["id"] = next_id
            next_id += 1
            inserted.append(row)
        self._next_ids[table_name] = next_id
        self.tables.setdefault(table_name, []).extend(inserted)
        logger.debug(f"Stored {len(inserted)} rows in memory table {table_name}")
        return copy.deepcopy(inserted)

    def call_procedure(self, procedure_name: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Run a registered procedure."""
        self.procedure_calls.append(procedure_name)
        procedure = self.procedures.get(procedure_name)
        if procedure is None:
            raise RecordStoreError(f"Procedure {procedure_name} does not exist in the memory store")
        return procedure(**(params or {}))

    def row_count(self, table_name: str) -> int:
        return len(self.tables.get(table_name, []))


class RecordStoreFactory:
    """Factory for creating record store implementations."""

    @staticmethod
    def create_store(store_type: str, **kwargs) -> IRecordStore:
        """
        Create a record store based on type.

        Args:
            store_type: "supabase" or "memory"
            **kwargs: url/service_key for supabase, procedures for memory

        Raises:
            ConfigurationError: If store_type is not supported
        """
        store_type = store_type.lower()

        if store_type == "supabase":
            settings = SupabaseSettings.resolve(kwargs.get("url"), kwargs.get("service_key"))
            return SupabaseRecordStore(settings)
        elif store_type == "memory":
            # Dry runs succeed on refresh even though no database exists
            procedures = kwargs.get("procedures")
            if procedures is None and kwargs.get("refresh_procedure"):
                procedures = {kwargs["refresh_procedure"]: lambda: None}
            return MemoryRecordStore(procedures=procedures)
        else:
            raise ConfigurationError(
                f"Unsupported record store type: {store_type}. "
                f"Supported types: {', '.join(RecordStoreFactory.get_supported_types())}"
            )

    @staticmethod
    def get_supported_types() -> list[str]:
        """Get list of supported store types."""
        return ["supabase", "memory"]
