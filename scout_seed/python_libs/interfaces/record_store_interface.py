"""
Abstract interface for record stores.

This module defines the relational store boundary the seed-loader depends on:
bulk insert into a named table (returning the inserted rows with their
generated identifiers) and invoking a server-side procedure by name.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class IRecordStore(ABC):
    """Abstract interface for record stores."""

    @abstractmethod
    def insert_batch(self, table_name: str, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Insert a batch of records into a table.

        Args:
            table_name: Name of the target table
            records: Records to insert, keyed by column name

        Returns:
            The inserted rows, including store-generated identifiers

        Raises:
            RecordStoreError: If the insert fails
        """
        pass

    @abstractmethod
    def call_procedure(self, procedure_name: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Invoke a server-side procedure by name.

        Raises:
            RecordStoreError: If the call fails
        """
        pass
