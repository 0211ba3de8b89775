"""
Seed and Mock Data Configuration Management

This module provides configuration management for the seed-loader and the mock
transaction generator, with file loading (YAML or JSON), runtime overrides and
validation on construction.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from scout_seed.python_libs.common.exceptions import ConfigurationError
from scout_seed.python_libs.python.sampling_utils import parse_date

logger = logging.getLogger(__name__)

SUPABASE_URL_ENV = "SUPABASE_URL"
SUPABASE_KEY_ENV = "SUPABASE_SERVICE_KEY"


def _check_ratio(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ConfigurationError(f"{name} must be between 0 and 1, got {value}")


def _check_non_negative(name: str, value: int) -> None:
    if value < 0:
        raise ConfigurationError(f"{name} must be non-negative, got {value}")


def load_config_file(path: str) -> Dict[str, Any]:
    """Load a configuration dictionary from a YAML or JSON file."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        if config_path.suffix.lower() == ".json":
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {config_path}: {e}") from e
        else:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {config_path} must contain a mapping")
    return data


@dataclass
class SeedDataConfiguration:
    """Target counts, ratios and batch sizes for the seed-loader."""

    brand_count: int = 50
    product_count: int = 500
    customer_count: int = 2000
    store_count: int = 100
    transaction_count: int = 18000

    transaction_batch_size: int = 1000
    derived_batch_size: int = 2000

    walk_in_rate: float = 0.1
    substitution_rate: float = 0.05
    request_behavior_rate: float = 0.3
    behavior_anonymous_rate: float = 0.2
    customer_request_rate: float = 0.1
    request_without_product_rate: float = 0.3

    min_devices_per_store: int = 1
    max_devices_per_store: int = 3
    health_rows_per_device: int = 100
    logs_per_device: int = 50

    max_items_per_transaction: int = 10
    transaction_window_days: int = 365

    refresh_procedure: Optional[str] = "refresh_analytical_views"
    seed: Optional[int] = None
    locale: str = "en_PH"

    # Runtime overrides applied on top of file/default values
    runtime_overrides: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate counts, ratios and batch sizes."""
        for name in ("brand_count", "product_count", "customer_count", "store_count", "transaction_count",
                     "health_rows_per_device", "logs_per_device"):
            _check_non_negative(name, getattr(self, name))

        for name in ("walk_in_rate", "substitution_rate", "request_behavior_rate", "behavior_anonymous_rate",
                     "customer_request_rate", "request_without_product_rate"):
            _check_ratio(name, getattr(self, name))

        if self.transaction_batch_size < 1 or self.derived_batch_size < 1:
            raise ConfigurationError("Batch sizes must be at least 1")

        if not 1 <= self.min_devices_per_store <= self.max_devices_per_store:
            raise ConfigurationError(
                f"Invalid devices per store range: {self.min_devices_per_store}-{self.max_devices_per_store}"
            )

        if self.max_items_per_transaction < 1:
            raise ConfigurationError("max_items_per_transaction must be at least 1")

        if self.transaction_window_days < 1:
            raise ConfigurationError("transaction_window_days must be at least 1")

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "SeedDataConfiguration":
        """Create configuration from dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config_dict) - known)
        if unknown:
            raise ConfigurationError(f"Unknown seed configuration keys: {', '.join(unknown)}")
        return cls(**config_dict)

    @classmethod
    def from_file(cls, path: str) -> "SeedDataConfiguration":
        """Load configuration from a YAML or JSON file."""
        data = load_config_file(path)
        # Allow the seed section to live under its own key
        return cls.from_dict(data.get("seed_loader", data))

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def apply_runtime_overrides(self, overrides: Dict[str, Any]) -> "SeedDataConfiguration":
        """Return a new configuration with overrides applied and validated."""
        merged = self.to_dict()
        merged_overrides = dict(self.runtime_overrides)
        merged_overrides.update(overrides)
        for key, value in overrides.items():
            if key not in merged or key == "runtime_overrides":
                raise ConfigurationError(f"Unknown seed configuration key: {key}")
            merged[key] = value
        merged["runtime_overrides"] = merged_overrides
        return SeedDataConfiguration.from_dict(merged)

    def stage_counts(self) -> Dict[str, str]:
        """Describe the configured row volume of each table."""
        return {
            "brands": f"{self.brand_count:,}",
            "products": f"{self.product_count:,}",
            "customers": f"{self.customer_count:,}",
            "stores": f"{self.store_count:,}",
            "devices": f"{self.min_devices_per_store}-{self.max_devices_per_store} per store",
            "transactions": f"{self.transaction_count:,} (batches of {self.transaction_batch_size:,})",
            "transaction_items": f"up to {self.max_items_per_transaction} per transaction",
            "substitutions": f"{self.substitution_rate:.0%} of transactions",
            "device_health": f"{self.health_rows_per_device} per device",
            "request_behaviors": f"{self.request_behavior_rate:.0%} of transactions",
            "customer_requests": f"{self.customer_request_rate:.0%} of customers",
            "edge_logs": f"{self.logs_per_device} per device",
        }


@dataclass
class MockTransactionConfig:
    """Parameters of the mock transaction file generator."""

    count: int = 5000
    start: str = "2024-01-01"
    end: str = "2024-12-20"
    output: str = "data/mockTransactions.json"

    repeat_customer_rate: float = 0.3
    client_brand_share: float = 0.6
    discount_probability: float = 0.2
    discount_rate_range: Tuple[float, float] = (0.05, 0.25)
    tax_rate: float = 0.12

    min_basket_size: int = 1
    max_basket_size: int = 8
    min_quantity: int = 1
    max_quantity: int = 5
    max_sku_attempts: int = 10
    max_date_attempts: int = 100

    seed: Optional[int] = None

    def __post_init__(self):
        """Validate the generator parameters."""
        _check_non_negative("count", self.count)
        for name in ("repeat_customer_rate", "client_brand_share", "discount_probability", "tax_rate"):
            _check_ratio(name, getattr(self, name))

        low, high = tuple(self.discount_rate_range)
        self.discount_rate_range = (float(low), float(high))
        if not 0.0 <= low <= high <= 1.0:
            raise ConfigurationError(f"Invalid discount rate range: {self.discount_rate_range}")

        if not 1 <= self.min_basket_size <= self.max_basket_size:
            raise ConfigurationError(f"Invalid basket size range: {self.min_basket_size}-{self.max_basket_size}")
        if not 1 <= self.min_quantity <= self.max_quantity:
            raise ConfigurationError(f"Invalid quantity range: {self.min_quantity}-{self.max_quantity}")
        if self.max_sku_attempts < 1 or self.max_date_attempts < 1:
            raise ConfigurationError("Attempt limits must be at least 1")

        # YAML turns unquoted dates into date objects
        if hasattr(self.start, "isoformat"):
            self.start = self.start.isoformat()
        if hasattr(self.end, "isoformat"):
            self.end = self.end.isoformat()

        try:
            start = parse_date(self.start)
            end = parse_date(self.end)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        if end < start:
            raise ConfigurationError(f"End date {self.end} is before start date {self.start}")

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "MockTransactionConfig":
        """Create configuration from dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config_dict) - known)
        if unknown:
            raise ConfigurationError(f"Unknown mock configuration keys: {', '.join(unknown)}")
        return cls(**config_dict)

    @classmethod
    def from_file(cls, path: str) -> "MockTransactionConfig":
        """Load configuration from a YAML or JSON file."""
        data = load_config_file(path)
        return cls.from_dict(data.get("mock_transactions", data))

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        data = asdict(self)
        data["discount_rate_range"] = list(self.discount_rate_range)
        return data

    def with_overrides(self, **overrides: Any) -> "MockTransactionConfig":
        """Return a copy with the non-None overrides applied."""
        data = self.to_dict()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return MockTransactionConfig.from_dict(data)


@dataclass
class SupabaseSettings:
    """Connection settings for the Supabase record store."""

    url: Optional[str] = None
    service_key: Optional[str] = None

    @classmethod
    def resolve(cls, url: Optional[str] = None, service_key: Optional[str] = None) -> "SupabaseSettings":
        """Resolve settings from explicit values, falling back to environment variables."""
        if url is None:
            url = os.environ.get(SUPABASE_URL_ENV)
            if url:
                logger.info(f"Using Supabase URL from {SUPABASE_URL_ENV}")
        if service_key is None:
            service_key = os.environ.get(SUPABASE_KEY_ENV)
        return cls(url=url, service_key=service_key)

    def validate(self) -> None:
        """Ensure both the URL and the service key are present."""
        missing = []
        if not self.url:
            missing.append(SUPABASE_URL_ENV)
        if not self.service_key:
            missing.append(SUPABASE_KEY_ENV)
        if missing:
            raise ConfigurationError(
                f"Missing Supabase settings: {', '.join(missing)}. "
                "Pass --supabase-url/--supabase-key or set the environment variables."
            )
