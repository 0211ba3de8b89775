import logging
import random

import pytest

from scout_seed.python_libs.common.seed_data_config import MockTransactionConfig, SeedDataConfiguration
from scout_seed.python_libs.common.seed_data_logger import SeedDataLogger
from scout_seed.python_libs.python.record_stores import MemoryRecordStore


@pytest.fixture
def rng():
    """Seeded random stream."""
    return random.Random(1234)


@pytest.fixture
def small_seed_config():
    """Seed configuration small enough to run the whole pipeline in a test."""
    return SeedDataConfiguration(
        brand_count=10,
        product_count=40,
        customer_count=30,
        store_count=4,
        transaction_count=60,
        transaction_batch_size=25,
        derived_batch_size=50,
        health_rows_per_device=3,
        logs_per_device=2,
        seed=42,
    )


@pytest.fixture
def small_mock_config():
    return MockTransactionConfig(count=50, start="2024-01-01", end="2024-03-31", seed=7)


@pytest.fixture
def memory_store():
    """In-memory store with a no-op refresh procedure."""
    return MemoryRecordStore(procedures={"refresh_analytical_views": lambda: None})


@pytest.fixture
def quiet_logger():
    return SeedDataLogger(logger_name="scout_seed.tests", enable_console_output=False)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers the CLI attaches to the package logger during a test."""
    yield
    logging.getLogger("scout_seed").handlers.clear()
