import json

import pytest

from scout_seed.python_libs.common.exceptions import ConfigurationError
from scout_seed.python_libs.common.reference_data import ReferenceDataRepository
from scout_seed.python_libs.common.seed_data_config import MockTransactionConfig
from scout_seed.python_libs.python.mock_transactions import (
    MockTransactionAssembler,
    generate_mock_transactions,
    write_mock_document,
)
from scout_seed.python_libs.python.sampling_utils import day_of_week, parse_date


@pytest.fixture
def document(small_mock_config):
    return MockTransactionAssembler(small_mock_config).generate()


class TestMockDocument:
    """Test the assembled mock document."""

    def test_single_transaction_on_one_day(self):
        document = generate_mock_transactions(1, "2024-01-01", "2024-01-01", seed=1)

        assert set(document) == {"transactions", "customers", "stores", "summary"}
        assert len(document["transactions"]) == 1
        transaction = document["transactions"][0]
        assert transaction["timestamp"].startswith("2024-01-01T")
        assert 1 <= len(transaction["items"]) <= 8
        assert transaction["transaction_summary"]["item_count"] == len(transaction["items"])
        assert document["summary"]["unique_customers"] == 1
        assert document["summary"]["unique_stores"] == 1

    def test_summary(self, document, small_mock_config):
        summary = document["summary"]
        assert summary["total_transactions"] == small_mock_config.count
        assert summary["unique_customers"] == len(document["customers"])
        assert summary["unique_stores"] == len(document["stores"])
        assert summary["date_range"] == {"start": "2024-01-01", "end": "2024-03-31"}
        expected = sum(t["transaction_summary"]["total_amount"] for t in document["transactions"])
        assert summary["total_revenue"] == pytest.approx(expected, abs=0.01)

    def test_totals_formula(self, document):
        for transaction in document["transactions"]:
            totals = transaction["transaction_summary"]
            line_total = sum(item["total_price"] for item in transaction["items"])
            assert totals["subtotal"] == pytest.approx(line_total, abs=0.011)
            taxable = totals["subtotal"] - totals["discount_amount"]
            assert totals["tax_amount"] == pytest.approx(taxable * 0.12, abs=0.011)
            assert totals["total_amount"] == pytest.approx(taxable + totals["tax_amount"], abs=0.011)
            assert totals["discount_amount"] <= totals["subtotal"] * 0.25 + 0.01

    def test_basket_skus_unique(self, document):
        for transaction in document["transactions"]:
            skus = [item["sku"] for item in transaction["items"]]
            assert len(skus) == len(set(skus))
            assert 1 <= len(skus) <= 8
            assert transaction["transaction_summary"]["item_count"] == len(skus)
            assert transaction["transaction_summary"]["total_quantity"] == sum(
                item["quantity"] for item in transaction["items"]
            )

    def test_item_prices_follow_size_multipliers(self, document):
        for transaction in document["transactions"]:
            for item in transaction["items"]:
                low, high = ReferenceDataRepository.get_price_range(item["category"], item["sku"])
                assert low - 0.005 <= item["unit_price"] <= high + 0.005
                assert item["total_price"] == round(item["unit_price"] * item["quantity"], 2)

    def test_metadata_matches_timestamp(self, document):
        for transaction in document["transactions"]:
            moment = parse_date(transaction["timestamp"])
            metadata = transaction["metadata"]
            assert metadata["day_of_week"] == day_of_week(moment)
            assert metadata["hour_of_day"] == moment.hour
            assert metadata["is_weekend"] == (day_of_week(moment) in (0, 6))
            assert metadata["device_id"] == f"POS-{transaction['store_info']['code']}-01"

    def test_timestamps_within_range(self, document):
        for transaction in document["transactions"]:
            assert "2024-01-01" <= transaction["timestamp"][:10] <= "2024-03-31"

    def test_store_and_customer_references(self, document):
        store_ids = {s["id"] for s in document["stores"]}
        customer_ids = {c["id"] for c in document["customers"]}
        for transaction in document["transactions"]:
            assert transaction["store_id"] in store_ids
            assert transaction["customer_id"] in customer_ids

    def test_stores_are_cached_by_region_city_type(self, document):
        keys = [(s["region"], s["city"], s["type"]) for s in document["stores"]]
        assert len(keys) == len(set(keys))

    def test_discount_activation_rate_and_range(self):
        """Test that about one basket in five is discounted at a 5-25% rate."""
        document = generate_mock_transactions(4000, "2024-01-01", "2024-12-20", seed=21)
        summaries = [t["transaction_summary"] for t in document["transactions"]]
        discounted = [s for s in summaries if s["discount_amount"] > 0]
        assert len(discounted) / len(summaries) == pytest.approx(0.2, abs=0.03)
        for s in discounted:
            # discount_amount is rounded to cents
            slack = 0.005 / s["subtotal"]
            assert 0.05 - slack <= s["discount_amount"] / s["subtotal"] <= 0.25 + slack

    def test_repeat_customers(self):
        document = generate_mock_transactions(500, "2024-01-01", "2024-12-20", seed=3)
        assert len(document["customers"]) < 500

    def test_no_repeat_customers_when_rate_is_zero(self):
        config = MockTransactionConfig(count=30, repeat_customer_rate=0.0, seed=3)
        document = MockTransactionAssembler(config).generate()
        assert len(document["customers"]) == 30

    def test_zero_count(self):
        document = generate_mock_transactions(0, "2024-01-01", "2024-01-31", seed=1)
        assert document["transactions"] == []
        assert document["summary"]["total_revenue"] == 0

    def test_same_seed_same_document(self):
        first = generate_mock_transactions(20, "2024-01-01", "2024-02-01", seed=11)
        second = generate_mock_transactions(20, "2024-01-01", "2024-02-01", seed=11)
        assert first == second

    def test_end_before_start_rejected(self):
        with pytest.raises(ConfigurationError, match="before start"):
            generate_mock_transactions(10, "2024-02-01", "2024-01-01")


class TestWriteMockDocument:
    def test_creates_parent_directories(self, tmp_path, document):
        output = tmp_path / "nested" / "dir" / "mockTransactions.json"
        path = write_mock_document(document, str(output))

        assert path == output
        with open(output, encoding="utf-8") as f:
            loaded = json.load(f)
        assert loaded["summary"] == document["summary"]
        assert output.read_text(encoding="utf-8").startswith("{\n  ")
