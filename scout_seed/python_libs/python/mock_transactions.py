"""
Mock Transaction Generator

Builds a self-contained JSON document of stores, customers and transactions
(with embedded basket items and monetary summaries) for dashboard development
without a database.
"""

from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from faker import Faker

from scout_seed.python_libs.common.reference_data import ReferenceDataRepository as ref
from scout_seed.python_libs.common.seed_data_config import MockTransactionConfig
from scout_seed.python_libs.python.sampling_utils import (
    day_of_week,
    format_timestamp,
    parse_date,
    random_decimal,
    random_element,
    random_int,
    realistic_datetime,
    round_money,
    weighted_choice,
)

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 1000


class MockTransactionAssembler:
    """Assembles mock transactions, reusing stores and customers across transactions."""

    def __init__(self, config: Optional[MockTransactionConfig] = None):
        self.config = config or MockTransactionConfig()
        self.rng = random.Random(self.config.seed)
        self.fake = Faker()
        if self.config.seed is not None:
            self.fake.seed_instance(self.config.seed)

        # Stores keyed by region_code-city-store_type, customers by id
        self.stores: Dict[str, Dict[str, Any]] = {}
        self.customers: Dict[str, Dict[str, Any]] = {}

    def get_or_create_store(self, region: Dict[str, Any], city: str, barangay: str) -> Dict[str, Any]:
        store_type = random_element(ref.MOCK_STORE_TYPES, self.rng)
        key = f"{region['code']}-{city}-{store_type}"
        store = self.stores.get(key)
        if store is None:
            store = {
                "id": self.fake.uuid4(),
                "code": f"STORE-{region['code']}-{len(self.stores) + 1:03d}",
                "name": f"{city} {store_type}",
                "type": store_type,
                "size": random_element(ref.STORE_SIZES, self.rng),
                "region": region["code"],
                "city": city,
                "barangay": barangay,
            }
            self.stores[key] = store
        return store

    def pick_customer(self, region: Dict[str, Any], city: str, barangay: str) -> Dict[str, Any]:
        """Reuse a cached customer at the repeat rate, otherwise create one."""
        if self.customers and self.rng.random() < self.config.repeat_customer_rate:
            return random_element(list(self.customers.values()), self.rng)

        customer = {
            "id": self.fake.uuid4(),
            "code": f"CUST-{len(self.customers) + 1:06d}",
            "gender": random_element(ref.GENDERS[:2], self.rng),
            "age_bracket": random_element(ref.AGE_BRACKETS, self.rng),
            "income_class": random_element(ref.INCOME_CLASSES, self.rng),
            "region": region["code"],
            "city": city,
            "barangay": barangay,
        }
        self.customers[customer["id"]] = customer
        return customer

    def price_for(self, category: str, sku: str) -> float:
        low, high = ref.get_price_range(category, sku)
        return random_decimal(low, high, self.rng)

    def build_basket(self) -> List[Dict[str, Any]]:
        """
        Fill 1-8 basket slots with distinct SKUs.

        Each slot draws a client brand at the configured share (else a
        competitor), then retries SKU draws until one is unused in this basket.
        A slot that exhausts its attempts is dropped.
        """
        cfg = self.config
        items: List[Dict[str, Any]] = []
        used_skus: Set[str] = set()

        for _ in range(random_int(cfg.min_basket_size, cfg.max_basket_size, self.rng)):
            brands = ref.CLIENT_BRANDS if self.rng.random() < cfg.client_brand_share else ref.COMPETITOR_BRANDS
            brand = random_element(brands, self.rng)

            sku = None
            for _ in range(cfg.max_sku_attempts):
                draw = random_element(brand["skus"], self.rng)
                if draw not in used_skus:
                    sku = draw
                    break
            if sku is None:
                continue

            used_skus.add(sku)
            quantity = random_int(cfg.min_quantity, cfg.max_quantity, self.rng)
            unit_price = self.price_for(brand["category"], sku)
            items.append(
                {
                    "sku": sku,
                    "product_name": f"{brand['name']} {sku.replace('-', ' ')}",
                    "brand": brand["name"],
                    "category": brand["category"],
                    "quantity": quantity,
                    "unit_price": unit_price,
                    "total_price": round_money(quantity * unit_price),
                }
            )
        return items

    def summarize_basket(self, items: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Compute the monetary summary, rounding at every step."""
        cfg = self.config
        subtotal = round_money(sum(item["total_price"] for item in items))
        discount_rate = 0.0
        if self.rng.random() < cfg.discount_probability:
            discount_rate = random_decimal(*cfg.discount_rate_range, self.rng)
        discount_amount = round_money(subtotal * discount_rate)
        taxable_amount = round_money(subtotal - discount_amount)
        tax_amount = round_money(taxable_amount * cfg.tax_rate)
        return {
            "item_count": len(items),
            "total_quantity": sum(item["quantity"] for item in items),
            "subtotal": subtotal,
            "discount_amount": discount_amount,
            "tax_amount": tax_amount,
            "total_amount": round_money(taxable_amount + tax_amount),
        }

    def assemble(self, number: int, start, end) -> Dict[str, Any]:
        """Assemble the transaction with 1-based sequence number ``number``."""
        region = weighted_choice(ref.region_weights(), self.rng)
        city = random_element(region["cities"], self.rng)
        barangay = f"Barangay {random_int(1, 100, self.rng)}"

        store = self.get_or_create_store(region, city, barangay)
        customer = self.pick_customer(region, city, barangay)
        items = self.build_basket()

        moment = realistic_datetime(start, end, self.rng, max_attempts=self.config.max_date_attempts)
        weekday = day_of_week(moment)

        return {
            "id": self.fake.uuid4(),
            "transaction_code": f"TXN-{number:08d}",
            "timestamp": format_timestamp(moment),
            "customer_id": customer["id"],
            "customer_profile": {
                "gender": customer["gender"],
                "age_bracket": customer["age_bracket"],
                "income_class": customer["income_class"],
                "region": customer["region"],
                "city": customer["city"],
            },
            "store_id": store["id"],
            "store_info": {key: store[key] for key in ("code", "name", "type", "size", "region", "city", "barangay")},
            "items": items,
            "transaction_summary": self.summarize_basket(items),
            "payment_method": random_element(ref.PAYMENT_METHODS, self.rng),
            "metadata": {
                "day_of_week": weekday,
                "hour_of_day": moment.hour,
                "is_weekend": weekday in (0, 6),
                "channel": "Retail",
                "device_id": f"POS-{store['code']}-01",
            },
        }

    def generate(self) -> Dict[str, Any]:
        """Generate the full mock document."""
        cfg = self.config
        start = parse_date(cfg.start)
        end = parse_date(cfg.end)
        logger.info(f"🚀 Generating {cfg.count:,} mock transactions")
        logger.info(f"📅 Date range: {cfg.start} to {cfg.end}")

        transactions = []
        for i in range(cfg.count):
            transactions.append(self.assemble(i + 1, start, end))
            if (i + 1) % PROGRESS_INTERVAL == 0:
                logger.info(f"   📊 Generated {i + 1:,}/{cfg.count:,} transactions")

        return {
            "transactions": transactions,
            "customers": list(self.customers.values()),
            "stores": list(self.stores.values()),
            "summary": {
                "total_transactions": len(transactions),
                "unique_customers": len(self.customers),
                "unique_stores": len(self.stores),
                "date_range": {"start": cfg.start, "end": cfg.end},
                "total_revenue": round_money(sum(t["transaction_summary"]["total_amount"] for t in transactions)),
            },
        }


def generate_mock_transactions(
    count: int,
    start: str,
    end: str,
    config: Optional[MockTransactionConfig] = None,
    seed: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Generate a mock transaction document.

    Args:
        count: Number of transactions
        start: Start date (ISO)
        end: End date (ISO)
        config: Base parameters; count, start, end and seed override it
        seed: Random seed for reproducible output

    Returns:
        Dictionary with transactions, customers, stores and summary
    """
    base = config or MockTransactionConfig()
    cfg = base.with_overrides(count=count, start=start, end=end, seed=seed)
    return MockTransactionAssembler(cfg).generate()


def write_mock_document(document: Dict[str, Any], output_path: str) -> Path:
    """Write the document as pretty-printed JSON, creating parent directories."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document, f, indent=2, ensure_ascii=False)
    logger.info(f"Wrote mock document to {path}")
    return path
