"""
Seed Entity Generators

One generator per seeded table. Each method is a function of the target count,
the upstream entities it references and the sampling tables, and returns plain
JSON-serializable records. Persisting the records is the caller's job.

Dependencies: faker
"""

import logging
import math
import random
import string
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from faker import Faker

from scout_seed.python_libs.common.exceptions import SeedPreconditionError
from scout_seed.python_libs.common.reference_data import ReferenceDataRepository as ref
from scout_seed.python_libs.common.seed_data_config import SeedDataConfiguration
from scout_seed.python_libs.python.sampling_utils import (
    format_timestamp,
    random_cents,
    random_decimal,
    random_element,
    random_int,
    realistic_datetime,
    round_money,
)

Record = Dict[str, Any]

TAX_RATE = 0.12
MAX_DISCOUNT_SHARE = 0.2
MAX_LINE_DISCOUNT_SHARE = 0.1
PRICE_JITTER = 0.1


def _require(entities: Sequence[Record], entity_name: str, needed_by: str) -> None:
    if not entities:
        raise SeedPreconditionError(f"Cannot generate {needed_by}: no {entity_name} to reference")


class SeedEntityGenerator:
    """Generates the seed-loader's entity batches."""

    def __init__(self, config: Optional[SeedDataConfiguration] = None, seed: Optional[int] = None):
        """Initialize the generator with optional seed for reproducibility."""
        self.config = config or SeedDataConfiguration()
        if seed is None:
            seed = self.config.seed

        self.rng = random.Random(seed)
        self.fake = Faker(self.config.locale)
        if seed is not None:
            self.fake.seed_instance(seed)

        self.logger = logging.getLogger(__name__)

    # ----- helpers -----

    def _code(self, length: int) -> str:
        alphabet = string.ascii_uppercase + string.digits
        return "".join(self.rng.choice(alphabet) for _ in range(length))

    def _pick(self, items: Sequence[Any]) -> Any:
        return random_element(items, self.rng)

    def _recent(self, days: int) -> str:
        moment = self.fake.date_time_between(start_date=f"-{days}d", end_date="now", tzinfo=timezone.utc)
        return format_timestamp(moment)

    def _past(self, years: int) -> str:
        moment = self.fake.date_time_between(start_date=f"-{years}y", end_date="-1d", tzinfo=timezone.utc)
        return format_timestamp(moment)

    def _sample_count(self, base: int, rate: float) -> int:
        return math.floor(base * rate)

    # ----- reference entities -----

    def generate_brands(self, count: int) -> List[Record]:
        """Generate brands: the real-brand catalog first, then synthetic brands."""
        brands = []
        for i in range(count):
            if i < len(ref.REAL_BRANDS):
                brands.append(dict(ref.REAL_BRANDS[i]))
                continue
            brands.append(
                {
                    "name": f"{self.fake.company()} {self._pick(ref.BRAND_SUFFIXES)}",
                    "category": self._pick(ref.FMCG_CATEGORIES),
                    "manufacturer": self.fake.company(),
                    "country_origin": self._pick(ref.BRAND_COUNTRIES),
                }
            )
        return brands

    def generate_products(self, count: int, brands: Sequence[Record]) -> List[Record]:
        """Generate products priced at unit cost times a markup of at least 1.2."""
        if count > 0:
            _require(brands, "brands", "products")

        products = []
        for _ in range(count):
            brand = self._pick(brands)
            unit_cost = random_decimal(5, 200, self.rng)
            markup = random_decimal(1.2, 3.0, self.rng)
            unit_size = self._pick(ref.UNIT_SIZES)
            products.append(
                {
                    "brand_id": brand["id"],
                    "sku": f"SKU-{self._code(10)}",
                    "name": f"{brand['name']} {self.fake.word().title()} {unit_size}",
                    "category": brand["category"],
                    "subcategory": self._pick(ref.get_subcategories(brand["category"])),
                    "unit_size": unit_size,
                    "unit_cost": unit_cost,
                    "retail_price": round_money(unit_cost * markup),
                }
            )
        return products

    def generate_customers(self, count: int) -> List[Record]:
        """Generate customers with a region, a province of that region and demographic tags."""
        customers = []
        for _ in range(count):
            region = self._pick(ref.PHILIPPINE_REGIONS)
            customers.append(
                {
                    "customer_code": f"CUST-{self._code(8)}",
                    "gender": self._pick(ref.GENDERS),
                    "age_group": self._pick(ref.AGE_GROUPS),
                    "location_region": region,
                    "location_province": self._pick(ref.get_provinces(region)),
                    "location_city": self.fake.city(),
                    "location_barangay": f"Barangay {self.fake.street_name()}",
                    "income_bracket": self._pick(ref.INCOME_BRACKETS),
                    "loyalty_tier": self._pick(ref.LOYALTY_TIERS),
                }
            )
        return customers

    def generate_stores(self, count: int) -> List[Record]:
        stores = []
        for _ in range(count):
            region = self._pick(ref.PHILIPPINE_REGIONS)
            store_type = self._pick(ref.STORE_TYPES)
            stores.append(
                {
                    "store_code": f"STORE-{self._code(6)}",
                    "name": f"{self.fake.company()} {store_type}",
                    "type": store_type,
                    "region": region,
                    "province": self._pick(ref.get_provinces(region)),
                    "city": self.fake.city(),
                    "barangay": f"Barangay {self.fake.street_name()}",
                    "address": self.fake.street_address(),
                    "store_size": self._pick(ref.STORE_SIZES),
                }
            )
        return stores

    def generate_devices(self, stores: Sequence[Record]) -> List[Record]:
        """Generate devices for every store, coded DEV-<store_code>-<NN>."""
        _require(stores, "stores", "devices")

        devices = []
        for store in stores:
            device_count = random_int(self.config.min_devices_per_store, self.config.max_devices_per_store, self.rng)
            for i in range(device_count):
                devices.append(
                    {
                        "device_id": f"DEV-{store['store_code']}-{i + 1:02d}",
                        "store_id": store["id"],
                        "device_type": self._pick(ref.DEVICE_TYPES),
                        "model": f"Model-{self._pick(ref.DEVICE_MODELS)}",
                        "firmware_version": (
                            f"v{random_int(1, 5, self.rng)}.{random_int(0, 9, self.rng)}.{random_int(0, 9, self.rng)}"
                        ),
                        "installation_date": self._past(2),
                        "last_maintenance": self._recent(30),
                    }
                )
        return devices

    # ----- transactional entities -----

    def generate_transactions(
        self,
        count: int,
        stores: Sequence[Record],
        customers: Sequence[Record],
        reference_time: Optional[datetime] = None,
    ) -> List[Record]:
        """
        Generate transactions over the trailing transaction window.

        Walk-in transactions (and every transaction when no customers exist)
        carry a null customer_id. Discount is 0-20% and tax 12% of the total.
        """
        if count > 0:
            _require(stores, "stores", "transactions")

        end = reference_time or datetime.now(timezone.utc)
        start = end - timedelta(days=self.config.transaction_window_days)

        transactions = []
        for _ in range(count):
            store = self._pick(stores)
            is_walk_in = self.rng.random() < self.config.walk_in_rate
            customer = self._pick(customers) if customers and not is_walk_in else None
            total_amount = random_decimal(50, 2000, self.rng)
            transactions.append(
                {
                    "transaction_code": f"TXN-{self._code(12)}",
                    "customer_id": customer["id"] if customer else None,
                    "store_id": store["id"],
                    "transaction_date": format_timestamp(realistic_datetime(start, end, self.rng)),
                    "total_amount": total_amount,
                    "total_items": random_int(1, 15, self.rng),
                    "payment_method": self._pick(ref.PAYMENT_METHODS),
                    "discount_amount": random_cents(total_amount * MAX_DISCOUNT_SHARE, self.rng),
                    "tax_amount": round_money(total_amount * TAX_RATE),
                }
            )
        return transactions

    def generate_transaction_items(
        self, transactions: Sequence[Record], products: Sequence[Record]
    ) -> List[Record]:
        """Generate up to min(total_items, max items) line items per transaction."""
        if transactions:
            _require(products, "products", "transaction items")

        items = []
        for transaction in transactions:
            item_count = min(transaction["total_items"], self.config.max_items_per_transaction)
            for _ in range(item_count):
                product = self._pick(products)
                retail_price = float(product["retail_price"])
                quantity = random_int(1, 5, self.rng)
                unit_price = random_decimal(
                    retail_price * (1 - PRICE_JITTER), retail_price * (1 + PRICE_JITTER), self.rng
                )
                items.append(
                    {
                        "transaction_id": transaction["id"],
                        "product_id": product["id"],
                        "quantity": quantity,
                        "unit_price": unit_price,
                        "discount_amount": random_cents(unit_price * quantity * MAX_LINE_DISCOUNT_SHARE, self.rng),
                    }
                )
        return items

    def generate_substitutions(
        self, transactions: Sequence[Record], products: Sequence[Record]
    ) -> Tuple[List[Record], int]:
        """
        Generate substitutions for a sample of transactions.

        Returns:
            The substitutions and the number of draws skipped because the
            original product had no other product in its category
        """
        count = self._sample_count(len(transactions), self.config.substitution_rate)
        if count > 0:
            _require(products, "products", "substitutions")

        by_category: Dict[str, List[Record]] = {}
        for product in products:
            by_category.setdefault(product["category"], []).append(product)

        substitutions = []
        skipped = 0
        for _ in range(count):
            transaction = self._pick(transactions)
            original = self._pick(products)
            candidates = [p for p in by_category[original["category"]] if p["id"] != original["id"]]
            if not candidates:
                skipped += 1
                continue
            substitute = self._pick(candidates)
            substitutions.append(
                {
                    "transaction_id": transaction["id"],
                    "original_product_id": original["id"],
                    "substitute_product_id": substitute["id"],
                    "reason": self._pick(ref.SUBSTITUTION_REASONS),
                    "customer_satisfaction_score": random_int(1, 5, self.rng),
                    "was_accepted": self.rng.random() > 0.3,
                }
            )
        return substitutions, skipped

    # ----- telemetry -----

    def generate_device_health(self, devices: Sequence[Record]) -> List[Record]:
        """Generate health rows per device. Offline devices report null metrics."""
        records = []
        for device in devices:
            for _ in range(self.config.health_rows_per_device):
                status = self._pick(ref.DEVICE_STATUSES)
                offline = status == "offline"
                records.append(
                    {
                        "device_id": device["device_id"],
                        "store_id": device["store_id"],
                        "status": status,
                        "cpu_usage": None if offline else random_decimal(10, 95, self.rng),
                        "memory_usage": None if offline else random_decimal(20, 85, self.rng),
                        "disk_usage": None if offline else random_decimal(15, 90, self.rng),
                        "network_latency": None if offline else random_int(10, 200, self.rng),
                        "last_heartbeat": self._recent(7),
                        "error_count": random_int(1, 10, self.rng) if status == "error" else 0,
                        # One week max
                        "uptime_hours": 0 if offline else random_decimal(0, 168, self.rng),
                    }
                )
        return records

    def generate_edge_logs(self, devices: Sequence[Record]) -> List[Record]:
        records = []
        for device in devices:
            for _ in range(self.config.logs_per_device):
                log_level = self._pick(ref.LOG_LEVELS)
                records.append(
                    {
                        "device_id": device["device_id"],
                        "store_id": device["store_id"],
                        "log_level": log_level,
                        "message": self.fake.sentence(),
                        "component": self._pick(ref.LOG_COMPONENTS),
                        "error_code": (
                            f"ERR-{random_int(1000, 9999, self.rng)}" if log_level in ("ERROR", "FATAL") else None
                        ),
                        "metadata": {
                            "session_id": self.fake.uuid4(),
                            "user_agent": self.fake.user_agent(),
                        },
                        "timestamp": self._recent(30),
                    }
                )
        return records

    # ----- behavioral -----

    def generate_request_behaviors(
        self, transaction_count: int, stores: Sequence[Record], customers: Sequence[Record]
    ) -> List[Record]:
        """Generate request behaviors for a share of the transaction volume."""
        count = self._sample_count(transaction_count, self.config.request_behavior_rate)
        if count > 0:
            _require(stores, "stores", "request behaviors")

        behaviors = []
        for _ in range(count):
            store = self._pick(stores)
            anonymous = self.rng.random() < self.config.behavior_anonymous_rate
            customer = self._pick(customers) if customers and not anonymous else None
            behaviors.append(
                {
                    "customer_id": customer["id"] if customer else None,
                    "store_id": store["id"],
                    "request_type": self._pick(ref.BEHAVIOR_REQUEST_TYPES),
                    "request_category": self._pick(ref.BEHAVIOR_REQUEST_CATEGORIES),
                    "request_details": {"query": self.fake.sentence()},
                    "response_time_ms": random_int(100, 5000, self.rng),
                    "was_successful": self.rng.random() > 0.1,
                    "timestamp": self._recent(30),
                }
            )
        return behaviors

    def generate_customer_requests(
        self, customers: Sequence[Record], stores: Sequence[Record], products: Sequence[Record]
    ) -> List[Record]:
        """Generate requests for a share of the customers."""
        count = self._sample_count(len(customers), self.config.customer_request_rate)
        if count > 0:
            _require(stores, "stores", "customer requests")

        requests = []
        for _ in range(count):
            customer = self._pick(customers)
            store = self._pick(stores)
            without_product = self.rng.random() < self.config.request_without_product_rate
            product = self._pick(products) if products and not without_product else None
            requests.append(
                {
                    "customer_id": customer["id"],
                    "store_id": store["id"],
                    "request_type": self._pick(ref.CUSTOMER_REQUEST_TYPES),
                    "product_category": product["category"] if product else self._pick(ref.FMCG_CATEGORIES),
                    "specific_product_id": product["id"] if product else None,
                    "request_description": self.fake.paragraph(),
                    "urgency_level": random_int(1, 5, self.rng),
                    "status": self._pick(ref.CUSTOMER_REQUEST_STATUSES),
                    "fulfilled_at": self._recent(10) if self.rng.random() > 0.5 else None,
                }
            )
        return requests
