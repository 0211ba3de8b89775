"""
Panel Analytics

Aggregates a mock transaction document into the pre-shaped JSON the dashboard
panels consume. Filters take the value "all" (or None) to disable them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import pandas as pd

from scout_seed.python_libs.python.sampling_utils import parse_date

logger = logging.getLogger(__name__)

ALL = "all"

TRANSACTION_COLUMNS = ["transaction_id", "timestamp", "region", "store_type", "total_amount"]
ITEM_COLUMNS = TRANSACTION_COLUMNS + ["sku", "product_name", "brand", "category", "quantity", "total_price"]
PROFILE_COLUMNS = TRANSACTION_COLUMNS + [
    "customer_id",
    "gender",
    "age_bracket",
    "income_class",
    "item_count",
    "payment_method",
]


@dataclass
class PanelFilters:
    """Filters shared by the panels."""

    start: Optional[str] = None
    end: Optional[str] = None
    region: Optional[str] = ALL
    store_type: Optional[str] = ALL
    category: Optional[str] = ALL
    brand: Optional[str] = ALL


def _active(value: Optional[str]) -> bool:
    return value is not None and value != ALL


def transactions_frame(document: Dict[str, Any]) -> pd.DataFrame:
    """One row per transaction with its timestamp, region, store type and total."""
    rows = [
        {
            "transaction_id": t["id"],
            "timestamp": t["timestamp"],
            "region": t["store_info"]["region"],
            "store_type": t["store_info"]["type"],
            "total_amount": t["transaction_summary"]["total_amount"],
        }
        for t in document.get("transactions", [])
    ]
    df = pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, format="ISO8601")
    return df


def items_frame(document: Dict[str, Any]) -> pd.DataFrame:
    """One row per basket item, carrying its transaction's attributes."""
    rows = []
    for t in document.get("transactions", []):
        for item in t["items"]:
            rows.append(
                {
                    "transaction_id": t["id"],
                    "timestamp": t["timestamp"],
                    "region": t["store_info"]["region"],
                    "store_type": t["store_info"]["type"],
                    "total_amount": t["transaction_summary"]["total_amount"],
                    "sku": item["sku"],
                    "product_name": item["product_name"],
                    "brand": item["brand"],
                    "category": item["category"],
                    "quantity": item["quantity"],
                    "total_price": item["total_price"],
                }
            )
    df = pd.DataFrame(rows, columns=ITEM_COLUMNS)
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, format="ISO8601")
    return df


def apply_filters(df: pd.DataFrame, filters: PanelFilters) -> pd.DataFrame:
    """Apply the date range and categorical filters present in the frame."""
    mask = pd.Series(True, index=df.index)
    if filters.start:
        mask &= df["timestamp"] >= pd.Timestamp(parse_date(filters.start))
    if filters.end:
        # A bare date includes the whole day
        end = pd.Timestamp(parse_date(filters.end))
        if len(str(filters.end)) == 10:
            end += pd.Timedelta(days=1)
            mask &= df["timestamp"] < end
        else:
            mask &= df["timestamp"] <= end
    for column, value in (
        ("region", filters.region),
        ("store_type", filters.store_type),
        ("category", filters.category),
        ("brand", filters.brand),
    ):
        if _active(value) and column in df.columns:
            mask &= df[column] == value
    return df[mask]


def _growth(first: float, second: float) -> float:
    if first == 0:
        return 0.0
    return round((second - first) / first * 100, 1)


def transaction_trends(document: Dict[str, Any], filters: Optional[PanelFilters] = None) -> Dict[str, List[Dict]]:
    """
    Compute the transaction trends panel.

    Returns:
        Dictionary with hourly, daily, weekly and regional series. Regional
        growth is the revenue change in percent between the first and second
        half of the filtered period.
    """
    filters = filters or PanelFilters()
    df = apply_filters(transactions_frame(document), filters)
    result: Dict[str, List[Dict]] = {"hourly": [], "daily": [], "weekly": [], "regional": []}
    if df.empty:
        return result

    df = df.assign(
        hour=df["timestamp"].dt.hour,
        date=df["timestamp"].dt.strftime("%Y-%m-%d"),
        week=df["timestamp"].dt.strftime("%G-W%V"),
        weekday=df["timestamp"].dt.dayofweek,
    )

    hourly = df.groupby("hour").agg(transactions=("transaction_id", "count"), revenue=("total_amount", "sum"))
    hourly = hourly.reindex(range(24), fill_value=0)
    result["hourly"] = [
        {"hour": f"{hour:02d}:00", "transactions": int(row.transactions), "revenue": round(float(row.revenue), 2)}
        for hour, row in hourly.iterrows()
    ]

    daily = df.groupby("date").agg(
        transactions=("transaction_id", "count"),
        revenue=("total_amount", "sum"),
        weekday=("weekday", "first"),
    )
    result["daily"] = [
        {
            "date": date,
            "transactions": int(row.transactions),
            "revenue": round(float(row.revenue), 2),
            # pandas counts Monday as 0
            "isWeekend": int(row.weekday) >= 5,
        }
        for date, row in daily.iterrows()
    ]

    weekly = df.groupby("week").agg(transactions=("transaction_id", "count"), revenue=("total_amount", "sum"))
    result["weekly"] = [
        {"week": week, "transactions": int(row.transactions), "revenue": round(float(row.revenue), 2)}
        for week, row in weekly.iterrows()
    ]

    midpoint = df["timestamp"].min() + (df["timestamp"].max() - df["timestamp"].min()) / 2
    df = df.assign(half=df["timestamp"].gt(midpoint).map({False: "first", True: "second"}))
    regional = df.groupby("region").agg(transactions=("transaction_id", "count"), revenue=("total_amount", "sum"))
    halves = df.groupby(["region", "half"])["total_amount"].sum().unstack(fill_value=0.0)
    for column in ("first", "second"):
        if column not in halves.columns:
            halves[column] = 0.0
    regional = regional.sort_values("revenue", ascending=False)
    result["regional"] = [
        {
            "region": region,
            "transactions": int(row.transactions),
            "revenue": round(float(row.revenue), 2),
            "growth": _growth(float(halves.loc[region, "first"]), float(halves.loc[region, "second"])),
        }
        for region, row in regional.iterrows()
    ]
    return result


def product_mix(document: Dict[str, Any], filters: Optional[PanelFilters] = None) -> Dict[str, List[Dict]]:
    """Compute the product mix panel: category mix, brand performance, SKU and Pareto analysis."""
    filters = filters or PanelFilters()
    df = apply_filters(items_frame(document), filters)
    result: Dict[str, List[Dict]] = {"categoryMix": [], "brandPerformance": [], "skuAnalysis": [], "paretoAnalysis": []}
    if df.empty:
        return result

    total_revenue = float(df["total_price"].sum())

    categories = (
        df.groupby("category")
        .agg(revenue=("total_price", "sum"), transactions=("transaction_id", "nunique"))
        .sort_values("revenue", ascending=False)
    )
    result["categoryMix"] = [
        {"category": category, "revenue": round(float(row.revenue), 2), "transactions": int(row.transactions)}
        for category, row in categories.iterrows()
    ]

    brands = (
        df.groupby(["brand", "category"], as_index=False)
        .agg(revenue=("total_price", "sum"))
        .sort_values("revenue", ascending=False)
    )
    result["brandPerformance"] = [
        {
            "brand": row.brand,
            "category": row.category,
            "revenue": round(float(row.revenue), 2),
            "marketShare": round(float(row.revenue) / total_revenue * 100, 2) if total_revenue else 0.0,
        }
        for row in brands.itertuples(index=False)
    ]

    skus = (
        df.groupby(["sku", "product_name", "brand", "category"], as_index=False)
        .agg(revenue=("total_price", "sum"), quantity=("quantity", "sum"))
        .sort_values(["revenue", "sku"], ascending=[False, True])
    )
    result["skuAnalysis"] = [
        {
            "sku": row.sku,
            "name": row.product_name,
            "brand": row.brand,
            "category": row.category,
            "revenue": round(float(row.revenue), 2),
            "quantity": int(row.quantity),
        }
        for row in skus.itertuples(index=False)
    ]

    cumulative = skus["revenue"].cumsum() / total_revenue * 100 if total_revenue else skus["revenue"] * 0
    result["paretoAnalysis"] = [
        {"sku": sku, "revenue": round(float(revenue), 2), "cumulativePercent": round(float(percent), 2)}
        for sku, revenue, percent in zip(skus["sku"], skus["revenue"], cumulative)
    ]
    return result


def profiles_frame(document: Dict[str, Any]) -> pd.DataFrame:
    """One row per transaction with the shopper's demographic profile."""
    rows = [
        {
            "transaction_id": t["id"],
            "timestamp": t["timestamp"],
            "region": t["store_info"]["region"],
            "store_type": t["store_info"]["type"],
            "total_amount": t["transaction_summary"]["total_amount"],
            "customer_id": t["customer_id"],
            "gender": t["customer_profile"]["gender"],
            "age_bracket": t["customer_profile"]["age_bracket"],
            "income_class": t["customer_profile"]["income_class"],
            "item_count": t["transaction_summary"]["item_count"],
            "payment_method": t["payment_method"],
        }
        for t in document.get("transactions", [])
    ]
    df = pd.DataFrame(rows, columns=PROFILE_COLUMNS)
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, format="ISO8601")
    return df


def _most_common(values: pd.Series) -> str:
    counts = values.value_counts()
    return str(counts.index[0]) if not counts.empty else ""


def consumer_behavior(document: Dict[str, Any], filters: Optional[PanelFilters] = None) -> Dict[str, Any]:
    """
    Compute the consumer behavior panel from the shopper profiles.

    Returns:
        Dictionary with demographic behavior per age bracket and gender, the
        income class mix, basket size by hour and the repeat customer share.
    """
    filters = filters or PanelFilters()
    df = apply_filters(profiles_frame(document), filters)
    result: Dict[str, Any] = {
        "demographicBehavior": [],
        "incomeMix": [],
        "timeBasedBehavior": [],
        "loyalty": {"customers": 0, "repeatCustomers": 0, "repeatRate": 0.0},
    }
    if df.empty:
        return result

    demographics = (
        df.groupby(["age_bracket", "gender"], as_index=False)
        .agg(
            transactions=("transaction_id", "count"),
            customers=("customer_id", "nunique"),
            avg_basket=("item_count", "mean"),
            avg_spend=("total_amount", "mean"),
            preferred_payment=("payment_method", _most_common),
        )
        .sort_values(["age_bracket", "gender"])
    )
    result["demographicBehavior"] = [
        {
            "demographic": f"{row.gender} {row.age_bracket}",
            "ageGroup": row.age_bracket,
            "gender": row.gender,
            "transactions": int(row.transactions),
            "customers": int(row.customers),
            "avgBasketSize": round(float(row.avg_basket), 1),
            "avgSpend": round(float(row.avg_spend), 2),
            "preferredPaymentMethod": row.preferred_payment,
        }
        for row in demographics.itertuples(index=False)
    ]

    total_revenue = float(df["total_amount"].sum())
    income = (
        df.groupby("income_class")
        .agg(transactions=("transaction_id", "count"), revenue=("total_amount", "sum"))
        .sort_index()
    )
    result["incomeMix"] = [
        {
            "incomeClass": income_class,
            "transactions": int(row.transactions),
            "revenue": round(float(row.revenue), 2),
            "share": round(float(row.revenue) / total_revenue * 100, 2) if total_revenue else 0.0,
        }
        for income_class, row in income.iterrows()
    ]

    hourly = (
        df.assign(hour=df["timestamp"].dt.hour)
        .groupby("hour")
        .agg(transactions=("transaction_id", "count"), avg_basket=("item_count", "mean"))
        .reindex(range(24))
    )
    result["timeBasedBehavior"] = [
        {
            "hour": int(hour),
            "transactions": 0 if pd.isna(row.transactions) else int(row.transactions),
            "avgBasketSize": 0.0 if pd.isna(row.avg_basket) else round(float(row.avg_basket), 1),
        }
        for hour, row in hourly.iterrows()
    ]

    visits = df["customer_id"].value_counts()
    repeat = int((visits > 1).sum())
    result["loyalty"] = {
        "customers": int(len(visits)),
        "repeatCustomers": repeat,
        "repeatRate": round(repeat / len(visits) * 100, 1),
    }
    return result


PANELS = {
    "trends": transaction_trends,
    "product-mix": product_mix,
    "consumer-behavior": consumer_behavior,
}


def compute_panel(panel: str, document: Dict[str, Any], filters: Optional[PanelFilters] = None) -> Dict[str, Any]:
    """Compute a panel by name."""
    if panel not in PANELS:
        raise ValueError(f"Unknown panel '{panel}'. Available panels: {', '.join(PANELS)}")
    logger.debug(f"Computing {panel} panel over {len(document.get('transactions', []))} transactions")
    return PANELS[panel](document, filters)
