"""
Per-product stock movement and reorder status, derived from ingested records
and (optionally) that product's calculated thresholds.
"""

import logging
from typing import Optional

from .schemas import InventoryInsight, InventoryRecord, StockFlowPoint, ThresholdLevels
from .utils import round_half_up

logger = logging.getLogger(__name__)

STATUS_CRITICAL = "Critical - Reorder Now"
STATUS_WARNING = "Warning - Plan to Reorder"
STATUS_HEALTHY = "Healthy"


def _days_of_supply(
    inventory_level: float, threshold: Optional[ThresholdLevels]
) -> Optional[int]:
    if threshold is None or threshold.avg_daily_sales <= 0:
        return None
    return round_half_up(inventory_level / threshold.avg_daily_sales)


def _product_records(
    records: list[InventoryRecord], product_id: Optional[str]
) -> list[InventoryRecord]:
    # Default to the first product present, like the chart does on load.
    if product_id is None:
        if not records:
            return []
        product_id = records[0].product_id
    selected = [record for record in records if record.product_id == product_id]
    return sorted(selected, key=lambda record: record.date)


def build_stock_flow(
    records: list[InventoryRecord],
    product_id: Optional[str] = None,
    threshold: Optional[ThresholdLevels] = None,
) -> list[StockFlowPoint]:
    """
    Date-ascending stock movement for one product.

    inventory_change is the day-over-day change in inventory_level (0 on the
    first day). restock_amount is the stock that must have arrived to explain
    that change given the day's orders, floored at 0.
    """
    points = []
    previous_level = None
    for record in _product_records(records, product_id):
        if previous_level is None:
            previous_level = record.inventory_level
        change = record.inventory_level - previous_level
        points.append(
            StockFlowPoint(
                date=record.date,
                inventory_level=record.inventory_level,
                orders=record.orders,
                inventory_change=change,
                restock_amount=max(change + record.orders, 0),
                days_of_supply=_days_of_supply(record.inventory_level, threshold),
            )
        )
        previous_level = record.inventory_level
    return points


def classify_inventory_level(
    current_level: float, threshold: Optional[ThresholdLevels]
) -> str:
    if threshold is None:
        return STATUS_HEALTHY
    if current_level <= threshold.low:
        return STATUS_CRITICAL
    if current_level <= threshold.medium:
        return STATUS_WARNING
    return STATUS_HEALTHY


def assess_inventory(
    records: list[InventoryRecord],
    product_id: Optional[str] = None,
    threshold: Optional[ThresholdLevels] = None,
) -> Optional[InventoryInsight]:
    """Latest stock position of one product against its thresholds."""
    selected = _product_records(records, product_id)
    if not selected:
        return None

    latest = selected[-1]
    avg_orders = sum(record.orders for record in selected) / len(selected)

    return InventoryInsight(
        product_id=latest.product_id,
        product_name=selected[0].product_name,
        current_level=latest.inventory_level,
        avg_orders=avg_orders,
        days_of_supply=_days_of_supply(latest.inventory_level, threshold),
        status=classify_inventory_level(latest.inventory_level, threshold),
    )
