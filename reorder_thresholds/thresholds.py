import logging
from typing import Optional

from . import settings
from .ingestion import records_to_frame
from .schemas import InventoryRecord, ThresholdLevels, ThresholdParams
from .utils import round_half_up

logger = logging.getLogger(__name__)


def derive_threshold_levels(
    product_id: str,
    product_name: str,
    avg_daily_sales: float,
    lead_time: float,
    safety_stock_percentage: float,
) -> ThresholdLevels:
    """
    Applies the fixed threshold formulas to one product:
        lead-time demand = avg daily sales x lead time
        safety stock     = lead-time demand x pct / 100
        low    = round(lead-time demand + safety stock)
        medium = round(low x 1.5)
        high   = round(low x 2)
    """
    lead_time_demand = avg_daily_sales * lead_time
    safety_stock = lead_time_demand * (safety_stock_percentage / 100)

    low = round_half_up(lead_time_demand + safety_stock)
    medium = round_half_up(low * settings.MEDIUM_TIER_MULTIPLIER)
    high = round_half_up(low * settings.HIGH_TIER_MULTIPLIER)

    return ThresholdLevels(
        product_id=product_id,
        product_name=product_name,
        low=low,
        medium=medium,
        high=high,
        lead_time_used=round_half_up(lead_time, 1),
        avg_daily_sales=round_half_up(avg_daily_sales, 2),
    )


def calculate_thresholds(
    records: list[InventoryRecord],
    params: ThresholdParams,
    selected_product_id: Optional[str] = None,
) -> list[ThresholdLevels]:
    """
    Computes low/medium/high reorder levels for every product in `records`,
    or only for `selected_product_id` when one is given.

    `params` is trusted as-is; build it through ThresholdParams so it has been
    validated. Results follow the order in which products first appear.
    """
    df = records_to_frame(records)
    if selected_product_id:
        df = df[df["product_id"] == selected_product_id]

    if df.empty:
        logger.info("No records to calculate thresholds for.")
        return []

    grouped = (
        df.groupby("product_id", sort=False)
        .agg(
            product_name=("product_name", "first"),
            total_orders=("orders", "sum"),
            total_lead_time=("lead_time_days", "sum"),
            data_points=("orders", "size"),
        )
        .reset_index()
    )

    results = []
    for row in grouped.to_dict("records"):
        count = row["data_points"]

        # The override is global: every product in this run gets the same value.
        if params.average_daily_sales is None:
            avg_daily_sales = row["total_orders"] / count
        else:
            avg_daily_sales = params.average_daily_sales

        if params.use_product_lead_time:
            lead_time = row["total_lead_time"] / count
        else:
            lead_time = float(params.custom_lead_time)

        results.append(
            derive_threshold_levels(
                product_id=row["product_id"],
                product_name=row["product_name"],
                avg_daily_sales=avg_daily_sales,
                lead_time=lead_time,
                safety_stock_percentage=params.safety_stock_percentage,
            )
        )

    logger.info(f"Calculated thresholds for {len(results)} product(s).")
    return results
