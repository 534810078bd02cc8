import logging
import math
from pathlib import Path
import pandas as pd

from . import settings
from .exceptions import RecordValidationError
from .schemas import InventoryRecord, ProductSummary
from .utils import load_csv, read_csv_text, round_half_up

logger = logging.getLogger(__name__)


def parse_inventory_table(raw_text: str) -> list[InventoryRecord]:
    """
    Parses CSV text into validated records sorted by product_id, then date.
    Empty text gives an empty list; the first invalid row aborts the whole parse.
    """
    if not raw_text or not raw_text.strip():
        return []
    try:
        df = read_csv_text(raw_text)
    except pd.errors.EmptyDataError:
        return []
    return records_from_frame(df)


def parse_inventory_file(file_path: Path) -> list[InventoryRecord]:
    """Loads a CSV file from disk and parses it like `parse_inventory_table`."""
    try:
        df = load_csv(file_path)
    except pd.errors.EmptyDataError:
        logger.warning(f"⚠️ {file_path.name} is empty. No records loaded.")
        return []

    records = records_from_frame(df)
    logger.info(f"✅ Parsed {file_path.name} successfully ({len(records)} records).")
    return records


def _parse_timestamp(value: str) -> pd.Timestamp:
    # One cell at a time, so every row keeps its own UTC offset.
    return pd.to_datetime(value, errors="coerce")


def _utc_instant(stamp: pd.Timestamp) -> pd.Timestamp:
    if stamp.tzinfo is None:
        return stamp
    return stamp.tz_convert("UTC").tz_localize(None)


def records_from_frame(df: pd.DataFrame) -> list[InventoryRecord]:
    """
    Turns an all-text DataFrame into sorted InventoryRecords.
    - Absent columns and blank cells are missing values.
    - Numeric columns must coerce to finite numbers, dates to calendar dates.
    - The first offending row raises RecordValidationError naming every
      missing (or, failing that, invalid) column of that row.
    """
    if df.empty:
        return []

    # Absent columns show up as NaN after the reindex and count as missing.
    text = (
        df.reindex(columns=settings.REQUIRED_COLUMNS)
        .fillna("")
        .astype(str)
        .apply(lambda col: col.str.strip())
    )
    missing = text == ""

    numbers = text[settings.NUMERIC_COLUMNS].apply(pd.to_numeric, errors="coerce")
    stamps = text["date"].map(_parse_timestamp)

    invalid = pd.DataFrame(False, index=text.index, columns=settings.REQUIRED_COLUMNS)
    invalid[settings.NUMERIC_COLUMNS] = numbers.isna() | numbers.isin(
        [math.inf, -math.inf]
    )
    invalid["date"] = stamps.isna()
    invalid = invalid & ~missing

    bad_rows = (missing.any(axis=1) | invalid.any(axis=1)).tolist()
    if any(bad_rows):
        position = bad_rows.index(True)
        row_missing = missing.iloc[position]
        if row_missing.any():
            raise RecordValidationError(
                position + 1, missing_columns=list(row_missing[row_missing].index)
            )
        row_invalid = invalid.iloc[position]
        raise RecordValidationError(
            position + 1, invalid_columns=list(row_invalid[row_invalid].index)
        )

    clean = text[settings.TEXT_COLUMNS].copy()
    # The record keeps the calendar day written in the row; the UTC instant
    # only breaks ties between rows of the same product and day.
    clean["date"] = stamps.map(lambda stamp: stamp.date())
    clean["_instant"] = stamps.map(_utc_instant)
    for col in settings.NUMERIC_COLUMNS:
        clean[col] = numbers[col].astype(float)

    # Multi-key sort is stable, so identical keys keep file order.
    clean = (
        clean.sort_values(["product_id", "date", "_instant"])
        .drop(columns="_instant")
        .reset_index(drop=True)
    )

    return [InventoryRecord(**row) for row in clean.to_dict("records")]


def records_to_frame(records: list[InventoryRecord]) -> pd.DataFrame:
    """Flattens records back into a DataFrame with the input schema's columns."""
    return pd.DataFrame(
        [record.model_dump() for record in records],
        columns=settings.REQUIRED_COLUMNS,
    )


def summarize_products(records: list[InventoryRecord]) -> list[ProductSummary]:
    """
    Per-product averages, in order of each product's first appearance.
    The first name seen for a product_id is the one reported.
    """
    df = records_to_frame(records)
    if df.empty:
        return []

    grouped = (
        df.groupby("product_id", sort=False)
        .agg(
            product_name=("product_name", "first"),
            total_inventory=("inventory_level", "sum"),
            total_orders=("orders", "sum"),
            total_lead_time=("lead_time_days", "sum"),
            data_points=("orders", "size"),
        )
        .reset_index()
    )

    summaries = []
    for row in grouped.to_dict("records"):
        count = row["data_points"]
        summaries.append(
            ProductSummary(
                product_id=row["product_id"],
                product_name=row["product_name"],
                avg_inventory=round_half_up(row["total_inventory"] / count),
                avg_orders=round_half_up(row["total_orders"] / count, 2),
                avg_lead_time=round_half_up(row["total_lead_time"] / count, 1),
                data_points=count,
            )
        )
    return summaries
