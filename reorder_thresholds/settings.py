import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float | None) -> float | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return float(value)


# --- Path Configuration ---
INPUT_DIR = BASE_DIR / os.getenv("INPUT_DIR", "input")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")

# --- Filename Configuration ---
INVENTORY_FILENAME = os.getenv("INVENTORY_FILENAME", "inventory_data.csv")
EXPORT_FILENAME_BASE = os.getenv("EXPORT_FILENAME_BASE", "inventory-thresholds")
SAVE_JSON_OUTPUT = _env_bool("SAVE_JSON_OUTPUT", True)

# --- Threshold Parameters (defaults for main.py runs) ---
SAFETY_STOCK_PERCENTAGE = _env_float("SAFETY_STOCK_PERCENTAGE", 20.0)
# Leave blank to compute average daily sales from each product's orders.
AVERAGE_DAILY_SALES = _env_float("AVERAGE_DAILY_SALES", None)
USE_PRODUCT_LEAD_TIME = _env_bool("USE_PRODUCT_LEAD_TIME", True)
CUSTOM_LEAD_TIME = _env_float("CUSTOM_LEAD_TIME", 7.0)
SELECTED_PRODUCT_ID = os.getenv("SELECTED_PRODUCT_ID") or None

# --- Shared Business Logic ---
# Input schema. Header names are case-sensitive; column order in the file is free.
TEXT_COLUMNS = ["product_id", "product_name"]
NUMERIC_COLUMNS = ["inventory_level", "orders", "lead_time_days"]
REQUIRED_COLUMNS = [
    "product_id",
    "product_name",
    "date",
    "inventory_level",
    "orders",
    "lead_time_days",
]

# Tier multipliers applied to the low threshold.
MEDIUM_TIER_MULTIPLIER = 1.5
HIGH_TIER_MULTIPLIER = 2

# Export column headers, in output order.
EXPORT_COLUMNS = {
    "product_id": "product_id",
    "product_name": "product_name",
    "low": "low_threshold",
    "medium": "medium_threshold",
    "high": "high_threshold",
    "lead_time_used": "lead_time_used",
    "avg_daily_sales": "avg_daily_sales",
}
