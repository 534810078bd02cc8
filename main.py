import logging
import sys
import pandas as pd
from pydantic import ValidationError

from reorder_thresholds import settings
from reorder_thresholds.exceptions import IngestionError
from reorder_thresholds.logger import setup_logger
from reorder_thresholds.pipelines.thresholds import ThresholdPipeline
from reorder_thresholds.schemas import ThresholdParams

logger = logging.getLogger(__name__)


def build_params_from_settings() -> ThresholdParams:
    """Threshold parameters as configured in the environment / .env file."""
    return ThresholdParams(
        safety_stock_percentage=settings.SAFETY_STOCK_PERCENTAGE,
        average_daily_sales=settings.AVERAGE_DAILY_SALES,
        use_product_lead_time=settings.USE_PRODUCT_LEAD_TIME,
        custom_lead_time=settings.CUSTOM_LEAD_TIME,
    )


def run_process() -> int:
    """Main orchestration function: load data, calculate thresholds, export."""
    setup_logger()
    logger.info("--- Starting Reorder Threshold Calculation ---")

    try:
        params = build_params_from_settings()
    except ValidationError as e:
        logger.error("❌ Invalid threshold parameters!")
        logger.error(e)
        return 1

    pipeline = ThresholdPipeline(
        params=params, selected_product_id=settings.SELECTED_PRODUCT_ID
    )
    try:
        pipeline.run()
    except FileNotFoundError:
        logger.error(f"❌ Inventory file not found at {pipeline.input_path}.")
        return 1
    except pd.errors.ParserError as e:
        logger.error(f"❌ Could not parse {pipeline.input_path.name}: {e}")
        return 1
    except IngestionError as e:
        logger.error("❌ Data validation failed! The data does not match the required schema.")
        logger.error(e.message)
        return 1

    logger.info("\n--- Process Finished Successfully ---")
    return 0


if __name__ == "__main__":
    sys.exit(run_process())
