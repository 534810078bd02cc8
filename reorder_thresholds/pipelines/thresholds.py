import logging
from pathlib import Path
from typing import Optional
import pandas as pd

from reorder_thresholds import data_handler, settings
from reorder_thresholds.ingestion import (
    parse_inventory_file,
    parse_inventory_table,
    summarize_products,
)
from reorder_thresholds.insights import assess_inventory
from reorder_thresholds.pipeline import DataPipeline
from reorder_thresholds.schemas import (
    InventoryRecord,
    ProductSummary,
    ThresholdLevels,
    ThresholdParams,
)
from reorder_thresholds.thresholds import calculate_thresholds

logger = logging.getLogger(__name__)


class ThresholdPipeline(DataPipeline):
    """
    Holds one session's data: the ingested records, their product summaries
    and the latest thresholds. Loading new data always clears the previous
    thresholds; a failed load leaves no records behind.
    """

    def __init__(
        self,
        input_path: Optional[Path] = None,
        params: Optional[ThresholdParams] = None,
        selected_product_id: Optional[str] = None,
        save: bool = True,
        output_dir: Optional[Path] = None,
    ):
        super().__init__("thresholds")
        self.input_path = input_path or settings.INPUT_DIR / settings.INVENTORY_FILENAME
        self.params = params or ThresholdParams()
        self.selected_product_id = selected_product_id
        self.save = save
        self.output_dir = output_dir

        self.records: list[InventoryRecord] = []
        self.summaries: list[ProductSummary] = []
        self.thresholds: Optional[list[ThresholdLevels]] = None
        self.saved_files: dict[str, Path] = {}

    def _reset(self):
        self.records = []
        self.summaries = []
        self.thresholds = None

    def _set_records(self, records: list[InventoryRecord]) -> list[InventoryRecord]:
        self.records = records
        self.summaries = summarize_products(records)
        logger.info(
            f"Loaded {len(self.records)} records for {len(self.summaries)} products."
        )
        return self.records

    def ingest_text(self, raw_text: str) -> list[InventoryRecord]:
        """Loads records from in-memory CSV text instead of the input file."""
        self._reset()
        return self._set_records(parse_inventory_table(raw_text))

    def extract(self) -> list[InventoryRecord]:
        logger.info(f"--- Loading inventory data: {self.input_path.name} ---")
        self._reset()
        return self._set_records(parse_inventory_file(self.input_path))

    def calculate(
        self,
        params: Optional[ThresholdParams] = None,
        selected_product_id: Optional[str] = None,
    ) -> list[ThresholdLevels]:
        """Runs the threshold engine over the current records and keeps the result."""
        self.thresholds = calculate_thresholds(
            self.records, params or self.params, selected_product_id
        )
        return self.thresholds

    def transform(self, records: list[InventoryRecord]) -> list[ThresholdLevels]:
        logger.info("\n--- Calculating Reorder Thresholds ---")
        self.records = records
        return self.calculate(self.params, self.selected_product_id)

    def load(self, results: list[ThresholdLevels]):
        if self.summaries:
            logger.info("\n--- Product Summary ---")
            summary_df = pd.DataFrame([item.model_dump() for item in self.summaries])
            logger.info(summary_df.to_string(index=False))

        if not results:
            logger.warning("No thresholds calculated.")
            return

        logger.info("\n--- Reorder Thresholds ---")
        thresholds_df = pd.DataFrame([item.model_dump() for item in results])
        logger.info(thresholds_df.to_string(index=False))

        logger.info("\n--- Current Stock Status ---")
        for threshold in results:
            insight = assess_inventory(self.records, threshold.product_id, threshold)
            if insight is not None:
                logger.info(
                    f"{insight.product_id} ({insight.product_name}): "
                    f"{insight.status}, current level {insight.current_level:g}"
                )

        if self.save:
            self.saved_files = data_handler.save_outputs(results, self.output_dir)
        else:
            logger.info("🧪 Save disabled: skipping export files.")
