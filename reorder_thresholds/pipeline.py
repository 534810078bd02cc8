import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)


class DataPipeline(ABC):
    """
    Abstract base class for data pipelines.
    Follows an Extract -> Transform -> Load (ETL) pattern.
    """

    def __init__(self, report_type: str):
        self.report_type = report_type

    def run(self) -> list[Any]:
        """
        Orchestrates the pipeline execution and returns the transformed data.
        Errors from any step propagate to the caller.
        """
        logger.info(f"🚀 STEP: {self.report_type.upper()} REPORT")
        logger.info("-" * 30)

        # --- 1. EXTRACT ---
        raw_data = self.extract()
        if not raw_data:
            logger.warning(f"⚠️ No data extracted for {self.report_type}.")
            self.load([])
            return []

        # --- 2. TRANSFORM ---
        transformed = self.transform(raw_data)

        # --- 3. LOAD ---
        self.load(transformed)

        logger.info(f"✅ {self.report_type.capitalize()} Pipeline Finished.\n")
        logger.info("=" * 60)
        return transformed

    @abstractmethod
    def extract(self) -> list[Any]:
        """Reads the input source and returns validated records."""
        pass

    @abstractmethod
    def transform(self, records: list[Any]) -> list[Any]:
        """Derives the pipeline's results from the extracted records."""
        pass

    @abstractmethod
    def load(self, results: list[Any]):
        """Reports and saves the results."""
        pass
