import csv
import io
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from . import settings
from . import utils
from .schemas import ThresholdLevels

logger = logging.getLogger(__name__)


def _iso_timestamp(moment: datetime) -> str:
    # Matches JavaScript's Date.toISOString(): UTC, milliseconds, "Z" suffix.
    return (
        moment.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def _compact_number(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def build_json_payload(
    thresholds: list[ThresholdLevels], generated_at: Optional[datetime] = None
) -> dict:
    """The JSON export document: the thresholds plus when they were generated."""
    generated_at = generated_at or datetime.now(timezone.utc)
    return {
        "thresholds": [item.model_dump(mode="json") for item in thresholds],
        "generatedAt": _iso_timestamp(generated_at),
    }


def thresholds_to_csv(thresholds: list[ThresholdLevels]) -> str:
    """
    Renders thresholds as CSV text. Text fields are always quoted, numbers
    never are, and whole-number floats drop their trailing ".0".
    """
    buffer = io.StringIO()
    buffer.write(",".join(settings.EXPORT_COLUMNS.values()) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for item in thresholds:
        row = item.model_dump()
        writer.writerow(_compact_number(row[field]) for field in settings.EXPORT_COLUMNS)
    return buffer.getvalue()


def save_outputs(
    thresholds: list[ThresholdLevels], output_dir: Optional[Path] = None
) -> dict[str, Path]:
    """Saves thresholds to CSV and conditionally to JSON, with dated filenames."""
    if not thresholds:
        logger.warning("No thresholds to save to disk.")
        return {}

    output_dir = output_dir or settings.OUTPUT_DIR
    output_dir.mkdir(parents=True, exist_ok=True)
    date_suffix = utils.get_date_suffix_for_filename()
    saved = {}

    csv_path = output_dir / f"{settings.EXPORT_FILENAME_BASE}-{date_suffix}.csv"
    csv_path.write_text(thresholds_to_csv(thresholds), encoding="utf-8")
    logger.info(f"✅ Threshold report saved to: {csv_path}")
    saved["csv"] = csv_path

    if settings.SAVE_JSON_OUTPUT:
        json_path = output_dir / f"{settings.EXPORT_FILENAME_BASE}-{date_suffix}.json"
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(build_json_payload(thresholds), f, indent=2)
        logger.info(f"✅ JSON output saved to: {json_path}")
        saved["json"] = json_path
    else:
        logger.info("INFO: Skipping JSON file save as per configuration.")

    return saved
