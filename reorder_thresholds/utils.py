import io
import logging
import math
from datetime import datetime, timezone
from pathlib import Path
import pandas as pd

logger = logging.getLogger(__name__)


def get_date_suffix_for_filename() -> str:
    """Returns the current UTC date as a YYYY-MM-DD string for filenames."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


def round_half_up(value: float, ndigits: int = 0) -> float | int:
    """
    Rounds the way the browser build did (`Math.round(x * 10**d) / 10**d`):
    halves go towards +infinity, so 2.5 -> 3 and 10.5 -> 11.
    Returns an int when `ndigits` is 0.
    """
    factor = 10**ndigits
    rounded = math.floor(value * factor + 0.5)
    if ndigits == 0:
        return int(rounded)
    return rounded / factor


def _read_table(source, encoding: str | None = None) -> pd.DataFrame:
    # Every cell comes back as text; empty cells stay "" so coercion is explicit.
    return pd.read_csv(
        source,
        encoding=encoding,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
    )


def read_csv_text(raw_text: str) -> pd.DataFrame:
    """Reads CSV text (header row first) into an all-text DataFrame."""
    return _read_table(io.StringIO(raw_text.lstrip("\ufeff")))


def load_csv(file_path: Path) -> pd.DataFrame:
    """
    Reads a CSV file into an all-text DataFrame with an encoding fallback:
    1. UTF-8 with BOM support ('utf-8-sig').
    2. Latin-1, which accepts any byte sequence.
    Missing files and malformed CSV propagate to the caller.
    """
    try:
        return _read_table(file_path, encoding="utf-8-sig")
    except UnicodeDecodeError:
        logger.info(
            f"UTF-8 decoding failed for {file_path.name}. Retrying with 'latin-1'."
        )
        return _read_table(file_path, encoding="latin-1")
