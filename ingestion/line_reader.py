"""Read already-extracted page lines from a CSV file."""
from pathlib import Path
from typing import List

import pandas as pd

from utils.logger import setup_logger
from ingestion.models import RawLine

logger = setup_logger(__name__)

REQUIRED_COLUMNS = ("page", "text")


class LineFileError(Exception):
    """Raised when a lines file cannot be read."""
    pass


def read_lines_csv(path: str) -> List[RawLine]:
    """Load RawLines from a CSV with ``page`` and ``text`` columns.

    Rows keep their file order. Missing text is read as an empty line and is
    dropped later by the segmenter.

    Raises:
        LineFileError: If the file is missing, unparseable or lacks a required column
    """
    path = Path(path)
    if not path.exists():
        raise LineFileError(f"Lines file not found: {path}")

    try:
        df = pd.read_csv(path, dtype={"text": str}, keep_default_na=False)
    except (pd.errors.ParserError, UnicodeDecodeError, ValueError) as e:
        raise LineFileError(f"Failed to read {path.name}: {e}") from e

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise LineFileError(f"{path.name} is missing columns: {', '.join(missing)}")

    if df.empty:
        logger.warning(f"{path.name} has no lines")
        return []

    if not pd.api.types.is_integer_dtype(df["page"]):
        raise LineFileError(f"{path.name}: 'page' column must hold integers")

    lines = [
        RawLine(page_number=int(page), text=text)
        for page, text in zip(df["page"], df["text"])
    ]
    logger.info(f"Read {len(lines)} lines from {path.name}")
    return lines


def write_lines_csv(lines: List[RawLine], path: str) -> None:
    """Save RawLines so a later run can skip PDF extraction."""
    df = pd.DataFrame(
        [{"page": l.page_number, "text": l.text} for l in lines],
        columns=list(REQUIRED_COLUMNS)
    )
    df.to_csv(path, index=False)
    logger.info(f"Saved {len(lines)} lines to {path}")
