"""Segments page-tagged lines into books, characters and chapters."""
import numbers
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from utils.logger import setup_logger
from ingestion.cleaner import normalize_whitespace
from ingestion.models import LabeledLine, RawLine, SegmenterState
from segmentation.book_ranges import BookRangeTable, default_table
from segmentation.chapters import BookLine, assign_ordinals, group_runs
from segmentation.errors import MalformedInputError
from segmentation.headings import resolve_headings

logger = setup_logger(__name__)

LINE_COLUMNS = ["page", "text", "book", "character", "chapter_in_book", "chapter_in_series"]

LineInput = Union[RawLine, Tuple[int, str]]


def _as_raw_line(item: LineInput, position: int) -> RawLine:
    if isinstance(item, RawLine):
        return item
    try:
        page_number, text = item
    except (TypeError, ValueError) as e:
        raise MalformedInputError(
            f"Line {position}: expected (page_number, text), got {item!r}"
        ) from e
    if not isinstance(page_number, numbers.Integral) or isinstance(page_number, bool):
        raise MalformedInputError(f"Line {position}: page number {page_number!r} is not an integer")
    return RawLine(page_number=int(page_number), text=str(text))


def validate_lines(lines: Sequence[RawLine]) -> None:
    """Check that page numbers are positive and never decrease.

    Raises:
        MalformedInputError: On the first offending line
    """
    previous = 0
    for position, line in enumerate(lines):
        page = line.page_number
        if isinstance(page, bool) or page < 1:
            raise MalformedInputError(
                f"Line {position}: page number {page!r} is not a positive integer"
            )
        if page < previous:
            raise MalformedInputError(
                f"Line {position}: page {page} follows page {previous}; "
                "input must be in page order"
            )
        previous = page


class Segmenter:
    """Turns extracted lines into chapter-attributed body lines."""

    def __init__(self, book_table: Optional[BookRangeTable] = None):
        """Initialize segmenter.

        Args:
            book_table: Page-to-book table; defaults to the configured edition
        """
        self.book_table = book_table if book_table is not None else default_table()

    def segment(self, lines: Iterable[LineInput]) -> List[LabeledLine]:
        """Label every body line with book, character and chapter identifiers.

        Accepted headings are consumed and lines on pages outside every book
        are dropped. The whole input is validated before any labelling, so a
        malformed corpus yields no partial result.

        Args:
            lines: RawLines or (page_number, text) pairs in corpus order

        Returns:
            LabeledLines in corpus order

        Raises:
            MalformedInputError: If page numbers are invalid or out of order
        """
        raw = [_as_raw_line(item, i) for i, item in enumerate(lines)]
        validate_lines(raw)

        normalized = []
        for line in raw:
            text = normalize_whitespace(line.text)
            if text:
                if text != line.text:
                    line = RawLine(page_number=line.page_number, text=text)
                normalized.append(line)

        state = SegmenterState()
        body = []
        headings = excluded = uncovered = 0
        for resolved in resolve_headings(normalized, state):
            if resolved.is_heading:
                headings += 1
                continue
            book = self.book_table.book_for_page(resolved.line.page_number)
            if book is None:
                if self.book_table.is_excluded(resolved.line.page_number):
                    excluded += 1
                else:
                    uncovered += 1
                continue
            body.append(BookLine(resolved=resolved, book=book))

        runs = group_runs(body)
        labeled = assign_ordinals(runs, state)

        logger.info(
            f"Segmented {len(raw)} lines: {len(labeled)} body lines kept, "
            f"{headings} headings, {excluded} in excluded ranges"
        )
        if uncovered:
            logger.warning(f"{uncovered} lines fall on pages outside every book and excluded range")
        logger.debug(
            f"{len(runs)} chapter runs across "
            f"{len(state.per_character_series_counts)} characters"
        )
        unattributed = sum(1 for l in labeled if l.character is None)
        if unattributed:
            logger.warning(f"{unattributed} body lines precede the first chapter heading")

        return labeled


def to_frame(labeled_lines: Iterable[LabeledLine]) -> pd.DataFrame:
    """Flatten labeled lines into the ``page, text, book, ...`` table."""
    return pd.DataFrame([l.to_row() for l in labeled_lines], columns=LINE_COLUMNS)
