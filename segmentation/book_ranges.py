"""Page-to-book lookup over the static book table."""
from bisect import bisect_right
from typing import Iterable, List, Optional, Sequence

from utils.logger import setup_logger
from ingestion.models import BookRange, PageRange
from segmentation.errors import BookRangeError
import config

logger = setup_logger(__name__)


class BookRangeTable:
    """Resolves page numbers to book names.

    Pages outside every book range (front matter, appendices, sample
    chapters, back matter) resolve to None.
    """

    def __init__(
        self,
        book_ranges: Iterable[BookRange],
        excluded_ranges: Iterable[PageRange] = ()
    ):
        self.book_ranges: List[BookRange] = sorted(book_ranges, key=lambda r: r.start_page)
        self.excluded_ranges: List[PageRange] = sorted(excluded_ranges, key=lambda r: r.start_page)
        self._starts = [r.start_page for r in self.book_ranges]
        self.validate()

    def validate(self) -> None:
        """Check the tables for empty, overlapping or conflicting ranges.

        Raises:
            BookRangeError: If any check fails
        """
        for r in list(self.book_ranges) + list(self.excluded_ranges):
            if r.start_page < 1 or r.start_page > r.end_page:
                raise BookRangeError(f"Invalid page range {r.start_page}-{r.end_page}")

        for prev, cur in zip(self.book_ranges, self.book_ranges[1:]):
            if prev.overlaps(cur):
                raise BookRangeError(
                    f"'{prev.book_name}' and '{cur.book_name}' share pages"
                )

        for excluded in self.excluded_ranges:
            for book in self.book_ranges:
                if excluded.overlaps(book):
                    raise BookRangeError(
                        f"Excluded range '{excluded.label}' overlaps '{book.book_name}'"
                    )

    def book_for_page(self, page: int) -> Optional[str]:
        """Return the book holding ``page``, or None if the page is excluded."""
        idx = bisect_right(self._starts, page) - 1
        if idx < 0:
            return None
        candidate = self.book_ranges[idx]
        return candidate.book_name if candidate.contains(page) else None

    def is_excluded(self, page: int) -> bool:
        """True if ``page`` lies in a named exclusion range."""
        return any(r.contains(page) for r in self.excluded_ranges)


def build_table(
    book_ranges: Sequence[tuple],
    excluded_ranges: Sequence[tuple] = ()
) -> BookRangeTable:
    """Build a table from ``(name, start_page, end_page)`` tuples."""
    return BookRangeTable(
        [BookRange(book_name=n, start_page=s, end_page=e) for n, s, e in book_ranges],
        [PageRange(label=n, start_page=s, end_page=e) for n, s, e in excluded_ranges]
    )


def default_table() -> BookRangeTable:
    """Book table for the combined five-book edition."""
    table = build_table(config.BOOK_RANGES, config.EXCLUDED_PAGE_RANGES)
    logger.debug(
        f"Loaded {len(table.book_ranges)} book ranges, "
        f"{len(table.excluded_ranges)} exclusion ranges"
    )
    return table
