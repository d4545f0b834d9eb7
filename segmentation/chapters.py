"""Chapter run grouping and ordinal assignment."""
from itertools import groupby
from typing import Iterable, List, NamedTuple, Optional, Tuple

from ingestion.models import LabeledLine, SegmenterState, chapter_id
from segmentation.headings import ResolvedLine


class BookLine(NamedTuple):
    """A surviving body line with its book resolved."""
    resolved: ResolvedLine
    book: str


class ChapterRun(NamedTuple):
    """A maximal block of lines under one heading within one book."""
    book: str
    character: Optional[str]
    lines: List[BookLine]


def _run_key(item: BookLine) -> Tuple[str, int]:
    return item.book, item.resolved.heading_index


def group_runs(lines: Iterable[BookLine]) -> List[ChapterRun]:
    """Partition body lines into chapter runs.

    A run ends where a new heading is accepted (even one repeating the same
    name) or where the book changes.
    """
    runs = []
    for (book, _), group in groupby(lines, key=_run_key):
        group = list(group)
        runs.append(ChapterRun(book=book, character=group[0].resolved.character, lines=group))
    return runs


def assign_ordinals(
    runs: Iterable[ChapterRun],
    state: Optional[SegmenterState] = None
) -> List[LabeledLine]:
    """Label every line of every run with its chapter identifiers.

    The series counter for a character never resets. The book counter is
    keyed by (book, character), so it starts again at 1 in each book. Runs
    without a character carry no chapter identifiers.
    """
    if state is None:
        state = SegmenterState()

    labeled = []
    for run in runs:
        in_book = in_series = None
        if run.character is not None:
            series_n = state.per_character_series_counts.get(run.character, 0) + 1
            state.per_character_series_counts[run.character] = series_n
            book_key = (run.book, run.character)
            book_n = state.per_character_book_counts.get(book_key, 0) + 1
            state.per_character_book_counts[book_key] = book_n
            in_book = chapter_id(run.character, book_n)
            in_series = chapter_id(run.character, series_n)

        for item in run.lines:
            labeled.append(LabeledLine(
                page_number=item.resolved.line.page_number,
                text=item.resolved.line.text,
                book=run.book,
                character=run.character,
                chapter_in_book=in_book,
                chapter_in_series=in_series
            ))
    return labeled
