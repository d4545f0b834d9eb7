"""Chapter heading detection.

Chapters in the corpus open with the point-of-view character's name set in
capitals on a line of its own (``JON``, ``DAENERYS``). A heading is detected
with two checks:

1. The line contains no lowercase letter.
2. The line contains no punctuation. This rejects shouted dialogue such as
   ``"WINTER IS COMING!"``.

The last accepted heading is carried forward to every following line.
"""
import string
import unicodedata
from typing import Iterable, Iterator, NamedTuple, Optional

from ingestion.models import RawLine, SegmenterState

_ASCII_PUNCTUATION = frozenset(string.punctuation)


class ResolvedLine(NamedTuple):
    """A line with the heading state in force at that point."""
    line: RawLine
    character: Optional[str]
    heading_index: int
    is_heading: bool


def is_heading_candidate(text: str) -> bool:
    """True if the line has no lowercase letter."""
    return not any(ch.islower() for ch in text)


def has_punctuation(text: str) -> bool:
    """True if any character is ASCII or Unicode punctuation."""
    for ch in text:
        if ch in _ASCII_PUNCTUATION or unicodedata.category(ch).startswith('P'):
            return True
    return False


def is_accepted_heading(text: str) -> bool:
    """True if the line is a heading candidate without punctuation."""
    return is_heading_candidate(text) and not has_punctuation(text)


def resolve_headings(
    lines: Iterable[RawLine],
    state: Optional[SegmenterState] = None
) -> Iterator[ResolvedLine]:
    """Forward-fill the point-of-view character over the line sequence.

    Args:
        lines: Normalized lines in corpus order
        state: Fold state; updated in place with the current character and
            the number of headings accepted so far

    Yields:
        One ResolvedLine per input line, headings included
    """
    if state is None:
        state = SegmenterState()

    for line in lines:
        heading = is_accepted_heading(line.text)
        if heading:
            state.current_character = line.text
            state.heading_index += 1
        yield ResolvedLine(
            line=line,
            character=state.current_character,
            heading_index=state.heading_index,
            is_heading=heading
        )
