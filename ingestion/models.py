"""Pydantic models for the line records that flow through the pipeline."""
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Optional, Tuple, Any


class RawLine(BaseModel):
    """One extracted line of text tagged with its source page."""
    model_config = ConfigDict(frozen=True)

    page_number: int
    text: str


class PageInterval(BaseModel):
    """An inclusive page interval."""
    model_config = ConfigDict(frozen=True)

    start_page: int
    end_page: int

    def contains(self, page: int) -> bool:
        return self.start_page <= page <= self.end_page

    def overlaps(self, other: "PageInterval") -> bool:
        return self.start_page <= other.end_page and other.start_page <= self.end_page


class BookRange(PageInterval):
    """Pages holding the body text of one book."""
    book_name: str


class PageRange(PageInterval):
    """Pages of non-body matter (front matter, appendices, sample chapters)."""
    label: str


class LabeledLine(BaseModel):
    """A body line attributed to a book, a point-of-view character and chapters."""
    model_config = ConfigDict(frozen=True)

    page_number: int
    text: str
    book: Optional[str] = None
    character: Optional[str] = None
    chapter_in_book: Optional[str] = None
    chapter_in_series: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        """Convert to a flat-table row."""
        return {
            'page': self.page_number,
            'text': self.text,
            'book': self.book,
            'character': self.character,
            'chapter_in_book': self.chapter_in_book,
            'chapter_in_series': self.chapter_in_series
        }


class SegmenterState(BaseModel):
    """State carried across the fold over the corpus."""
    current_character: Optional[str] = None
    heading_index: int = 0
    per_character_book_counts: Dict[Tuple[str, str], int] = Field(default_factory=dict)
    per_character_series_counts: Dict[str, int] = Field(default_factory=dict)


def chapter_id(character: str, ordinal: int) -> str:
    """Build a chapter identifier such as ``JON_3``."""
    return f"{character}_{ordinal}"
