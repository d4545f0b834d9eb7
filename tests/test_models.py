"""Test Pydantic models."""
import pytest
from pydantic import ValidationError
from ingestion.models import BookRange, LabeledLine, PageRange, RawLine, SegmenterState, chapter_id


def test_raw_line_is_frozen():
    """Test that raw lines cannot be mutated."""
    line = RawLine(page_number=3, text="JON")

    with pytest.raises(ValidationError):
        line.text = "ARYA"


def test_labeled_line_row():
    """Test flattening a labeled line into a table row."""
    line = LabeledLine(
        page_number=21,
        text="He shivered.",
        book="A Game of Thrones",
        character="JON",
        chapter_in_book="JON_1",
        chapter_in_series="JON_4"
    )

    row = line.to_row()

    assert list(row) == ["page", "text", "book", "character", "chapter_in_book", "chapter_in_series"]
    assert row["page"] == 21
    assert row["chapter_in_series"] == "JON_4"


def test_labeled_line_defaults_to_unattributed():
    """Test that attribution fields are optional."""
    line = LabeledLine(page_number=1, text="Prologue text")

    assert line.book is None
    assert line.character is None
    assert line.chapter_in_book is None


def test_page_ranges():
    """Test inclusive containment and overlap."""
    book = BookRange(book_name="A Game of Thrones", start_page=17, end_page=911)
    appendix = PageRange(label="Appendix", start_page=912, end_page=928)

    assert book.contains(17)
    assert book.contains(911)
    assert not book.contains(912)
    assert not book.overlaps(appendix)
    assert book.overlaps(PageRange(label="Overlap", start_page=900, end_page=920))


def test_segmenter_state_counters_are_independent():
    """Test that each state gets its own counter dicts."""
    first = SegmenterState()
    second = SegmenterState()
    first.per_character_series_counts["JON"] = 2

    assert second.per_character_series_counts == {}
    assert first.current_character is None
    assert first.heading_index == 0


def test_chapter_id():
    assert chapter_id("GAME OF THRONES", 2) == "GAME OF THRONES_2"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
