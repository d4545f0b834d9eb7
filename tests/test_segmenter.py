"""Test chapter segmentation."""
from collections import defaultdict

import pytest
from ingestion.models import RawLine
from segmentation.book_ranges import build_table
from segmentation.chapters import BookLine, group_runs
from segmentation.errors import MalformedInputError
from segmentation.headings import resolve_headings
from segmentation import segmenter as segmenter_module
from segmentation.segmenter import LINE_COLUMNS, Segmenter, to_frame, validate_lines


@pytest.fixture
def got_segmenter():
    return Segmenter(build_table([("A Game of Thrones", 17, 911)]))


def _ordinal(chapter):
    return int(chapter.rsplit("_", 1)[1])


def test_repeated_heading_forms_two_chapters(got_segmenter):
    """Test that a repeated heading starts a second chapter of the same name."""
    lines = [
        (20, "GAME OF THRONES"),
        (21, "Winter is coming, the old man said."),
        (22, "GAME OF THRONES"),
        (23, "He shivered."),
    ]

    labeled = got_segmenter.segment(lines)

    assert len(labeled) == 2
    assert all(l.character == "GAME OF THRONES" for l in labeled)
    assert all(l.book == "A Game of Thrones" for l in labeled)
    assert [l.chapter_in_book for l in labeled] == ["GAME OF THRONES_1", "GAME OF THRONES_2"]
    assert [l.chapter_in_series for l in labeled] == ["GAME OF THRONES_1", "GAME OF THRONES_2"]


def test_punctuated_heading_keeps_character(got_segmenter):
    """Test that an all-caps line with an apostrophe does not open a chapter."""
    lines = [
        (20, "JON"),
        (21, "He walked."),
        (22, "JON SNOW'S ROOM"),
        (23, "It was cold."),
    ]

    labeled = got_segmenter.segment(lines)

    assert [l.text for l in labeled] == ["He walked.", "JON SNOW'S ROOM", "It was cold."]
    assert all(l.character == "JON" for l in labeled)
    assert {l.chapter_in_book for l in labeled} == {"JON_1"}


def test_shouted_dialogue_is_body_text(got_segmenter):
    lines = [
        (20, "ARYA"),
        (20, '"STICK THEM WITH THE POINTY END!"'),
        (21, "She laughed."),
        (22, "SANSA"),
        (22, "Sansa sighed."),
    ]

    labeled = got_segmenter.segment(lines)

    assert [l.character for l in labeled] == ["ARYA", "ARYA", "SANSA"]
    assert [l.chapter_in_series for l in labeled] == ["ARYA_1", "ARYA_1", "SANSA_1"]


def test_book_ordinals_reset_series_ordinals_do_not(segmenter, two_book_lines):
    """Test per-book and per-series chapter numbering."""
    labeled = segmenter.segment(two_book_lines)

    summary = [(l.book, l.chapter_in_book, l.chapter_in_series) for l in labeled]
    assert summary == [
        ("Book One", "ARYA_1", "ARYA_1"),
        ("Book One", "BRAN_1", "BRAN_1"),
        ("Book One", "ARYA_2", "ARYA_2"),
        ("Book Two", "ARYA_1", "ARYA_3"),
        ("Book Two", "BRAN_1", "BRAN_2"),
    ]


def test_excluded_gap_lines_are_dropped(segmenter, two_book_lines):
    labeled = segmenter.segment(two_book_lines)

    assert all(not 20 <= l.page_number <= 29 for l in labeled)
    assert "House Stark of Winterfell." not in [l.text for l in labeled]


def test_excluded_and_uncovered_pages_logged_separately(segmenter, two_book_lines, monkeypatch):
    """Test that pages in no range at all are reported apart from excluded pages."""
    info, warnings = [], []
    monkeypatch.setattr(segmenter_module.logger, "info", info.append)
    monkeypatch.setattr(segmenter_module.logger, "warning", warnings.append)

    segmenter.segment(two_book_lines + [(45, "Back matter.")])

    assert "1 in excluded ranges" in info[-1]
    assert warnings == ["1 lines fall on pages outside every book and excluded range"]


def test_order_is_preserved(segmenter, two_book_lines):
    labeled = segmenter.segment(two_book_lines)

    surviving = [text for page, text in two_book_lines if text in {l.text for l in labeled}]
    assert [l.text for l in labeled] == surviving


def test_ordinals_are_consecutive(segmenter, two_book_lines):
    """Test that ordinals grow by one per run in book and series scope."""
    labeled = segmenter.segment(two_book_lines)

    book_seen = defaultdict(list)
    series_seen = defaultdict(list)
    for l in labeled:
        n = _ordinal(l.chapter_in_book)
        if not book_seen[(l.book, l.character)] or book_seen[(l.book, l.character)][-1] != n:
            book_seen[(l.book, l.character)].append(n)
        n = _ordinal(l.chapter_in_series)
        if not series_seen[l.character] or series_seen[l.character][-1] != n:
            series_seen[l.character].append(n)

    for ordinals in list(book_seen.values()) + list(series_seen.values()):
        assert ordinals == list(range(1, len(ordinals) + 1))


def test_heading_carries_across_book_boundary(segmenter):
    """Test that a book change without a heading still starts a new chapter."""
    lines = [(18, "SANSA"), (19, "Sansa sewed."), (30, "Sansa sewed again.")]

    labeled = segmenter.segment(lines)

    assert [l.character for l in labeled] == ["SANSA", "SANSA"]
    assert [l.chapter_in_book for l in labeled] == ["SANSA_1", "SANSA_1"]
    assert [l.chapter_in_series for l in labeled] == ["SANSA_1", "SANSA_2"]


def test_lines_before_first_heading_are_unattributed(segmenter):
    labeled = segmenter.segment([(10, "The prologue begins."), (11, "WILL"), (12, "Will waited.")])

    assert labeled[0].character is None
    assert labeled[0].chapter_in_book is None
    assert labeled[0].chapter_in_series is None
    assert labeled[0].book == "Book One"
    assert labeled[1].chapter_in_series == "WILL_1"


def test_whitespace_is_normalized(segmenter):
    """Test that stray whitespace neither blocks headings nor creates them."""
    lines = [
        RawLine(page_number=10, text="  JON  "),
        RawLine(page_number=10, text="   "),
        RawLine(page_number=11, text="He   walked \t north. "),
    ]

    labeled = segmenter.segment(lines)

    assert len(labeled) == 1
    assert labeled[0].text == "He walked north."
    assert labeled[0].character == "JON"


def test_empty_input(segmenter):
    assert segmenter.segment([]) == []


def test_no_surviving_lines(segmenter):
    assert segmenter.segment([(1, "CONTENTS"), (2, "Front matter.")]) == []


def test_out_of_order_pages_rejected(segmenter):
    with pytest.raises(MalformedInputError):
        segmenter.segment([(12, "JON"), (11, "He walked.")])


@pytest.mark.parametrize("page", [0, -3])
def test_non_positive_page_rejected(segmenter, page):
    with pytest.raises(MalformedInputError):
        segmenter.segment([(page, "JON")])


@pytest.mark.parametrize("item", [("12", "JON"), (True, "JON"), (12.5, "JON"), ("JON",)])
def test_malformed_pairs_rejected(segmenter, item):
    with pytest.raises(MalformedInputError):
        segmenter.segment([item])


def test_validate_accepts_equal_pages():
    validate_lines([RawLine(page_number=5, text="a"), RawLine(page_number=5, text="b")])


def test_segment_is_deterministic(segmenter, two_book_lines):
    first = segmenter.segment(two_book_lines)
    second = segmenter.segment(two_book_lines)

    assert first == second
    assert to_frame(first).to_csv(index=False) == to_frame(second).to_csv(index=False)


def test_group_runs_splits_on_heading_and_book():
    lines = [RawLine(page_number=p, text=t) for p, t in [(1, "JON"), (1, "a"), (2, "b"), (3, "JON"), (3, "c")]]
    body = [
        BookLine(resolved=r, book="Two" if r.line.page_number == 2 else "One")
        for r in resolve_headings(lines) if not r.is_heading
    ]

    runs = group_runs(body)

    assert [(run.book, len(run.lines)) for run in runs] == [("One", 1), ("Two", 1), ("One", 1)]


def test_to_frame_columns(segmenter, two_book_lines):
    df = to_frame(segmenter.segment(two_book_lines))

    assert list(df.columns) == LINE_COLUMNS
    assert len(df) == 5
    assert df.iloc[3]["chapter_in_series"] == "ARYA_3"


def test_to_frame_empty():
    df = to_frame([])

    assert list(df.columns) == LINE_COLUMNS
    assert df.empty


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
