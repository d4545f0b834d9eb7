"""Shared fixtures for the report tests."""
import pandas as pd
import pytest

from analysis.sentiment import Lexicon
from segmentation.book_ranges import build_table
from segmentation.segmenter import Segmenter


@pytest.fixture
def two_book_table():
    """Two books separated by an appendix gap."""
    return build_table(
        [("Book One", 10, 19), ("Book Two", 30, 39)],
        [("Front matter", 1, 9), ("Appendix", 20, 29)]
    )


@pytest.fixture
def segmenter(two_book_table):
    return Segmenter(two_book_table)


@pytest.fixture
def two_book_lines():
    return [
        (10, "ARYA"),
        (11, "Arya ran through the yard."),
        (12, "BRAN"),
        (13, "Bran climbed the tower."),
        (14, "ARYA"),
        (15, "Arya held Needle."),
        (21, "APPENDIX"),
        (22, "House Stark of Winterfell."),
        (30, "ARYA"),
        (31, "Arya sailed east."),
        (32, "BRAN"),
        (33, "Bran dreamed of a crow."),
    ]


@pytest.fixture
def small_lexicon():
    return Lexicon(
        positive=frozenset({"love", "brave", "warm"}),
        negative=frozenset({"cold", "death", "fear"})
    )


@pytest.fixture
def lines_df():
    rows = [
        (20, "He was brave and warm.", "A Game of Thrones", "JON", "JON_1", "JON_1"),
        (20, "The cold wind brought fear.", "A Game of Thrones", "JON", "JON_1", "JON_1"),
        (21, "She felt love for her brave wolf.", "A Game of Thrones", "ARYA", "ARYA_1", "ARYA_1"),
        (22, "Death came in the cold night.", "A Game of Thrones", "JON", "JON_2", "JON_2"),
        (30, "Cold, cold, cold.", "A Clash of Kings", "JON", "JON_1", "JON_3"),
    ]
    return pd.DataFrame(
        rows,
        columns=["page", "text", "book", "character", "chapter_in_book", "chapter_in_series"]
    )
