"""Word frequency statistics over the token table."""
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from analysis.tokens import character_attributed, tokenize


def _as_list(by: Optional[Sequence[str]]) -> List[str]:
    if by is None:
        return []
    if isinstance(by, str):
        return [by]
    return list(by)


def remove_stopwords(tokens_df: pd.DataFrame, stopwords: Iterable[str]) -> pd.DataFrame:
    """Anti-join the token table against a stopword list."""
    stopwords = {w.lower() for w in stopwords}
    return tokens_df[~tokens_df["word"].isin(stopwords)].reset_index(drop=True)


def word_frequencies(tokens_df: pd.DataFrame, by: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """
    Count words, optionally within groups.

    Args:
        tokens_df: Token table with a ``word`` column
        by: Grouping columns such as ``["book"]`` or ``["character"]``

    Returns:
        DataFrame with the group columns, ``word``, ``count`` and
        ``relative_frequency`` (per 10,000 words of the group), sorted by
        group, then count descending, then word
    """
    by = _as_list(by)
    columns = by + ["word", "count", "relative_frequency"]
    if by and "character" in by:
        tokens_df = character_attributed(tokens_df)
    if tokens_df.empty:
        return pd.DataFrame(columns=columns)

    counts = tokens_df.groupby(by + ["word"], sort=False).size().reset_index(name="count")
    if by:
        totals = counts.groupby(by, sort=False)["count"].transform("sum")
    else:
        totals = counts["count"].sum()
    counts["relative_frequency"] = counts["count"] / totals * 10000

    counts = counts.sort_values(
        by + ["count", "word"],
        ascending=[True] * len(by) + [False, True],
        kind="mergesort"
    )
    return counts[columns].reset_index(drop=True)


def top_words(freq_df: pd.DataFrame, n: int = 10, by: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """Keep the ``n`` most frequent words (per group when ``by`` is given)."""
    by = _as_list(by)
    if by:
        return freq_df.groupby(by, sort=False).head(n).reset_index(drop=True)
    return freq_df.head(n).reset_index(drop=True)


def chapter_lengths(lines_df: pd.DataFrame) -> pd.DataFrame:
    """Words per chapter, in corpus order."""
    columns = ["book", "character", "chapter_in_book", "chapter_in_series", "words"]
    chapters = character_attributed(lines_df)
    if chapters.empty:
        return pd.DataFrame(columns=columns)
    chapters = chapters.assign(words=chapters["text"].map(lambda t: len(tokenize(t))))
    lengths = chapters.groupby(columns[:-1], sort=False)["words"].sum().reset_index()
    return lengths[columns]


def corpus_summary(lines_df: pd.DataFrame, tokens_df: pd.DataFrame) -> pd.DataFrame:
    """Per-book counts of lines, words, unique words, chapters and characters."""
    columns = ["book", "lines", "words", "unique_words", "chapters", "characters"]
    if lines_df.empty:
        return pd.DataFrame(columns=columns)

    books = pd.unique(lines_df["book"])
    rows = []
    for book in books:
        book_lines = lines_df[lines_df["book"] == book]
        book_tokens = tokens_df[tokens_df["book"] == book]
        rows.append({
            "book": book,
            "lines": len(book_lines),
            "words": len(book_tokens),
            "unique_words": book_tokens["word"].nunique(),
            "chapters": book_lines["chapter_in_book"].nunique(),
            "characters": book_lines["character"].nunique()
        })
    return pd.DataFrame(rows, columns=columns)
