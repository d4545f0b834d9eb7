"""Lexicon-based sentiment scoring per chapter, character and book."""
import math
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Sequence

import nltk
import pandas as pd
from pydantic import BaseModel, ConfigDict, model_validator

from utils.logger import setup_logger
from analysis.tokens import character_attributed

logger = setup_logger(__name__)

SENTIMENTS = ["positive", "negative"]
CHAPTER_KEYS = ["book", "character", "chapter_in_book", "chapter_in_series"]


class LexiconError(Exception):
    """Raised when a sentiment lexicon is malformed."""
    pass


class StopwordFileError(Exception):
    """Raised when a stopword file cannot be read."""
    pass


class Lexicon(BaseModel):
    """Positive and negative word lists."""
    model_config = ConfigDict(frozen=True)

    positive: FrozenSet[str]
    negative: FrozenSet[str]

    @model_validator(mode="after")
    def _check_disjoint(self) -> "Lexicon":
        both = self.positive & self.negative
        if both:
            raise LexiconError(
                f"Words labelled both positive and negative: {', '.join(sorted(both)[:10])}"
            )
        return self

    def __len__(self) -> int:
        return len(self.positive) + len(self.negative)

    def to_frame(self) -> pd.DataFrame:
        """Two-column ``word, sentiment`` table used for joins."""
        rows = [(w, "positive") for w in sorted(self.positive)]
        rows += [(w, "negative") for w in sorted(self.negative)]
        return pd.DataFrame(rows, columns=["word", "sentiment"])

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "Lexicon":
        """Build from a ``word, sentiment`` table."""
        if not {"word", "sentiment"} <= set(df.columns):
            raise LexiconError("Lexicon needs 'word' and 'sentiment' columns")
        labels = df["sentiment"].astype(str).str.strip().str.lower()
        unknown = sorted(set(labels) - set(SENTIMENTS))
        if unknown:
            raise LexiconError(f"Unknown sentiment labels: {', '.join(unknown)}")
        words = df["word"].astype(str).str.strip().str.lower()
        present = words != ""
        return cls(
            positive=frozenset(words[present & (labels == "positive")]),
            negative=frozenset(words[present & (labels == "negative")])
        )


def _ensure_nltk_resource(resource: str, package: str) -> None:
    # Download the corpus if needed
    try:
        nltk.data.find(resource)
    except LookupError:
        logger.info(f"Downloading NLTK resource '{package}'")
        nltk.download(package, quiet=True)


def load_lexicon(path: Optional[str] = None) -> Lexicon:
    """Load a lexicon from CSV, or the Hu & Liu opinion lexicon shipped with NLTK.

    Args:
        path: CSV with ``word`` and ``sentiment`` columns; NLTK if None

    Returns:
        Lexicon

    Raises:
        LexiconError: If the CSV is missing, unparseable or mislabelled
    """
    if path:
        path = Path(path)
        if not path.exists():
            raise LexiconError(f"Lexicon file not found: {path}")
        try:
            df = pd.read_csv(path, dtype=str, keep_default_na=False)
        except (pd.errors.ParserError, UnicodeDecodeError, ValueError) as e:
            raise LexiconError(f"Failed to read {path.name}: {e}") from e
        lexicon = Lexicon.from_frame(df)
        logger.info(f"Loaded {len(lexicon)} lexicon words from {path.name}")
        return lexicon

    _ensure_nltk_resource("corpora/opinion_lexicon", "opinion_lexicon")
    from nltk.corpus import opinion_lexicon

    positive = set(opinion_lexicon.positive())
    negative = set(opinion_lexicon.negative())
    # The opinion lexicon lists a handful of words under both labels
    ambiguous = positive & negative
    if ambiguous:
        logger.debug(f"Dropping {len(ambiguous)} words with both labels")
    lexicon = Lexicon(positive=frozenset(positive - ambiguous), negative=frozenset(negative - ambiguous))
    logger.info(f"Loaded {len(lexicon)} words from the NLTK opinion lexicon")
    return lexicon


def load_stopwords(extra: Iterable[str] = ()) -> FrozenSet[str]:
    """NLTK English stopwords plus any extra words."""
    _ensure_nltk_resource("corpora/stopwords", "stopwords")
    from nltk.corpus import stopwords

    words = set(stopwords.words("english"))
    words.update(w.lower() for w in extra)
    return frozenset(words)


def read_stopword_file(path: str, extra: Iterable[str] = ()) -> FrozenSet[str]:
    """Stopwords from a UTF-8 file with one word per line, plus any extra words."""
    path = Path(path)
    try:
        words = path.read_text(encoding="utf-8").split()
    except (OSError, UnicodeDecodeError) as e:
        raise StopwordFileError(f"Failed to read {path.name}: {e}") from e
    logger.info(f"Loaded {len(words)} stopwords from {path.name}")
    return frozenset(w.lower() for w in words) | frozenset(w.lower() for w in extra)


def log_ratio(positive: int, negative: int) -> float:
    """log(positive / negative); NaN when either count is zero."""
    if positive <= 0 or negative <= 0:
        return math.nan
    return math.log(positive / negative)


def label_tokens(tokens_df: pd.DataFrame, lexicon: Lexicon) -> pd.DataFrame:
    """Inner-join tokens with the lexicon, adding a ``sentiment`` column."""
    return tokens_df.merge(lexicon.to_frame(), on="word", how="inner", sort=False)


def sentiment_scores(tokens_df: pd.DataFrame, lexicon: Lexicon, by: Sequence[str]) -> pd.DataFrame:
    """
    Count positive and negative words per group and score them.

    Groups keep their order of first appearance in the token table. Groups
    with no lexicon hits are kept with zero counts. Rows with a missing key
    are ignored.

    Returns:
        DataFrame with the group columns, ``positive``, ``negative``,
        ``total`` and ``log_ratio``
    """
    by = list(by)
    columns = by + SENTIMENTS + ["total", "log_ratio"]
    tokens_df = tokens_df.dropna(subset=by)
    if tokens_df.empty:
        return pd.DataFrame(columns=columns)

    keys = tokens_df[by].drop_duplicates().reset_index(drop=True)
    labeled = label_tokens(tokens_df, lexicon)

    if labeled.empty:
        scores = keys.assign(positive=0, negative=0)
    else:
        counts = (
            labeled.groupby(by + ["sentiment"]).size()
            .unstack("sentiment", fill_value=0)
            .reindex(columns=SENTIMENTS, fill_value=0)
            .reset_index()
        )
        counts.columns.name = None
        scores = keys.merge(counts, on=by, how="left")
        scores[SENTIMENTS] = scores[SENTIMENTS].fillna(0).astype(int)

    scores["total"] = scores["positive"] + scores["negative"]
    scores["log_ratio"] = [log_ratio(p, n) for p, n in zip(scores["positive"], scores["negative"])]
    return scores[columns]


def chapter_sentiment(tokens_df: pd.DataFrame, lexicon: Lexicon) -> pd.DataFrame:
    """Sentiment per chapter, in corpus order."""
    return sentiment_scores(character_attributed(tokens_df), lexicon, CHAPTER_KEYS)


def character_sentiment(tokens_df: pd.DataFrame, lexicon: Lexicon) -> pd.DataFrame:
    """
    Sentiment per point-of-view character.

    Besides the pooled counts and log-ratio, reports how many chapters the
    character narrates and the mean and spread of the chapter log-ratios.
    """
    columns = ["character"] + SENTIMENTS + ["total", "log_ratio", "chapters",
                                            "mean_chapter_log_ratio", "std_chapter_log_ratio"]
    attributed = character_attributed(tokens_df)
    scores = sentiment_scores(attributed, lexicon, ["character"])
    if scores.empty:
        return pd.DataFrame(columns=columns)

    chapters = chapter_sentiment(attributed, lexicon)
    per_chapter = chapters.groupby("character", sort=False).agg(
        chapters=("chapter_in_series", "nunique"),
        mean_chapter_log_ratio=("log_ratio", "mean"),
        std_chapter_log_ratio=("log_ratio", "std")
    ).reset_index()
    return scores.merge(per_chapter, on="character", how="left")[columns]


def book_sentiment(tokens_df: pd.DataFrame, lexicon: Lexicon) -> pd.DataFrame:
    """Sentiment per book."""
    return sentiment_scores(tokens_df, lexicon, ["book"])


def word_contributions(tokens_df: pd.DataFrame, lexicon: Lexicon, n: int = 10) -> pd.DataFrame:
    """Most frequent positive and negative words."""
    columns = ["sentiment", "word", "count"]
    labeled = label_tokens(tokens_df, lexicon)
    if labeled.empty:
        return pd.DataFrame(columns=columns)
    counts = labeled.groupby(["sentiment", "word"]).size().reset_index(name="count")
    counts = counts.sort_values(["sentiment", "count", "word"], ascending=[False, False, True])
    return counts.groupby("sentiment", sort=False).head(n).reset_index(drop=True)[columns]


def rank_characters(character_df: pd.DataFrame, min_chapters: int = 1) -> List[str]:
    """Characters ordered from most to least positive."""
    eligible = character_df[character_df["chapters"] >= min_chapters]
    ranked = eligible.sort_values("log_ratio", ascending=False, na_position="last", kind="mergesort")
    return ranked["character"].tolist()
