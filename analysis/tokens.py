"""Word tokenization for the labeled line table."""
import re
from typing import List

import pandas as pd

WORD_PATTERN = re.compile(r"[a-z]+(?:'[a-z]+)*")

# Curly apostrophes from the PDF text layer
_APOSTROPHES = str.maketrans({'’': "'", '‘': "'", 'ʼ': "'"})

TOKEN_COLUMNS = ["page", "book", "character", "chapter_in_book", "chapter_in_series", "word"]


def tokenize(text: str) -> List[str]:
    """Split a line into lowercase words, keeping inner apostrophes (``don't``)."""
    return WORD_PATTERN.findall(text.translate(_APOSTROPHES).lower())


def unnest_tokens(lines_df: pd.DataFrame) -> pd.DataFrame:
    """Explode the line table into one row per word.

    Args:
        lines_df: Table with ``text`` and the attribution columns

    Returns:
        Token table with the attribution columns and ``word``
    """
    if lines_df.empty:
        return pd.DataFrame(columns=TOKEN_COLUMNS)

    tokens = lines_df.assign(word=lines_df["text"].map(tokenize))
    tokens = tokens.explode("word").dropna(subset=["word"])
    return tokens[TOKEN_COLUMNS].reset_index(drop=True)


def character_attributed(df: pd.DataFrame) -> pd.DataFrame:
    """Drop rows from before the first chapter heading."""
    return df[df["character"].notna()]
