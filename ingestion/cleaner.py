"""Text cleaning utilities."""
import re
from typing import List

_WHITESPACE = re.compile(r'\s+')


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace and trim both ends.

    Args:
        text: One extracted line

    Returns:
        Normalized line (may be empty)
    """
    return _WHITESPACE.sub(' ', text).strip()


def split_page_lines(page_text: str) -> List[str]:
    """Split the text of one page into normalized, non-empty lines.

    Args:
        page_text: Raw text of a page as returned by the PDF library

    Returns:
        Lines in page order
    """
    lines = []
    for line in page_text.splitlines():
        line = normalize_whitespace(line)
        if line:
            lines.append(line)
    return lines
