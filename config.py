"""Configuration module for the Ice and Fire chapter report."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Input Configuration
CORPUS_PDF = os.getenv("CORPUS_PDF", "./data/a_song_of_ice_and_fire.pdf")

# Output Paths
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", "./output"))

# Analysis Configuration
LEXICON_PATH = os.getenv("LEXICON_PATH")  # CSV with word,sentiment; NLTK opinion lexicon if unset
EXTRA_STOPWORDS = [
    w.strip().lower()
    for w in os.getenv("EXTRA_STOPWORDS", "ser,lord,said").split(",")
    if w.strip()
]
TOP_N_WORDS = int(os.getenv("TOP_N_WORDS", "10"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Book page ranges in the combined five-book PDF (inclusive, 1-based)
BOOK_RANGES = [
    ("A Game of Thrones", 17, 911),
    ("A Clash of Kings", 929, 1913),
    ("A Storm of Swords", 1935, 3135),
    ("A Feast for Crows", 3157, 4040),
    ("A Dance with Dragons", 4066, 5265),
]

# Non-body matter: front matter, appendices and sample chapters between books
EXCLUDED_PAGE_RANGES = [
    ("Front matter", 1, 16),
    ("A Game of Thrones appendix", 912, 928),
    ("A Clash of Kings appendix", 1914, 1934),
    ("A Storm of Swords appendix", 3136, 3156),
    ("A Feast for Crows appendix", 4041, 4065),
]
