"""Main CLI entry point for the Ice and Fire chapter report."""
import sys
from pathlib import Path
from typing import FrozenSet, List, Optional

import click
import pandas as pd
from rich.console import Console
from rich.table import Table

from utils.logger import setup_logger
from monitoring.progress_tracker import ProgressTracker
from ingestion.models import RawLine
from ingestion.pdf_extractor import PDFLineExtractor, PDFExtractionError
from ingestion.line_reader import LineFileError, read_lines_csv, write_lines_csv
from segmentation.book_ranges import default_table
from segmentation.errors import SegmentationError
from segmentation.segmenter import Segmenter, to_frame
from analysis.tokens import unnest_tokens
from analysis.frequency import (
    chapter_lengths,
    corpus_summary,
    remove_stopwords,
    top_words,
    word_frequencies,
)
from analysis.sentiment import (
    LexiconError,
    StopwordFileError,
    book_sentiment,
    chapter_sentiment,
    character_sentiment,
    load_lexicon,
    load_stopwords,
    rank_characters,
    read_stopword_file,
    word_contributions,
)
from storage.exporter import ReportExporter
import config

logger = setup_logger(__name__)
console = Console()

INPUT_ERRORS = (PDFExtractionError, LineFileError, SegmentationError, LexiconError, StopwordFileError)


def input_options(func):
    """Shared options selecting the corpus input and output directory."""
    func = click.option('--output', default=str(config.OUTPUT_DIR), type=click.Path(file_okay=False),
                        help='Output directory')(func)
    func = click.option('--lines', 'lines_csv', default=None, type=click.Path(exists=True, dir_okay=False),
                        help='CSV of already-extracted lines (page,text)')(func)
    func = click.option('--pdf', default=None, type=click.Path(dir_okay=False),
                        help='Path to the combined series PDF')(func)
    return func


def load_corpus(pdf: Optional[str], lines_csv: Optional[str]) -> List[RawLine]:
    """Read RawLines from a lines CSV, or from the PDF with a progress bar."""
    if lines_csv:
        return read_lines_csv(lines_csv)

    pdf_path = pdf or config.CORPUS_PDF
    tracker = ProgressTracker(console)
    with tracker.create_progress(transient=True) as progress:
        task = progress.add_task("Extracting PDF lines...", total=None)
        return PDFLineExtractor().extract(pdf_path, on_page=tracker.page_callback(progress, task))


def segment_corpus(pdf: Optional[str], lines_csv: Optional[str]) -> pd.DataFrame:
    raw_lines = load_corpus(pdf, lines_csv)
    labeled = Segmenter().segment(raw_lines)
    return to_frame(labeled)


def read_stopwords(path: Optional[str]) -> FrozenSet[str]:
    """Stopwords from a one-word-per-line file, or NLTK's English list."""
    if path:
        return read_stopword_file(path, config.EXTRA_STOPWORDS)
    return load_stopwords(config.EXTRA_STOPWORDS)


def fail(error: Exception) -> None:
    console.print(f"[red]Error: {error}[/red]")
    sys.exit(1)


def print_book_summary(summary: pd.DataFrame) -> None:
    table = Table(title="Books")
    table.add_column("Book", style="cyan")
    table.add_column("Lines", justify="right")
    table.add_column("Words", justify="right")
    table.add_column("Unique", justify="right")
    table.add_column("Chapters", justify="right")
    table.add_column("POV Characters", justify="right")

    for row in summary.itertuples(index=False):
        table.add_row(
            str(row.book),
            f"{row.lines:,}",
            f"{row.words:,}",
            f"{row.unique_words:,}",
            str(row.chapters),
            str(row.characters)
        )

    console.print(table)


def print_top_words(freq: pd.DataFrame, title: str) -> None:
    table = Table(title=title)
    table.add_column("Word", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Per 10k", justify="right")

    for word, count, per_10k in zip(freq["word"], freq["count"], freq["relative_frequency"]):
        table.add_row(word, f"{count:,}", f"{per_10k:.1f}")

    console.print(table)


def print_character_sentiment(characters: pd.DataFrame, limit: int) -> None:
    table = Table(title="Point-of-View Characters by Sentiment")
    table.add_column("Character", style="cyan")
    table.add_column("Chapters", justify="right")
    table.add_column("Positive", justify="right", style="green")
    table.add_column("Negative", justify="right", style="red")
    table.add_column("Log Ratio", justify="right")

    indexed = characters.set_index("character")
    for name in rank_characters(characters)[:limit]:
        row = indexed.loc[name]
        ratio = "n/a" if pd.isna(row["log_ratio"]) else f"{row['log_ratio']:+.3f}"
        table.add_row(
            name,
            str(int(row["chapters"])),
            f"{int(row['positive']):,}",
            f"{int(row['negative']):,}",
            ratio
        )

    console.print(table)


@click.group()
def cli():
    """Ice and Fire Report - chapter segmentation, word frequencies and sentiment"""
    pass


@cli.command()
def books():
    """Show the static book and exclusion page tables."""
    book_table = default_table()

    table = Table(title="Page Ranges")
    table.add_column("Range")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Kind", style="dim")

    ranges = [(r.book_name, r.start_page, r.end_page, "book") for r in book_table.book_ranges]
    ranges += [(r.label, r.start_page, r.end_page, "excluded") for r in book_table.excluded_ranges]
    for name, start, end, kind in sorted(ranges, key=lambda r: r[1]):
        table.add_row(name, str(start), str(end), kind)

    console.print(table)


@cli.command()
@input_options
@click.option('--save-lines', default=None, type=click.Path(dir_okay=False),
              help='Also save the extracted raw lines as CSV')
def segment(pdf, lines_csv, output, save_lines):
    """Segment the corpus into books, characters and chapters."""
    console.print("\n[bold cyan]Chapter Segmentation[/bold cyan]\n")

    try:
        raw_lines = load_corpus(pdf, lines_csv)
        if save_lines:
            write_lines_csv(raw_lines, save_lines)
        lines_df = to_frame(Segmenter().segment(raw_lines))
    except INPUT_ERRORS as e:
        fail(e)

    exporter = ReportExporter(Path(output))
    path = exporter.export_table("labeled_lines", lines_df)

    if lines_df.empty:
        console.print("[yellow]No lines fell inside the book page ranges[/yellow]")
    else:
        print_book_summary(corpus_summary(lines_df, unnest_tokens(lines_df)))

    console.print(f"\n[green]✓ Segmentation complete![/green] Lines: {len(lines_df):,}")
    console.print(f"Output: [cyan]{path}[/cyan]")


@cli.command()
@input_options
@click.option('--stopwords', 'stopwords_path', default=None, type=click.Path(exists=True, dir_okay=False),
              help='Stopword file (one word per line); NLTK English list if omitted')
@click.option('--top', default=config.TOP_N_WORDS, show_default=True, help='Words to keep per group')
def frequencies(pdf, lines_csv, output, stopwords_path, top):
    """Count words across the corpus and per character."""
    console.print("\n[bold cyan]Word Frequencies[/bold cyan]\n")

    try:
        lines_df = segment_corpus(pdf, lines_csv)
        stopwords = read_stopwords(stopwords_path)
    except INPUT_ERRORS as e:
        fail(e)

    tokens = remove_stopwords(unnest_tokens(lines_df), stopwords)
    corpus_freq = word_frequencies(tokens)
    character_freq = top_words(word_frequencies(tokens, by=["character"]), top, by=["character"])

    exporter = ReportExporter(Path(output))
    exporter.export_table("word_frequencies", corpus_freq)
    exporter.export_table("character_word_frequencies", character_freq)

    print_top_words(corpus_freq.head(top), f"Top {top} Words")
    console.print(f"\n[green]✓ Word frequencies exported to {exporter.output_dir}[/green]")


@cli.command()
@input_options
@click.option('--lexicon', default=config.LEXICON_PATH, type=click.Path(dir_okay=False),
              help='Sentiment lexicon CSV (word,sentiment); NLTK opinion lexicon if omitted')
@click.option('--top', default=config.TOP_N_WORDS, show_default=True, help='Characters and words to show')
def sentiment(pdf, lines_csv, output, lexicon, top):
    """Score sentiment per chapter, character and book."""
    console.print("\n[bold cyan]Sentiment Analysis[/bold cyan]\n")

    try:
        lines_df = segment_corpus(pdf, lines_csv)
        word_lexicon = load_lexicon(lexicon)
    except INPUT_ERRORS as e:
        fail(e)

    tokens = unnest_tokens(lines_df)
    characters = character_sentiment(tokens, word_lexicon)

    exporter = ReportExporter(Path(output))
    exporter.export_table("chapter_sentiment", chapter_sentiment(tokens, word_lexicon))
    exporter.export_table("character_sentiment", characters)
    exporter.export_table("book_sentiment", book_sentiment(tokens, word_lexicon))
    exporter.export_table("sentiment_words", word_contributions(tokens, word_lexicon, top))

    if not characters.empty:
        print_character_sentiment(characters, top)
    console.print(f"\n[green]✓ Sentiment tables exported to {exporter.output_dir}[/green]")


@cli.command()
@input_options
@click.option('--stopwords', 'stopwords_path', default=None, type=click.Path(exists=True, dir_okay=False),
              help='Stopword file (one word per line); NLTK English list if omitted')
@click.option('--lexicon', default=config.LEXICON_PATH, type=click.Path(dir_okay=False),
              help='Sentiment lexicon CSV (word,sentiment); NLTK opinion lexicon if omitted')
@click.option('--top', default=config.TOP_N_WORDS, show_default=True, help='Rows to show per table')
def run_all(pdf, lines_csv, output, stopwords_path, lexicon, top):
    """Run the complete report: segmentation, frequencies and sentiment."""
    console.print("\n[bold cyan]Ice and Fire Report - Full Run[/bold cyan]\n")

    # Step 1: Segment
    console.print("[bold]Step 1: Segmenting chapters[/bold]\n")
    try:
        lines_df = segment_corpus(pdf, lines_csv)
        stopwords = read_stopwords(stopwords_path)
        word_lexicon = load_lexicon(lexicon)
    except INPUT_ERRORS as e:
        fail(e)

    exporter = ReportExporter(Path(output))
    exporter.export_table("labeled_lines", lines_df)
    tokens = unnest_tokens(lines_df)
    summary = corpus_summary(lines_df, tokens)
    if not summary.empty:
        print_book_summary(summary)

    # Step 2: Word frequencies
    console.print("\n[bold]Step 2: Counting words[/bold]\n")
    content_tokens = remove_stopwords(tokens, stopwords)
    corpus_freq = word_frequencies(content_tokens)
    exporter.export_table("word_frequencies", corpus_freq)
    exporter.export_table(
        "character_word_frequencies",
        top_words(word_frequencies(content_tokens, by=["character"]), top, by=["character"])
    )
    exporter.export_table("chapter_lengths", chapter_lengths(lines_df))
    print_top_words(corpus_freq.head(top), f"Top {top} Words")

    # Step 3: Sentiment
    console.print("\n[bold]Step 3: Scoring sentiment[/bold]\n")
    chapters = chapter_sentiment(tokens, word_lexicon)
    characters = character_sentiment(tokens, word_lexicon)
    exporter.export_table("chapter_sentiment", chapters)
    exporter.export_table("character_sentiment", characters)
    exporter.export_table("book_sentiment", book_sentiment(tokens, word_lexicon))
    exporter.export_table("sentiment_words", word_contributions(tokens, word_lexicon, top))
    if not characters.empty:
        print_character_sentiment(characters, top)

    summary_path = exporter.export_summary({
        'input': lines_csv or pdf or config.CORPUS_PDF,
        'lines': len(lines_df),
        'words': len(tokens),
        'books': int(lines_df["book"].nunique()),
        'characters': int(lines_df["character"].nunique()),
        'chapters': int(lines_df["chapter_in_series"].nunique()),
        'lexicon_words': len(word_lexicon)
    })

    console.print("\n[bold green]✓ Report Complete![/bold green]\n")

    table = Table(show_header=False)
    table.add_row("Lines", f"{len(lines_df):,}")
    table.add_row("Words", f"{len(tokens):,}")
    table.add_row("Chapters", str(len(chapters)))
    table.add_row("Characters", str(len(characters)))
    table.add_row("Output Dir", str(exporter.output_dir))
    table.add_row("Summary", str(summary_path))

    console.print(table)


if __name__ == '__main__':
    cli()
