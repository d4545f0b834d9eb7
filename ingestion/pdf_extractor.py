"""PDF line extraction module."""
import fitz  # PyMuPDF
from pathlib import Path
from typing import Callable, List, Optional
from utils.logger import setup_logger
from ingestion.models import RawLine
from ingestion.cleaner import split_page_lines

logger = setup_logger(__name__)


class PDFExtractionError(Exception):
    """Raised when PDF extraction fails."""
    pass


class PDFLineExtractor:
    """Reads a PDF into page-tagged lines."""

    def extract(
        self,
        pdf_path: str,
        on_page: Optional[Callable[[int, int], None]] = None
    ) -> List[RawLine]:
        """Extract every text line of a PDF, tagged with its 1-based page number.

        Args:
            pdf_path: Path to PDF file
            on_page: Optional callback receiving (pages_done, page_count)

        Returns:
            RawLines in corpus order

        Raises:
            PDFExtractionError: If the file is missing, unreadable or empty
        """
        pdf_path = Path(pdf_path)

        if not pdf_path.exists():
            raise PDFExtractionError(f"PDF file not found: {pdf_path}")

        logger.info(f"Extracting lines from {pdf_path.name}")

        try:
            doc = fitz.open(pdf_path)
        except Exception as e:
            raise PDFExtractionError(f"Failed to open PDF: {e}") from e

        try:
            page_count = doc.page_count
            if page_count == 0:
                raise PDFExtractionError("PDF has no pages")

            lines = []
            for page_index in range(page_count):
                page_text = doc[page_index].get_text()
                for text in split_page_lines(page_text):
                    lines.append(RawLine(page_number=page_index + 1, text=text))
                if on_page:
                    on_page(page_index + 1, page_count)
        finally:
            doc.close()

        if not lines:
            logger.warning(
                f"{pdf_path.name} has no extractable text; "
                "it may be a scanned image PDF"
            )

        logger.info(f"Extracted {len(lines)} lines from {page_count} pages")

        return lines

