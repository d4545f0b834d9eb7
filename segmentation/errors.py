"""Exceptions raised while segmenting the corpus."""


class SegmentationError(Exception):
    """Base class for segmentation failures."""
    pass


class MalformedInputError(SegmentationError):
    """Raised when page numbers are invalid or out of order."""
    pass


class BookRangeError(SegmentationError):
    """Raised when the static page tables are inconsistent."""
    pass
