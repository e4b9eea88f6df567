from dataclasses import dataclass


@dataclass(frozen=True)
class PageText:
    """Title and description derived from a page's OCR text."""

    title: str
    description: str
