"""Helpers for inspecting rendered PDF bytes with pdfminer."""

from __future__ import annotations

import io
from typing import List, Tuple

try:
    from pdfminer.high_level import (  # type: ignore[import-not-found]
        extract_pages,
        extract_text,
    )
    from pdfminer.layout import LAParams  # type: ignore[import-not-found]
except ImportError as exc:  # pragma: no cover - surfaces missing dependency
    raise SystemExit(
        (
            "Missing dependency 'pdfminer.six'. Install with "
            "pip install pdfminer.six"
        )
    ) from exc

PDF_SIGNATURE = b"%PDF-"


def is_pdf(data: bytes) -> bool:
    """Return True when ``data`` starts with the PDF file signature."""

    return bool(data) and data.startswith(PDF_SIGNATURE)


def extract_pdf_text(data: bytes) -> str:
    """Return the text layer of ``data`` as a single string."""

    return extract_text(io.BytesIO(data), laparams=LAParams())


def page_sizes(data: bytes) -> List[Tuple[float, float]]:
    """Return ``(width, height)`` in points for each page of ``data``."""

    return [
        (page.width, page.height) for page in extract_pages(io.BytesIO(data))
    ]


def count_pages(data: bytes) -> int:
    return len(page_sizes(data))


__all__ = [
    "PDF_SIGNATURE",
    "count_pages",
    "extract_pdf_text",
    "is_pdf",
    "page_sizes",
]
