"""Checksum utilities so repeated renders only rewrite changed PDFs."""

from __future__ import annotations

import hashlib
from pathlib import Path

from pdf_inspect import PDF_SIGNATURE, is_pdf


def sha256_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def sha256_file(path: Path) -> str | None:
    if not path.is_file():
        return None
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for block in iter(lambda: handle.read(65536), b""):
            digest.update(block)
    return digest.hexdigest()


def write_pdf_if_changed(path: Path, pdf_bytes: bytes) -> bool:
    """Write ``pdf_bytes`` to ``path`` unless the same PDF is already there.

    Returns True when the file was (re)written. Payloads without the PDF
    signature are refused so a failed render never replaces a good file.
    """

    if not is_pdf(pdf_bytes):
        raise ValueError(
            f"Refusing to write {path}: payload does not start with"
            f" {PDF_SIGNATURE!r}"
        )
    if sha256_file(path) == sha256_bytes(pdf_bytes):
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(pdf_bytes)
    return True
