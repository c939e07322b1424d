"""Render an HTML file to PDF with headless Chromium."""

# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from checksum import write_pdf_if_changed
from config_loader import ConfigError, resolve_runtime_paths
from html_to_pdf import (
    HtmlContentRequiredError,
    PdfConversionOptions,
    PlaywrightError,
    convert_html_to_pdf_sync,
)
from pdf_inspect import count_pages


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for the HTML to PDF renderer."""

    parser = argparse.ArgumentParser(
        description="Convert an HTML document into a PDF via Playwright."
    )
    parser.add_argument("--config", help="Path to config JSON file.")
    parser.add_argument("--input-html", help="Override source HTML path.")
    parser.add_argument("--output-pdf", help="Override PDF destination path.")
    parser.add_argument(
        "--no-javascript",
        action="store_true",
        help="Disable script execution while rendering.",
    )
    parser.add_argument(
        "--no-network-idle",
        action="store_true",
        help="Wait for the load event only instead of network idle.",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        metavar="MS",
        help="Navigation timeout in milliseconds.",
    )
    parser.add_argument(
        "--header-footer-html",
        help="HTML snippet appended to the document body before export.",
    )
    parser.add_argument("--format", help="Paper format, e.g. A4 or Letter.")
    return parser.parse_args(argv)


def build_options(
    conversion: Dict[str, Any], args: argparse.Namespace
) -> PdfConversionOptions:
    """Layer CLI switches over the ``pdf_conversion`` config block."""

    overrides: Dict[str, Any] = dict(conversion)
    if args.no_javascript:
        overrides["enable_javascript"] = False
    if args.no_network_idle:
        overrides["wait_for_network_idle"] = False
    if args.timeout is not None:
        overrides["navigation_timeout_ms"] = args.timeout
    if args.header_footer_html:
        overrides["custom_header_footer"] = args.header_footer_html
    if args.format:
        pdf_options = dict(overrides.get("pdf_options") or {})
        pdf_options["format"] = args.format
        overrides["pdf_options"] = pdf_options
    return PdfConversionOptions.from_mapping(overrides)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the HTML to PDF CLI."""

    args = parse_args(argv)
    try:
        runtime = resolve_runtime_paths(
            config_path=args.config,
            input_html=args.input_html,
            output_pdf=args.output_pdf,
        )
        options = build_options(runtime["pdf_conversion"], args)
    except (ConfigError, ValueError, TypeError) as exc:
        raise SystemExit(f"Config error: {exc}") from exc

    input_path = Path(runtime["input_html"])
    output_path = Path(runtime["output_pdf"])

    try:
        html = input_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SystemExit(f"Unable to read {input_path}: {exc}") from exc

    try:
        pdf_bytes = convert_html_to_pdf_sync(html, options)
    except HtmlContentRequiredError as exc:
        raise SystemExit(f"⚠️ {input_path} is empty: {exc}") from exc
    except PlaywrightError as exc:
        raise SystemExit(f"⚠️ Failed to render {input_path.name}: {exc}") from exc

    try:
        written = write_pdf_if_changed(output_path, pdf_bytes)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"⚠️ Unable to write {output_path}: {exc}") from exc

    if written:
        print(f"✅ PDF written: {output_path} ({count_pages(pdf_bytes)} pages)")
    else:
        print(f"⏭️ PDF unchanged: {output_path}")


if __name__ == "__main__":
    main()
