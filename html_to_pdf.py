"""Utilities for exporting HTML documents to PDF bytes with Playwright."""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field, fields
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

try:
    from playwright.async_api import (  # type: ignore[import-not-found]
        Error as PlaywrightError,
        Page,
        async_playwright,
    )
except ImportError as exc:  # pragma: no cover - handled at runtime
    raise SystemExit(
        "Missing dependency 'playwright'. Install with pip install"
        " playwright && playwright install chromium"
    ) from exc

logger = logging.getLogger(__name__)

DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {"headless": True}
DEFAULT_PDF_OPTIONS: Dict[str, Any] = {"format": "A4", "print_background": True}
DEFAULT_NAVIGATION_TIMEOUT_MS = 30_000

# Appends the supplied markup to <body> inside a wrapper element.
INJECT_HEADER_FOOTER_JS = """
(markup) => {
    const container = document.createElement('div');
    container.innerHTML = markup;
    document.body.appendChild(container);
}
"""

PageHook = Callable[[Page], Union[Awaitable[None], None]]


class HtmlContentRequiredError(ValueError):
    """Raised when conversion is requested without any HTML content."""


def _empty_options() -> Dict[str, Any]:
    return {}


@dataclass(slots=True)
class PdfConversionOptions:
    """Caller-supplied settings merged over the conversion defaults.

    ``launch_options`` and ``pdf_options`` are forwarded as keyword
    arguments to ``chromium.launch()`` and ``page.pdf()`` respectively.
    """

    launch_options: Dict[str, Any] = field(default_factory=_empty_options)
    pdf_options: Dict[str, Any] = field(default_factory=_empty_options)
    enable_javascript: bool = True
    custom_header_footer: str = ""
    wait_for_network_idle: bool = True
    navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS
    on_page_loaded: Optional[PageHook] = None

    @classmethod
    def from_mapping(
        cls, mapping: Optional[Mapping[str, Any]]
    ) -> "PdfConversionOptions":
        """Build options from a plain mapping such as a JSON config block."""

        if not mapping:
            return cls()

        known = {item.name for item in fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise ValueError(
                f"Unknown PDF conversion option(s): {', '.join(unknown)}"
            )

        for key in ("launch_options", "pdf_options"):
            value = mapping.get(key)
            if value is not None and not isinstance(value, Mapping):
                raise TypeError(f"{key} must be a mapping, got {type(value)!r}")

        values: Dict[str, Any] = dict(mapping)
        for key in ("launch_options", "pdf_options"):
            if values.get(key) is None:
                values.pop(key, None)
            else:
                values[key] = dict(values[key])
        if "navigation_timeout_ms" in values:
            values["navigation_timeout_ms"] = int(values["navigation_timeout_ms"])
        return cls(**values)

    def merged_launch_options(self) -> Dict[str, Any]:
        """Return launch kwargs with caller values layered over defaults."""

        return {**DEFAULT_LAUNCH_OPTIONS, **self.launch_options}

    def merged_pdf_options(self) -> Dict[str, Any]:
        """Return ``page.pdf()`` kwargs with caller values over defaults."""

        return {**DEFAULT_PDF_OPTIONS, **self.pdf_options}

    @property
    def wait_until(self) -> str:
        return "networkidle" if self.wait_for_network_idle else "load"


def _coerce_options(
    options: Union[PdfConversionOptions, Mapping[str, Any], None]
) -> PdfConversionOptions:
    if options is None:
        return PdfConversionOptions()
    if isinstance(options, PdfConversionOptions):
        return options
    return PdfConversionOptions.from_mapping(options)


async def _close_browser(browser: Any) -> None:
    """Close ``browser``, logging instead of raising when close fails."""

    try:
        await browser.close()
    except Exception:  # pylint: disable=broad-except
        logger.warning("Failed to close browser after PDF export", exc_info=True)


async def _render(page: Page, html: str, options: PdfConversionOptions) -> bytes:
    page.set_default_navigation_timeout(options.navigation_timeout_ms)
    await page.set_content(
        html,
        wait_until=options.wait_until,
        timeout=options.navigation_timeout_ms,
    )

    if options.on_page_loaded is not None:
        result = options.on_page_loaded(page)
        if inspect.isawaitable(result):
            await result

    if options.custom_header_footer:
        await page.evaluate(INJECT_HEADER_FOOTER_JS, options.custom_header_footer)

    return await page.pdf(**options.merged_pdf_options())


async def convert_html_to_pdf(
    html: Optional[str],
    options: Union[PdfConversionOptions, Mapping[str, Any], None] = None,
) -> bytes:
    """Render ``html`` in headless Chromium and return the PDF bytes.

    The browser is launched for this call only and is closed before the
    function returns or raises. Errors from loading, the
    ``on_page_loaded`` hook, header/footer injection or export are logged
    and re-raised unchanged.
    """

    if not html:
        logger.error("HTML content is required for conversion.")
        raise HtmlContentRequiredError("HTML content is required.")

    resolved = _coerce_options(options)

    try:
        playwright_context: Any = await async_playwright().start()
    except Exception:
        logger.exception("Failed to start Playwright driver")
        raise

    try:
        try:
            browser: Any = await playwright_context.chromium.launch(
                **resolved.merged_launch_options()
            )
        except Exception:
            logger.exception("Failed to launch browser for PDF export")
            raise

        try:
            context: Any = await browser.new_context(
                java_script_enabled=resolved.enable_javascript
            )
            page: Page = await context.new_page()
            pdf_bytes = await _render(page, html, resolved)
        except Exception:
            logger.exception("Failed to convert HTML to PDF")
            raise
        finally:
            await _close_browser(browser)
    finally:
        await playwright_context.stop()

    logger.debug("Rendered %d PDF bytes", len(pdf_bytes))
    return pdf_bytes


def convert_html_to_pdf_sync(
    html: Optional[str],
    options: Union[PdfConversionOptions, Mapping[str, Any], None] = None,
) -> bytes:
    """Blocking wrapper around :func:`convert_html_to_pdf`."""

    return asyncio.run(convert_html_to_pdf(html, options))


__all__ = [
    "DEFAULT_LAUNCH_OPTIONS",
    "DEFAULT_NAVIGATION_TIMEOUT_MS",
    "DEFAULT_PDF_OPTIONS",
    "HtmlContentRequiredError",
    "PdfConversionOptions",
    "PlaywrightError",
    "convert_html_to_pdf",
    "convert_html_to_pdf_sync",
]
