"""Shared fixtures: an in-memory stand-in for the Playwright async API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pytest

import html_to_pdf

FAKE_PDF = b"%PDF-1.7\n% fake body\n%%EOF\n"


@dataclass
class FakeCalls:
    """Ordered record of every call the converter made."""

    events: List[tuple] = field(default_factory=list)
    launches: int = 0
    closes: int = 0
    fail_on: Optional[str] = None
    close_error: Optional[BaseException] = None
    start_error: Optional[BaseException] = None

    def record(self, name: str, *payload: Any) -> None:
        self.events.append((name, *payload))
        if self.fail_on == name:
            raise RuntimeError(f"{name} failed")

    def names(self) -> List[str]:
        return [event[0] for event in self.events]


class FakePage:
    def __init__(self, calls: FakeCalls) -> None:
        self._calls = calls

    def set_default_navigation_timeout(self, timeout: float) -> None:
        self._calls.record("set_default_navigation_timeout", timeout)

    async def set_content(self, html: str, **kwargs: Any) -> None:
        self._calls.record("set_content", html, kwargs)

    async def evaluate(self, expression: str, arg: Any = None) -> None:
        self._calls.record("evaluate", expression, arg)

    async def pdf(self, **kwargs: Any) -> bytes:
        self._calls.record("pdf", kwargs)
        return FAKE_PDF


class FakeContext:
    def __init__(self, calls: FakeCalls) -> None:
        self._calls = calls

    async def new_page(self) -> FakePage:
        self._calls.record("new_page")
        return FakePage(self._calls)


class FakeBrowser:
    def __init__(self, calls: FakeCalls) -> None:
        self._calls = calls

    async def new_context(self, **kwargs: Any) -> FakeContext:
        self._calls.record("new_context", kwargs)
        return FakeContext(self._calls)

    async def close(self) -> None:
        self._calls.closes += 1
        self._calls.events.append(("close",))
        if self._calls.close_error is not None:
            raise self._calls.close_error


class FakeChromium:
    def __init__(self, calls: FakeCalls) -> None:
        self._calls = calls

    async def launch(self, **kwargs: Any) -> FakeBrowser:
        self._calls.launches += 1
        self._calls.record("launch", kwargs)
        return FakeBrowser(self._calls)


class FakeDriver:
    def __init__(self, calls: FakeCalls) -> None:
        self.chromium = FakeChromium(calls)
        self._calls = calls

    async def stop(self) -> None:
        self._calls.events.append(("stop",))


class FakePlaywrightManager:
    """Mimics the object returned by ``async_playwright()``."""

    def __init__(self, calls: FakeCalls) -> None:
        self._calls = calls

    async def start(self) -> FakeDriver:
        if self._calls.start_error is not None:
            raise self._calls.start_error
        self._calls.events.append(("start",))
        return FakeDriver(self._calls)


@pytest.fixture
def fake_playwright(monkeypatch: pytest.MonkeyPatch) -> FakeCalls:
    calls = FakeCalls()
    monkeypatch.setattr(html_to_pdf, "async_playwright", lambda: FakePlaywrightManager(calls))
    return calls


def run(coro: Any) -> Any:
    return asyncio.run(coro)


def first_event(calls: FakeCalls, name: str) -> tuple:
    for event in calls.events:
        if event[0] == name:
            return event
    raise AssertionError(f"{name} was never called: {calls.names()}")


def kwargs_of(calls: FakeCalls, name: str) -> Dict[str, Any]:
    return first_event(calls, name)[-1]


@pytest.fixture(scope="session")
def chromium_available() -> bool:
    """Skip end-to-end tests when Playwright's Chromium is not installed."""

    pytest.importorskip("playwright.async_api")
    from playwright.sync_api import Error as PlaywrightError
    from playwright.sync_api import sync_playwright

    try:
        with sync_playwright() as playwright_context:
            browser = playwright_context.chromium.launch(headless=True)
            browser.close()
    except PlaywrightError as exc:
        pytest.skip(f"Chromium unavailable for Playwright: {exc}")
    return True
