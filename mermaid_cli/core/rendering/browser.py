"""
Browser Drivers
===============

The browser operations the render orchestrator depends on, and their
Playwright (Chromium) implementation.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    ElementHandle,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from mermaid_cli.config.logging import get_logger
from mermaid_cli.config.settings import get_settings

logger = get_logger(__name__)

# Resolves once an element matching the selector is attached to the DOM.
SELECTOR_PRESENT_JS = "selector => document.querySelector(selector) !== null"


def clip_to_viewport(
    bounding_box: Dict[str, float], viewport: Optional[Dict[str, int]]
) -> Optional[Dict[str, float]]:
    """
    Intersect an element box with the viewport.

    Returns:
        Clip rectangle for ``page.screenshot``, or None when the two do not
        overlap
    """
    left = max(bounding_box["x"], 0.0)
    top = max(bounding_box["y"], 0.0)
    right = bounding_box["x"] + bounding_box["width"]
    bottom = bounding_box["y"] + bounding_box["height"]
    if viewport is not None:
        right = min(right, viewport["width"])
        bottom = min(bottom, viewport["height"])

    if right <= left or bottom <= top:
        return None
    return {"x": left, "y": top, "width": right - left, "height": bottom - top}


class BrowserTimeoutError(Exception):
    """Exception raised when a browser operation runs out of time."""

    pass


class BrowserDriver(ABC):
    """Abstract browser capable of loading a page and capturing an element."""

    @abstractmethod
    async def launch(self, width: int, height: int) -> None:
        """Start a browser whose viewport is ``width`` x ``height``."""

    @abstractmethod
    async def new_page(self) -> None:
        """Open the page that subsequent calls act on."""

    @abstractmethod
    async def navigate(self, url: str, timeout_ms: int) -> None:
        """Load ``url`` and wait until the document has loaded."""

    @abstractmethod
    async def wait_for_selector(
        self, selector: str, timeout_ms: int, poll_interval_ms: int
    ) -> Optional[Any]:
        """
        Poll until an element matches ``selector`` and return it.

        Raises:
            BrowserTimeoutError: If nothing matches within ``timeout_ms``
        """

    @abstractmethod
    async def evaluate(self, element: Any, script: str) -> Optional[str]:
        """
        Call ``script`` with ``element`` as its argument.

        Returns:
            The result serialized as JSON, so strings come back quoted, or
            None when the script produced no value
        """

    @abstractmethod
    async def screenshot(self, element: Any) -> bytes:
        """Capture ``element`` as PNG bytes, clipped to the viewport."""

    @abstractmethod
    async def close(self) -> None:
        """Release the browser and everything it opened."""


class PlaywrightBrowserDriver(BrowserDriver):
    """Chromium driven through Playwright."""

    def __init__(
        self,
        headless: Optional[bool] = None,
        args: Optional[List[str]] = None,
        executable_path: Optional[str] = None,
    ):
        self.settings = get_settings()
        self.headless = self.settings.browser_headless if headless is None else headless
        self.args = list(self.settings.browser_args if args is None else args)
        if executable_path is None and self.settings.browser_executable_path is not None:
            executable_path = str(self.settings.browser_executable_path)
        self.executable_path = executable_path
        self.logger: Any = logger.bind(driver="playwright")  # structlog.BoundLoggerBase

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("No page open, call new_page() first")
        return self._page

    async def launch(self, width: int, height: int) -> None:
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self.headless,
            args=self.args,
            executable_path=self.executable_path,
        )
        self._context = await self._browser.new_context(
            viewport={"width": width, "height": height},
            device_scale_factor=1,
        )
        self.logger.debug("Browser launched", width=width, height=height, headless=self.headless)

    async def new_page(self) -> None:
        if self._context is None:
            raise RuntimeError("Browser not launched")
        self._page = await self._context.new_page()

    async def navigate(self, url: str, timeout_ms: int) -> None:
        try:
            await self.page.goto(url, wait_until="load", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise BrowserTimeoutError(f"Navigation to {url} timed out after {timeout_ms} ms") from e

    async def wait_for_selector(
        self, selector: str, timeout_ms: int, poll_interval_ms: int
    ) -> Optional[ElementHandle]:
        try:
            await self.page.wait_for_function(
                SELECTOR_PRESENT_JS,
                arg=selector,
                polling=poll_interval_ms,
                timeout=timeout_ms,
            )
        except PlaywrightTimeoutError as e:
            raise BrowserTimeoutError(
                f"No element matched {selector!r} within {timeout_ms} ms"
            ) from e
        return await self.page.query_selector(selector)

    async def evaluate(self, element: ElementHandle, script: str) -> Optional[str]:
        result = await element.evaluate(script)
        if result is None:
            return None
        return json.dumps(result, ensure_ascii=False)

    async def screenshot(self, element: ElementHandle) -> bytes:
        """Capture the part of ``element`` that lies inside the viewport."""
        bounding_box = await element.bounding_box()
        if bounding_box is None:
            raise RuntimeError("Element has no bounding box, it is not rendered")

        viewport = self.page.viewport_size
        clip = clip_to_viewport(bounding_box, viewport)
        if clip is None:
            raise RuntimeError(f"Element {bounding_box} lies outside the viewport {viewport}")
        return await self.page.screenshot(type="png", clip=clip)

    async def close(self) -> None:
        if self._context is not None:
            await self._context.close()
        if self._browser is not None:
            await self._browser.close()
        if self._playwright is not None:
            await self._playwright.stop()

        self._page = None
        self._context = None
        self._browser = None
        self._playwright = None
        self.logger.debug("Browser closed")
