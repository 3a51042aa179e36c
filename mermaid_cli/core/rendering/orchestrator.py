"""
Render Orchestrator
===================

Drive a headless browser through loading the asset server page, waiting for
Mermaid.js to finish rendering, and extracting the diagram as SVG markup or a
PNG screenshot.

Render completion is detected by polling for DOM elements, which relies on
how the page and Mermaid.js build the DOM:

- ``div#mermaid`` is attached by the HTML shell only after ``mermaid.render``
  resolved, so SVG export waits for it and reads its inner HTML.
- ``div#mermaid > svg#svg`` is Mermaid's own root element. PNG export waits
  for it because a screenshot needs the laid out drawing, not only the
  container.

A Mermaid.js release that changes either of these breaks detection without
any other symptom than a wait timeout.
"""

from typing import Any, Callable, Optional

from mermaid_cli.config.logging import get_logger
from mermaid_cli.config.settings import get_settings
from mermaid_cli.core.rendering.browser import (
    BrowserDriver,
    BrowserTimeoutError,
    PlaywrightBrowserDriver,
)
from mermaid_cli.models.schemas import ImageFormat, RenderRequest

logger = get_logger(__name__)

SVG_CONTAINER_SELECTOR = "div#mermaid"
PNG_ROOT_SELECTOR = "div#mermaid > svg#svg"
INNER_HTML_JS = "element => element.innerHTML"


class RenderError(Exception):
    """Exception raised when rendering a diagram fails."""

    pass


class BrowserLaunchError(RenderError):
    """The browser could not be started."""


class NavigationError(RenderError):
    """The asset server page could not be loaded."""


class ElementWaitTimeoutError(RenderError):
    """The rendered diagram did not appear in time."""


class ExtractionError(RenderError):
    """SVG markup could not be read from the page."""


class ScreenshotError(RenderError):
    """The PNG screenshot could not be captured."""


def unquote_svg_markup(value: str) -> str:
    """
    Turn a JSON-quoted inner HTML string back into raw markup.

    Escaped quotes are restored and exactly one character is dropped from
    each end, e.g. ``"<svg>\\"a\\"</svg>"`` becomes ``<svg>"a"</svg>``.

    No other JSON escape is reversed: a backslash in the markup stays
    doubled, and newlines or control characters stay as their escape
    sequences (``\\n``, ``\\u0001``). Mermaid's SVG output is one line and
    carries none of them.
    """
    value = value.replace('\\"', '"')
    return value[1:-1]


class RenderOrchestrator:
    """Render one diagram served by the asset server."""

    def __init__(
        self,
        driver_factory: Optional[Callable[[], BrowserDriver]] = None,
        timeout_ms: Optional[int] = None,
        poll_interval_ms: Optional[int] = None,
    ):
        self.settings = get_settings()
        self.driver_factory = driver_factory or PlaywrightBrowserDriver
        self.timeout_ms = timeout_ms or self.settings.render_timeout_ms
        self.poll_interval_ms = poll_interval_ms or self.settings.poll_interval_ms
        self.logger: Any = logger.bind(component="render_orchestrator")  # structlog.BoundLoggerBase

    async def render(self, request: RenderRequest) -> bytes:
        """
        Render the diagram described by ``request``.

        Args:
            request: Viewport size, output format and asset server port

        Returns:
            SVG markup encoded as UTF-8, or PNG bytes

        Raises:
            RenderError: One of its subclasses, naming the failed step
        """
        self.logger.info(
            "Rendering diagram",
            width=request.width,
            height=request.height,
            format=request.format.value,
            url=request.url,
        )
        driver = self.driver_factory()
        try:
            await self._open(driver, request)
            if request.format == ImageFormat.SVG:
                image = await self._extract_svg(driver)
            else:
                image = await self._capture_png(driver)
        except RenderError as e:
            self.logger.error("Rendering failed", error=str(e), step=type(e).__name__)
            raise
        finally:
            try:
                await driver.close()
            except Exception as e:
                self.logger.error("Error closing browser", error=str(e))

        self.logger.info("Rendering completed", size=len(image))
        return image

    async def _open(self, driver: BrowserDriver, request: RenderRequest) -> None:
        try:
            await driver.launch(request.width, request.height)
            await driver.new_page()
        except Exception as e:
            raise BrowserLaunchError(f"Failed to launch browser: {e}") from e

        try:
            await driver.navigate(request.url, self.timeout_ms)
        except Exception as e:
            raise NavigationError(f"Failed to navigate to {request.url}: {e}") from e

    async def _wait_for(self, driver: BrowserDriver, selector: str) -> Any:
        try:
            element = await driver.wait_for_selector(
                selector, self.timeout_ms, self.poll_interval_ms
            )
        except BrowserTimeoutError as e:
            raise ElementWaitTimeoutError(f"Timed out waiting for {selector!r}: {e}") from e
        except Exception as e:
            raise ElementWaitTimeoutError(f"Failed waiting for {selector!r}: {e}") from e

        if element is None:
            raise ElementWaitTimeoutError(f"Element {selector!r} disappeared after it was found")
        return element

    async def _extract_svg(self, driver: BrowserDriver) -> bytes:
        element = await self._wait_for(driver, SVG_CONTAINER_SELECTOR)
        try:
            value = await driver.evaluate(element, INNER_HTML_JS)
        except Exception as e:
            raise ExtractionError(f"failed to extract SVG: {e}") from e

        if value is None:
            raise ExtractionError("failed to extract SVG")
        return unquote_svg_markup(value).encode("utf-8")

    async def _capture_png(self, driver: BrowserDriver) -> bytes:
        element = await self._wait_for(driver, PNG_ROOT_SELECTOR)
        try:
            return await driver.screenshot(element)
        except Exception as e:
            raise ScreenshotError(f"Failed to capture PNG screenshot: {e}") from e


async def render_to_image(
    width: int,
    height: int,
    format: ImageFormat,
    port: int,
    orchestrator: Optional[RenderOrchestrator] = None,
) -> bytes:
    """Render the diagram served on ``port`` with a default orchestrator."""
    request = RenderRequest(width=width, height=height, format=format, port=port)
    return await (orchestrator or RenderOrchestrator()).render(request)
