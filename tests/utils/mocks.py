"""
Test Mocks
===========

Mock implementations for testing the render pipeline without a browser.
"""

import base64
import json
from typing import Any, Dict, List, Optional

import httpx

from mermaid_cli.core.rendering.browser import BrowserDriver, BrowserTimeoutError

SAMPLE_SVG = '<svg id="svg" xmlns="http://www.w3.org/2000/svg" width="100"><g class="node"></g></svg>'

# Smallest valid PNG: a single transparent pixel
SAMPLE_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


class FakeBrowserDriver(BrowserDriver):
    """
    Browser driver recording every call.

    ``fail_on`` names a step that raises, ``missing`` lists selectors that
    never appear. With ``fetch_pages`` set, navigation really requests the
    page and its resources from the asset server.
    """

    def __init__(
        self,
        inner_html: Optional[str] = SAMPLE_SVG,
        png: bytes = SAMPLE_PNG,
        fail_on: Optional[str] = None,
        missing: Optional[List[str]] = None,
        fetch_pages: bool = False,
    ):
        self.inner_html = inner_html
        self.png = png
        self.fail_on = fail_on
        self.missing = missing or []
        self.fetch_pages = fetch_pages
        self.calls: List[str] = []
        self.launched_with: Optional[tuple] = None
        self.url: Optional[str] = None
        self.fetched: Dict[str, httpx.Response] = {}
        self.waited_for: List[str] = []
        self.closed = False

    def _step(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name:
            raise RuntimeError(f"{name} exploded")

    async def launch(self, width: int, height: int) -> None:
        self._step("launch")
        self.launched_with = (width, height)

    async def new_page(self) -> None:
        self._step("new_page")

    async def navigate(self, url: str, timeout_ms: int) -> None:
        self._step("navigate")
        self.url = url
        if self.fetch_pages:
            async with httpx.AsyncClient(base_url=url, trust_env=False) as client:
                for path in ("/", "/font", "/style", "/config", "/diagram", "/mermaid_js"):
                    self.fetched[path] = await client.get(path)

    async def wait_for_selector(
        self, selector: str, timeout_ms: int, poll_interval_ms: int
    ) -> Optional[Any]:
        self._step("wait_for_selector")
        self.waited_for.append(selector)
        if selector in self.missing:
            raise BrowserTimeoutError(f"No element matched {selector!r} within {timeout_ms} ms")
        return {"selector": selector}

    async def evaluate(self, element: Any, script: str) -> Optional[str]:
        self._step("evaluate")
        if self.inner_html is None:
            return None
        return json.dumps(self.inner_html)

    async def screenshot(self, element: Any) -> bytes:
        self._step("screenshot")
        return self.png

    async def close(self) -> None:
        self.calls.append("close")
        self.closed = True
