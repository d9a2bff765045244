"""
HTML to PDF rendering.

Two engines are available:
- ChromiumRenderer: headless Chromium driven by Playwright (default)
- WeasyPrintRenderer: WeasyPrint, no browser process required

Both produce US Letter pages with 1in margins.
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from starlette.concurrency import run_in_threadpool

from loi_service.config import ServiceConfig
from loi_service.errors import RenderError

logger = logging.getLogger(__name__)

PAGE_FORMAT = "Letter"
PAGE_MARGIN = "1in"
CHROMIUM_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]
PAGE_CSS = f"@page {{ size: {PAGE_FORMAT}; margin: {PAGE_MARGIN}; }}"


def _require_html(html: Optional[str]) -> str:
    if not isinstance(html, str) or not html.strip():
        raise RenderError("HTML content required")
    return html


class PdfRenderer:
    """Base renderer; engines that hold external resources override start/stop."""

    name = "base"

    async def start(self) -> None:
        return None

    async def stop(self) -> None:
        return None

    async def render_pdf(self, html: str) -> bytes:
        html = _require_html(html)
        t0 = time.perf_counter()
        logger.info("rendering pdf", extra={"engine": self.name, "html_chars": len(html)})
        try:
            pdf = await self._render(html)
        except RenderError:
            raise
        except Exception as e:
            logger.error("pdf render failed", extra={"engine": self.name, "error": str(e)})
            raise RenderError(str(e) or type(e).__name__) from e
        logger.info(
            "pdf rendered",
            extra={"engine": self.name, "bytes": len(pdf), "latency_ms": int((time.perf_counter() - t0) * 1000)},
        )
        return pdf

    async def _render(self, html: str) -> bytes:
        raise NotImplementedError


class ChromiumRenderer(PdfRenderer):
    """
    One Chromium process per renderer, one browser context per render.

    Contexts share nothing (cookies, storage, cache), and each is closed when
    its render finishes, fails or is cancelled.
    """

    name = "chromium"

    def __init__(self, headless: bool = True):
        self.headless = headless
        self._playwright: Any = None
        self._browser: Any = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        async with self._lock:
            if self._browser is not None and self._browser.is_connected():
                return
            # Lazy import so the WeasyPrint engine and tests don't need Playwright installed
            from playwright.async_api import async_playwright

            if self._playwright is None:
                self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=self.headless, args=CHROMIUM_ARGS)
            logger.info("chromium started")

    async def stop(self) -> None:
        async with self._lock:
            browser, pw = self._browser, self._playwright
            self._browser = None
            self._playwright = None
            try:
                if browser is not None:
                    await browser.close()
            finally:
                if pw is not None:
                    await pw.stop()
            logger.info("chromium stopped")

    @asynccontextmanager
    async def isolated_page(self) -> AsyncIterator[Any]:
        """Acquire a fresh context + page; the context is always closed on exit."""
        await self.start()
        context = await self._browser.new_context()
        try:
            page = await context.new_page()
            yield page
        finally:
            await context.close()

    async def _render(self, html: str) -> bytes:
        async with self.isolated_page() as page:
            await page.set_content(html, wait_until="networkidle")
            return await page.pdf(
                format=PAGE_FORMAT,
                print_background=True,
                margin={"top": PAGE_MARGIN, "right": PAGE_MARGIN, "bottom": PAGE_MARGIN, "left": PAGE_MARGIN},
            )


class WeasyPrintRenderer(PdfRenderer):
    name = "weasyprint"

    def _write_pdf(self, html: str) -> bytes:
        # Lazy import to avoid loading WeasyPrint when Chromium is selected
        from weasyprint import CSS, HTML

        return HTML(string=html).write_pdf(stylesheets=[CSS(string=PAGE_CSS)])

    async def _render(self, html: str) -> bytes:
        return await run_in_threadpool(self._write_pdf, html)


def build_renderer(config: ServiceConfig) -> PdfRenderer:
    if config.pdf_engine == "chromium":
        return ChromiumRenderer()
    if config.pdf_engine == "weasyprint":
        return WeasyPrintRenderer()
    raise ValueError(f"Unsupported PDF engine: {config.pdf_engine}")
