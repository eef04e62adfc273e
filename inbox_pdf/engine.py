"""Shared headless Chromium handle for HTML -> PDF conversion.

Launching Chromium dominates the latency of a naive per-render launch,
so one browser is started lazily on first use and kept for the life of
the process.  Each render gets its own page, which is always closed
afterwards; a failed render never tears down the browser.
"""

from __future__ import annotations

import asyncio
import signal

import structlog
from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from .config import RendererConfig
from .errors import RenderError

logger = structlog.get_logger()


class BrowserEngine:
    """Owns one Playwright Chromium process.

    * :meth:`render_pdf` launches the browser on first call (guarded by an
      :class:`asyncio.Lock` so concurrent first calls launch once).
    * A browser found disconnected at acquire time is relaunched.
    * At most ``config.max_concurrent_pages`` pages are open at once.
    * :meth:`shutdown` closes the browser and stops Playwright exactly once.
    """

    def __init__(self, config: RendererConfig) -> None:
        self._config = config
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._lock = asyncio.Lock()
        self._pages = asyncio.Semaphore(config.max_concurrent_pages)
        self._closed = False
        self._shutdown_task: asyncio.Task[None] | None = None
        self.launch_count: int = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    async def render_pdf(self, html: str) -> bytes:
        """Load *html* into a fresh page and export it as PDF bytes."""
        browser = await self._acquire_browser()

        async with self._pages:
            page: Page | None = None
            try:
                page = await browser.new_page()
                await page.set_content(
                    html,
                    wait_until="domcontentloaded",
                    timeout=self._config.content_timeout_ms,
                )
                pdf = await page.pdf(
                    format=self._config.page_format,
                    print_background=self._config.print_background,
                    margin=self._config.margins,
                )
            except PlaywrightError as exc:
                logger.error("pdf_render_failed", error=str(exc))
                raise RenderError(f"Failed to render PDF: {exc}", cause=exc) from exc
            finally:
                if page is not None:
                    await self._close_page(page)

        logger.debug("pdf_rendered", html_chars=len(html), pdf_bytes=len(pdf))
        return pdf

    async def _close_page(self, page: Page) -> None:
        try:
            await page.close()
        except PlaywrightError as exc:
            logger.warning("page_close_failed", error=str(exc))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def _acquire_browser(self) -> Browser:
        async with self._lock:
            if self._closed:
                raise RenderError("Rendering engine has been shut down")

            if self._browser is not None:
                if self._browser.is_connected():
                    return self._browser
                logger.warning("browser_relaunching", reason="disconnected")
                self._browser = None

            try:
                if self._playwright is None:
                    self._playwright = await async_playwright().start()
                self._browser = await self._playwright.chromium.launch(
                    headless=self._config.headless,
                    args=self._config.launch_args,
                )
            except PlaywrightError as exc:
                logger.error("browser_launch_failed", error=str(exc))
                raise RenderError(f"Failed to launch browser: {exc}", cause=exc) from exc

            self.launch_count += 1
            logger.info(
                "browser_launched",
                headless=self._config.headless,
                launch_count=self.launch_count,
            )
            return self._browser

    async def shutdown(self) -> None:
        """Close the browser and stop Playwright.  Safe to call repeatedly."""
        async with self._lock:
            if self._closed:
                return
            self._closed = True

            if self._browser is not None:
                try:
                    await self._browser.close()
                except PlaywrightError as exc:
                    logger.warning("browser_close_failed", error=str(exc))
                self._browser = None

            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None

        logger.info("browser_engine_shutdown", launch_count=self.launch_count)

    def schedule_shutdown(self) -> asyncio.Task[None]:
        """Start :meth:`shutdown` as a task on the running loop, once."""
        if self._shutdown_task is None:
            self._shutdown_task = asyncio.get_running_loop().create_task(self.shutdown())
        return self._shutdown_task


_engine: BrowserEngine | None = None


def get_engine(config: RendererConfig | None = None) -> BrowserEngine:
    """Return the process-wide engine, creating it on first use.

    *config* only applies when a new engine is created.  A new engine
    replaces one that has already been shut down.
    """
    global _engine
    if _engine is None or _engine.closed:
        _engine = BrowserEngine(config or RendererConfig())
    return _engine


def install_shutdown_hook(
    engine: BrowserEngine,
    shutdown_event: asyncio.Event | None = None,
) -> None:
    """Register SIGTERM and SIGINT handlers that shut *engine* down.

    Call this once from the running event loop.  If *shutdown_event* is
    given it is set as well, so the host can stop its own work.
    """
    loop = asyncio.get_running_loop()

    def _handle(sig: signal.Signals) -> None:
        logger.info("shutdown_signal_received", signal=sig.name)
        engine.schedule_shutdown()
        if shutdown_event is not None:
            shutdown_event.set()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, _handle, sig)
