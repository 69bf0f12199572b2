"""
Report asset acquisition: company logo over HTTP and chart snapshots.

Every failure here is recovered locally. A logo that cannot be fetched turns
into None and a chart that cannot be captured is dropped; both are logged at
WARNING so the export itself always proceeds.
"""
from __future__ import annotations

import asyncio
import base64
import logging
import os
from typing import Optional, Protocol, Sequence

import httpx

from branding import report_base_url, resolve_logo_url
from models import ChartCaptureRequest, ChartImage

logger = logging.getLogger(__name__)

MAX_LOGO_BYTES = 1_500_000
DEFAULT_LOGO_TIMEOUT_S = 10.0
DEFAULT_CAPTURE_TIMEOUT_MS = 30_000
CAPTURE_SCALE = 2
CAPTURE_BACKGROUND = "#ffffff"


def logo_timeout_s() -> float:
    raw = (os.environ.get("LOGO_FETCH_TIMEOUT_S") or "").strip()
    try:
        return float(raw) if raw else DEFAULT_LOGO_TIMEOUT_S
    except ValueError:
        return DEFAULT_LOGO_TIMEOUT_S


def capture_timeout_ms() -> int:
    raw = (os.environ.get("CHART_CAPTURE_TIMEOUT_MS") or "").strip()
    try:
        return int(raw) if raw else DEFAULT_CAPTURE_TIMEOUT_MS
    except ValueError:
        return DEFAULT_CAPTURE_TIMEOUT_MS


def sniff_image_mime(raw: bytes) -> Optional[str]:
    """Minimal MIME sniffing for safe image embedding. None when the bytes are not an image we embed."""
    if raw[:8] == b"\x89PNG\r\n\x1a\n":
        return "image/png"
    if raw.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if raw.startswith(b"GIF8"):
        return "image/gif"
    if raw[:4] == b"RIFF" and raw[8:12] == b"WEBP":
        return "image/webp"
    head = raw[:256].lstrip()
    if head.startswith(b"<svg") or (head.startswith(b"<?xml") and b"<svg" in raw[:2048]):
        return "image/svg+xml"
    return None


def image_data_uri(raw: bytes) -> Optional[str]:
    if not raw or len(raw) > MAX_LOGO_BYTES:
        return None
    mime = sniff_image_mime(raw)
    if mime is None:
        return None
    return f"data:{mime};base64,{base64.b64encode(raw).decode('ascii')}"


def absolute_report_url(url: str) -> str:
    """Dashboard URLs may be given relative to REPORT_BASE_URL."""
    text = (url or "").strip()
    if text.startswith(("http://", "https://")):
        return text
    return f"{report_base_url()}/{text.lstrip('/')}"


class ChartSnapshotProvider(Protocol):
    async def capture(self, element_id: str) -> Optional[bytes]:
        """PNG bytes of the element, or None when no such element exists."""
        ...


class NullChartSnapshotProvider:
    """Used when there is no dashboard page to capture from."""

    async def capture(self, element_id: str) -> Optional[bytes]:
        return None


class PlaywrightChartSnapshotProvider:
    """
    Screenshots chart elements of a live dashboard page in headless Chromium.

    The page is loaded once, on the first capture, and shared by every capture
    of the same export. Use as an async context manager so the browser is
    always closed.
    """

    def __init__(self, page_url: str, timeout_ms: Optional[int] = None):
        self.page_url = absolute_report_url(page_url)
        self.timeout_ms = timeout_ms if timeout_ms is not None else capture_timeout_ms()
        self._lock = asyncio.Lock()
        self._playwright = None
        self._browser = None
        self._page = None
        self._load_error: Optional[BaseException] = None

    async def __aenter__(self) -> "PlaywrightChartSnapshotProvider":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        try:
            if self._browser is not None:
                await self._browser.close()
            if self._playwright is not None:
                await self._playwright.stop()
        except Exception as e:
            logger.warning("Closing chart capture browser failed: %s", e)
        finally:
            self._browser = None
            self._playwright = None
            self._page = None

    async def _ensure_page(self):
        async with self._lock:
            if self._page is not None:
                return self._page
            if self._load_error is not None:
                raise RuntimeError(f"dashboard page unavailable: {self._load_error}")
            try:
                from playwright.async_api import async_playwright

                self._playwright = await async_playwright().start()
                self._browser = await self._playwright.chromium.launch()
                context = await self._browser.new_context(
                    device_scale_factor=CAPTURE_SCALE,
                    bypass_csp=True,
                )
                page = await context.new_page()
                await page.goto(self.page_url, wait_until="networkidle", timeout=self.timeout_ms)
            except Exception as e:
                self._load_error = e
                raise
            self._page = page
            return page

    async def capture(self, element_id: str) -> Optional[bytes]:
        page = await self._ensure_page()
        locator = page.locator(f"id={element_id}")
        if await locator.count() == 0:
            return None
        element = locator.first
        await element.evaluate("(el, bg) => { el.style.backgroundColor = bg; }", CAPTURE_BACKGROUND)
        return await element.screenshot(type="png", timeout=self.timeout_ms)


class AssetFetcher:
    """Fetches the logo and captures charts for one export."""

    def __init__(
        self,
        snapshot_provider: Optional[ChartSnapshotProvider] = None,
        logo_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout_s: Optional[float] = None,
    ):
        self.snapshot_provider = snapshot_provider or NullChartSnapshotProvider()
        self.logo_url = logo_url
        self._transport = transport
        self._timeout_s = timeout_s if timeout_s is not None else logo_timeout_s()

    async def fetch_logo(self) -> Optional[str]:
        url = self.logo_url or resolve_logo_url()
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout_s) as client:
                res = await client.get(url)
                res.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Logo fetch failed for %s: %s", url, e)
            return None
        if len(res.content) > MAX_LOGO_BYTES:
            logger.warning("Logo at %s is too large (%d bytes)", url, len(res.content))
            return None
        data_uri = image_data_uri(res.content)
        if data_uri is None:
            logger.warning("Logo at %s is empty or not a supported image", url)
        return data_uri

    async def capture_chart(self, element_id: str) -> Optional[str]:
        try:
            raw = await self.snapshot_provider.capture(element_id)
        except Exception as e:
            logger.warning("Chart capture failed for #%s: %s", element_id, e)
            return None
        if not raw:
            logger.warning("Chart element #%s not found", element_id)
            return None
        return f"data:image/png;base64,{base64.b64encode(raw).decode('ascii')}"

    async def capture_charts(self, requests: Sequence[ChartCaptureRequest]) -> list[ChartImage]:
        """Capture every requested chart concurrently; failures are dropped, order is kept."""
        images = await asyncio.gather(*(self.capture_chart(req.element_id) for req in requests))
        return [
            ChartImage(title=req.title, image_base64=image)
            for req, image in zip(requests, images)
            if image is not None
        ]
