"""PDF rendering of a DocumentTree with headless Chromium (Playwright)."""
from __future__ import annotations

import logging

from .composer import DocumentTree
from .html_renderer import footer_template, page_margins, render_document_html
from .theme import StyleSheet

logger = logging.getLogger(__name__)


class PdfRenderError(RuntimeError):
    """Chromium could not be launched or failed to print the document."""


class PlaywrightPdfRenderer:
    def __init__(self, page_format: str = "A4"):
        self.page_format = page_format

    async def render(self, tree: DocumentTree, sheet: StyleSheet) -> bytes:
        from playwright.async_api import async_playwright

        html_content = render_document_html(tree, sheet)
        footer = tree.pages[0].footer if tree.pages else None
        pdf_kwargs = {
            "format": self.page_format,
            "print_background": True,
            "margin": page_margins(),
        }
        if footer is not None and footer.fixed:
            pdf_kwargs.update(
                display_header_footer=True,
                header_template="<span></span>",
                footer_template=footer_template(footer, sheet),
            )
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch()
                try:
                    page = await browser.new_page()
                    await page.set_content(html_content, wait_until="networkidle")
                    await page.emulate_media(media="print")
                    pdf_bytes = await page.pdf(**pdf_kwargs)
                finally:
                    await browser.close()
        except Exception as e:
            raise PdfRenderError(f"PDF rendering failed: {e}") from e
        logger.info("Rendered %s (%d bytes)", tree.metadata.title, len(pdf_bytes))
        return pdf_bytes


async def check_pdf_runtime() -> None:
    """Launch and close Chromium once; raises when the runtime is unusable."""
    from playwright.async_api import async_playwright

    async with async_playwright() as p:
        browser = await p.chromium.launch()
        await browser.close()
