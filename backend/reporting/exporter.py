"""
Export orchestration: assets -> document spec -> theme -> tree -> PDF -> delivery.

Asset failures degrade the document (no logo, fewer charts) and never abort
an export. Rendering and delivery failures propagate to the caller.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

from branding import get_branding
from models import ExportOptions, ReportDocumentSpec
from models_branding import BrandingConfig

from .assets import AssetFetcher, PlaywrightChartSnapshotProvider
from .composer import DocumentTree, compose
from .download import DownloadTrigger
from .filenames import export_filename
from .pdf_renderer import PlaywrightPdfRenderer
from .theme import StyleSheet, build_style_sheet

logger = logging.getLogger(__name__)


class DocumentRenderer(Protocol):
    async def render(self, tree: DocumentTree, sheet: StyleSheet) -> bytes:
        ...


@dataclass(frozen=True)
class ExportResult:
    filename: str
    content: bytes
    page_title: str


class ReportExporter:
    def __init__(
        self,
        branding: Optional[BrandingConfig] = None,
        fetcher: Optional[AssetFetcher] = None,
        renderer: Optional[DocumentRenderer] = None,
    ):
        self.branding = branding or get_branding()
        self._fetcher = fetcher
        self.renderer = renderer or PlaywrightPdfRenderer()

    async def _collect_assets(self, fetcher: AssetFetcher, options: ExportOptions) -> ReportDocumentSpec:
        logo, captured = await asyncio.gather(
            fetcher.fetch_logo(),
            fetcher.capture_charts(options.chart_specs),
        )
        if len(captured) < len(options.chart_specs):
            logger.warning(
                "%s: %d of %d charts could not be captured",
                options.title,
                len(options.chart_specs) - len(captured),
                len(options.chart_specs),
            )
        return ReportDocumentSpec(
            title=options.title,
            subtitle=options.subtitle,
            period=options.period,
            logo=logo,
            summary_items=options.summary_items,
            charts=[*options.charts, *captured],
            tables=options.tables,
        )

    async def build_document_spec(self, options: ExportOptions) -> ReportDocumentSpec:
        """Fetch the logo and capture every chart together, then freeze the spec."""
        if self._fetcher is not None:
            return await self._collect_assets(self._fetcher, options)
        if options.chart_specs and options.source_url:
            async with PlaywrightChartSnapshotProvider(options.source_url) as provider:
                return await self._collect_assets(AssetFetcher(snapshot_provider=provider), options)
        return await self._collect_assets(AssetFetcher(), options)

    async def compose_document(
        self, options: ExportOptions, generated_at: Optional[datetime] = None
    ) -> tuple[DocumentTree, StyleSheet]:
        spec = await self.build_document_spec(options)
        sheet = build_style_sheet(self.branding)
        return compose(spec, sheet, self.branding, generated_at=generated_at), sheet

    async def render(self, options: ExportOptions, generated_at: Optional[datetime] = None) -> ExportResult:
        """The header timestamp and the filename date come from the same moment."""
        moment = generated_at or datetime.now()
        tree, sheet = await self.compose_document(options, generated_at=moment)
        content = await self.renderer.render(tree, sheet)
        return ExportResult(
            filename=export_filename(options.filename or options.title, today=moment.date()),
            content=content,
            page_title=options.title,
        )

    async def export(self, options: ExportOptions, trigger: DownloadTrigger) -> None:
        result = await self.render(options)
        trigger.save(result.content, result.filename)
        logger.info("Exported %s as %s", result.page_title, result.filename)
