"""
Report document composer.

Turns a fully resolved ReportDocumentSpec into a DocumentTree: one A4 page
flow holding, in fixed order, the header band and accent stripe, the title
block, the optional KPI and chart sections, one section per table, and a
footer that repeats on every rendered page. Pagination is left to the
renderer; the composer only fixes ordering and marks the footer as repeating.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

from models import ReportDocumentSpec, ReportTable, TableCell
from models_branding import BrandingConfig

from .format_utils import format_cell, format_generated_at
from .theme import StyleSheet

PAGE_SIZE = "A4"
GENERATED_LABEL = "Generated"
PERIOD_LABEL = "Period"
KPI_SECTION_TITLE = "Key Metrics"
CHART_SECTION_TITLE = "Charts & Analytics"
CONFIDENTIAL_LABEL = "Confidential"
PAGE_LABEL_TEMPLATE = "Page {page_number} of {total_pages}"


@dataclass(frozen=True)
class HeaderBand:
    company_name: str
    tagline: str
    address: str
    contact: str
    generated_label: str
    generated_at: str
    logo_src: Optional[str] = None


@dataclass(frozen=True)
class AccentStripe:
    pass


@dataclass(frozen=True)
class TitleBlock:
    title: str
    period_label: str
    period: str
    subtitle: Optional[str] = None


@dataclass(frozen=True)
class SectionHeader:
    title: str


@dataclass(frozen=True)
class KpiCard:
    label: str
    value: str
    sub: Optional[str] = None


@dataclass(frozen=True)
class KpiGrid:
    cards: tuple[KpiCard, ...]


@dataclass(frozen=True)
class ChartBlock:
    title: str
    image_src: str


@dataclass(frozen=True)
class TableCellNode:
    text: str
    style: str


@dataclass(frozen=True)
class TableRowNode:
    cells: tuple[TableCellNode, ...]
    shade: str  # "even" | "odd"


@dataclass(frozen=True)
class TableBlock:
    columns: tuple[str, ...]
    rows: tuple[TableRowNode, ...]


Block = Union[HeaderBand, AccentStripe, TitleBlock, SectionHeader, KpiGrid, ChartBlock, TableBlock]


@dataclass(frozen=True)
class Section:
    kind: str  # header | title | kpis | charts | table
    blocks: tuple[Block, ...]


@dataclass(frozen=True)
class Footer:
    company_name: str
    website: str
    confidentiality: str
    page_label_template: str = PAGE_LABEL_TEMPLATE
    fixed: bool = True

    def page_label(self, page_number: int, total_pages: int) -> str:
        return self.page_label_template.format(page_number=page_number, total_pages=total_pages)


@dataclass(frozen=True)
class Page:
    size: str
    sections: tuple[Section, ...]
    footer: Footer


@dataclass(frozen=True)
class DocumentMetadata:
    title: str
    author: str
    creator: str
    subject: str


@dataclass(frozen=True)
class DocumentTree:
    metadata: DocumentMetadata
    pages: tuple[Page, ...] = field(default_factory=tuple)

    @property
    def sections(self) -> tuple[Section, ...]:
        return tuple(section for page in self.pages for section in page.sections)

    def blocks_of(self, block_type: type) -> list:
        return [block for section in self.sections for block in section.blocks if isinstance(block, block_type)]


def cell_style(table: ReportTable, column: int) -> str:
    """Emphasis style of a column. Precedence: green > red > bold > default."""
    if column in table.green_cols:
        return "table_cell_green"
    if column in table.red_cols:
        return "table_cell_red"
    if column in table.bold_cols:
        return "table_cell_bold"
    return "table_cell"


def _table_row(table: ReportTable, index: int, row: list[TableCell]) -> TableRowNode:
    cells = tuple(TableCellNode(text=format_cell(value), style=cell_style(table, ci)) for ci, value in enumerate(row))
    return TableRowNode(cells=cells, shade="even" if index % 2 == 0 else "odd")


def _header_section(spec: ReportDocumentSpec, branding: BrandingConfig, generated_at: datetime) -> Section:
    band = HeaderBand(
        company_name=branding.name,
        tagline=branding.tagline,
        address=branding.address,
        contact=branding.contact_line,
        generated_label=GENERATED_LABEL,
        generated_at=format_generated_at(generated_at),
        logo_src=spec.logo or None,
    )
    return Section(kind="header", blocks=(band, AccentStripe()))


def _kpi_section(spec: ReportDocumentSpec) -> Section:
    cards = tuple(KpiCard(label=item.label, value=item.value, sub=item.sub or None) for item in spec.summary_items)
    return Section(kind="kpis", blocks=(SectionHeader(KPI_SECTION_TITLE), KpiGrid(cards=cards)))


def _chart_section(spec: ReportDocumentSpec) -> Section:
    blocks: list[Block] = [SectionHeader(CHART_SECTION_TITLE)]
    blocks.extend(ChartBlock(title=chart.title, image_src=chart.image_base64) for chart in spec.charts)
    return Section(kind="charts", blocks=tuple(blocks))


def _table_section(table: ReportTable) -> Section:
    blocks: list[Block] = []
    if table.title:
        blocks.append(SectionHeader(table.title))
    blocks.append(
        TableBlock(
            columns=tuple(table.columns),
            rows=tuple(_table_row(table, ri, row) for ri, row in enumerate(table.rows)),
        )
    )
    return Section(kind="table", blocks=tuple(blocks))


def compose(
    spec: ReportDocumentSpec,
    sheet: StyleSheet,
    branding: BrandingConfig,
    generated_at: datetime | None = None,
) -> DocumentTree:
    """
    Lay out a report document.

    generated_at defaults to the moment of composition. Layout does not depend
    on the sheet; style names on the tree are keys into it.
    """
    moment = generated_at or datetime.now()

    sections: list[Section] = [
        _header_section(spec, branding, moment),
        Section(
            kind="title",
            blocks=(TitleBlock(title=spec.title, subtitle=spec.subtitle or None, period_label=PERIOD_LABEL, period=spec.period),),
        ),
    ]
    if spec.summary_items:
        sections.append(_kpi_section(spec))
    if spec.charts:
        sections.append(_chart_section(spec))
    sections.extend(_table_section(table) for table in spec.tables)

    footer = Footer(company_name=branding.name, website=branding.website, confidentiality=CONFIDENTIAL_LABEL)
    metadata = DocumentMetadata(
        title=spec.title,
        author=branding.name,
        creator=branding.name,
        subject=f"{spec.title} — {spec.period}",
    )
    return DocumentTree(
        metadata=metadata,
        pages=(Page(size=PAGE_SIZE, sections=tuple(sections), footer=footer),),
    )

