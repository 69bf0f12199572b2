"""
HTML rendering of a composed DocumentTree.

The page body and the repeating footer are rendered separately: Chromium
prints the footer template into the bottom page margin of every page and
fills its pageNumber / totalPages spans from the final pagination.
"""
from __future__ import annotations

import html
from typing import Any

from .composer import (
    AccentStripe,
    Block,
    ChartBlock,
    DocumentTree,
    Footer,
    HeaderBand,
    KpiCard,
    KpiGrid,
    Section,
    SectionHeader,
    TableBlock,
    TitleBlock,
)
from .theme import FOOTER_HEIGHT, StyleSheet

PAGE_TOP_MARGIN = "24px"


def page_margins() -> dict[str, str]:
    """Printed page margins. The bottom margin is the band the footer template is drawn in."""
    return {"top": PAGE_TOP_MARGIN, "right": "0px", "bottom": FOOTER_HEIGHT, "left": "0px"}


def _esc(value: Any) -> str:
    return html.escape(str(value if value is not None else ""), quote=True)


def _cls(sheet: StyleSheet, *names: str) -> str:
    return " ".join(sheet.class_name(name) for name in names)


def _header_band(band: HeaderBand, sheet: StyleSheet) -> str:
    logo = f'<img class="{_cls(sheet, "logo")}" src="{_esc(band.logo_src)}" alt="" />' if band.logo_src else ""
    return f"""
    <div class="{_cls(sheet, "header_band")}">
      <div class="{_cls(sheet, "header_left")}">
        {logo}
        <div>
          <div class="{_cls(sheet, "company_name")}">{_esc(band.company_name)}</div>
          <div class="{_cls(sheet, "company_tagline")}">{_esc(band.tagline)}</div>
          <div class="{_cls(sheet, "contact_line")}">{_esc(band.address)}</div>
          <div class="{_cls(sheet, "contact_line")}">{_esc(band.contact)}</div>
        </div>
      </div>
      <div class="{_cls(sheet, "header_right")}">
        <div class="{_cls(sheet, "generated_label")}">{_esc(band.generated_label)}</div>
        <div class="{_cls(sheet, "generated_date")}">{_esc(band.generated_at)}</div>
      </div>
    </div>
    """


def _title_block(block: TitleBlock, sheet: StyleSheet) -> str:
    subtitle = (
        f'<div class="{_cls(sheet, "report_subtitle")}">{_esc(block.subtitle)}</div>' if block.subtitle else ""
    )
    return f"""
    <div class="{_cls(sheet, "title_block")}">
      <div>
        <div class="{_cls(sheet, "report_title")}">{_esc(block.title)}</div>
        {subtitle}
      </div>
      <div class="{_cls(sheet, "period_badge")}">
        <div class="{_cls(sheet, "period_label")}">{_esc(block.period_label)}</div>
        <div class="{_cls(sheet, "period_value")}">{_esc(block.period)}</div>
      </div>
    </div>
    """


def _section_header(block: SectionHeader, sheet: StyleSheet) -> str:
    return f"""
    <div class="{_cls(sheet, "section_header")}">
      <div class="{_cls(sheet, "section_accent_bar")}"></div>
      <div class="{_cls(sheet, "section_title")}">{_esc(block.title)}</div>
    </div>
    """


def _kpi_card(card: KpiCard, sheet: StyleSheet) -> str:
    sub = f'<div class="{_cls(sheet, "kpi_sub")}">{_esc(card.sub)}</div>' if card.sub else ""
    return f"""
        <div class="{_cls(sheet, "kpi_card")}">
          <div class="{_cls(sheet, "kpi_label")}">{_esc(card.label)}</div>
          <div class="{_cls(sheet, "kpi_value")}">{_esc(card.value)}</div>
          {sub}
        </div>
        """


def _kpi_grid(block: KpiGrid, sheet: StyleSheet) -> str:
    cards = "".join(_kpi_card(card, sheet) for card in block.cards)
    return f'<div class="{_cls(sheet, "kpi_grid")}">{cards}</div>'


def _chart_block(block: ChartBlock, sheet: StyleSheet) -> str:
    return f"""
    <div class="{_cls(sheet, "chart_container")}">
      <div class="{_cls(sheet, "chart_title")}">{_esc(block.title)}</div>
      <img class="{_cls(sheet, "chart_image")}" src="{_esc(block.image_src)}" alt="{_esc(block.title)}" />
    </div>
    """


def _table_block(block: TableBlock, sheet: StyleSheet) -> str:
    head = "".join(f'<th class="{_cls(sheet, "table_header_cell")}">{_esc(col)}</th>' for col in block.columns)
    body = []
    for row in block.rows:
        cells = "".join(
            f'<td class="{_cls(sheet, "table_cell")}{"" if cell.style == "table_cell" else " " + _cls(sheet, cell.style)}">'
            f"{_esc(cell.text)}</td>"
            for cell in row.cells
        )
        body.append(f'<tr class="{_cls(sheet, "table_row", "table_row_" + row.shade)}">{cells}</tr>')
    return f"""
    <table class="{_cls(sheet, "table")}">
      <thead><tr class="{_cls(sheet, "table_header_row")}">{head}</tr></thead>
      <tbody>{''.join(body)}</tbody>
    </table>
    """


def _block(block: Block, sheet: StyleSheet) -> str:
    if isinstance(block, HeaderBand):
        return _header_band(block, sheet)
    if isinstance(block, AccentStripe):
        return f'<div class="{_cls(sheet, "accent_stripe")}"></div>'
    if isinstance(block, TitleBlock):
        return _title_block(block, sheet)
    if isinstance(block, SectionHeader):
        return _section_header(block, sheet)
    if isinstance(block, KpiGrid):
        return _kpi_grid(block, sheet)
    if isinstance(block, ChartBlock):
        return _chart_block(block, sheet)
    if isinstance(block, TableBlock):
        return _table_block(block, sheet)
    raise TypeError(f"unsupported block: {type(block).__name__}")


def _section(section: Section, sheet: StyleSheet) -> str:
    inner = "".join(_block(block, sheet) for block in section.blocks)
    if section.kind == "header":
        return inner
    return f'<section class="{_cls(sheet, "content")}" data-kind="{_esc(section.kind)}">{inner}</section>'


def render_document_html(tree: DocumentTree, sheet: StyleSheet) -> str:
    """Full HTML document of the page body. The footer is rendered by footer_template()."""
    body = "".join(_section(section, sheet) for page in tree.pages for section in page.sections)
    size = tree.pages[0].size if tree.pages else "A4"
    meta = tree.metadata
    return f"""
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <title>{_esc(meta.title)}</title>
  <meta name="author" content="{_esc(meta.author)}" />
  <meta name="generator" content="{_esc(meta.creator)}" />
  <meta name="description" content="{_esc(meta.subject)}" />
  <style>
    @page {{ size: {size}; margin: {PAGE_TOP_MARGIN} 0 {FOOTER_HEIGHT} 0; }}
    html, body {{ -webkit-print-color-adjust: exact; print-color-adjust: exact; }}
{sheet.to_css()}
  </style>
</head>
<body class="{_cls(sheet, "page")}">
  {body}
</body>
</html>
    """.strip()


def footer_template(footer: Footer, sheet: StyleSheet) -> str:
    """
    Chromium footer template. Page CSS does not reach the template, so every
    style is inlined and font sizes are explicit.
    """
    page_label = _esc(footer.page_label_template).format(
        page_number='<span class="pageNumber"></span>',
        total_pages='<span class="totalPages"></span>',
    )
    return (
        f'<div style="{sheet["footer"].to_css()}; -webkit-print-color-adjust: exact;">'
        f'<div style="{sheet["footer_left"].to_css()}">'
        f'<span style="{sheet["footer_accent"].to_css()}">{_esc(footer.company_name)}</span>'
        f" · {_esc(footer.website)} · {_esc(footer.confidentiality)}"
        f"</div>"
        f'<div style="{sheet["footer_right"].to_css()}">{page_label}</div>'
        f"</div>"
    )
