"""Tests for the style theme, the document composer, and HTML rendering."""
from datetime import datetime

from branding import COMPANY_BRANDING
from models import ChartImage, ReportDocumentSpec, ReportTable, SummaryItem
from models_branding import BrandingConfig
from reporting.composer import (
    ChartBlock,
    HeaderBand,
    KpiCard,
    KpiGrid,
    SectionHeader,
    TableBlock,
    TitleBlock,
    cell_style,
    compose,
)
from reporting.html_renderer import footer_template, render_document_html
from reporting.theme import build_style_sheet

PNG_URI = "data:image/png;base64,iVBORw0KGgo="
MOMENT = datetime(2025, 1, 31, 14, 30)


def _spec(**overrides) -> ReportDocumentSpec:
    fields = {
        "title": "Cashflow Report",
        "period": "2025-01-01 – 2025-01-31",
        "summary_items": [SummaryItem(label="Net Cash Flow", value="Rs 45,200")],
        "tables": [ReportTable(title="Daily Breakdown", columns=["Date", "Cash In"], rows=[["2025-01-01", "1200"]])],
    }
    fields.update(overrides)
    return ReportDocumentSpec(**fields)


def _compose(spec: ReportDocumentSpec):
    sheet = build_style_sheet(COMPANY_BRANDING)
    return compose(spec, sheet, COMPANY_BRANDING, generated_at=MOMENT), sheet


# --- Theme ---
def test_style_sheet_is_deterministic():
    assert build_style_sheet(COMPANY_BRANDING) == build_style_sheet(COMPANY_BRANDING)


def test_style_sheet_uses_branding_palette():
    brand = BrandingConfig(name="Acme", primaryColor="#123456", accentColor="#ABCDEF")
    sheet = build_style_sheet(brand)
    assert sheet["header_band"].get("background-color") == "#123456"
    assert sheet["report_title"].get("color") == "#123456"
    assert sheet["table_header_row"].get("background-color") == "#123456"
    assert sheet["accent_stripe"].get("background-color") == "#abcdef"
    assert sheet["kpi_card"].get("border-left") == "3px solid #abcdef"
    assert sheet["table_cell_green"].get("color") == "#abcdef"
    assert sheet["table_cell_red"].get("color") == "#dc2626"


def test_style_sheet_css_uses_class_names():
    sheet = build_style_sheet(COMPANY_BRANDING)
    css = sheet.to_css()
    assert ".s-header-band {" in css
    assert sheet.class_name("table_cell_bold") == "s-table-cell-bold"


# --- Composer ---
def test_scenario_kpi_and_table():
    tree, _ = _compose(_spec())
    cards = tree.blocks_of(KpiGrid)[0].cards
    assert cards == (KpiCard(label="Net Cash Flow", value="Rs 45,200"),)
    headers = [b.title for b in tree.blocks_of(SectionHeader)]
    assert headers == ["Key Metrics", "Daily Breakdown"]
    table = tree.blocks_of(TableBlock)[0]
    assert len(table.rows) == 1
    assert [c.text for c in table.rows[0].cells] == ["2025-01-01", "1200"]


def test_section_order():
    spec = _spec(charts=[ChartImage(title="Trend", image_base64=PNG_URI)])
    tree, _ = _compose(spec)
    assert [s.kind for s in tree.sections] == ["header", "title", "kpis", "charts", "table"]
    assert tree.pages[0].size == "A4"
    assert tree.pages[0].footer.fixed is True


def test_empty_kpis_and_charts_are_omitted():
    tree, _ = _compose(_spec(summary_items=[], charts=[]))
    assert [s.kind for s in tree.sections] == ["header", "title", "table"]
    assert tree.blocks_of(KpiGrid) == []
    assert tree.blocks_of(ChartBlock) == []
    assert "Key Metrics" not in [b.title for b in tree.blocks_of(SectionHeader)]


def test_null_cell_and_negative_number_with_red_emphasis():
    table = ReportTable(columns=["Name", "Note", "Delta"], rows=[["A", None, -50]], red_cols=[2])
    tree, _ = _compose(_spec(tables=[table]))
    cells = tree.blocks_of(TableBlock)[0].rows[0].cells
    assert cells[1].text == "—"
    assert cells[2].text == "-50"
    assert cells[2].style == "table_cell_red"
    assert cells[0].style == "table_cell"


def test_green_beats_red_and_bold():
    table = ReportTable(columns=["a", "b"], rows=[["x", "y"]], green_cols=[1], red_cols=[1], bold_cols=[0, 1])
    assert cell_style(table, 1) == "table_cell_green"
    assert cell_style(table, 0) == "table_cell_bold"
    red_bold = ReportTable(columns=["a"], rows=[["x"]], red_cols=[0], bold_cols=[0])
    assert cell_style(red_bold, 0) == "table_cell_red"


def test_rows_alternate_shading():
    table = ReportTable(columns=["n"], rows=[[1], [2], [3]])
    tree, _ = _compose(_spec(tables=[table]))
    assert [r.shade for r in tree.blocks_of(TableBlock)[0].rows] == ["even", "odd", "even"]


def test_table_without_title_has_no_section_header():
    table = ReportTable(columns=["n"], rows=[[1]])
    tree, _ = _compose(_spec(summary_items=[], tables=[table]))
    assert tree.blocks_of(SectionHeader) == []


def test_header_band_identity_and_timestamp():
    tree, _ = _compose(_spec(logo=PNG_URI))
    band = tree.blocks_of(HeaderBand)[0]
    assert band.company_name == "NEVERBE"
    assert band.address == "330/4/10, New Kandy Road, Delgoda  ·  Gampaha, Sri Lanka"
    assert band.contact == "+94 70 520 8999 · info@neverbe.com · www.neverbe.lk"
    assert band.generated_at == "January 31, 2025 at 02:30 PM"
    assert band.logo_src == PNG_URI


def test_header_without_logo():
    tree, sheet = _compose(_spec(logo=None))
    assert tree.blocks_of(HeaderBand)[0].logo_src is None
    assert "<img" not in render_document_html(tree, sheet)


def test_title_block_and_metadata():
    tree, _ = _compose(_spec(subtitle="Daily view"))
    title = tree.blocks_of(TitleBlock)[0]
    assert title.period_label == "Period"
    assert title.subtitle == "Daily view"
    assert tree.metadata.author == "NEVERBE"
    assert tree.metadata.subject == "Cashflow Report — 2025-01-01 – 2025-01-31"


def test_footer_page_label():
    tree, _ = _compose(_spec())
    assert tree.pages[0].footer.page_label(2, 5) == "Page 2 of 5"


# --- HTML rendering ---
def test_rendered_html_escapes_and_styles_cells():
    table = ReportTable(columns=["Item", "Amount"], rows=[["<b>Fees</b>", "Rs 10"]], green_cols=[1])
    tree, sheet = _compose(_spec(tables=[table]))
    out = render_document_html(tree, sheet)
    assert "&lt;b&gt;Fees&lt;/b&gt;" in out
    assert 'class="s-table-cell s-table-cell-green"' in out
    assert "<title>Cashflow Report</title>" in out
    assert "size: A4" in out


def test_footer_template_uses_engine_page_counters():
    tree, sheet = _compose(_spec())
    out = footer_template(tree.pages[0].footer, sheet)
    assert 'Page <span class="pageNumber"></span> of <span class="totalPages"></span>' in out
    assert "NEVERBE" in out
    assert "Confidential" in out


def test_positive_cells_follow_accent_color():
    default_sheet = build_style_sheet(COMPANY_BRANDING)
    assert default_sheet["table_cell_green"].get("color") == COMPANY_BRANDING.accent_color
    rebranded = build_style_sheet(COMPANY_BRANDING.model_copy(update={"accent_color": "#0ea5e9"}))
    assert rebranded["table_cell_green"].get("color") == "#0ea5e9"
    assert rebranded["table_cell_red"].get("color") == "#dc2626"
