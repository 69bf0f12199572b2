"""Tests for the report HTTP endpoints."""
import httpx
import pytest
from fastapi.testclient import TestClient

# Conftest adds backend dir to path: use direct imports (no backend. prefix)
from main import app, get_exporter
from reporting.assets import AssetFetcher
from reporting.exporter import ReportExporter

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24


class FakeRenderer:
    async def render(self, tree, sheet):
        return b"%PDF-1.4 " + tree.metadata.title.encode("utf-8")


class BrokenRenderer:
    async def render(self, tree, sheet):
        raise RuntimeError("Target page, context or browser has been closed")


def _fake_exporter(renderer=None) -> ReportExporter:
    fetcher = AssetFetcher(
        logo_url="http://reports.test/logo.png",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, content=PNG)),
        timeout_s=1.0,
    )
    return ReportExporter(fetcher=fetcher, renderer=renderer or FakeRenderer())


@pytest.fixture
def client():
    app.dependency_overrides[get_exporter] = _fake_exporter
    yield TestClient(app)
    app.dependency_overrides.clear()


def _payload(**overrides):
    payload = {
        "title": "Cashflow Report",
        "period": "2025-01-01 – 2025-01-31",
        "summaryItems": [{"label": "Net Cash Flow", "value": "Rs 45,200"}],
        "tables": [
            {
                "title": "Daily Breakdown",
                "columns": ["Date", "Cash In", "Net"],
                "rows": [["2025-01-01", "1200", None]],
                "greenCols": [2],
            }
        ],
    }
    payload.update(overrides)
    return payload


def test_health():
    response = TestClient(app).get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-Id" in response.headers


def test_health_pdf_reports_runtime():
    response = TestClient(app).get("/health/pdf")
    # 200 when Chromium launches, 503 when Playwright or its browser is missing
    assert response.status_code in (200, 503)


def test_branding():
    response = TestClient(app).get("/branding")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "NEVERBE"
    assert data["logo_url"].endswith("/logo.png")
    assert data["contact_line"] == "+94 70 520 8999 · info@neverbe.com · www.neverbe.lk"


def test_post_report_pdf_returns_attachment(client):
    response = client.post("/reports/pdf", json=_payload())
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="Cashflow_Report_')
    assert disposition.endswith('.pdf"')
    assert response.content == b"%PDF-1.4 Cashflow Report"


def test_post_report_preview_returns_html(client):
    response = client.post("/reports/preview", json=_payload())
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    body = response.text
    assert "Key Metrics" in body
    assert "Daily Breakdown" in body
    assert "Rs 45,200" in body
    assert "—" in body
    assert "data:image/png;base64," in body


def test_post_report_rejects_malformed_table(client):
    bad = _payload(tables=[{"columns": ["A", "B"], "rows": [["only one"]]}])
    assert client.post("/reports/pdf", json=bad).status_code == 422
    bad_index = _payload(tables=[{"columns": ["A"], "rows": [["x"]], "redCols": [3]}])
    assert client.post("/reports/pdf", json=bad_index).status_code == 422


def test_post_report_rejects_missing_title(client):
    assert client.post("/reports/pdf", json=_payload(title="")).status_code == 422


def test_render_failure_returns_503():
    app.dependency_overrides[get_exporter] = lambda: _fake_exporter(renderer=BrokenRenderer())
    try:
        response = TestClient(app).post("/reports/pdf", json=_payload())
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 503
    assert "PDF generation failed" in response.json()["detail"]


def test_cashflow_pdf_preset(client):
    body = {
        "from": "2025-01-01",
        "to": "2025-01-31",
        "summary": {
            "daily": [
                {"date": "2025-01-01", "orders": 2, "cashIn": 500, "transactionFees": 10, "expenses": 40, "netCashFlow": 450}
            ]
        },
    }
    response = client.post("/reports/cashflow/pdf", json=body)
    assert response.status_code == 200
    assert 'filename="cashflow_2025-01-01_2025-01-31_' in response.headers["content-disposition"]


def test_pnl_pdf_preset(client):
    body = {"from": "2025-01-01", "to": "2025-01-31", "statement": {"grossProfit": 10, "netProfit": 5}}
    response = client.post("/reports/pnl/pdf", json=body)
    assert response.status_code == 200
    assert response.content == b"%PDF-1.4 Profit & Loss Statement"
    assert 'filename="pnl_statement_2025-01-01_2025-01-31_' in response.headers["content-disposition"]


def test_tax_pdf_preset(client):
    body = {
        "from": "2025-01-01",
        "to": "2025-01-31",
        "report": {
            "summary": {"totalSales": 1180, "totalTaxableAmount": 1000, "totalTaxCollected": 180, "effectiveTaxRate": 18},
            "transactions": [
                {"date": "2025-01-02", "orderId": "ORD-1", "orderTotal": 1180, "taxableAmount": 1000, "taxCollected": 180}
            ],
        },
    }
    response = client.post("/reports/tax/pdf", json=body)
    assert response.status_code == 200
    assert response.content == b"%PDF-1.4 Tax Report"
    assert 'filename="tax_report_2025-01-01_2025-01-31_' in response.headers["content-disposition"]


def test_live_stock_pdf_preset(client):
    body = {
        "asOf": "2025-01-31",
        "items": [{"productName": "Runner X", "variantName": "Black", "size": "42", "stockName": "Colombo", "quantity": 5}],
    }
    response = client.post("/reports/stocks/live/pdf", json=body)
    assert response.status_code == 200
    assert response.content == b"%PDF-1.4 Live Stock Report"
    assert 'filename="live_stock_' in response.headers["content-disposition"]


def test_stock_valuation_pdf_preset(client):
    body = {
        "items": [
            {"productName": "Runner X", "stockName": "Colombo", "quantity": 2, "buyingPrice": 4000, "valuation": 8000}
        ],
        "summary": {"totalProducts": 1, "totalQuantity": 2, "totalValuation": 8000},
    }
    response = client.post("/reports/stocks/valuation/pdf", json=body)
    assert response.status_code == 200
    assert response.content == b"%PDF-1.4 Stock Valuation Report"
    assert 'filename="stock_valuation_' in response.headers["content-disposition"]


def test_sales_by_category_pdf_preset(client):
    body = {
        "from": "2025-01-01",
        "to": "2025-01-31",
        "categories": [{"category": "Shoes", "totalOrders": 2, "totalQuantity": 3, "totalSales": 900, "totalNetSales": 850}],
    }
    response = client.post("/reports/sales/by-category/pdf", json=body)
    assert response.status_code == 200
    assert response.content == b"%PDF-1.4 Sales by Category"
    assert 'filename="sales_by_category_2025-01-01_2025-01-31_' in response.headers["content-disposition"]


def test_stock_pdf_rejects_item_without_product_name(client):
    response = client.post("/reports/stocks/live/pdf", json={"items": [{"quantity": 1}]})
    assert response.status_code == 422
