from __future__ import annotations

import logging
import os
import time
import uuid
from pathlib import Path

from dotenv import load_dotenv

# Load .env from backend directory so REPORT_BASE_URL etc. are available
load_dotenv(Path(__file__).resolve().parent / ".env")

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from branding import get_branding, report_base_url, resolve_logo_url
from models import (
    CashflowPdfRequest,
    ExportOptions,
    LiveStockPdfRequest,
    ProfitLossPdfRequest,
    SalesByCategoryPdfRequest,
    StockValuationPdfRequest,
    TaxPdfRequest,
)
from reporting.download import AttachmentDownload
from reporting.exporter import ReportExporter
from reporting.html_renderer import render_document_html
from reporting.pdf_renderer import check_pdf_runtime
from reporting.presets import (
    cashflow_export_options,
    live_stock_export_options,
    profit_and_loss_export_options,
    sales_by_category_export_options,
    stock_valuation_export_options,
    tax_export_options,
)

# Version for /health and the startup log (Render sets RENDER_GIT_COMMIT)
VERSION = (os.environ.get("RENDER_GIT_COMMIT") or "").strip() or "unknown"

_LOG = logging.getLogger("uvicorn.error")

app = FastAPI(title="Report Export Backend", version="0.1.0")

# CORS: use ALLOWED_ORIGINS env (comma-separated) if set, else default
_origins_env = os.environ.get("ALLOWED_ORIGINS", "").strip()
if _origins_env:
    ALLOWED_ORIGINS = [o.strip() for o in _origins_env.split(",") if o.strip()]
else:
    ALLOWED_ORIGINS = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Request-Id"],
)


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        _LOG.info(
            "request_id=%s method=%s path=%s status=%s duration_ms=%.0f",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        response.headers["X-Request-Id"] = request_id
        return response


app.add_middleware(RequestLogMiddleware)


@app.on_event("startup")
def startup_log() -> None:
    _LOG.info(
        "Report backend starting version=%s report_base_url=%s",
        VERSION,
        report_base_url(),
    )


def get_exporter() -> ReportExporter:
    return ReportExporter()


async def _export_attachment(exporter: ReportExporter, options: ExportOptions) -> Response:
    trigger = AttachmentDownload()
    try:
        await exporter.export(options, trigger)
    except ImportError:
        raise HTTPException(
            status_code=503,
            detail="Playwright is required for PDF. Install: pip install playwright && playwright install chromium. Use POST /reports/preview for HTML without Playwright.",
        )
    except Exception as e:
        _LOG.exception("PDF export failed for %r: %s", options.title, e)
        raise HTTPException(status_code=503, detail=f"PDF generation failed: {e!s}"[:500]) from e
    return trigger.response


@app.get("/health")
def health():
    return {"status": "ok", "version": VERSION}


@app.get("/health/pdf")
async def health_pdf():
    """
    Runtime check for Playwright PDF dependencies.
    Returns 200 only when Chromium can launch successfully.
    """
    try:
        await check_pdf_runtime()
    except ImportError:
        raise HTTPException(status_code=503, detail="Playwright is not installed.")
    except Exception as e:
        msg = str(e)
        if len(msg) > 500:
            msg = msg[:500]
        raise HTTPException(
            status_code=503,
            detail=f"Playwright runtime unavailable: {msg}",
        ) from e

    return {"status": "ok", "pdf_runtime": "ready"}


@app.get("/branding")
def branding():
    brand = get_branding()
    return {
        **brand.model_dump(),
        "address": brand.address,
        "contact_line": brand.contact_line,
        "logo_url": resolve_logo_url(),
    }


@app.post("/reports/pdf")
async def report_pdf(options: ExportOptions, exporter: ReportExporter = Depends(get_exporter)):
    """Branded A4 PDF of the given report, as a download attachment."""
    return await _export_attachment(exporter, options)


@app.post("/reports/preview", response_class=HTMLResponse)
async def report_preview(options: ExportOptions, exporter: ReportExporter = Depends(get_exporter)):
    """Same document as /reports/pdf, returned as HTML. Does not need Chromium for composition."""
    tree, sheet = await exporter.compose_document(options)
    return HTMLResponse(content=render_document_html(tree, sheet))


@app.post("/reports/cashflow/pdf")
async def cashflow_pdf(req: CashflowPdfRequest, exporter: ReportExporter = Depends(get_exporter)):
    options = cashflow_export_options(req.summary, req.date_from, req.date_to, source_url=req.source_url)
    return await _export_attachment(exporter, options)


@app.post("/reports/pnl/pdf")
async def pnl_pdf(req: ProfitLossPdfRequest, exporter: ReportExporter = Depends(get_exporter)):
    options = profit_and_loss_export_options(req.statement, req.date_from, req.date_to)
    return await _export_attachment(exporter, options)


@app.post("/reports/tax/pdf")
async def tax_pdf(req: TaxPdfRequest, exporter: ReportExporter = Depends(get_exporter)):
    options = tax_export_options(req.report, req.date_from, req.date_to)
    return await _export_attachment(exporter, options)


@app.post("/reports/stocks/live/pdf")
async def live_stock_pdf(req: LiveStockPdfRequest, exporter: ReportExporter = Depends(get_exporter)):
    options = live_stock_export_options(req.items, req.summary, as_of=req.as_of, source_url=req.source_url)
    return await _export_attachment(exporter, options)


@app.post("/reports/stocks/valuation/pdf")
async def stock_valuation_pdf(req: StockValuationPdfRequest, exporter: ReportExporter = Depends(get_exporter)):
    options = stock_valuation_export_options(req.items, req.summary, as_of=req.as_of, source_url=req.source_url)
    return await _export_attachment(exporter, options)


@app.post("/reports/sales/by-category/pdf")
async def sales_by_category_pdf(req: SalesByCategoryPdfRequest, exporter: ReportExporter = Depends(get_exporter)):
    options = sales_by_category_export_options(req.categories, req.date_from, req.date_to, source_url=req.source_url)
    return await _export_attachment(exporter, options)
