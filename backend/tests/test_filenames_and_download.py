"""Tests for filename sanitization and download triggers."""
import re
from datetime import date

import pytest

from reporting.download import AttachmentDownload, DirectoryDownload
from reporting.filenames import export_filename, sanitize_filename


def test_sanitize_filename_charset():
    out = sanitize_filename("  Q1 Report: Sales/Returns (draft) ✓  ")
    assert out == "Q1_Report_SalesReturns_draft"
    assert re.fullmatch(r"[A-Za-z0-9_\-]*", out)


def test_sanitize_filename_is_idempotent():
    for name in ["Cashflow Report", "pnl_statement_2025-01-01_2025-01-31", "  a   b\tc ", "***", ""]:
        once = sanitize_filename(name)
        assert sanitize_filename(once) == once


def test_export_filename_appends_date():
    assert export_filename("Cashflow Report", today=date(2025, 1, 31)) == "Cashflow_Report_2025-01-31.pdf"


def test_export_filename_falls_back_when_empty():
    assert export_filename("???", today=date(2025, 2, 1)) == "report_2025-02-01.pdf"


def test_export_filename_extension():
    assert export_filename("stock", today=date(2025, 2, 1), extension="html") == "stock_2025-02-01.html"


def test_attachment_download_builds_response():
    trigger = AttachmentDownload()
    trigger.save(b"%PDF-1.4", "Cashflow_Report_2025-01-31.pdf")
    assert trigger.response.media_type == "application/pdf"
    assert trigger.response.body == b"%PDF-1.4"
    assert trigger.response.headers["content-disposition"] == 'attachment; filename="Cashflow_Report_2025-01-31.pdf"'


def test_directory_download_writes_file(tmp_path):
    trigger = DirectoryDownload(tmp_path / "out")
    trigger.save(b"%PDF-1.4 one", "a.pdf")
    trigger.save(b"%PDF-1.4 two", "a.pdf")
    trigger.save(b"%PDF-1.4 three", "b.pdf")
    assert (tmp_path / "out" / "a.pdf").read_bytes() == b"%PDF-1.4 two"
    assert sorted(p.name for p in (tmp_path / "out").iterdir()) == ["a.pdf", "b.pdf"]


def test_directory_download_cleans_up_on_failure(tmp_path):
    # A directory in the way makes the final move fail
    (tmp_path / "taken.pdf").mkdir()
    trigger = DirectoryDownload(tmp_path)
    with pytest.raises(OSError):
        trigger.save(b"%PDF-1.4", "taken.pdf")
    assert [p.name for p in tmp_path.iterdir()] == ["taken.pdf"]
