"""Company branding for PDF reports. Update COMPANY_BRANDING to rebrand every report."""
from __future__ import annotations

import os

from models_branding import BrandingConfig

LOGO_PATH = "/logo.png"
DEFAULT_REPORT_BASE_URL = "http://localhost:3000"

COMPANY_BRANDING = BrandingConfig(
    name="NEVERBE",
    tagline="Business Intelligence & ERP Platform",
    address_line1="330/4/10, New Kandy Road, Delgoda",
    address_line2="Gampaha, Sri Lanka",
    phone="+94 70 520 8999",
    email="info@neverbe.com",
    website="www.neverbe.lk",
    primary_color="#111827",
    accent_color="#16a34a",
)


def get_branding() -> BrandingConfig:
    return COMPANY_BRANDING


def report_base_url() -> str:
    """Origin the dashboard and its static assets are served from."""
    base = (os.environ.get("REPORT_BASE_URL") or "").strip() or DEFAULT_REPORT_BASE_URL
    return base.rstrip("/")


def resolve_logo_url(origin: str | None = None) -> str:
    """Absolute URL of the company logo. Pure string construction, no I/O."""
    base = (origin or "").strip().rstrip("/") or report_base_url()
    return f"{base}{LOGO_PATH}"
