"""Company branding used to theme every generated report."""
from __future__ import annotations

import re
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})")


class BrandingConfig(BaseModel):
    """Company identity and palette shared by the style theme and the composer."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str
    tagline: str = ""
    address_line1: str = Field(default="", validation_alias=AliasChoices("address_line1", "addressLine1"))
    address_line2: Optional[str] = Field(default=None, validation_alias=AliasChoices("address_line2", "addressLine2"))
    phone: str = ""
    email: str = ""
    website: str = ""
    # Primary drives header bands and headline text, accent drives stripes and positive emphasis
    primary_color: str = Field(default="#111827", validation_alias=AliasChoices("primary_color", "primaryColor"))
    accent_color: str = Field(default="#16a34a", validation_alias=AliasChoices("accent_color", "accentColor"))

    @field_validator("primary_color", "accent_color")
    @classmethod
    def _validate_hex(cls, value: str) -> str:
        text = str(value or "").strip()
        if not _HEX_COLOR.fullmatch(text):
            raise ValueError(f"expected a #rgb or #rrggbb color, got {value!r}")
        return text.lower()

    @field_validator("address_line2", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @property
    def address(self) -> str:
        if self.address_line2:
            return f"{self.address_line1}  ·  {self.address_line2}"
        return self.address_line1

    @property
    def contact_line(self) -> str:
        return " · ".join(part for part in (self.phone, self.email, self.website) if part)
