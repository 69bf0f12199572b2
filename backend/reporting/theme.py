"""
Declarative style theme for report documents.

build_style_sheet() maps every named region of a report (header band, KPI
cards, table cell variants, footer ...) to CSS declarations derived from the
branding palette. It is pure: the same branding always yields an equal sheet.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping

from models_branding import BrandingConfig

FONT_FAMILY = "Helvetica, Arial, sans-serif"

# Neutral palette shared by every brand
WHITE = "#ffffff"
TEXT = "#1a1a1a"
TEXT_BODY = "#374151"
MUTED = "#6b7280"
MUTED_LIGHT = "#9ca3af"
MUTED_LIGHTER = "#d1d5db"
BORDER = "#e5e7eb"
SURFACE = "#f9fafb"
SURFACE_ALT = "#f3f4f6"
NEGATIVE = "#dc2626"

CONTENT_PADDING_X = "40px"
FOOTER_HEIGHT = "50px"


@dataclass(frozen=True)
class StyleRule:
    """Ordered CSS declarations for one region."""
    declarations: tuple[tuple[str, str], ...]

    def get(self, prop: str, default: str | None = None) -> str | None:
        for key, value in self.declarations:
            if key == prop:
                return value
        return default

    def to_css(self) -> str:
        return "; ".join(f"{key}: {value}" for key, value in self.declarations)


def _rule(**props: str) -> StyleRule:
    # Keyword names use underscores; CSS wants dashes
    return StyleRule(tuple((key.replace("_", "-"), str(value)) for key, value in props.items()))


class StyleSheet(Mapping[str, StyleRule]):
    """Immutable mapping of region name -> StyleRule."""

    def __init__(self, rules: Mapping[str, StyleRule]):
        self._rules = MappingProxyType(dict(rules))

    def __getitem__(self, name: str) -> StyleRule:
        return self._rules[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StyleSheet):
            return NotImplemented
        return dict(self._rules) == dict(other._rules)

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._rules.items())))

    def class_name(self, name: str) -> str:
        if name not in self._rules:
            raise KeyError(f"unknown style region: {name}")
        return "s-" + name.replace("_", "-")

    def to_css(self) -> str:
        return "\n".join(f".{self.class_name(name)} {{ {rule.to_css()}; }}" for name, rule in self._rules.items())


def build_style_sheet(branding: BrandingConfig) -> StyleSheet:
    primary = branding.primary_color
    accent = branding.accent_color

    rules: dict[str, StyleRule] = {
        # -- Page --
        "page": _rule(
            font_family=FONT_FAMILY,
            font_size="9px",
            color=TEXT,
            background_color=WHITE,
            margin="0",
            padding="0",
        ),
        # -- Header band --
        "header_band": _rule(
            background_color=primary,
            padding=f"24px {CONTENT_PADDING_X}",
            display="flex",
            justify_content="space-between",
            align_items="center",
        ),
        "header_left": _rule(display="flex", align_items="center", gap="12px"),
        "logo": _rule(width="44px", height="44px", object_fit="contain"),
        "company_name": _rule(
            color=WHITE,
            font_size="18px",
            font_weight="700",
            letter_spacing="1px",
        ),
        "company_tagline": _rule(color=MUTED_LIGHT, font_size="8px", margin_top="2px"),
        "contact_line": _rule(color=MUTED, font_size="7px", margin_top="1px"),
        "header_right": _rule(text_align="right"),
        "generated_label": _rule(
            color=MUTED_LIGHT,
            font_size="7px",
            text_transform="uppercase",
            letter_spacing="0.5px",
        ),
        "generated_date": _rule(color=MUTED_LIGHTER, font_size="8px", margin_top="2px"),
        # -- Accent stripe --
        "accent_stripe": _rule(background_color=accent, height="4px"),
        # -- Content wrapper --
        "content": _rule(padding=f"28px {CONTENT_PADDING_X} 0 {CONTENT_PADDING_X}"),
        # -- Report title block --
        "title_block": _rule(
            display="flex",
            justify_content="space-between",
            align_items="flex-end",
            margin_bottom="20px",
            padding_bottom="14px",
            border_bottom=f"1px solid {BORDER}",
        ),
        "report_title": _rule(
            font_size="22px",
            font_weight="700",
            color=primary,
            letter_spacing="0.3px",
        ),
        "report_subtitle": _rule(font_size="8px", color=MUTED, margin_top="3px"),
        "period_badge": _rule(
            background_color=SURFACE_ALT,
            border_radius="4px",
            padding="5px 10px",
            text_align="center",
        ),
        "period_label": _rule(
            font_size="7px",
            color=MUTED_LIGHT,
            text_transform="uppercase",
            letter_spacing="0.5px",
        ),
        "period_value": _rule(font_size="9px", font_weight="700", color=primary, margin_top="2px"),
        # -- Section header --
        "section_header": _rule(
            display="flex",
            align_items="center",
            margin_top="18px",
            margin_bottom="10px",
            break_after="avoid",
        ),
        "section_accent_bar": _rule(
            width="3px",
            height="14px",
            background_color=accent,
            border_radius="2px",
            margin_right="8px",
        ),
        "section_title": _rule(font_size="11px", font_weight="700", color=primary),
        # -- KPI cards --
        "kpi_grid": _rule(display="flex", flex_wrap="wrap", gap="10px", margin_bottom="6px"),
        "kpi_card": _rule(
            background_color=SURFACE,
            border_radius="6px",
            border_left=f"3px solid {accent}",
            padding="12px",
            min_width="110px",
            flex="1",
            break_inside="avoid",
        ),
        "kpi_label": _rule(
            font_size="7px",
            font_weight="700",
            color=MUTED,
            text_transform="uppercase",
            letter_spacing="0.4px",
        ),
        "kpi_value": _rule(font_size="16px", font_weight="700", color=primary, margin_top="4px"),
        "kpi_sub": _rule(font_size="7px", color=MUTED_LIGHT, margin_top="2px"),
        # -- Charts --
        "chart_container": _rule(
            background_color=SURFACE,
            border_radius="6px",
            padding="10px",
            margin_bottom="14px",
            break_inside="avoid",
        ),
        "chart_title": _rule(font_size="9px", font_weight="700", color=primary, margin_bottom="6px"),
        "chart_image": _rule(
            display="block",
            width="100%",
            border_radius="6px",
            object_fit="contain",
        ),
        # -- Data tables --
        "table": _rule(
            width="100%",
            border_collapse="collapse",
            margin_top="6px",
            margin_bottom="14px",
            table_layout="fixed",
        ),
        "table_header_row": _rule(background_color=primary),
        "table_header_cell": _rule(
            color=WHITE,
            font_size="7px",
            font_weight="700",
            text_transform="uppercase",
            letter_spacing="0.4px",
            text_align="left",
            padding="7px 10px",
        ),
        "table_row": _rule(border_bottom=f"1px solid {SURFACE_ALT}", break_inside="avoid"),
        "table_row_even": _rule(background_color=SURFACE),
        "table_row_odd": _rule(background_color=WHITE),
        "table_cell": _rule(font_size="8px", color=TEXT_BODY, padding="6px 10px", overflow_wrap="anywhere"),
        "table_cell_bold": _rule(font_weight="700", color=primary),
        "table_cell_green": _rule(font_weight="700", color=accent),
        "table_cell_red": _rule(font_weight="700", color=NEGATIVE),
        # -- Footer (repeated on every page by the renderer) --
        "footer": _rule(
            display="flex",
            justify_content="space-between",
            align_items="center",
            width="100%",
            box_sizing="border-box",
            padding=f"12px {CONTENT_PADDING_X}",
            border_top=f"1px solid {BORDER}",
            background_color=WHITE,
            font_family=FONT_FAMILY,
        ),
        "footer_left": _rule(font_size="7px", color=MUTED_LIGHT),
        "footer_right": _rule(font_size="7px", color=MUTED_LIGHT),
        "footer_accent": _rule(font_weight="700", color=accent),
    }
    return StyleSheet(rules)
