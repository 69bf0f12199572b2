from __future__ import annotations

import datetime as dt
from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

TableCell = Union[str, int, float, None]


class SummaryItem(BaseModel):
    """One KPI tile. Value and sub are display strings formatted by the caller."""
    label: str
    value: str
    sub: Optional[str] = None


class ChartImage(BaseModel):
    """A raster chart snapshot (data-URI PNG) plus its caption."""
    model_config = ConfigDict(populate_by_name=True)

    title: str
    image_base64: str = Field(validation_alias=AliasChoices("image_base64", "imageBase64"))

    @field_validator("image_base64")
    @classmethod
    def _validate_data_uri(cls, value: str) -> str:
        text = str(value or "").strip()
        if not text.startswith("data:image/"):
            raise ValueError("image_base64 must be a data:image/... URI")
        return text


class ReportTable(BaseModel):
    """
    Tabular block of a report.

    Emphasis columns are indices into `columns`. A column may sit in more than
    one emphasis set; green wins over red, red wins over bold.
    """
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    columns: List[str]
    rows: List[List[TableCell]] = Field(default_factory=list)
    green_cols: List[int] = Field(default_factory=list, validation_alias=AliasChoices("green_cols", "greenCols"))
    red_cols: List[int] = Field(default_factory=list, validation_alias=AliasChoices("red_cols", "redCols"))
    bold_cols: List[int] = Field(default_factory=list, validation_alias=AliasChoices("bold_cols", "boldCols"))

    @field_validator("green_cols", "red_cols", "bold_cols", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Optional[List[int]]) -> List[int]:
        return [] if value is None else value

    @model_validator(mode="after")
    def _check_shape(self) -> "ReportTable":
        width = len(self.columns)
        for idx, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(f"row {idx} has {len(row)} cells, expected {width}")
        for name in ("green_cols", "red_cols", "bold_cols"):
            for col in getattr(self, name):
                if col < 0 or col >= width:
                    raise ValueError(f"{name} index {col} is out of range for {width} columns")
        return self


class ChartCaptureRequest(BaseModel):
    """A request to snapshot a live chart element by its DOM id."""
    model_config = ConfigDict(populate_by_name=True)

    title: str
    element_id: str = Field(validation_alias=AliasChoices("element_id", "elementId"))


class ReportDocumentSpec(BaseModel):
    """Fully resolved input of the document composer. Built once per export."""
    model_config = ConfigDict(frozen=True)

    title: str
    subtitle: Optional[str] = None
    period: str
    logo: Optional[str] = None  # data URI, None when the logo could not be fetched
    summary_items: List[SummaryItem] = Field(default_factory=list)
    charts: List[ChartImage] = Field(default_factory=list)
    tables: List[ReportTable] = Field(default_factory=list)


class ExportOptions(BaseModel):
    """Caller-facing export request: the document spec minus logo, plus capture and filename hints."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    subtitle: Optional[str] = None
    period: str
    summary_items: List[SummaryItem] = Field(
        default_factory=list, validation_alias=AliasChoices("summary_items", "summaryItems")
    )
    tables: List[ReportTable] = Field(default_factory=list)
    filename: Optional[str] = None
    chart_specs: List[ChartCaptureRequest] = Field(
        default_factory=list, validation_alias=AliasChoices("chart_specs", "chartSpecs")
    )
    # Pre-rendered chart images, embedded as-is ahead of captured ones
    charts: List[ChartImage] = Field(default_factory=list)
    # Dashboard page holding the chart elements named in chart_specs
    source_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("source_url", "sourceUrl"))

    @field_validator("summary_items", "tables", "chart_specs", "charts", mode="before")
    @classmethod
    def _none_to_empty_list(cls, value):
        return [] if value is None else value


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class CashflowDay(_CamelModel):
    date: str
    orders: int = 0
    cash_in: float = 0.0
    transaction_fees: float = 0.0
    expenses: float = 0.0
    net_cash_flow: float = 0.0


class CashflowSummary(_CamelModel):
    """Body of the cashflow report endpoint (`summary`)."""
    total_orders: int = 0
    total_cash_in: float = 0.0
    total_transaction_fees: float = 0.0
    total_expenses: float = 0.0
    total_net_cash_flow: float = 0.0
    daily: List[CashflowDay] = Field(default_factory=list)


class RevenueBreakdown(_CamelModel):
    gross_sales: float = 0.0
    discounts: float = 0.0
    net_sales: float = 0.0
    shipping_income: float = 0.0
    other_income: float = 0.0
    total_revenue: float = 0.0


class CostOfGoodsSold(_CamelModel):
    product_cost: float = 0.0
    shipping_cost: float = 0.0
    total_cogs: float = Field(default=0.0, validation_alias=AliasChoices("total_cogs", "totalCOGS"))


class ExpenseCategory(_CamelModel):
    category: str
    amount: float = 0.0


class OperatingExpenses(_CamelModel):
    by_category: List[ExpenseCategory] = Field(default_factory=list)
    total_expenses: float = 0.0


class OtherExpenses(_CamelModel):
    transaction_fees: float = 0.0
    other_fees: float = 0.0
    total_other: float = 0.0


class ProfitLossStatement(_CamelModel):
    revenue: RevenueBreakdown = Field(default_factory=RevenueBreakdown)
    cost_of_goods_sold: CostOfGoodsSold = Field(default_factory=CostOfGoodsSold)
    gross_profit: float = 0.0
    gross_profit_margin: float = 0.0
    operating_expenses: OperatingExpenses = Field(default_factory=OperatingExpenses)
    operating_income: float = 0.0
    other_expenses: OtherExpenses = Field(default_factory=OtherExpenses)
    net_profit: float = 0.0
    net_profit_margin: float = 0.0


class _SourceRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("source_url", "sourceUrl"))


class _PresetRequest(_SourceRequest):
    date_from: str = Field(validation_alias=AliasChoices("date_from", "from"))
    date_to: str = Field(validation_alias=AliasChoices("date_to", "to"))


class CashflowPdfRequest(_PresetRequest):
    summary: CashflowSummary


class ProfitLossPdfRequest(_PresetRequest):
    statement: ProfitLossStatement


class TaxTransaction(_CamelModel):
    date: str
    order_id: str
    order_total: float = 0.0
    taxable_amount: float = 0.0
    tax_collected: float = 0.0


class TaxSummary(_CamelModel):
    total_orders: int = 0
    total_sales: float = 0.0
    total_taxable_amount: float = 0.0
    total_tax_collected: float = 0.0
    effective_tax_rate: float = 0.0


class TaxReport(_CamelModel):
    """Body of the tax report endpoint (summary plus per-order transactions)."""
    summary: TaxSummary = Field(default_factory=TaxSummary)
    transactions: List[TaxTransaction] = Field(default_factory=list)


class StockItem(_CamelModel):
    """One product variant held at one stock location."""
    product_id: Optional[str] = None
    product_name: str
    variant_id: Optional[str] = None
    variant_name: Optional[str] = None
    size: Optional[str] = None
    stock_id: Optional[str] = None
    stock_name: Optional[str] = None
    quantity: int = 0


class ValuedStockItem(StockItem):
    buying_price: float = 0.0
    valuation: float = 0.0


class StockSummary(_CamelModel):
    """Totals sent by the stock endpoints. Missing totals are derived from the items."""
    total_products: Optional[int] = None
    total_quantity: Optional[int] = None
    total_valuation: Optional[float] = None


class SalesCategory(_CamelModel):
    category: str
    total_orders: int = 0
    total_quantity: int = 0
    total_sales: float = 0.0
    total_net_sales: float = 0.0
    total_gross_profit: Optional[float] = None
    gross_profit_margin: float = 0.0
    total_cogs: float = Field(default=0.0, validation_alias=AliasChoices("total_cogs", "totalCOGS"))
    total_discount: float = 0.0


class TaxPdfRequest(_PresetRequest):
    report: TaxReport


class SalesByCategoryPdfRequest(_PresetRequest):
    categories: List[SalesCategory] = Field(default_factory=list)


class _StockRequest(_SourceRequest):
    # Stock reports are point-in-time; the period shows this date (today when omitted)
    as_of: Optional[dt.date] = Field(default=None, validation_alias=AliasChoices("as_of", "asOf"))
    summary: StockSummary = Field(default_factory=StockSummary)


class LiveStockPdfRequest(_StockRequest):
    items: List[StockItem] = Field(default_factory=list)


class StockValuationPdfRequest(_StockRequest):
    items: List[ValuedStockItem] = Field(default_factory=list)
