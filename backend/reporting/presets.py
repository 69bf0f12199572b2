"""
Export presets of the standard finance, tax, stock and sales reports.

Each preset turns the JSON of a report endpoint into ExportOptions: KPI
cards, dashboard charts to capture, and tables with the emphasis columns the
report pages use.
"""
from __future__ import annotations

from datetime import date
from typing import List, Optional

from models import (
    CashflowSummary,
    ChartCaptureRequest,
    ExportOptions,
    ProfitLossStatement,
    ReportTable,
    SalesCategory,
    StockItem,
    StockSummary,
    SummaryItem,
    TaxReport,
    ValuedStockItem,
)

from .format_utils import EMPTY_CELL, format_amount, format_long_date, format_number, format_percent

CASHFLOW_CHARTS = (
    ("Net Cash Flow Trend", "cashflow-chart-1"),
    ("Cost Breakdown", "cashflow-chart-2"),
)
PNL_CURRENCY = "LKR"
SALES_CATEGORY_CHARTS = (("Sales Comparison", "sales-comparison-chart"),)


def report_period(date_from: str, date_to: str) -> str:
    return f"{date_from} – {date_to}"


def cashflow_export_options(
    payload: CashflowSummary,
    date_from: str,
    date_to: str,
    source_url: Optional[str] = None,
) -> ExportOptions:
    daily = payload.daily
    total_cash_in = sum(d.cash_in for d in daily)
    total_fees = sum(d.transaction_fees for d in daily)
    total_expenses = sum(d.expenses for d in daily)
    total_net = sum(d.net_cash_flow for d in daily)

    rows = [
        [
            d.date,
            d.orders,
            f"Rs {d.cash_in:.2f}",
            f"Rs {d.transaction_fees:.2f}",
            f"Rs {d.expenses:.2f}",
            f"Rs {d.net_cash_flow:.2f}",
        ]
        for d in daily
    ]
    return ExportOptions(
        title="Cashflow Report",
        subtitle="Daily cash in, fees, expenses, and net cash flow",
        period=report_period(date_from, date_to),
        summary_items=[
            SummaryItem(label="Total Cash In", value=format_amount(total_cash_in)),
            SummaryItem(label="Transaction Fees", value=format_amount(total_fees)),
            SummaryItem(label="Total Expenses", value=format_amount(total_expenses)),
            SummaryItem(
                label="Net Cash Flow",
                value=format_amount(total_net),
                sub="Positive" if total_net >= 0 else "Negative",
            ),
        ],
        chart_specs=[ChartCaptureRequest(title=title, element_id=element_id) for title, element_id in CASHFLOW_CHARTS],
        tables=[
            ReportTable(
                title="Daily Cashflow Breakdown",
                columns=["Date", "Orders", "Cash In", "Trans. Fee", "Expenses", "Net Cash Flow"],
                rows=rows,
                green_cols=[5],
            )
        ],
        filename=f"cashflow_{date_from}_{date_to}",
        source_url=source_url,
    )


def _lkr(value: float) -> str:
    return format_number(value)


def _deduction(value: float) -> str:
    return f"({format_number(value)})"


def profit_and_loss_export_options(
    report: ProfitLossStatement,
    date_from: str,
    date_to: str,
) -> ExportOptions:
    revenue = report.revenue
    cogs = report.cost_of_goods_sold
    opex = report.operating_expenses
    other = report.other_expenses

    revenue_rows = [
        ["Gross Sales", _lkr(revenue.gross_sales)],
        ["Less: Discounts", _deduction(revenue.discounts)],
        ["Net Sales", _lkr(revenue.net_sales)],
        ["Shipping Income", f"{_lkr(revenue.shipping_income)} (Collected)"],
    ]
    if revenue.other_income > 0:
        revenue_rows.append(["Other Income", _lkr(revenue.other_income)])
    revenue_rows.append(["TOTAL REVENUE", _lkr(revenue.total_revenue)])

    cogs_rows = [["Product Cost", _lkr(cogs.product_cost)]]
    if cogs.shipping_cost > 0:
        cogs_rows.append(["Shipping Cost", f"{_lkr(cogs.shipping_cost)} (Pass-through)"])
    cogs_rows.append(["TOTAL COGS", _deduction(cogs.total_cogs)])
    cogs_rows.append(
        ["GROSS PROFIT", f"{format_percent(report.gross_profit_margin)} · {PNL_CURRENCY} {_lkr(report.gross_profit)}"]
    )

    opex_rows = [
        [
            e.category,
            _lkr(e.amount),
            format_percent(e.amount / opex.total_expenses * 100) if opex.total_expenses > 0 else EMPTY_CELL,
        ]
        for e in opex.by_category
    ]
    opex_rows.append(["TOTAL OPEX", _deduction(opex.total_expenses), ""])
    opex_rows.append(["OPERATING INCOME", _lkr(report.operating_income), ""])

    other_rows = [["Transaction Fees", _deduction(other.transaction_fees)]]
    if other.other_fees > 0:
        other_rows.append(["Other Fees", _deduction(other.other_fees)])
    other_rows.append(["Total Non-Operating Exp.", _deduction(other.total_other)])
    other_rows.append(
        ["NET PROFIT / (LOSS)", f"{format_percent(report.net_profit_margin)} · {PNL_CURRENCY} {_lkr(report.net_profit)}"]
    )

    return ExportOptions(
        title="Profit & Loss Statement",
        subtitle="Statement of Operations",
        period=report_period(date_from, date_to),
        summary_items=[
            SummaryItem(label="Total Revenue", value=format_amount(revenue.total_revenue, currency=PNL_CURRENCY)),
            SummaryItem(
                label="Gross Profit",
                value=format_amount(report.gross_profit, currency=PNL_CURRENCY),
                sub=f"{format_percent(report.gross_profit_margin)} margin",
            ),
            SummaryItem(label="Operating Income", value=format_amount(report.operating_income, currency=PNL_CURRENCY)),
            SummaryItem(
                label="Net Profit / (Loss)",
                value=format_amount(report.net_profit, currency=PNL_CURRENCY),
                sub=f"{format_percent(report.net_profit_margin)} margin",
            ),
        ],
        tables=[
            ReportTable(title="Revenue", columns=["Line Item", "LKR"], rows=revenue_rows, bold_cols=[0], green_cols=[1]),
            ReportTable(title="Cost of Goods Sold", columns=["Line Item", "LKR"], rows=cogs_rows, bold_cols=[0], red_cols=[1]),
            ReportTable(
                title="Operating Expenses",
                columns=["Category", "LKR", "% of OPEX"],
                rows=opex_rows,
                bold_cols=[0],
                red_cols=[1],
            ),
            ReportTable(
                title="Non-Operating Expenses & Net Profit",
                columns=["Line Item", "LKR"],
                rows=other_rows,
                bold_cols=[0],
            ),
        ],
        filename=f"pnl_statement_{date_from}_{date_to}",
    )


def tax_export_options(report: TaxReport, date_from: str, date_to: str) -> ExportOptions:
    summary = report.summary
    rows = [
        [t.date, t.order_id, _lkr(t.order_total), _lkr(t.taxable_amount), _lkr(t.tax_collected)]
        for t in report.transactions
    ]
    return ExportOptions(
        title="Tax Report",
        subtitle="Taxable sales and collected tax breakdown",
        period=report_period(date_from, date_to),
        summary_items=[
            SummaryItem(label="Total Sales", value=format_amount(summary.total_sales, currency=PNL_CURRENCY)),
            SummaryItem(label="Taxable Amount", value=format_amount(summary.total_taxable_amount, currency=PNL_CURRENCY)),
            SummaryItem(
                label="Tax Collected",
                value=format_amount(summary.total_tax_collected, currency=PNL_CURRENCY),
                sub=f"{format_percent(summary.effective_tax_rate, precision=2)} effective rate",
            ),
        ],
        tables=[
            ReportTable(
                title="Tax Transactions",
                columns=["Date", "Order ID", "Order Total", "Taxable Amt", "Tax Collected"],
                rows=rows,
                bold_cols=[1],
                green_cols=[4],
            )
        ],
        filename=f"tax_report_{date_from}_{date_to}",
    )


def _stock_totals(items: List[StockItem], summary: StockSummary) -> tuple:
    products = summary.total_products if summary.total_products is not None else len(items)
    quantity = summary.total_quantity if summary.total_quantity is not None else sum(i.quantity for i in items)
    return products, quantity


def live_stock_export_options(
    items: List[StockItem],
    summary: Optional[StockSummary] = None,
    as_of: Optional[date] = None,
    source_url: Optional[str] = None,
) -> ExportOptions:
    products, quantity = _stock_totals(items, summary or StockSummary())
    return ExportOptions(
        title="Live Stock Report",
        subtitle="Current inventory levels across all stocks",
        period=format_long_date(as_of or date.today()),
        summary_items=[
            SummaryItem(label="Total SKUs", value=str(products)),
            SummaryItem(label="Total Quantity", value=str(quantity)),
        ],
        tables=[
            ReportTable(
                title="Inventory Stock Levels",
                columns=["Product", "Variant", "Size", "Stock", "Quantity"],
                rows=[[i.product_name, i.variant_name, i.size, i.stock_name, i.quantity] for i in items],
                bold_cols=[0],
            )
        ],
        filename="live_stock",
        source_url=source_url,
    )


def stock_valuation_export_options(
    items: List[ValuedStockItem],
    summary: Optional[StockSummary] = None,
    as_of: Optional[date] = None,
    source_url: Optional[str] = None,
) -> ExportOptions:
    summary = summary or StockSummary()
    products, quantity = _stock_totals(items, summary)
    valuation = summary.total_valuation if summary.total_valuation is not None else sum(i.valuation for i in items)
    rows = [
        [
            i.product_name,
            i.variant_name,
            i.size or "-",
            i.stock_name,
            str(i.quantity),
            _lkr(i.buying_price),
            _lkr(i.valuation),
        ]
        for i in items
    ]
    return ExportOptions(
        title="Stock Valuation Report",
        subtitle="Locked asset value based on latest cost prices",
        period=format_long_date(as_of or date.today()),
        summary_items=[
            SummaryItem(label="Total Unique Products", value=f"{products:,}"),
            SummaryItem(label="Total Units", value=f"{quantity:,}"),
            SummaryItem(label="Total Valuation", value=format_amount(valuation, currency=PNL_CURRENCY)),
        ],
        tables=[
            ReportTable(
                title="Inventory Valuation Details",
                columns=["Product", "Variant", "Size", "Location", "Qty", "Buying Price (LKR)", "Valuation (LKR)"],
                rows=rows,
                bold_cols=[0],
                green_cols=[6],
            )
        ],
        filename="stock_valuation",
        source_url=source_url,
    )


def sales_by_category_export_options(
    categories: List[SalesCategory],
    date_from: str,
    date_to: str,
    source_url: Optional[str] = None,
) -> ExportOptions:
    total_quantity = sum(c.total_quantity for c in categories)
    total_sales = sum(c.total_sales for c in categories)
    total_profit = sum(c.total_gross_profit or 0 for c in categories)
    rows = [
        [
            c.category,
            str(c.total_orders),
            str(c.total_quantity),
            _lkr(c.total_net_sales),
            _lkr(c.total_gross_profit or 0),
            format_percent(c.gross_profit_margin),
        ]
        for c in categories
    ]
    return ExportOptions(
        title="Sales by Category",
        subtitle="Sales performance breakdown by product category",
        period=report_period(date_from, date_to),
        summary_items=[
            SummaryItem(label="Total Categories", value=str(len(categories))),
            SummaryItem(label="Total Quantity", value=f"{total_quantity:,}"),
            SummaryItem(label="Total Sales", value=format_amount(total_sales, currency=PNL_CURRENCY)),
            SummaryItem(label="Total Profit", value=format_amount(total_profit, currency=PNL_CURRENCY)),
        ],
        chart_specs=[ChartCaptureRequest(title=title, element_id=element_id) for title, element_id in SALES_CATEGORY_CHARTS],
        tables=[
            ReportTable(
                title="Category Breakdown",
                columns=["Category", "Orders", "Qty", "Net Sales", "Profit", "Margin"],
                rows=rows,
                bold_cols=[0],
                green_cols=[4],
            )
        ],
        filename=f"sales_by_category_{date_from}_{date_to}",
        source_url=source_url,
    )
