"""
Statement PDF renderer (A4 portrait, reportlab canvas).

Layout, top to bottom:
  - Header band: business name, statement title
  - Bill To block (name, address, phone) and print date
  - Transactions table per page, boxed; payments as negative amounts
    in the accent colour
  - Summary: opening balance, litres, bill, paid, net receivable
  - Attribution footer on every page
"""

from decimal import Decimal
from io import BytesIO
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Table, TableStyle

from dairy_ledger.config import BusinessSettings, StatementSettings, get_settings
from dairy_ledger.models.statement import Statement, StatementRow


TABLE_HEADER = ["Date", "Description", "Rate", "Qty", "Amount"]
COL_WIDTHS = [30 * mm, 55 * mm, 30 * mm, 25 * mm, 30 * mm]  # 170mm, 20mm side margins
EMPTY_MESSAGE = "No transactions recorded in this period."

X_MARGIN = 20 * mm
TOP_MARGIN = 20 * mm
FOOTER_Y = 12 * mm
SUMMARY_X = 140 * mm
SUMMARY_HEIGHT = 48 * mm


def _fmt_money(v: Decimal) -> str:
    return f"{v:.2f}"


def _fmt_number(v: Decimal) -> str:
    """1.50 -> '1.5', 2 -> '2'."""
    return format(v.normalize(), "f")


def _fmt_day(row: StatementRow) -> str:
    return f"{row.date.strftime('%b')} {row.date.day}"


def _table_data(rows: list[StatementRow]) -> list[list[str]]:
    data = [list(TABLE_HEADER)]
    for row in rows:
        if row.is_credit:
            data.append([_fmt_day(row), row.description, "-", "-", _fmt_money(row.signed_amount)])
        else:
            data.append([
                _fmt_day(row),
                row.description,
                _fmt_number(row.rate),
                f"{_fmt_number(row.quantity)} L",
                _fmt_money(row.amount),
            ])
    return data


def _table_style(rows: list[StatementRow], accent: colors.Color) -> TableStyle:
    commands = [
        ("FONT", (0, 0), (-1, 0), "Helvetica-Bold", 10),
        ("FONT", (0, 1), (-1, -1), "Helvetica", 9),
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#F0F0F0")),
        ("LINEBELOW", (0, 0), (-1, 0), 0.5, colors.HexColor("#C8C8C8")),
        ("LINEBELOW", (0, 1), (-1, -1), 0.25, colors.HexColor("#E6E6E6")),
        ("BOX", (0, 0), (-1, -1), 0.75, colors.HexColor("#646464")),
        ("ALIGN", (4, 0), (4, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 2),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
    ]
    for i, row in enumerate(rows, start=1):
        if row.is_credit:
            commands.append(("TEXTCOLOR", (4, i), (4, i), accent))
    return TableStyle(commands)


def _draw_table(c: canvas.Canvas, rows: list[StatementRow], y: float, accent: colors.Color) -> float:
    """Draw one page's table with its top edge at y; return the y below it."""
    if rows:
        table = Table(_table_data(rows), colWidths=COL_WIDTHS)
        table.setStyle(_table_style(rows, accent))
    else:
        table = Table([list(TABLE_HEADER), [EMPTY_MESSAGE, "", "", "", ""]], colWidths=COL_WIDTHS)
        style = _table_style([], accent)
        style.add("SPAN", (0, 1), (-1, 1))
        table.setStyle(style)

    _, th = table.wrapOn(c, sum(COL_WIDTHS), y)
    table.drawOn(c, X_MARGIN, y - th)
    return y - th


def _draw_footer(c: canvas.Canvas, business: BusinessSettings, page_w: float) -> None:
    """Attribution line, centred, with the author's name in bold."""
    size = 10
    parts = [
        (business.footer_prefix, "Helvetica"),
        (business.footer_author, "Helvetica-Bold"),
        (business.footer_suffix, "Helvetica"),
    ]
    total_w = sum(c.stringWidth(text, font, size) for text, font in parts)
    x = (page_w - total_w) / 2
    c.setFillColor(colors.HexColor("#646464"))
    for text, font in parts:
        c.setFont(font, size)
        c.drawString(x, FOOTER_Y, text)
        x += c.stringWidth(text, font, size)


def _draw_header(
    c: canvas.Canvas,
    statement: Statement,
    business: BusinessSettings,
    accent: colors.Color,
    page_w: float,
    page_h: float,
) -> float:
    """Header band, Bill To block and the 'Transactions' caption. Returns table top y."""
    c.setFillColor(accent)
    c.rect(0, page_h - 40 * mm, page_w, 40 * mm, stroke=0, fill=1)
    c.setFillColor(colors.white)
    c.setFont("Helvetica-Bold", 24)
    c.drawCentredString(page_w / 2, page_h - 20 * mm, business.business_name)
    c.setFont("Helvetica", 12)
    c.drawCentredString(page_w / 2, page_h - 30 * mm, statement.title)

    c.setFillColor(colors.HexColor("#3C3C3C"))
    c.setFont("Helvetica", 14)
    c.drawString(X_MARGIN, page_h - 60 * mm, "Bill To:")
    c.setFont("Helvetica", 12)
    c.drawString(150 * mm, page_h - 60 * mm, f"Date: {statement.generated_on.strftime('%d/%m/%Y')}")
    c.setFont("Helvetica-Bold", 12)
    c.drawString(X_MARGIN, page_h - 70 * mm, statement.customer_name)
    c.setFont("Helvetica", 12)
    c.drawString(X_MARGIN, page_h - 78 * mm, statement.customer_address)
    c.drawString(X_MARGIN, page_h - 86 * mm, f"Phone: {statement.customer_mobile}")

    c.setFillColor(colors.black)
    c.setFont("Helvetica-Bold", 12)
    c.drawString(X_MARGIN, page_h - 100 * mm, "Transactions")
    return page_h - 105 * mm


def _net_color(statement: Statement, owed: colors.Color, accent: colors.Color) -> colors.Color:
    """Red-ish when the customer owes, accent when paid up or in advance."""
    return owed if statement.net_position == "owed" else accent


def _draw_summary(
    c: canvas.Canvas,
    statement: Statement,
    business: BusinessSettings,
    owed: colors.Color,
    accent: colors.Color,
    y: float,
) -> None:
    cur = business.currency_label
    c.setFillColor(colors.black)
    c.setFont("Helvetica-Bold", 10)
    c.drawString(SUMMARY_X, y, "Summary")
    y -= 8 * mm

    c.setFont("Helvetica", 10)
    for line in (
        f"Opening Balance: {cur} {_fmt_money(statement.opening_balance)}",
        f"Total Litres: {statement.total_litres:.1f} L",
        f"Total Bill: {cur} {_fmt_money(statement.total_debit)}",
        f"Total Paid: {cur} {_fmt_money(statement.total_credit)}",
    ):
        c.drawString(SUMMARY_X, y, line)
        y -= 6 * mm

    y -= 4 * mm
    c.setFont("Helvetica-Bold", 14)
    c.setFillColor(_net_color(statement, owed, accent))
    c.drawString(SUMMARY_X, y, f"Net Receivable: {cur} {_fmt_money(statement.net_receivable)}")


def render_statement_pdf(
    statement: Statement,
    business: Optional[BusinessSettings] = None,
    layout: Optional[StatementSettings] = None,
) -> bytes:
    """Render a statement to PDF bytes."""
    settings = get_settings()
    business = business or settings.business
    layout = layout or settings.statement
    accent = colors.HexColor(layout.accent_color)
    owed = colors.HexColor(layout.owed_color)

    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    page_w, page_h = A4
    c.setTitle(f"{statement.title} - {statement.customer_name}")

    pages = statement.pages or [statement.rows]
    y = page_h
    for index, page_rows in enumerate(pages):
        if index == 0:
            y = _draw_header(c, statement, business, accent, page_w, page_h)
        else:
            _draw_footer(c, business, page_w)
            c.showPage()
            y = page_h - TOP_MARGIN
        y = _draw_table(c, page_rows, y, accent)

    y -= 10 * mm
    if y - SUMMARY_HEIGHT < FOOTER_Y + 6 * mm:
        _draw_footer(c, business, page_w)
        c.showPage()
        y = page_h - TOP_MARGIN

    _draw_summary(c, statement, business, owed, accent, y)
    _draw_footer(c, business, page_w)

    c.showPage()
    c.save()
    return buf.getvalue()


def statement_filename(statement: Statement) -> str:
    """Statement_<customer>_<YYYY-MM-DD>.pdf"""
    name = "_".join(statement.customer_name.split()) or statement.customer_id
    return f"Statement_{name}_{statement.generated_on.isoformat()}.pdf"
