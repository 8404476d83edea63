"""Excel and PDF renderings of the sales report.

Both exports share :data:`SALES_COLUMNS` and :func:`report_rows`, so a column
added there shows up in the workbook and the PDF alike.
"""

from collections import namedtuple
from decimal import Decimal
from io import BytesIO
from typing import Callable, Iterator, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .invoice_pdf import get_pdf_fonts
from .services.money import ZERO, to_decimal


__all__ = [
    "SALES_COLUMNS",
    "generate_sales_report_pdf",
    "generate_sales_report_workbook",
    "report_rows",
    "summarize_sales",
]


Column = namedtuple("Column", "title width money")

# Widths are in millimetres on the PDF page.
SALES_COLUMNS = (
    Column("#", 10, False),
    Column("Date", 24, False),
    Column("Invoice", 30, False),
    Column("Client", 62, False),
    Column("Status", 26, False),
    Column("Payment", 28, False),
    Column("Grand Total", 28, True),
    Column("Paid", 26, True),
    Column("Remaining", 26, True),
)
TOTAL_FIELDS = ("grand_total", "total_paid", "remaining_amount")

BRAND_COLOR = "1F4E78"
SHADE_COLOR = "EDEDED"
MONEY_FORMAT = "#,##0.00"


def summarize_sales(sales: Sequence) -> dict[str, Decimal]:
    totals = dict.fromkeys(TOTAL_FIELDS, ZERO)
    for sale in sales:
        for field in TOTAL_FIELDS:
            totals[field] += to_decimal(getattr(sale, field))
    return totals


def report_rows(sales: Sequence) -> Iterator[tuple]:
    """One tuple per sale, in :data:`SALES_COLUMNS` order."""

    for position, sale in enumerate(sales, start=1):
        yield (
            position,
            sale.sale_date.isoformat(),
            sale.invoice_number or "",
            sale.client.name if sale.client_id else "",
            sale.get_status_display(),
            sale.get_payment_status_display(),
            *(to_decimal(getattr(sale, field)) for field in TOTAL_FIELDS),
        )


def _totals_row(totals: dict, render: Callable) -> list:
    leading = sum(1 for column in SALES_COLUMNS if not column.money)
    return ["Total"] + [""] * (leading - 1) + [render(totals[field]) for field in TOTAL_FIELDS]


def _as_cell(value):
    return float(value) if isinstance(value, Decimal) else value


def _as_text(value) -> str:
    if isinstance(value, Decimal):
        return f"{value:,.2f}"
    return str(value)


def generate_sales_report_workbook(sales: Sequence, start_date: str, end_date: str) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Sales"

    sheet.append(["Sales Report"])
    sheet.append([f"{start_date} to {end_date}"])
    sheet.append([])
    sheet["A1"].font = Font(size=14, bold=True)
    sheet["A2"].font = Font(italic=True, color="595959")

    sheet.append([column.title for column in SALES_COLUMNS])
    header_row = sheet.max_row
    brand_fill = PatternFill(fill_type="solid", start_color=BRAND_COLOR, end_color=BRAND_COLOR)
    for cell in sheet[header_row]:
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = brand_fill
    sheet.freeze_panes = f"A{header_row + 1}"

    for values in report_rows(sales):
        sheet.append([_as_cell(value) for value in values])

    sheet.append(_totals_row(summarize_sales(sales), float))
    shade_fill = PatternFill(fill_type="solid", start_color=SHADE_COLOR, end_color=SHADE_COLOR)
    for cell in sheet[sheet.max_row]:
        cell.font = Font(bold=True)
        cell.fill = shade_fill

    for index, column in enumerate(SALES_COLUMNS, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = column.width // 2 + 2
        if column.money:
            for (cell,) in sheet.iter_rows(min_row=header_row + 1, min_col=index, max_col=index):
                cell.number_format = MONEY_FORMAT

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def generate_sales_report_pdf(sales: Sequence, start_date: str, end_date: str) -> bytes:
    font_regular, font_bold = get_pdf_fonts()
    title_style = ParagraphStyle("ReportTitle", fontName=font_bold, fontSize=16, leading=20)
    body_style = ParagraphStyle("ReportBody", fontName=font_regular, fontSize=9, leading=12)

    totals = summarize_sales(sales)
    story = [
        Paragraph("Sales Report", title_style),
        Paragraph(f"{start_date} to {end_date}", body_style),
        Spacer(1, 3 * mm),
        Paragraph(
            f"{len(sales)} sales, billed {_as_text(totals['grand_total'])}, "
            f"outstanding {_as_text(totals['remaining_amount'])}",
            body_style,
        ),
        Spacer(1, 5 * mm),
    ]

    table_data = [[column.title for column in SALES_COLUMNS]]
    table_data.extend([_as_text(value) for value in row] for row in report_rows(sales))
    table_data.append(_totals_row(totals, _as_text))

    first_money = next(index for index, column in enumerate(SALES_COLUMNS) if column.money)
    table = Table(table_data, colWidths=[column.width * mm for column in SALES_COLUMNS], repeatRows=1)
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), font_regular),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("FONTNAME", (0, 0), (-1, 0), font_bold),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(f"#{BRAND_COLOR}")),
        ("ALIGN", (first_money, 0), (-1, -1), "RIGHT"),
        ("FONTNAME", (0, -1), (-1, -1), font_bold),
        ("BACKGROUND", (0, -1), (-1, -1), colors.HexColor(f"#{SHADE_COLOR}")),
        ("LINEBELOW", (0, 0), (-1, -2), 0.25, colors.HexColor("#BFBFBF")),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))
    story.append(table)

    buffer = BytesIO()
    SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        leftMargin=12 * mm,
        rightMargin=12 * mm,
        topMargin=12 * mm,
        bottomMargin=12 * mm,
        title="Sales Report",
    ).build(story)
    return buffer.getvalue()
