"""Utilities for generating PDF invoices."""

import logging
from io import BytesIO
from pathlib import Path
from typing import IO

from django.conf import settings
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .models import Sale

logger = logging.getLogger(__name__)

FONT_REGULAR = 'DejaVuSans'
FONT_BOLD = 'DejaVuSans-Bold'
FALLBACK_REGULAR = 'Helvetica'
FALLBACK_BOLD = 'Helvetica-Bold'


def _register_font(font_name: str, file_name: str) -> bool:
    """Register a TrueType font with ReportLab if it hasn't been registered."""
    try:
        pdfmetrics.getFont(font_name)
        return True
    except KeyError:
        font_path = Path(settings.BACKOFFICE_FONT_DIR) / file_name
        if not font_path.exists():
            return False
        pdfmetrics.registerFont(TTFont(font_name, str(font_path)))
        return True


def get_pdf_fonts() -> tuple[str, str]:
    """Return ``(regular, bold)`` font names, preferring the bundled DejaVu fonts."""
    if _register_font(FONT_REGULAR, 'DejaVuSans.ttf') and _register_font(FONT_BOLD, 'DejaVuSans-Bold.ttf'):
        return FONT_REGULAR, FONT_BOLD
    logger.debug("DejaVu fonts not found in %s, using Helvetica", settings.BACKOFFICE_FONT_DIR)
    return FALLBACK_REGULAR, FALLBACK_BOLD


def get_currency_prefix(font_name: str) -> str:
    """The currency symbol, or the currency code when the font cannot draw it."""
    symbol = settings.BACKOFFICE_CURRENCY_SYMBOL
    if font_name == FALLBACK_REGULAR:
        try:
            symbol.encode('cp1252')
        except UnicodeEncodeError:
            return f"{settings.BACKOFFICE_CURRENCY_CODE} "
    return symbol


def generate_invoice_pdf(sale: Sale) -> IO[bytes]:
    """Generate a PDF invoice for the given ``Sale`` instance."""

    buffer = BytesIO()
    font_regular, font_bold = get_pdf_fonts()
    currency = get_currency_prefix(font_regular)

    def money(value):
        return f"{currency}{value:,.2f}"

    # --- Document Setup ---
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=20 * mm,
        rightMargin=20 * mm,
        topMargin=20 * mm,
        bottomMargin=20 * mm,
        title=f"Invoice {sale.invoice_number}",
        author=settings.BACKOFFICE_COMPANY_NAME,
    )

    # --- Styles ---
    styles = getSampleStyleSheet()
    styles['Normal'].fontName = font_regular
    styles.add(ParagraphStyle(name='CompanyName', fontSize=18, leading=22, fontName=font_bold))
    styles.add(ParagraphStyle(name='CompanyInfo', fontSize=10, fontName=font_regular))
    styles.add(ParagraphStyle(name='InvoiceTitle', fontSize=14, leading=18, fontName=font_bold, alignment=TA_RIGHT))
    styles.add(ParagraphStyle(name='InvoiceInfo', fontSize=10, fontName=font_regular, alignment=TA_RIGHT))
    styles.add(ParagraphStyle(name='BillTo', fontSize=10, fontName=font_bold))
    styles.add(ParagraphStyle(name='TableHead', fontSize=10, fontName=font_bold, alignment=TA_CENTER, textColor=colors.whitesmoke))
    styles.add(ParagraphStyle(name='TableCell', fontSize=10, fontName=font_regular))
    styles.add(ParagraphStyle(name='TableCellRight', fontSize=10, fontName=font_regular, alignment=TA_RIGHT))
    styles.add(ParagraphStyle(name='TotalLabel', fontSize=10, fontName=font_bold, alignment=TA_RIGHT))
    styles.add(ParagraphStyle(name='TotalValue', fontSize=10, fontName=font_regular, alignment=TA_RIGHT))
    styles.add(ParagraphStyle(name='GrandTotalLabel', fontSize=12, leading=15, fontName=font_bold, alignment=TA_RIGHT))

    elements = []

    # --- 1. Header Section ---
    company_details_table = Table(
        [
            [Paragraph(settings.BACKOFFICE_COMPANY_NAME, styles['CompanyName'])],
            [Paragraph(settings.BACKOFFICE_COMPANY_ADDRESS, styles['CompanyInfo'])],
        ],
        colWidths=[80 * mm],
    )
    company_details_table.setStyle(TableStyle([
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 1),
    ]))

    invoice_info_data = [
        [Paragraph('TAX INVOICE' if sale.gst_percentage else 'INVOICE', styles['InvoiceTitle'])],
        [Paragraph(f"# {sale.invoice_number}", styles['InvoiceInfo'])],
        [Paragraph(f"Date: {sale.sale_date.strftime('%d %b, %Y')}", styles['InvoiceInfo'])],
        [Paragraph(f"Status: {sale.get_status_display()}", styles['InvoiceInfo'])],
    ]
    if sale.payment_terms:
        invoice_info_data.append([Paragraph(f"Terms: {sale.payment_terms}", styles['InvoiceInfo'])])
    invoice_info_table = Table(invoice_info_data, colWidths=[80 * mm])
    invoice_info_table.setStyle(TableStyle([('VALIGN', (0, 0), (-1, -1), 'TOP')]))

    header_table = Table([[company_details_table, invoice_info_table]], colWidths=[90 * mm, 80 * mm])
    header_table.setStyle(TableStyle([('VALIGN', (0, 0), (-1, -1), 'TOP')]))

    elements.append(header_table)
    elements.append(Spacer(1, 15 * mm))

    # --- 2. Bill To Section ---
    client = sale.client
    address = ', '.join(
        part for part in (client.street, client.city, client.state, client.postal_code, client.country) if part
    )
    bill_to_data = [
        [Paragraph("BILL TO", styles['BillTo'])],
        [Paragraph(client.name, styles['Normal'])],
        [Paragraph(address, styles['Normal'])],
    ]
    if client.gst_number:
        bill_to_data.append([Paragraph(f"GSTIN: {client.gst_number}", styles['Normal'])])
    bill_to_table = Table(bill_to_data, colWidths=[170 * mm])
    bill_to_table.setStyle(TableStyle([('BOTTOMPADDING', (0, 0), (-1, -1), 1)]))

    elements.append(bill_to_table)
    elements.append(Spacer(1, 10 * mm))

    # --- 3. Items Table ---
    data = [[
        Paragraph('#', styles['TableHead']),
        Paragraph('Item Description', styles['TableHead']),
        Paragraph('Qty', styles['TableHead']),
        Paragraph('Unit Price', styles['TableHead']),
        Paragraph('Amount', styles['TableHead']),
    ]]

    for index, item in enumerate(sale.items.all(), start=1):
        data.append([
            Paragraph(str(index), styles['TableCell']),
            Paragraph(item.item_name or f"Item #{item.item_id}", styles['TableCell']),
            Paragraph(f"{item.quantity}", styles['TableCellRight']),
            Paragraph(money(item.unit_price), styles['TableCellRight']),
            Paragraph(money(item.amount), styles['TableCellRight']),
        ])

    items_table = Table(data, colWidths=[12 * mm, 78 * mm, 20 * mm, 30 * mm, 30 * mm])
    items_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#4F4F4F')),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('LINEBELOW', (0, 0), (-1, 0), 1, colors.black),
        ('LINEBELOW', (0, -1), (-1, -1), 1, colors.HexColor('#CCCCCC')),
        ('TOPPADDING', (0, 0), (-1, 0), 3 * mm),
        ('BOTTOMPADDING', (0, 0), (-1, 0), 3 * mm),
        ('TOPPADDING', (0, 1), (-1, -1), 2 * mm),
        ('BOTTOMPADDING', (0, 1), (-1, -1), 2 * mm),
    ]))
    elements.append(items_table)

    # --- 4. Totals Section ---
    totals_data = [
        [Paragraph('Subtotal:', styles['TotalLabel']), Paragraph(money(sale.subtotal), styles['TotalValue'])],
    ]
    if sale.discount:
        totals_data.append(
            [Paragraph('Discount:', styles['TotalLabel']), Paragraph(f"-{money(sale.discount)}", styles['TotalValue'])]
        )
    totals_data += [
        [Paragraph(f'GST ({sale.gst_percentage}%):', styles['TotalLabel']), Paragraph(money(sale.gst_amount), styles['TotalValue'])],
        [Paragraph('Grand Total:', styles['TotalLabel']), Paragraph(money(sale.grand_total), styles['TotalValue'])],
        [Paragraph('Total Paid:', styles['TotalLabel']), Paragraph(money(sale.total_paid), styles['TotalValue'])],
        [Paragraph('Balance Due:', styles['GrandTotalLabel']), Paragraph(money(sale.remaining_amount), styles['GrandTotalLabel'])],
    ]

    totals_table = Table(totals_data, colWidths=[40 * mm, 35 * mm])
    totals_table.setStyle(TableStyle([
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('LEFTPADDING', (0, 0), (-1, -1), 0),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 1),
        ('LINEABOVE', (0, -1), (1, -1), 1, colors.black),
        ('TOPPADDING', (0, -1), (1, -1), 3),
    ]))

    wrapper_table = Table([[totals_table]], colWidths=[170 * mm], style=[('ALIGN', (0, 0), (-1, -1), 'RIGHT')])
    elements.append(wrapper_table)
    elements.append(Spacer(1, 20 * mm))

    # --- 5. Footer / Notes ---
    if sale.notes:
        elements.append(Paragraph(f"Notes: {sale.notes}", styles['Normal']))
        elements.append(Spacer(1, 5 * mm))
    elements.append(Paragraph("Thank you for your business!", styles['Normal']))

    doc.build(elements)
    buffer.seek(0)
    return buffer
