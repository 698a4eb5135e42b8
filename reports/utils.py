# reports/utils.py
import csv
from datetime import date, datetime
from decimal import Decimal
from io import BytesIO, StringIO
from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer


def format_cell(value):
    """Render a report cell as text for JSON and file exports"""
    if value is None:
        return ''
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, date):
        return format_date(value)
    return value


def format_rows(rows):
    return [[format_cell(value) for value in row] for row in rows]


def export_to_csv(header, rows):
    """Export rows to CSV format"""
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(header)
    for row in format_rows(rows):
        writer.writerow(row)
    return output.getvalue()


def export_to_excel(header, rows, sheet_name='Report'):
    """Export rows to Excel format"""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name[:31]

    for col_num, column in enumerate(header, 1):
        cell = ws.cell(row=1, column=col_num)
        cell.value = column
        cell.font = Font(bold=True)

    for row_num, row in enumerate(format_rows(rows), 2):
        for col_num, value in enumerate(row, 1):
            ws.cell(row=row_num, column=col_num).value = value

    for col_num in range(1, len(header) + 1):
        ws.column_dimensions[get_column_letter(col_num)].width = 20

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output.getvalue()


PDF_TABLE_STYLE = TableStyle([
    ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#2f5d3a')),
    ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
    ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
    ('FONTSIZE', (0, 0), (-1, -1), 8),
    ('VALIGN', (0, 0), (-1, -1), 'TOP'),
    ('LINEBELOW', (0, 0), (-1, -1), 0.25, colors.HexColor('#bbbbbb')),
    ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f1f4ef')]),
])


def export_to_pdf(header, rows, title='Report'):
    """Export rows to a landscape PDF table"""
    output = BytesIO()
    styles = getSampleStyleSheet()
    subtitle = ParagraphStyle('ReportSubtitle', parent=styles['Italic'], fontSize=9, spaceAfter=12)

    body = [[str(value) for value in row] for row in format_rows(rows)]
    table = Table([list(header)] + body, repeatRows=1)
    table.setStyle(PDF_TABLE_STYLE)

    story = [
        Paragraph(title, styles['Title']),
        Paragraph(f"{len(body)} rows, generated {format_datetime(timezone.now())}", subtitle),
        Spacer(1, 0.15 * inch),
        table,
    ]
    SimpleDocTemplate(output, pagesize=landscape(A4), title=title).build(story)
    return output.getvalue()


def export_report(header, rows, export_format, title='Report'):
    if export_format == 'csv':
        return export_to_csv(header, rows)
    elif export_format == 'excel':
        return export_to_excel(header, rows, title)
    elif export_format == 'pdf':
        return export_to_pdf(header, rows, title)
    raise ValueError(f"Unsupported format: {export_format}")


def format_date(value):
    if not value:
        return ''
    return value if isinstance(value, str) else value.strftime('%Y-%m-%d')


def format_datetime(value):
    if not value:
        return ''
    if isinstance(value, str):
        return value
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime('%Y-%m-%d %H:%M')
