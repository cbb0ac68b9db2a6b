"""
Equipment log report export utilities for PDF and Excel.

Generates a point-in-time snapshot of log entries and their signatures.
Filtering and access checks happen at the view layer; this module is pure I/O.
"""

import io

from django.utils import timezone

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

REPORT_COLUMNS = [
    "Log Code",
    "Equipment",
    "Activity",
    "Start",
    "End",
    "Batch",
    "Status",
    "Created By",
    "Submitted",
    "Reviewed By",
    "Reviewed",
]


def _fmt(value):
    if value is None:
        return "—"
    return timezone.localtime(value).strftime("%Y-%m-%d %H:%M")


def _signer(user):
    if user is None:
        return "—"
    return user.full_name or user.username


def report_rows(entries):
    """Flatten log entries into report rows (one per entry)."""
    rows = []
    for entry in entries:
        reviewer = entry.approved_by or entry.rejected_by
        reviewed_at = entry.approved_at or entry.rejected_at
        rows.append(
            [
                entry.log_code,
                entry.equipment.equipment_code,
                entry.activity_type,
                _fmt(entry.start_time),
                _fmt(entry.end_time),
                entry.batch_number or "—",
                entry.status,
                _signer(entry.created_by),
                _fmt(entry.submitted_at),
                _signer(reviewer),
                _fmt(reviewed_at),
            ]
        )
    return rows


def _filename(extension):
    ts = timezone.now().strftime("%Y%m%d_%H%M")
    return f"logbook_report_{ts}.{extension}"


def export_log_report_pdf(entries, filters=None):
    """
    Generate PDF export of log entries.
    Returns (bytes, filename).
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(letter),
        rightMargin=0.5 * inch,
        leftMargin=0.5 * inch,
        topMargin=0.5 * inch,
        bottomMargin=0.5 * inch,
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ReportTitle",
        parent=styles["Heading1"],
        fontSize=16,
        alignment=TA_CENTER,
        spaceAfter=12,
    )

    story = [Paragraph("Equipment Log Report", title_style), Spacer(1, 6)]

    if filters:
        summary = ", ".join(f"{key}: {value}" for key, value in filters.items())
        story.append(Paragraph(f"Filters: {summary}", styles["Normal"]))
        story.append(Spacer(1, 8))

    rows = report_rows(entries)
    if rows:
        table = Table([REPORT_COLUMNS] + rows, repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                    ("FONTSIZE", (0, 0), (-1, -1), 7),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ]
            )
        )
        story.append(table)
    else:
        story.append(Paragraph("<i>No log entries match the filters</i>", styles["Normal"]))

    story.append(Spacer(1, 12))
    story.append(
        Paragraph(
            f"<i>{len(rows)} entries. Exported on "
            f"{timezone.now().strftime('%Y-%m-%d %H:%M UTC')}</i>",
            styles["Normal"],
        )
    )

    doc.build(story)
    buffer.seek(0)
    return buffer.read(), _filename("pdf")


def export_log_report_excel(entries, filters=None):
    """
    Generate Excel export of log entries.
    Returns (bytes, filename).
    """
    from openpyxl import Workbook
    from openpyxl.styles import Border, Font, PatternFill, Side
    from openpyxl.utils import get_column_letter

    wb = Workbook()
    ws = wb.active
    ws.title = "Log Entries"

    header_font = Font(bold=True)
    header_fill = PatternFill(start_color="DDDDDD", end_color="DDDDDD", fill_type="solid")
    thin = Side(style="thin")
    thin_border = Border(left=thin, right=thin, top=thin, bottom=thin)

    row = 1
    ws.cell(row=row, column=1, value="Equipment Log Report").font = header_font
    row += 1
    for key, value in (filters or {}).items():
        ws.cell(row=row, column=1, value=key)
        ws.cell(row=row, column=2, value=str(value))
        row += 1
    row += 1

    for col, heading in enumerate(REPORT_COLUMNS, 1):
        cell = ws.cell(row=row, column=col, value=heading)
        cell.font = header_font
        cell.fill = header_fill
        cell.border = thin_border
    row += 1

    for values in report_rows(entries):
        for col, value in enumerate(values, 1):
            ws.cell(row=row, column=col, value=value).border = thin_border
        row += 1

    row += 1
    ws.cell(
        row=row,
        column=1,
        value=f"Exported on {timezone.now().strftime('%Y-%m-%d %H:%M UTC')}",
    ).font = Font(italic=True)

    for col in range(1, len(REPORT_COLUMNS) + 1):
        ws.column_dimensions[get_column_letter(col)].width = 18

    buffer = io.BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return buffer.read(), _filename("xlsx")
