"""
Site report export.

Columns are grouped into field groups that can be switched on and off; the
groups always appear in ``FIELD_GROUPS`` order. Every value is either a raw
site field or a figure from the valuation module.
"""
import re
from io import BytesIO

from django.utils import timezone
from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfgen import canvas

from . import valuation

IDENTITY = "identity"
STATUS = "status"
FACING = "facing"
CUSTOMER = "customer"
AREA = "area"
DIMENSIONS = "dimensions"
FINANCIALS = "financials"

FIELD_GROUPS = (IDENTITY, STATUS, FACING, CUSTOMER, AREA, DIMENSIONS, FINANCIALS)

COLUMNS = {
    IDENTITY: ("Site Number",),
    STATUS: ("Status",),
    FACING: ("Facing",),
    CUSTOMER: ("Customer Name", "Customer Phone"),
    AREA: ("Area (SqFt)", "Area (Cents)"),
    DIMENSIONS: ("North (ft)", "South (ft)", "East (ft)", "West (ft)"),
    FINANCIALS: (
        "Plot Rate/SqFt",
        "Plot Value",
        "Const Area",
        "Const Rate",
        "Const Value",
        "Base Value",
        "Profit Margin %",
        "Total Projected Value",
    ),
}

MISSING = "N/A"


class Text(str):
    """Cell that is quote-wrapped in the CSV output."""


def parse_field_groups(values):
    """Enabled groups from request values; nothing selected means everything."""
    wanted = {v.strip().lower() for v in values or [] if v and v.strip()}
    if not wanted:
        return FIELD_GROUPS
    return tuple(group for group in FIELD_GROUPS if group in wanted)


def header(groups=FIELD_GROUPS):
    columns = []
    for group in FIELD_GROUPS:
        if group in groups:
            columns.extend(COLUMNS[group])
    return columns


def site_cells(site, groups=FIELD_GROUPS):
    cells = []
    if IDENTITY in groups:
        cells.append(Text(site.number))
    if STATUS in groups:
        cells.append(Text(site.status))
    if FACING in groups:
        cells.append(Text(site.facing or ""))
    if CUSTOMER in groups:
        cells.append(Text(site.customer_name or MISSING))
        cells.append(Text(site.customer_phone or MISSING))
    if AREA in groups:
        cells.append(site.land_area_sqft or 0)
        cells.append(valuation.format_cents(site.land_area_sqft))
    if DIMENSIONS in groups:
        dims = site.dimensions
        cells.extend([dims.north, dims.south, dims.east, dims.west])
    if FINANCIALS in groups:
        figures = valuation.site_valuation(site)
        cells.extend([
            site.land_cost_per_sqft or 0,
            figures.land_value,
            site.construction_area_sqft or 0,
            site.construction_rate_per_sqft or 0,
            figures.construction_value,
            figures.base_value,
            site.profit_margin_percentage or 0,
            figures.projected_total_value,
        ])
    return cells


def format_number(value):
    if isinstance(value, str):
        return value
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _quote(value):
    return '"%s"' % value.replace('"', '""')


def _csv_cell(value):
    if isinstance(value, Text):
        return _quote(value)
    return format_number(value)


def render_csv(sites, groups=FIELD_GROUPS):
    lines = [",".join(header(groups))]
    for site in sites:
        lines.append(",".join(_csv_cell(cell) for cell in site_cells(site, groups)))
    return "\n".join(lines)


def report_filename(project_name, extension="csv", on=None):
    on = on or timezone.now().date()
    return "%s_Report_%s.%s" % (re.sub(r"\s+", "_", project_name), on.isoformat(), extension)


def render_pdf(project, sites, groups=FIELD_GROUPS, company=None):
    """Printable report: company and project heading, then one line per site."""
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=landscape(A4))
    width, height = landscape(A4)

    heading = []
    if company is not None:
        heading.append(company.name)
        address = ", ".join(part for part in (company.street, company.city, company.state, company.zip) if part)
        if address:
            heading.append(address)
    heading.append(f"{project.name} - {project.location}")
    heading.append(f"Generated {timezone.now().date().isoformat()} | {len(sites)} sites")

    def new_page():
        text = pdf.beginText(30, height - 40)
        text.setFont("Helvetica", 8)
        return text

    text = new_page()
    for line in heading:
        text.textLine(line)
    text.textLine("")
    text.textLine(" | ".join(header(groups)))

    for site in sites:
        if text.getY() < 40:
            pdf.drawText(text)
            pdf.showPage()
            text = new_page()
        text.textLine(" | ".join(format_number(cell) for cell in site_cells(site, groups)))

    pdf.drawText(text)
    pdf.showPage()
    pdf.save()
    data = buffer.getvalue()
    buffer.close()
    return data
