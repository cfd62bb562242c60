"""
Data access for projects and sites.

Every public function talks to the ORM and returns plain entities or a
sentinel (``None``, ``False`` or ``[]``). Store errors are logged here and
never propagate to the views.
"""
import logging
from decimal import InvalidOperation

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.db.models import Prefetch
from django.utils import timezone

from .entities import (
    Dimensions,
    PaymentRecord,
    Project,
    SITE_JSON_FIELDS,
    SITE_NUMERIC_FIELDS,
    Site,
    iso_date,
    to_decimal,
    to_float,
)
from .models import Project as ProjectRow, Site as SiteRow
from .valuation import land_area_from_dimensions

logger = logging.getLogger(__name__)

STORE_ERRORS = (DatabaseError, ValidationError, ValueError, InvalidOperation)

PROJECT_COLUMNS = ("name", "location", "launch_date", "image_urls")
SITE_COLUMNS = tuple(SITE_JSON_FIELDS.values())


def store_ready(action):
    """False (and a warning) when the store credentials are missing."""
    if not getattr(settings, "STORE_CONFIGURED", False):
        logger.warning("Store not configured, skipping %s", action)
        return False
    return True


# --- row -> entity ---

def payment_from_row(row):
    return PaymentRecord(
        id=str(row.id),
        amount=to_float(row.amount),
        date=iso_date(row.date),
        method=row.method,
        notes=row.notes,
    )


def site_from_row(row, payments=None):
    if payments is None:
        payments = row.payment_records.all()
    profit = row.profit_margin_percentage
    return Site(
        id=str(row.id),
        number=row.number,
        status=row.status,
        customer_name=row.customer_name,
        customer_phone=row.customer_phone,
        facing=row.facing or "",
        dimensions=Dimensions.from_dict(row.dimensions),
        land_area_sqft=to_float(row.land_area_sqft),
        land_cost_per_sqft=to_float(row.land_cost_per_sqft),
        construction_area_sqft=to_float(row.construction_area_sqft),
        construction_rate_per_sqft=to_float(row.construction_rate_per_sqft),
        profit_margin_percentage=None if profit is None else to_float(profit),
        image_urls=list(row.image_urls or []),
        tags=list(row.tags or []),
        projected_completion_date=iso_date(row.projected_completion_date),
        booking_date=iso_date(row.booking_date),
        sale_date=iso_date(row.sale_date),
        payments=[payment_from_row(p) for p in payments],
    )


def project_from_row(row):
    return Project(
        id=str(row.id),
        name=row.name,
        location=row.location,
        launch_date=iso_date(row.launch_date),
        image_urls=list(row.image_urls or []),
        sites=[site_from_row(s) for s in row.sites.all()],
    )


# --- entity fields -> row payload ---

def _project_payload(fields):
    payload = {}
    for column in PROJECT_COLUMNS:
        if column not in fields:
            continue
        value = fields[column]
        if column == "image_urls":
            value = list(value or [])
        elif column == "launch_date":
            value = value or None
        payload[column] = value
    return payload


def _site_payload(fields):
    """Column values for the keys present in ``fields`` only.

    Dimensions always drive the land area; an explicit area is honoured
    only when no dimensions are written alongside it.
    """
    payload = {}
    for column in SITE_COLUMNS:
        if column not in fields:
            continue
        value = fields[column]
        if column == "dimensions":
            dims = value if isinstance(value, Dimensions) else Dimensions.from_dict(value)
            payload["dimensions"] = dims.to_dict()
            payload["land_area_sqft"] = to_decimal(land_area_from_dimensions(dims))
        elif column == "land_area_sqft":
            if "dimensions" not in fields:
                payload[column] = to_decimal(value)
        elif column == "profit_margin_percentage":
            payload[column] = None if value is None else to_decimal(value)
        elif column in SITE_NUMERIC_FIELDS:
            payload[column] = to_decimal(value)
        elif column in ("image_urls", "tags"):
            payload[column] = list(value or [])
        elif column in ("customer_name", "customer_phone"):
            payload[column] = value or None
        elif column in ("projected_completion_date", "booking_date", "sale_date"):
            payload[column] = value or None
        else:
            payload[column] = value
    return payload


# --- projects ---

def get_all_projects():
    """Every project with nested sites and payments, oldest first."""
    if not store_ready("get_all_projects"):
        return []
    try:
        rows = list(
            ProjectRow.objects.order_by("created_at").prefetch_related(
                Prefetch(
                    "sites",
                    queryset=SiteRow.objects.order_by("created_at").prefetch_related("payment_records"),
                )
            )
        )
        return [project_from_row(row) for row in rows]
    except STORE_ERRORS:
        logger.exception("Error fetching projects")
        return []


def create_project(fields):
    if not store_ready("create_project"):
        return None
    try:
        row = ProjectRow.objects.create(**_project_payload(fields))
    except STORE_ERRORS:
        logger.exception("Error creating project")
        return None
    logger.info("Created project %s (%s)", row.id, row.name)
    return str(row.id)


def update_project(project_id, fields):
    if not store_ready("update_project"):
        return False
    try:
        updated = ProjectRow.objects.filter(pk=project_id).update(
            updated_at=timezone.now(), **_project_payload(fields)
        )
    except STORE_ERRORS:
        logger.exception("Error updating project %s", project_id)
        return False
    if not updated:
        logger.warning("Project %s not found for update", project_id)
    return updated > 0


def delete_project(project_id):
    if not store_ready("delete_project"):
        return False
    try:
        deleted, _ = ProjectRow.objects.filter(pk=project_id).delete()
    except STORE_ERRORS:
        logger.exception("Error deleting project %s", project_id)
        return False
    return deleted > 0


# --- sites ---

def create_site(project_id, fields):
    if not store_ready("create_site"):
        return None
    try:
        if not ProjectRow.objects.filter(pk=project_id).exists():
            logger.error("Cannot create site, project %s does not exist", project_id)
            return None
        row = SiteRow.objects.create(project_id=project_id, **_site_payload(fields))
    except STORE_ERRORS:
        logger.exception("Error creating site in project %s", project_id)
        return None
    logger.info("Created site %s (%s) in project %s", row.id, row.number, project_id)
    return str(row.id)


def update_site(site_id, patch):
    """Write only the keys present in ``patch``; everything else is untouched."""
    if not store_ready("update_site"):
        return False
    try:
        payload = _site_payload(patch)
        updated = SiteRow.objects.filter(pk=site_id).update(updated_at=timezone.now(), **payload)
    except STORE_ERRORS:
        logger.exception("Error updating site %s", site_id)
        return False
    if not updated:
        logger.warning("Site %s not found for update", site_id)
    return updated > 0


def delete_site(site_id):
    if not store_ready("delete_site"):
        return False
    try:
        deleted, _ = SiteRow.objects.filter(pk=site_id).delete()
    except STORE_ERRORS:
        logger.exception("Error deleting site %s", site_id)
        return False
    return deleted > 0
