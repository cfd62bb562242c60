import logging

from django.utils import timezone

from PROJECTS.entities import CompanySettings
from PROJECTS.services import STORE_ERRORS, store_ready

from .models import CompanySettings as CompanySettingsRow

logger = logging.getLogger(__name__)

SETTINGS_COLUMNS = ("name", "logo_url", "street", "city", "state", "zip")


def settings_from_row(row):
    return CompanySettings(
        name=row.name,
        logo_url=row.logo_url,
        street=row.street,
        city=row.city,
        state=row.state,
        zip=row.zip,
    )


def _singleton_row():
    return CompanySettingsRow.objects.order_by("created_at").first()


def get_company_settings():
    if not store_ready("get_company_settings"):
        return None
    try:
        row = _singleton_row()
    except STORE_ERRORS:
        logger.exception("Error fetching company settings")
        return None
    return settings_from_row(row) if row else None


def upsert_company_settings(fields):
    """Update the settings row when it exists, insert it otherwise."""
    if not store_ready("upsert_company_settings"):
        return False
    payload = {column: fields.get(column) for column in SETTINGS_COLUMNS}
    try:
        existing = _singleton_row()
        if existing:
            CompanySettingsRow.objects.filter(pk=existing.pk).update(updated_at=timezone.now(), **payload)
        else:
            CompanySettingsRow.objects.create(**payload)
    except STORE_ERRORS:
        logger.exception("Error saving company settings")
        return False
    return True
