import logging

from PROJECTS.entities import to_decimal, to_float
from PROJECTS.models import Site
from PROJECTS.services import STORE_ERRORS, store_ready

from .models import PaymentRecord

logger = logging.getLogger(__name__)


def create_payment(site_id, fields):
    """Append a payment to a site's ledger. Returns the new id or None."""
    if not store_ready("create_payment"):
        return None
    amount = to_float(fields.get("amount"))
    if amount <= 0:
        logger.warning("Rejected payment of %s for site %s: amount must be positive", amount, site_id)
        return None
    try:
        if not Site.objects.filter(pk=site_id).exists():
            logger.error("Cannot record payment, site %s does not exist", site_id)
            return None
        payment = PaymentRecord.objects.create(
            site_id=site_id,
            amount=to_decimal(amount),
            date=fields.get("date"),
            method=fields.get("method") or "Bank Transfer",
            notes=fields.get("notes") or None,
        )
    except STORE_ERRORS:
        logger.exception("Error creating payment for site %s", site_id)
        return None
    logger.info("Recorded payment %s of %s for site %s", payment.id, payment.amount, site_id)
    return str(payment.id)


def delete_payment(payment_id):
    if not store_ready("delete_payment"):
        return False
    try:
        deleted, _ = PaymentRecord.objects.filter(pk=payment_id).delete()
    except STORE_ERRORS:
        logger.exception("Error deleting payment %s", payment_id)
        return False
    return deleted > 0
