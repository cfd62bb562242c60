import logging

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect
from django.views.decorators.http import require_POST

from PROJECTS.views import STORE_MISSING
from PROJECTS.workspace import Workspace

from .forms import PaymentForm

logger = logging.getLogger(__name__)


@require_POST
def register_payment(request, site_id):
    if not settings.STORE_CONFIGURED:
        messages.error(request, STORE_MISSING)
        return redirect("dashboard")

    form = PaymentForm(request.POST)
    if not form.is_valid():
        for errors in form.errors.values():
            for error in errors:
                messages.error(request, error)
        return redirect("dashboard")

    ws = Workspace.from_session(request.session).load()
    if ws.find_site(str(site_id)) is None:
        messages.error(request, "Site not found.")
        return redirect("dashboard")

    if ws.record_payment(str(site_id), form.to_fields()):
        ws.save(request.session)
        messages.success(request, "Payment recorded.")
    else:
        messages.error(request, "Could not record the payment.")
    return redirect("dashboard")
