from dataclasses import asdict

from django.conf import settings
from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET

from PROJECTS.views import STORE_MISSING
from PROJECTS.workspace import Workspace

from .forms import CompanySettingsForm


def company_settings(request):
    ws = Workspace.from_session(request.session).load()

    if request.method == "POST":
        form = CompanySettingsForm(request.POST)
        if not settings.STORE_CONFIGURED:
            messages.error(request, STORE_MISSING)
            return render(request, "company/settings_form.html", {"form": form, "company": ws.company})
        if form.is_valid():
            if ws.save_company_settings(form.to_fields()):
                messages.success(request, "Company profile saved.")
                return redirect("dashboard")
            messages.error(request, "Could not save the company profile.")
        return render(request, "company/settings_form.html", {"form": form, "company": ws.company})

    form = CompanySettingsForm(initial=asdict(ws.company))
    return render(request, "company/settings_form.html", {"form": form, "company": ws.company})


@require_GET
def company_settings_api(request):
    ws = Workspace.from_session(request.session).load()
    return JsonResponse(ws.company.to_dict())
