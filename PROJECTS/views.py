import json
import logging

from django.conf import settings
from django.contrib import messages
from django.http import HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.utils import timezone
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from SALES.forms import PaymentForm
from SALES.models import PAYMENT_METHODS

from . import export, valuation
from .entities import FACING_CHOICES, site_patch_from_json
from .filters import STATUS_FILTERS
from .forms import ProjectForm, SiteForm, SitePatchForm
from .workspace import SiteEditSession, Workspace

logger = logging.getLogger(__name__)

STORE_MISSING = "Database connection is not configured. Set DB_HOST and DB_PASSWORD and restart."


def _workspace(request):
    return Workspace.from_session(request.session).load()


def _store_missing(request):
    if not settings.STORE_CONFIGURED:
        messages.error(request, STORE_MISSING)
        return True
    return False


def _form_errors(request, form):
    for field, errors in form.errors.items():
        for error in errors:
            messages.error(request, f"{field}: {error}" if field != "__all__" else error)


def dashboard(request):
    ws = _workspace(request)
    if "q" in request.GET or "status" in request.GET:
        ws.set_filters(query=request.GET.get("q"), status_filter=request.GET.get("status"))

    project = ws.selected_project
    site = ws.selected_site
    rows = [
        {"site": s, "value": valuation.site_valuation(s), "cents": valuation.format_cents(s.land_area_sqft)}
        for s in ws.filtered_sites
    ]
    context = {
        "ws": ws,
        "project": project,
        "projects": ws.projects,
        "company": ws.company,
        "counts": ws.status_counts,
        "totals": ws.totals,
        "rows": rows,
        "site": site,
        "site_value": valuation.site_valuation(site) if site else None,
        "site_cents": valuation.format_cents(site.land_area_sqft) if site else None,
        "status_filters": STATUS_FILTERS,
        "facing_choices": FACING_CHOICES,
        "payment_methods": PAYMENT_METHODS,
        "payment_form": PaymentForm(),
        "export_groups": export.FIELD_GROUPS,
        "store_configured": settings.STORE_CONFIGURED,
    }
    ws.save(request.session)
    return render(request, "projects/dashboard.html", context)


@require_GET
def select_project(request, project_id):
    ws = _workspace(request)
    ws.select_project(str(project_id))
    ws.save(request.session)
    return redirect("dashboard")


@require_GET
def select_site(request, site_id):
    ws = _workspace(request)
    site = ws.find_site(str(site_id))
    if site is None:
        messages.error(request, "Site not found.")
    else:
        ws.select_site(site.id)
        ws.save(request.session)
    return redirect("dashboard")


@require_POST
def project_create(request):
    if _store_missing(request):
        return redirect("dashboard")
    form = ProjectForm(request.POST)
    if not form.is_valid():
        _form_errors(request, form)
        return redirect("dashboard")
    ws = _workspace(request)
    if ws.create_project(form.to_fields()):
        ws.save(request.session)
        messages.success(request, "Project created.")
    else:
        messages.error(request, "Could not create the project.")
    return redirect("dashboard")


@require_POST
def project_edit(request, project_id):
    if _store_missing(request):
        return redirect("dashboard")
    form = ProjectForm(request.POST)
    if not form.is_valid():
        _form_errors(request, form)
        return redirect("dashboard")
    ws = _workspace(request)
    if ws.update_project(str(project_id), form.to_fields()):
        ws.save(request.session)
        messages.success(request, "Project updated.")
    else:
        messages.error(request, "Could not update the project.")
    return redirect("dashboard")


@require_POST
def project_delete(request, project_id):
    if _store_missing(request):
        return redirect("dashboard")
    ws = _workspace(request)
    if ws.delete_project(str(project_id)):
        ws.save(request.session)
        messages.success(request, "Project deleted.")
    else:
        messages.error(request, "Could not delete the project.")
    return redirect("dashboard")


@require_POST
def site_create(request, project_id):
    if _store_missing(request):
        return redirect("dashboard")
    form = SiteForm(request.POST)
    if not form.is_valid():
        _form_errors(request, form)
        return redirect("dashboard")
    ws = _workspace(request)
    if ws.selected_project_id != str(project_id):
        ws.select_project(str(project_id))
    if ws.add_site(form.to_fields()):
        ws.save(request.session)
        messages.success(request, "Site created.")
    else:
        messages.error(request, "Could not create the site.")
    return redirect("dashboard")


@require_POST
def site_edit(request, site_id):
    if _store_missing(request):
        return redirect("dashboard")
    ws = _workspace(request)
    site = ws.find_site(str(site_id))
    if site is None:
        messages.error(request, "Site not found.")
        return redirect("dashboard")
    form = SitePatchForm(request.POST, site=site)
    if not form.is_valid():
        _form_errors(request, form)
        return redirect("dashboard")
    patch = SiteEditSession(site).apply(form.patch()).patch()
    if ws.update_site(site.id, patch):
        ws.save(request.session)
        messages.success(request, "Site updated.")
    else:
        messages.error(request, "Could not update the site.")
    return redirect("dashboard")


@require_POST
def site_delete(request, site_id):
    if _store_missing(request):
        return redirect("dashboard")
    confirmed = request.POST.get("confirm") in ("yes", "true", "1", "on")
    if not confirmed:
        messages.error(request, "Confirm the deletion to remove this site.")
        return redirect("dashboard")
    ws = _workspace(request)
    if ws.delete_site(str(site_id), confirmed=True):
        ws.save(request.session)
        messages.success(request, "Site deleted.")
    else:
        messages.error(request, "Could not delete the site.")
    return redirect("dashboard")


@require_GET
def project_list_api(request):
    ws = _workspace(request)
    return JsonResponse({"results": [p.to_dict() for p in ws.projects]})


@require_http_methods(["PATCH", "POST"])
def site_update_api(request, site_id):
    if not settings.STORE_CONFIGURED:
        return JsonResponse({"success": False, "error": STORE_MISSING}, status=503)
    try:
        data = json.loads(request.body or b"{}")
        patch = site_patch_from_json(data)
    except (ValueError, TypeError) as exc:
        return JsonResponse({"success": False, "error": f"Invalid patch: {exc}"}, status=400)
    if "number" in patch and not (patch["number"] or "").strip():
        return JsonResponse({"success": False, "error": "Unit number is required."}, status=400)

    ws = _workspace(request)
    site = ws.find_site(str(site_id))
    if site is None:
        return JsonResponse({"success": False, "error": "Site not found."}, status=404)
    if not ws.update_site(site.id, SiteEditSession(site).apply(patch).patch()):
        return JsonResponse({"success": False, "error": "Could not update the site."}, status=400)
    site = ws.find_site(str(site_id))
    return JsonResponse({"success": True, "site": site.to_dict() if site else None})


@require_GET
def project_export(request, project_id):
    if not settings.STORE_CONFIGURED:
        return HttpResponse(STORE_MISSING, status=503, content_type="text/plain")
    ws = _workspace(request)
    project = next((p for p in ws.projects if p.id == str(project_id)), None)
    if project is None:
        return HttpResponse("Project not found.", status=404, content_type="text/plain")

    # UTC calendar date, whatever the server time zone.
    today = timezone.now().date()
    groups = export.parse_field_groups(request.GET.getlist("fields"))
    if request.GET.get("scope") == "filtered" and ws.selected_project_id == project.id:
        sites = ws.filtered_sites
    else:
        sites = project.sites

    if request.GET.get("format") == "pdf":
        filename = export.report_filename(project.name, "pdf", on=today)
        response = HttpResponse(export.render_pdf(project, sites, groups, ws.company), content_type="application/pdf")
    else:
        filename = export.report_filename(project.name, "csv", on=today)
        response = HttpResponse(export.render_csv(sites, groups), content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    logger.info("Exported %d sites of project %s as %s", len(sites), project.id, filename)
    return response
