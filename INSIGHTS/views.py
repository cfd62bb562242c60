import logging
from importlib import import_module

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from PROJECTS.workspace import Workspace

from . import narrator as narrator_module

logger = logging.getLogger(__name__)


def _stored_session(request):
    """A fresh copy of this client's session, or None before it is first saved.

    The narrator call can take seconds; other requests from the same client
    may change the selection meanwhile, and ``request.session`` still holds
    the state from when this request started.
    """
    key = request.session.session_key
    if key is None:
        return None
    engine = import_module(settings.SESSION_ENGINE)
    return engine.SessionStore(session_key=key)


def _current_selection(request, ws, attr):
    def read():
        stored = _stored_session(request)
        if stored is None:
            return getattr(ws, attr)
        return getattr(Workspace.from_session(stored), attr)
    return read


@require_GET
def project_summary_api(request, project_id):
    ws = Workspace.from_session(request.session).load()
    project_id = str(project_id)
    if not any(p.id == project_id for p in ws.projects):
        return JsonResponse({"error": "Project not found"}, status=404)

    text = ws.refresh_summary(
        narrator_module.get_narrator(),
        project_id,
        current_selection=_current_selection(request, ws, "selected_project_id"),
    )
    if text is None:
        # The client moved on to another project; the page drops this.
        return JsonResponse({"projectId": project_id, "summary": None, "stale": True})

    stored = _stored_session(request)
    if stored is None:
        ws.save(request.session)
    else:
        ws.save_summary(stored)
        stored.save()
    return JsonResponse({"projectId": project_id, "summary": text, "stale": False})


@require_GET
def site_report_api(request, site_id):
    ws = Workspace.from_session(request.session).load()
    site_id = str(site_id)
    if ws.find_site(site_id) is None:
        return JsonResponse({"error": "Site not found"}, status=404)

    text = ws.site_report(
        narrator_module.get_narrator(),
        site_id,
        current_selection=_current_selection(request, ws, "selected_site_id"),
    )
    if text is None:
        return JsonResponse({"siteId": site_id, "report": None, "stale": True})
    return JsonResponse({"siteId": site_id, "report": text, "stale": False})
