"""
Per-session application state.

A ``Workspace`` is rebuilt from the session on every request, reloads the
project list from the store, and applies user actions through the data
access layer. A mutation that the store rejects leaves the loaded state and
the selection exactly as they were; a successful one triggers a full reload.
"""
import logging

from django.conf import settings

from COMPANY import services as company_services
from SALES import services as sales_services

from . import services
from .entities import EDGES, CompanySettings, Dimensions
from .filters import STATUS_ALL, filter_sites, normalize_status_filter, project_stats, status_counts
from .valuation import land_area_from_dimensions, project_totals

logger = logging.getLogger(__name__)

SESSION_KEY = "workspace"


def default_company():
    return CompanySettings(name=settings.DEFAULT_COMPANY_NAME, street="", city="", state="", zip="")


class Workspace:
    def __init__(self, selected_project_id=None, selected_site_id=None, search_query="",
                 status_filter=STATUS_ALL, ai_summary=None, summary_key=None):
        self.projects = []
        self.company = default_company()
        self.selected_project_id = selected_project_id
        self.selected_site_id = selected_site_id
        self.search_query = search_query or ""
        self.status_filter = normalize_status_filter(status_filter)
        self.ai_summary = ai_summary
        self.summary_key = summary_key

    # --- session ---

    @classmethod
    def from_session(cls, session):
        return cls(**session.get(SESSION_KEY, {}))

    def save(self, session):
        session[SESSION_KEY] = {
            "selected_project_id": self.selected_project_id,
            "selected_site_id": self.selected_site_id,
            "search_query": self.search_query,
            "status_filter": self.status_filter,
            "ai_summary": self.ai_summary,
            "summary_key": self.summary_key,
        }

    # --- reads ---

    def load(self):
        self.projects = services.get_all_projects()
        loaded_settings = company_services.get_company_settings()
        if loaded_settings:
            self.company = loaded_settings
        if self.projects and self.selected_project is None:
            self.select_project(self.projects[0].id)
        elif not self.projects:
            self.selected_project_id = None
            self.selected_site_id = None
        if self.selected_site_id and self.selected_site is None:
            self.selected_site_id = None
        return self

    @property
    def selected_project(self):
        for project in self.projects:
            if project.id == self.selected_project_id:
                return project
        return None

    @property
    def selected_site(self):
        project = self.selected_project
        if project is None:
            return None
        for site in project.sites:
            if site.id == self.selected_site_id:
                return site
        return None

    def find_site(self, site_id):
        for project in self.projects:
            for site in project.sites:
                if site.id == site_id:
                    return site
        return None

    @property
    def filtered_sites(self):
        project = self.selected_project
        if project is None:
            return []
        return filter_sites(project.sites, self.search_query, self.status_filter)

    @property
    def status_counts(self):
        project = self.selected_project
        return status_counts(project.sites if project else [])

    @property
    def totals(self):
        project = self.selected_project
        return project_totals(project.sites if project else [])

    # --- selection ---

    def select_project(self, project_id):
        self.selected_project_id = project_id
        self.selected_site_id = None
        self.search_query = ""
        self.status_filter = STATUS_ALL
        self.ai_summary = None
        self.summary_key = None

    def select_site(self, site_id):
        self.selected_site_id = site_id

    def set_filters(self, query=None, status_filter=None):
        if query is not None:
            self.search_query = query
        if status_filter is not None:
            self.status_filter = normalize_status_filter(status_filter)

    # --- mutations ---

    def create_project(self, fields):
        new_id = services.create_project(fields)
        if new_id:
            self.load()
            self.select_project(new_id)
        return new_id

    def update_project(self, project_id, fields):
        ok = services.update_project(project_id, fields)
        if ok:
            self.load()
        return ok

    def delete_project(self, project_id):
        ok = services.delete_project(project_id)
        if ok:
            if self.selected_project_id == project_id:
                self.selected_project_id = None
                self.selected_site_id = None
            self.load()
        return ok

    def add_site(self, fields):
        if not self.selected_project_id:
            return None
        new_id = services.create_site(self.selected_project_id, fields)
        if new_id:
            self.load()
            self.select_site(new_id)
        return new_id

    def update_site(self, site_id, patch):
        ok = services.update_site(site_id, patch)
        if ok:
            self.load()
        return ok

    def delete_site(self, site_id, confirmed=False):
        if not confirmed:
            return False
        ok = services.delete_site(site_id)
        if ok:
            self.load()
            self.selected_site_id = None
        return ok

    def record_payment(self, site_id, fields):
        payment_id = sales_services.create_payment(site_id, fields)
        if payment_id:
            self.load()
        return payment_id

    def save_company_settings(self, fields):
        ok = company_services.upsert_company_settings(fields)
        if ok:
            self.company = CompanySettings(**fields)
        return ok

    # --- narrative text ---

    def refresh_summary(self, narrator, project_id=None, current_selection=None):
        """Fetch the project summary; drop it if the selection moved meanwhile.

        ``current_selection`` returns the selected project id as stored at the
        time the call resolves; without it the in-memory selection is used.
        """
        key = project_id or self.selected_project_id
        project = next((p for p in self.projects if p.id == key), None)
        if project is None:
            return None
        text = narrator.summarize(project_stats(project))
        selected = current_selection() if current_selection else self.selected_project_id
        if selected != key:
            logger.info("Discarding stale summary for project %s", key)
            return None
        self.ai_summary = text
        self.summary_key = key
        return text

    def site_report(self, narrator, site_id=None, current_selection=None):
        key = site_id or self.selected_site_id
        site = self.find_site(key) if key else None
        if site is None:
            return None
        text = narrator.site_report(site)
        selected = current_selection() if current_selection else self.selected_site_id
        if selected != key:
            logger.info("Discarding stale report for site %s", key)
            return None
        return text

    def save_summary(self, session):
        """Write the cached summary only, leaving the stored selection alone."""
        state = dict(session.get(SESSION_KEY, {}))
        state["ai_summary"] = self.ai_summary
        state["summary_key"] = self.summary_key
        session[SESSION_KEY] = state


class SiteEditSession:
    """In-place edit of one site.

    Edge edits recompute the land area immediately; ``patch`` returns only
    the fields whose value differs from the site being edited.
    """

    def __init__(self, site):
        self.site = site
        self.values = {}

    def current(self, field):
        return self.values.get(field, getattr(self.site, field))

    def set_field(self, field, value):
        self.values[field] = value

    def set_dimension(self, edge, value):
        if edge not in EDGES:
            raise ValueError(f"Unknown edge: {edge}")
        dims = Dimensions(**self.current("dimensions").to_dict())
        setattr(dims, edge, float(value or 0))
        self.values["dimensions"] = dims
        self.values["land_area_sqft"] = land_area_from_dimensions(dims)

    def apply(self, patch):
        """Replay a sparse patch as field and edge edits; edges go last."""
        for field, value in patch.items():
            if field != "dimensions":
                self.set_field(field, value)
        if "dimensions" in patch:
            current = self.current("dimensions")
            for edge, value in patch["dimensions"].to_dict().items():
                if getattr(current, edge) != value:
                    self.set_dimension(edge, value)
        return self

    def patch(self):
        return {
            field: value for field, value in self.values.items()
            if getattr(self.site, field) != value
        }
