from dataclasses import dataclass

from .entities import BOOKED, SITE_STATUSES, SOLD, UNSOLD

STATUS_ALL = "ALL"
STATUS_FILTERS = (STATUS_ALL,) + SITE_STATUSES


def normalize_status_filter(value) -> str:
    value = (value or "").strip().upper()
    return value if value in STATUS_FILTERS else STATUS_ALL


def filter_sites(sites, query="", status_filter=STATUS_ALL):
    """Sites whose number contains ``query`` (case-insensitive) and whose
    status matches ``status_filter`` (``ALL`` matches every status)."""
    needle = (query or "").lower()
    return [
        site for site in sites
        if needle in (site.number or "").lower()
        and (status_filter == STATUS_ALL or site.status == status_filter)
    ]


def status_counts(sites):
    counts = {status: 0 for status in SITE_STATUSES}
    for site in sites:
        if site.status in counts:
            counts[site.status] += 1
    return counts


@dataclass(frozen=True)
class ProjectStats:
    name: str
    location: str
    total: int
    sold: int
    booked: int
    unsold: int


def project_stats(project) -> ProjectStats:
    counts = status_counts(project.sites)
    return ProjectStats(
        name=project.name,
        location=project.location,
        total=len(project.sites),
        sold=counts[SOLD],
        booked=counts[BOOKED],
        unsold=counts[UNSOLD],
    )
