from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

SQFT_PER_CENT = 435.6


def _num(value) -> float:
    return float(value) if value is not None else 0.0


def land_area_from_dimensions(dimensions) -> float:
    """Average opposite edges and multiply: ((N+S)/2) * ((E+W)/2)."""
    north = _num(getattr(dimensions, "north", None))
    south = _num(getattr(dimensions, "south", None))
    east = _num(getattr(dimensions, "east", None))
    west = _num(getattr(dimensions, "west", None))
    return ((north + south) / 2) * ((east + west) / 2)


def land_value(site) -> float:
    return _num(site.land_area_sqft) * _num(site.land_cost_per_sqft)


def construction_value(site) -> float:
    return _num(site.construction_area_sqft) * _num(site.construction_rate_per_sqft)


def base_value(site) -> float:
    return land_value(site) + construction_value(site)


def profit_amount(site) -> float:
    return base_value(site) * (_num(site.profit_margin_percentage) / 100)


def projected_total_value(site) -> float:
    return base_value(site) + profit_amount(site)


def total_paid(site) -> float:
    return sum((_num(p.amount) for p in (site.payments or [])), 0.0)


def balance_due(site) -> float:
    # Overpayment yields a negative balance.
    return projected_total_value(site) - total_paid(site)


def to_cents(area_sqft) -> float:
    return _num(area_sqft) / SQFT_PER_CENT


def format_cents(area_sqft) -> str:
    return f"{to_cents(area_sqft):.2f}"


def format_sqft(area_sqft) -> str:
    # Display only; the stored area keeps its precision.
    return str(Decimal(str(_num(area_sqft))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class SiteValuation:
    land_value: float
    construction_value: float
    base_value: float
    profit_amount: float
    projected_total_value: float
    total_paid: float
    balance_due: float


def site_valuation(site) -> SiteValuation:
    land = land_value(site)
    construction = construction_value(site)
    base = land + construction
    profit = base * (_num(site.profit_margin_percentage) / 100)
    projected = base + profit
    paid = total_paid(site)
    return SiteValuation(
        land_value=land,
        construction_value=construction,
        base_value=base,
        profit_amount=profit,
        projected_total_value=projected,
        total_paid=paid,
        balance_due=projected - paid,
    )


@dataclass(frozen=True)
class ProjectTotals:
    total_land: float = 0.0
    total_construction: float = 0.0
    total_projected: float = 0.0


def project_totals(sites) -> ProjectTotals:
    """Roll site values up to project level, over every site given."""
    total_land = 0.0
    total_construction = 0.0
    total_projected = 0.0
    for site in sites:
        total_land += land_value(site)
        total_construction += construction_value(site)
        total_projected += projected_total_value(site)
    return ProjectTotals(total_land, total_construction, total_projected)
