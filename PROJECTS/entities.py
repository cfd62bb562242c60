"""
Application-side shapes of the stored rows.

The ORM rows carry ``Decimal`` columns; everything that reaches the
calculator is a plain ``float``. The camelCase key maps below are the JSON
shape served by the API and accepted in partial site patches.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

UNSOLD = "UNSOLD"
BOOKED = "BOOKED"
SOLD = "SOLD"
SITE_STATUSES = (UNSOLD, BOOKED, SOLD)

EDGES = ("north", "south", "east", "west")

FACING_CHOICES = (
    "North", "South", "East", "West",
    "North-East", "North-West", "South-East", "South-West",
)


def to_float(value) -> float:
    """Parse a stored decimal (``Decimal``, numeric string or number) to float.

    ``None`` and empty strings become 0.0 so they never poison a sum.
    """
    if value is None or value == "":
        return 0.0
    if isinstance(value, float):
        return value
    try:
        return float(Decimal(str(value).strip()))
    except (InvalidOperation, ValueError):
        raise ValueError(f"Not a decimal value: {value!r}")


def to_decimal(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))


def iso_date(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


@dataclass
class Dimensions:
    north: float = 0.0
    south: float = 0.0
    east: float = 0.0
    west: float = 0.0

    @classmethod
    def from_dict(cls, data) -> "Dimensions":
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError(f"Dimensions must be an object, got {type(data).__name__}")
        return cls(**{edge: to_float(data.get(edge)) for edge in EDGES})

    def to_dict(self) -> Dict[str, float]:
        return {edge: getattr(self, edge) for edge in EDGES}


@dataclass
class PaymentRecord:
    id: str
    amount: float
    date: Optional[str]
    method: str
    notes: Optional[str] = None

    def to_dict(self):
        return {
            "id": self.id,
            "amount": self.amount,
            "date": self.date,
            "method": self.method,
            "notes": self.notes,
        }


@dataclass
class Site:
    id: str
    number: str
    status: str = UNSOLD
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    facing: str = ""
    dimensions: Dimensions = field(default_factory=Dimensions)
    land_area_sqft: float = 0.0
    land_cost_per_sqft: float = 0.0
    construction_area_sqft: float = 0.0
    construction_rate_per_sqft: float = 0.0
    profit_margin_percentage: Optional[float] = None
    image_urls: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    projected_completion_date: Optional[str] = None
    booking_date: Optional[str] = None
    sale_date: Optional[str] = None
    payments: List[PaymentRecord] = field(default_factory=list)

    def to_dict(self):
        data = {json_key: getattr(self, attr) for json_key, attr in SITE_JSON_FIELDS.items()}
        data["id"] = self.id
        data["dimensions"] = self.dimensions.to_dict()
        data["payments"] = [p.to_dict() for p in self.payments]
        return data


@dataclass
class Project:
    id: str
    name: str
    location: str
    launch_date: Optional[str] = None
    image_urls: List[str] = field(default_factory=list)
    sites: List[Site] = field(default_factory=list)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "location": self.location,
            "launchDate": self.launch_date,
            "imageUrls": list(self.image_urls),
            "sites": [s.to_dict() for s in self.sites],
        }


@dataclass
class CompanySettings:
    name: str
    logo_url: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None

    def to_dict(self):
        return {
            "name": self.name,
            "logoUrl": self.logo_url,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zip": self.zip,
        }


# camelCase JSON key -> Site attribute (also the ORM column name).
SITE_JSON_FIELDS = {
    "number": "number",
    "status": "status",
    "customerName": "customer_name",
    "customerPhone": "customer_phone",
    "facing": "facing",
    "dimensions": "dimensions",
    "landAreaSqFt": "land_area_sqft",
    "landCostPerSqFt": "land_cost_per_sqft",
    "constructionAreaSqFt": "construction_area_sqft",
    "constructionRatePerSqFt": "construction_rate_per_sqft",
    "profitMarginPercentage": "profit_margin_percentage",
    "imageUrls": "image_urls",
    "tags": "tags",
    "projectedCompletionDate": "projected_completion_date",
    "bookingDate": "booking_date",
    "saleDate": "sale_date",
}

SITE_NUMERIC_FIELDS = (
    "land_area_sqft",
    "land_cost_per_sqft",
    "construction_area_sqft",
    "construction_rate_per_sqft",
    "profit_margin_percentage",
)

SITE_DATE_FIELDS = ("projected_completion_date", "booking_date", "sale_date")


SITE_TEXT_FIELDS = ("number", "facing", "customer_name", "customer_phone")
SITE_LIST_FIELDS = ("image_urls", "tags")


def site_patch_from_json(data) -> Dict[str, object]:
    """Sparse patch (attribute name -> value) from a camelCase JSON body.

    Only keys present in ``data`` appear in the result; unknown keys are
    ignored. Malformed values raise ``ValueError``.
    """
    if not isinstance(data, dict):
        raise ValueError("Patch body must be a JSON object")
    patch = {}
    for json_key, attr in SITE_JSON_FIELDS.items():
        if json_key not in data:
            continue
        value = data[json_key]
        if attr == "status":
            if value not in SITE_STATUSES:
                raise ValueError(f"status must be one of {', '.join(SITE_STATUSES)}")
        elif attr in SITE_TEXT_FIELDS:
            if value is not None and not isinstance(value, str):
                raise ValueError(f"{json_key} must be a string")
        elif attr == "dimensions":
            value = Dimensions.from_dict(value)
            if any(v < 0 for v in value.to_dict().values()):
                raise ValueError("dimensions must be zero or positive")
        elif attr == "profit_margin_percentage":
            value = None if value is None else to_float(value)
        elif attr in SITE_NUMERIC_FIELDS:
            value = to_float(value)
            if value < 0:
                raise ValueError(f"{json_key} must be zero or positive")
        elif attr in SITE_LIST_FIELDS:
            if value is None:
                value = []
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ValueError(f"{json_key} must be a list of strings")
        elif attr in SITE_DATE_FIELDS:
            if value == "":
                value = None
            if value is not None and not isinstance(value, str):
                raise ValueError(f"{json_key} must be an ISO date")
            if value is not None:
                date.fromisoformat(value)
        patch[attr] = value
    return patch
