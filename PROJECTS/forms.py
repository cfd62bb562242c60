from django import forms

from .entities import EDGES, FACING_CHOICES, SITE_STATUSES, UNSOLD, Dimensions

STATUS_CHOICES = [(s, s.title()) for s in SITE_STATUSES]


def _split_lines(value):
    return [line.strip() for line in (value or "").splitlines() if line.strip()]


def _split_commas(value):
    return [part.strip() for part in (value or "").split(",") if part.strip()]


class ProjectForm(forms.Form):
    name = forms.CharField(max_length=200)
    location = forms.CharField(max_length=255)
    launch_date = forms.DateField()
    image_urls = forms.CharField(required=False, widget=forms.Textarea, help_text="One image URL per line.")

    def clean_name(self):
        name = self.cleaned_data["name"].strip()
        if not name:
            raise forms.ValidationError("Project name is required.")
        return name

    def clean_location(self):
        location = self.cleaned_data["location"].strip()
        if not location:
            raise forms.ValidationError("Location is required.")
        return location

    def to_fields(self):
        data = self.cleaned_data
        return {
            "name": data["name"],
            "location": data["location"],
            "launch_date": data["launch_date"],
            "image_urls": _split_lines(data.get("image_urls")),
        }


class SiteForm(forms.Form):
    number = forms.CharField(max_length=50)
    status = forms.ChoiceField(choices=STATUS_CHOICES, initial=UNSOLD)
    facing = forms.CharField(max_length=30, initial=FACING_CHOICES[0])
    customer_name = forms.CharField(max_length=200, required=False)
    customer_phone = forms.CharField(max_length=50, required=False)

    north = forms.FloatField(min_value=0, initial=30)
    south = forms.FloatField(min_value=0, initial=30)
    east = forms.FloatField(min_value=0, initial=40)
    west = forms.FloatField(min_value=0, initial=40)

    land_cost_per_sqft = forms.FloatField(min_value=0, required=False)
    construction_area_sqft = forms.FloatField(min_value=0, required=False)
    construction_rate_per_sqft = forms.FloatField(min_value=0, required=False)
    profit_margin_percentage = forms.FloatField(required=False)

    tags = forms.CharField(required=False, help_text="Comma separated.")
    image_urls = forms.CharField(required=False, widget=forms.Textarea)
    projected_completion_date = forms.DateField(required=False)
    booking_date = forms.DateField(required=False)
    sale_date = forms.DateField(required=False)

    def clean_number(self):
        number = self.cleaned_data["number"].strip()
        if not number:
            raise forms.ValidationError("Unit number is required.")
        return number

    def to_fields(self):
        data = self.cleaned_data
        # land_area_sqft follows from the dimensions in the data access layer.
        return {
            "number": data["number"],
            "status": data["status"],
            "facing": data.get("facing") or "",
            "customer_name": data.get("customer_name") or None,
            "customer_phone": data.get("customer_phone") or None,
            "dimensions": Dimensions(**{edge: data[edge] for edge in EDGES}),
            "land_cost_per_sqft": data.get("land_cost_per_sqft") or 0,
            "construction_area_sqft": data.get("construction_area_sqft") or 0,
            "construction_rate_per_sqft": data.get("construction_rate_per_sqft") or 0,
            "profit_margin_percentage": data.get("profit_margin_percentage"),
            "tags": _split_commas(data.get("tags")),
            "image_urls": _split_lines(data.get("image_urls")),
            "projected_completion_date": data.get("projected_completion_date"),
            "booking_date": data.get("booking_date"),
            "sale_date": data.get("sale_date"),
        }


class SitePatchForm(SiteForm):
    """Every field optional; ``patch`` keeps only the fields that were posted."""

    land_area_sqft = forms.FloatField(min_value=0, required=False)

    def __init__(self, *args, site=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.site = site
        for field in self.fields.values():
            field.required = False

    def clean_number(self):
        number = (self.cleaned_data.get("number") or "").strip()
        if "number" in self.data and not number:
            raise forms.ValidationError("Unit number is required.")
        return number

    def patch(self):
        data = self.cleaned_data
        posted = set(self.data.keys())
        patch = {}
        for name in ("number", "status", "facing", "customer_name", "customer_phone"):
            if name in posted:
                patch[name] = data.get(name) or ("" if name == "facing" else None)
        for name in ("land_area_sqft", "land_cost_per_sqft", "construction_area_sqft", "construction_rate_per_sqft"):
            if name in posted:
                patch[name] = data.get(name) or 0
        if "profit_margin_percentage" in posted:
            patch["profit_margin_percentage"] = data.get("profit_margin_percentage")
        if posted.intersection(EDGES):
            current = self.site.dimensions if self.site else Dimensions()
            values = current.to_dict()
            for edge in EDGES:
                if edge in posted:
                    values[edge] = data.get(edge) or 0
            patch["dimensions"] = Dimensions(**values)
        if "tags" in posted:
            patch["tags"] = _split_commas(data.get("tags"))
        if "image_urls" in posted:
            patch["image_urls"] = _split_lines(data.get("image_urls"))
        for name in ("projected_completion_date", "booking_date", "sale_date"):
            if name in posted:
                patch[name] = data.get(name)
        return patch
