import uuid

from django.db import models

from .entities import BOOKED, SOLD, UNSOLD


class Project(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    location = models.CharField(max_length=255)
    launch_date = models.DateField(blank=True, null=True)
    image_urls = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "projects"
        ordering = ("created_at",)

    def __str__(self):
        return self.name


class Site(models.Model):
    STATUS_CHOICES = (
        (UNSOLD, 'Unsold'),
        (BOOKED, 'Booked'),
        (SOLD, 'Sold'),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="sites")
    number = models.CharField(max_length=50)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=UNSOLD)
    customer_name = models.CharField(max_length=200, blank=True, null=True)
    customer_phone = models.CharField(max_length=50, blank=True, null=True)
    facing = models.CharField(max_length=30, blank=True, default="")

    # {"north": ft, "south": ft, "east": ft, "west": ft}
    dimensions = models.JSONField(default=dict, blank=True)

    # Derived from fractional edges, so keep more precision than the rates.
    land_area_sqft = models.DecimalField(max_digits=28, decimal_places=10, default=0)
    land_cost_per_sqft = models.DecimalField(max_digits=18, decimal_places=2, default=0)
    construction_area_sqft = models.DecimalField(max_digits=18, decimal_places=4, default=0)
    construction_rate_per_sqft = models.DecimalField(max_digits=18, decimal_places=2, default=0)
    profit_margin_percentage = models.DecimalField(max_digits=7, decimal_places=2, blank=True, null=True)

    image_urls = models.JSONField(default=list, blank=True)
    tags = models.JSONField(default=list, blank=True)

    projected_completion_date = models.DateField(blank=True, null=True)
    booking_date = models.DateField(blank=True, null=True)
    sale_date = models.DateField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "sites"
        ordering = ("created_at",)

    def __str__(self):
        return self.number
