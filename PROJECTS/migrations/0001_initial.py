import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Project",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=200)),
                ("location", models.CharField(max_length=255)),
                ("launch_date", models.DateField(blank=True, null=True)),
                ("image_urls", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "projects",
                "ordering": ("created_at",),
            },
        ),
        migrations.CreateModel(
            name="Site",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("number", models.CharField(max_length=50)),
                (
                    "status",
                    models.CharField(
                        choices=[("UNSOLD", "Unsold"), ("BOOKED", "Booked"), ("SOLD", "Sold")],
                        default="UNSOLD",
                        max_length=10,
                    ),
                ),
                ("customer_name", models.CharField(blank=True, max_length=200, null=True)),
                ("customer_phone", models.CharField(blank=True, max_length=50, null=True)),
                ("facing", models.CharField(blank=True, default="", max_length=30)),
                ("dimensions", models.JSONField(blank=True, default=dict)),
                ("land_area_sqft", models.DecimalField(decimal_places=4, default=0, max_digits=18)),
                ("land_cost_per_sqft", models.DecimalField(decimal_places=2, default=0, max_digits=18)),
                ("construction_area_sqft", models.DecimalField(decimal_places=4, default=0, max_digits=18)),
                ("construction_rate_per_sqft", models.DecimalField(decimal_places=2, default=0, max_digits=18)),
                ("profit_margin_percentage", models.DecimalField(blank=True, decimal_places=2, max_digits=7, null=True)),
                ("image_urls", models.JSONField(blank=True, default=list)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("projected_completion_date", models.DateField(blank=True, null=True)),
                ("booking_date", models.DateField(blank=True, null=True)),
                ("sale_date", models.DateField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "project",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sites",
                        to="PROJECTS.project",
                    ),
                ),
            ],
            options={
                "db_table": "sites",
                "ordering": ("created_at",),
            },
        ),
    ]
