from django.contrib import admin
from .models import Project, Site


class SiteInline(admin.TabularInline):
    model = Site
    extra = 0
    fields = ("number", "status", "facing", "land_area_sqft", "land_cost_per_sqft")


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("name", "location", "launch_date", "created_at")
    search_fields = ("name", "location")
    inlines = [SiteInline]


@admin.register(Site)
class SiteAdmin(admin.ModelAdmin):
    list_display = ("number", "project", "status", "facing", "land_area_sqft", "customer_name")
    list_filter = ("project", "status")
    search_fields = ("number", "customer_name", "customer_phone")
