from django.contrib import admin
from .models import PaymentRecord


@admin.register(PaymentRecord)
class PaymentRecordAdmin(admin.ModelAdmin):
    list_display = ("id", "site", "amount", "date", "method")
    list_filter = ("method", "date")
    search_fields = ("site__number", "site__project__name", "notes")
