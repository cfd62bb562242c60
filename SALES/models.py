import uuid

from django.db import models

from PROJECTS.models import Site

PAYMENT_METHODS = ("Bank Transfer", "Cash", "Online/UPI", "Cheque")


class PaymentRecord(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    site = models.ForeignKey(Site, on_delete=models.CASCADE, related_name="payment_records")
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    date = models.DateField()
    method = models.CharField(max_length=50, default=PAYMENT_METHODS[0])
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "payment_records"
        ordering = ("date", "created_at")

    def __str__(self):
        return f"{self.site} - {self.amount}"
