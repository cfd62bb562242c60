from django import forms
from django.utils import timezone

from .models import PAYMENT_METHODS


class PaymentForm(forms.Form):
    amount = forms.DecimalField(max_digits=18, decimal_places=2)
    date = forms.DateField(initial=timezone.localdate)
    method = forms.CharField(max_length=50, initial=PAYMENT_METHODS[0])
    notes = forms.CharField(required=False, widget=forms.Textarea)

    def clean_amount(self):
        amount = self.cleaned_data["amount"]
        if amount <= 0:
            raise forms.ValidationError("Amount must be greater than 0.")
        return amount

    def to_fields(self):
        data = self.cleaned_data
        return {
            "amount": data["amount"],
            "date": data["date"],
            "method": data.get("method") or PAYMENT_METHODS[0],
            "notes": data.get("notes") or None,
        }
