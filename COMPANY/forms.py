from django import forms


class CompanySettingsForm(forms.Form):
    name = forms.CharField(max_length=200, label="Company legal name")
    logo_url = forms.CharField(required=False, widget=forms.Textarea)
    street = forms.CharField(max_length=255, required=False)
    city = forms.CharField(max_length=100, required=False)
    state = forms.CharField(max_length=100, required=False)
    zip = forms.CharField(max_length=20, required=False, label="ZIP")

    def clean_name(self):
        name = self.cleaned_data["name"].strip()
        if not name:
            raise forms.ValidationError("Company name is required.")
        return name

    def to_fields(self):
        data = self.cleaned_data
        return {
            "name": data["name"],
            "logo_url": data.get("logo_url") or None,
            "street": data.get("street") or "",
            "city": data.get("city") or "",
            "state": data.get("state") or "",
            "zip": data.get("zip") or "",
        }
