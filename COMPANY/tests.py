from django.test import TestCase, override_settings
from django.urls import reverse

from COMPANY import services
from COMPANY.models import CompanySettings


class CompanySettingsServicesTestCase(TestCase):

    def test_missing_row(self):
        self.assertIsNone(services.get_company_settings())

    def test_upsert_keeps_single_row(self):
        for city in ("Mysore", "Hassan", "Mandya"):
            self.assertTrue(services.upsert_company_settings({
                "name": "Acme Estates", "street": "1 MG Road", "city": city, "state": "KA", "zip": "570001",
            }))
        self.assertEqual(CompanySettings.objects.count(), 1)
        loaded = services.get_company_settings()
        self.assertEqual(loaded.city, "Mandya")
        self.assertIsNone(loaded.logo_url)

    @override_settings(STORE_CONFIGURED=False)
    def test_unconfigured_store(self):
        self.assertFalse(services.upsert_company_settings({"name": "Acme"}))
        self.assertIsNone(services.get_company_settings())


class CompanySettingsViewsTestCase(TestCase):

    def test_default_profile(self):
        body = self.client.get(reverse("company_settings_api")).json()
        self.assertEqual(body["name"], "ESTATENEXUS")
        self.assertIn("logoUrl", body)

    def test_save_profile(self):
        response = self.client.post(reverse("company_settings"), {
            "name": "Acme Estates", "logo_url": "https://example.com/logo.png", "city": "Mysore",
        })
        self.assertRedirects(response, reverse("dashboard"), fetch_redirect_response=False)
        body = self.client.get(reverse("company_settings_api")).json()
        self.assertEqual(body["name"], "Acme Estates")
        self.assertEqual(body["logoUrl"], "https://example.com/logo.png")

    def test_name_required(self):
        response = self.client.post(reverse("company_settings"), {"name": ""})
        self.assertEqual(response.status_code, 200)
        self.assertFalse(CompanySettings.objects.exists())

    def test_form_page(self):
        response = self.client.get(reverse("company_settings"))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "ESTATENEXUS")
