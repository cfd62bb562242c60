from datetime import date
from decimal import Decimal

from django.test import TestCase, override_settings
from django.urls import reverse

from PROJECTS import services as project_services, valuation
from PROJECTS.entities import Dimensions
from PROJECTS.workspace import Workspace
from SALES import services
from SALES.models import PaymentRecord


class PaymentServicesTestCase(TestCase):

    def setUp(self):
        self.project_id = project_services.create_project({
            "name": "Green Valley", "location": "Mysore", "launch_date": date(2024, 1, 15),
        })
        self.site_id = project_services.create_site(self.project_id, {
            "number": "A-1",
            "dimensions": Dimensions(30, 30, 40, 40),
            "land_cost_per_sqft": 4500,
            "construction_area_sqft": 1800,
            "construction_rate_per_sqft": 2200,
            "profit_margin_percentage": 10,
        })

    def test_create_payment(self):
        payment_id = services.create_payment(self.site_id, {
            "amount": Decimal("2000000"), "date": date(2024, 3, 1), "method": "Cash",
        })
        self.assertIsNotNone(payment_id)
        row = PaymentRecord.objects.get(pk=payment_id)
        self.assertEqual(row.amount, Decimal("2000000"))
        self.assertEqual(row.method, "Cash")

    def test_non_positive_amount_rejected(self):
        self.assertIsNone(services.create_payment(self.site_id, {"amount": 0, "date": date(2024, 3, 1)}))
        self.assertIsNone(services.create_payment(self.site_id, {"amount": -5, "date": date(2024, 3, 1)}))
        self.assertFalse(PaymentRecord.objects.exists())

    def test_unknown_site(self):
        missing = "00000000-0000-0000-0000-000000000000"
        self.assertIsNone(services.create_payment(missing, {"amount": 10, "date": date(2024, 3, 1)}))

    def test_balance_after_payment(self):
        ws = Workspace().load()
        self.assertTrue(ws.record_payment(self.site_id, {"amount": 2000000, "date": date(2024, 3, 1)}))
        site = ws.find_site(self.site_id)
        self.assertEqual(len(site.payments), 1)
        self.assertEqual(site.payments[0].method, "Bank Transfer")
        self.assertAlmostEqual(valuation.balance_due(site), 8296000)

    def test_payments_ordered_by_date(self):
        services.create_payment(self.site_id, {"amount": 10, "date": date(2024, 5, 1)})
        services.create_payment(self.site_id, {"amount": 20, "date": date(2024, 2, 1)})
        site = Workspace().load().find_site(self.site_id)
        self.assertEqual([p.date for p in site.payments], ["2024-02-01", "2024-05-01"])

    def test_delete_payment(self):
        payment_id = services.create_payment(self.site_id, {"amount": 10, "date": date(2024, 5, 1)})
        self.assertTrue(services.delete_payment(payment_id))
        self.assertFalse(services.delete_payment(payment_id))

    @override_settings(STORE_CONFIGURED=False)
    def test_unconfigured_store(self):
        self.assertIsNone(services.create_payment(self.site_id, {"amount": 10, "date": date(2024, 5, 1)}))


class RegisterPaymentViewTestCase(TestCase):

    def setUp(self):
        self.project_id = project_services.create_project({
            "name": "Green Valley", "location": "Mysore", "launch_date": date(2024, 1, 15),
        })
        self.site_id = project_services.create_site(self.project_id, {"number": "A-1"})

    def test_register_payment(self):
        response = self.client.post(reverse("register_payment", args=[self.site_id]), {
            "amount": "1500.50", "date": "2024-04-01", "method": "Online/UPI", "notes": "Token advance",
        })
        self.assertRedirects(response, reverse("dashboard"), fetch_redirect_response=False)
        row = PaymentRecord.objects.get()
        self.assertEqual(row.amount, Decimal("1500.50"))
        self.assertEqual(row.notes, "Token advance")

    def test_zero_amount_is_refused(self):
        self.client.post(reverse("register_payment", args=[self.site_id]), {
            "amount": "0", "date": "2024-04-01", "method": "Cash",
        })
        self.assertFalse(PaymentRecord.objects.exists())
