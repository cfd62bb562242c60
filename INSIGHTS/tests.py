from datetime import date
from types import SimpleNamespace
from unittest import mock

from django.test import SimpleTestCase, TestCase
from django.urls import reverse

from INSIGHTS import narrator
from PROJECTS import services
from PROJECTS.entities import Dimensions, Site
from PROJECTS.filters import ProjectStats


def completion(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


STATS = ProjectStats(name="Green Valley", location="Mysore", total=10, sold=4, booked=3, unsold=3)
SITE = Site(id="s1", number="A-1", status="BOOKED", facing="East", dimensions=Dimensions(30, 30, 40, 40),
            land_area_sqft=1200.0, land_cost_per_sqft=4500.0, customer_name="Ravi")


class NarratorTestCase(SimpleTestCase):

    def test_prompts_carry_the_figures(self):
        prompt = narrator.project_prompt(STATS)
        self.assertIn('"Green Valley"', prompt)
        self.assertIn("- Sold: 4", prompt)
        report_prompt = narrator.site_prompt(SITE)
        self.assertIn("site #A-1", report_prompt)
        self.assertIn("1200 sq ft", report_prompt)
        self.assertIn("Rs. 5,400,000", report_prompt)
        self.assertIn("Current Customer: Ravi", report_prompt)

    def test_summary(self):
        client = mock.Mock()
        client.chat_completion.return_value = completion("  Strong sales momentum.  ")
        service = narrator.HuggingFaceNarrator(api_key="key", model_id="main", client=client)
        self.assertEqual(service.summarize(STATS), "Strong sales momentum.")
        self.assertEqual(client.chat_completion.call_args.kwargs["model"], "main")

    def test_missing_key_falls_back(self):
        service = narrator.HuggingFaceNarrator(api_key="")
        self.assertEqual(service.summarize(STATS), narrator.SUMMARY_FAILED)
        self.assertEqual(service.site_report(SITE), narrator.REPORT_FAILED)

    def test_provider_failure_falls_back(self):
        client = mock.Mock()
        client.chat_completion.side_effect = RuntimeError("network down")
        service = narrator.HuggingFaceNarrator(api_key="key", client=client)
        self.assertEqual(service.summarize(STATS), narrator.SUMMARY_FAILED)
        self.assertEqual(service.site_report(SITE), narrator.REPORT_FAILED)

    def test_fallback_model_is_tried(self):
        client = mock.Mock()
        client.chat_completion.side_effect = [RuntimeError("model busy"), completion("Fallback report.")]
        service = narrator.HuggingFaceNarrator(api_key="key", model_id="main", fallback_model_id="backup", client=client)
        self.assertEqual(service.site_report(SITE), "Fallback report.")
        self.assertEqual(client.chat_completion.call_args.kwargs["model"], "backup")

    def test_empty_response(self):
        client = mock.Mock()
        client.chat_completion.return_value = completion(None)
        service = narrator.HuggingFaceNarrator(api_key="key", client=client)
        self.assertEqual(service.summarize(STATS), narrator.SUMMARY_EMPTY)
        self.assertEqual(service.site_report(SITE), narrator.REPORT_EMPTY)


class NarrativeApiTestCase(TestCase):

    def setUp(self):
        self.first = services.create_project({"name": "First", "location": "Mysore", "launch_date": date(2024, 1, 1)})
        self.second = services.create_project({"name": "Second", "location": "Hassan", "launch_date": date(2024, 2, 1)})
        self.site_id = services.create_site(self.first, {"number": "A-1", "dimensions": Dimensions(30, 30, 40, 40)})
        self.fake = mock.Mock()
        self.fake.summarize.return_value = "Healthy pipeline."
        self.fake.site_report.return_value = "Prime corner plot."
        patcher = mock.patch("INSIGHTS.narrator.get_narrator", return_value=self.fake)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_summary_for_selected_project(self):
        body = self.client.get(reverse("project_summary_api", args=[self.first])).json()
        self.assertEqual(body, {"projectId": self.first, "summary": "Healthy pipeline.", "stale": False})

    def test_summary_for_other_project_is_stale(self):
        body = self.client.get(reverse("project_summary_api", args=[self.second])).json()
        self.assertTrue(body["stale"])
        self.assertIsNone(body["summary"])

    def test_unknown_project(self):
        response = self.client.get(reverse("project_summary_api", args=["00000000-0000-0000-0000-000000000000"]))
        self.assertEqual(response.status_code, 404)

    def test_site_report(self):
        self.client.get(reverse("site_select", args=[self.site_id]))
        body = self.client.get(reverse("site_report_api", args=[self.site_id])).json()
        self.assertEqual(body["report"], "Prime corner plot.")
        self.assertFalse(body["stale"])

    def test_site_report_without_selection_is_stale(self):
        body = self.client.get(reverse("site_report_api", args=[self.site_id])).json()
        self.assertTrue(body["stale"])

    def test_project_switch_during_summary_is_kept(self):
        self.client.get(reverse("dashboard"))

        def switch_project(stats):
            self.client.get(reverse("project_select", args=[self.second]))
            return "Summary for First"

        self.fake.summarize.side_effect = switch_project
        body = self.client.get(reverse("project_summary_api", args=[self.first])).json()
        self.assertTrue(body["stale"])
        self.assertIsNone(body["summary"])
        self.assertEqual(self.client.session["workspace"]["selected_project_id"], self.second)

    def test_summary_is_cached_without_touching_selection(self):
        self.client.get(reverse("dashboard"), {"q": "A", "status": "UNSOLD"})
        body = self.client.get(reverse("project_summary_api", args=[self.first])).json()
        self.assertFalse(body["stale"])
        state = self.client.session["workspace"]
        self.assertEqual(state["ai_summary"], "Healthy pipeline.")
        self.assertEqual(state["summary_key"], self.first)
        self.assertEqual((state["search_query"], state["status_filter"]), ("A", "UNSOLD"))

    def test_project_switch_during_site_report(self):
        self.client.get(reverse("site_select", args=[self.site_id]))

        def switch_project(site):
            self.client.get(reverse("project_select", args=[self.second]))
            return "Prime corner plot."

        self.fake.site_report.side_effect = switch_project
        body = self.client.get(reverse("site_report_api", args=[self.site_id])).json()
        self.assertTrue(body["stale"])
        self.assertIsNone(self.client.session["workspace"]["selected_site_id"])
