import json
from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal
from unittest import mock

from django.test import TestCase, SimpleTestCase, override_settings
from django.urls import reverse

from PROJECTS import export, services, valuation
from PROJECTS.entities import CompanySettings, Dimensions, PaymentRecord, Project, Site, site_patch_from_json, to_float
from PROJECTS.filters import filter_sites, project_stats, status_counts, normalize_status_filter
from PROJECTS.forms import SitePatchForm
from PROJECTS.models import Project as ProjectRow, Site as SiteRow
from PROJECTS.workspace import SiteEditSession, Workspace
from SALES.models import PaymentRecord as PaymentRow


def make_site(**overrides):
    values = dict(
        id="s1",
        number="A-1",
        status="UNSOLD",
        facing="East",
        dimensions=Dimensions(30, 30, 40, 40),
        land_area_sqft=1200.0,
        land_cost_per_sqft=4500.0,
        construction_area_sqft=1800.0,
        construction_rate_per_sqft=2200.0,
        profit_margin_percentage=10.0,
    )
    values.update(overrides)
    return Site(**values)


class ValuationTestCase(SimpleTestCase):

    def test_area_from_dimensions(self):
        self.assertEqual(valuation.land_area_from_dimensions(Dimensions(30, 30, 40, 40)), 1200.0)
        # irregular plot: averages of opposite edges
        self.assertEqual(valuation.land_area_from_dimensions(Dimensions(30, 50, 40, 60)), 2000.0)
        self.assertEqual(valuation.land_area_from_dimensions(Dimensions()), 0.0)

    def test_site_value_and_balance(self):
        site = make_site()
        figures = valuation.site_valuation(site)
        self.assertAlmostEqual(figures.land_value, 5400000)
        self.assertAlmostEqual(figures.construction_value, 3960000)
        self.assertAlmostEqual(figures.base_value, 9360000)
        self.assertAlmostEqual(figures.profit_amount, 936000)
        self.assertAlmostEqual(figures.projected_total_value, 10296000)
        self.assertAlmostEqual(figures.balance_due, 10296000)

        site.payments.append(PaymentRecord(id="p1", amount=2000000.0, date="2024-01-10", method="Cash"))
        self.assertAlmostEqual(valuation.total_paid(site), 2000000)
        self.assertAlmostEqual(valuation.balance_due(site), 8296000)

    def test_missing_profit_counts_as_zero(self):
        site = make_site(profit_margin_percentage=None)
        self.assertEqual(valuation.profit_amount(site), 0.0)
        self.assertEqual(valuation.projected_total_value(site), valuation.base_value(site))

    def test_overpayment_gives_negative_balance(self):
        site = make_site(land_cost_per_sqft=1.0, construction_area_sqft=0.0, profit_margin_percentage=None)
        site.payments.append(PaymentRecord(id="p1", amount=1500.0, date=None, method="Cash"))
        self.assertEqual(valuation.balance_due(site), -300.0)

    def test_cents_and_sqft_display(self):
        self.assertEqual(valuation.format_cents(1200), "2.75")
        self.assertEqual(valuation.format_cents(None), "0.00")
        self.assertEqual(valuation.format_sqft(1200.5), "1201")

    def test_project_totals_cover_every_site(self):
        sites = [make_site(), make_site(id="s2", number="B-1", profit_margin_percentage=None)]
        totals = valuation.project_totals(sites)
        self.assertAlmostEqual(totals.total_land, 10800000)
        self.assertAlmostEqual(totals.total_construction, 7920000)
        self.assertAlmostEqual(totals.total_projected, 10296000 + 9360000)
        self.assertEqual(valuation.project_totals([]).total_projected, 0.0)


class EntitiesTestCase(SimpleTestCase):

    def test_to_float(self):
        self.assertEqual(to_float(Decimal("1200.5000")), 1200.5)
        self.assertEqual(to_float(" 42.10 "), 42.1)
        self.assertEqual(to_float(None), 0.0)
        self.assertEqual(to_float(""), 0.0)
        with self.assertRaises(ValueError):
            to_float("abc")

    def test_patch_from_json_keeps_only_present_keys(self):
        patch = site_patch_from_json({"status": "SOLD", "landCostPerSqFt": "4500", "unknown": 1})
        self.assertEqual(patch, {"status": "SOLD", "land_cost_per_sqft": 4500.0})

    def test_patch_from_json_dimensions(self):
        patch = site_patch_from_json({"dimensions": {"north": "10", "south": 10, "east": 20}})
        self.assertEqual(patch["dimensions"], Dimensions(10.0, 10.0, 20.0, 0.0))

    def test_patch_from_json_rejects_malformed_values(self):
        bad_bodies = [
            {"status": "BOGUS"},
            {"dimensions": 5},
            {"dimensions": {"north": -1}},
            {"number": 12},
            {"landCostPerSqFt": -10},
            {"landCostPerSqFt": {"x": 1}},
            {"tags": "corner"},
            {"bookingDate": "next week"},
            ["status", "SOLD"],
        ]
        for body in bad_bodies:
            with self.subTest(body=body):
                with self.assertRaises(ValueError):
                    site_patch_from_json(body)

    def test_patch_from_json_blank_date_clears(self):
        self.assertEqual(site_patch_from_json({"saleDate": ""}), {"sale_date": None})


class FiltersTestCase(SimpleTestCase):

    def setUp(self):
        self.sites = [
            make_site(id="1", number="A-101", status="SOLD"),
            make_site(id="2", number="a-102", status="BOOKED"),
            make_site(id="3", number="B-201", status="UNSOLD"),
            make_site(id="4", number="B-202", status="SOLD"),
        ]

    def test_query_is_case_insensitive_substring(self):
        numbers = [s.number for s in filter_sites(self.sites, "A-1")]
        self.assertEqual(numbers, ["A-101", "a-102"])

    def test_status_filter(self):
        numbers = [s.number for s in filter_sites(self.sites, "", "SOLD")]
        self.assertEqual(numbers, ["A-101", "B-202"])
        self.assertEqual(len(filter_sites(self.sites, "", "ALL")), 4)
        self.assertEqual(filter_sites(self.sites, "zzz", "ALL"), [])

    def test_counts_ignore_filters(self):
        self.assertEqual(status_counts(self.sites), {"UNSOLD": 1, "BOOKED": 1, "SOLD": 2})

    def test_normalize_status_filter(self):
        self.assertEqual(normalize_status_filter("sold"), "SOLD")
        self.assertEqual(normalize_status_filter("bogus"), "ALL")
        self.assertEqual(normalize_status_filter(None), "ALL")


class ExportTestCase(SimpleTestCase):

    def test_header_follows_group_order(self):
        self.assertEqual(
            export.header(("area", "identity")),
            ["Site Number", "Area (SqFt)", "Area (Cents)"],
        )
        self.assertEqual(len(export.header()), 19)

    def test_csv_rows(self):
        site = make_site(status="SOLD")
        csv_text = export.render_csv([site], ("identity", "status", "customer", "area"))
        self.assertEqual(
            csv_text,
            'Site Number,Status,Customer Name,Customer Phone,Area (SqFt),Area (Cents)\n'
            '"A-1","SOLD","N/A","N/A",1200,2.75',
        )

    def test_csv_financials(self):
        site = make_site(profit_margin_percentage=None, customer_name='Ravi "RK" Kumar')
        csv_text = export.render_csv([site], ("customer", "financials"))
        row = csv_text.split("\n")[1]
        self.assertEqual(row, '"Ravi ""RK"" Kumar","N/A",4500,5400000,1800,2200,3960000,9360000,0,9360000')

    def test_empty_selection_means_all_groups(self):
        self.assertEqual(export.parse_field_groups([]), export.FIELD_GROUPS)
        self.assertEqual(export.parse_field_groups(["Financials", "identity"]), ("identity", "financials"))

    def test_report_filename(self):
        self.assertEqual(
            export.report_filename("Green Valley  Phase 2", "csv", on=date(2024, 5, 1)),
            "Green_Valley_Phase_2_Report_2024-05-01.csv",
        )

    def test_pdf_bytes(self):
        project = Project(id="p", name="Green Valley", location="Mysore", sites=[make_site()])
        data = export.render_pdf(project, project.sites, company=CompanySettings(name="Acme"))
        self.assertTrue(data.startswith(b"%PDF"))


class SiteEditSessionTestCase(SimpleTestCase):

    def test_edge_edit_recomputes_area(self):
        session = SiteEditSession(make_site())
        session.set_dimension("north", 50)
        self.assertEqual(session.current("land_area_sqft"), 1600.0)
        self.assertEqual(session.patch(), {
            "dimensions": Dimensions(50.0, 30, 40, 40),
            "land_area_sqft": 1600.0,
        })

    def test_unchanged_fields_are_not_patched(self):
        session = SiteEditSession(make_site())
        session.set_field("status", "UNSOLD")
        session.set_field("customer_name", "Ravi")
        self.assertEqual(session.patch(), {"customer_name": "Ravi"})

    def test_unknown_edge(self):
        with self.assertRaises(ValueError):
            SiteEditSession(make_site()).set_dimension("up", 3)

    def test_apply_recomputes_area_for_changed_edges(self):
        patch = SiteEditSession(make_site()).apply({
            "status": "BOOKED",
            "dimensions": Dimensions(30, 30, 50, 50),
        }).patch()
        self.assertEqual(patch, {
            "status": "BOOKED",
            "dimensions": Dimensions(30, 30, 50.0, 50.0),
            "land_area_sqft": 1500.0,
        })

    def test_apply_with_unchanged_edges_keeps_area_override(self):
        site = make_site(land_area_sqft=999.0)
        patch = SiteEditSession(site).apply({"dimensions": Dimensions(30, 30, 40, 40)}).patch()
        self.assertEqual(patch, {})


class ServicesTestCase(TestCase):

    def setUp(self):
        self.project_id = services.create_project({
            "name": "Green Valley",
            "location": "Mysore",
            "launch_date": date(2024, 1, 15),
            "image_urls": [],
        })
        self.site_id = services.create_site(self.project_id, {
            "number": "A-1",
            "status": "UNSOLD",
            "facing": "East",
            "dimensions": Dimensions(30, 30, 40, 40),
            "land_cost_per_sqft": 4500,
        })

    def test_create_and_load(self):
        projects = services.get_all_projects()
        self.assertEqual(len(projects), 1)
        project = projects[0]
        self.assertEqual(project.launch_date, "2024-01-15")
        self.assertEqual(len(project.sites), 1)
        site = project.sites[0]
        self.assertEqual(site.land_area_sqft, 1200.0)
        self.assertIsInstance(site.land_cost_per_sqft, float)
        self.assertEqual(site.dimensions, Dimensions(30, 30, 40, 40))

    def test_projects_in_creation_order(self):
        services.create_project({"name": "Second", "location": "Hassan", "launch_date": date(2024, 2, 1)})
        self.assertEqual([p.name for p in services.get_all_projects()], ["Green Valley", "Second"])

    def test_create_site_for_unknown_project(self):
        self.assertIsNone(services.create_site("00000000-0000-0000-0000-000000000000", {"number": "X"}))

    def test_partial_update_leaves_other_fields(self):
        self.assertTrue(services.update_site(self.site_id, {"status": "BOOKED", "customer_name": "Ravi"}))
        row = SiteRow.objects.get(pk=self.site_id)
        self.assertEqual(row.status, "BOOKED")
        self.assertEqual(row.customer_name, "Ravi")
        self.assertEqual(row.number, "A-1")
        self.assertEqual(row.land_cost_per_sqft, Decimal("4500"))
        self.assertEqual(row.dimensions["north"], 30)

    def test_area_override_only_without_dimensions(self):
        services.update_site(self.site_id, {"land_area_sqft": 999})
        self.assertEqual(SiteRow.objects.get(pk=self.site_id).land_area_sqft, Decimal("999"))

        services.update_site(self.site_id, {"dimensions": Dimensions(10, 10, 10, 10), "land_area_sqft": 5})
        self.assertEqual(SiteRow.objects.get(pk=self.site_id).land_area_sqft, Decimal("100"))

    def test_fractional_area_keeps_precision(self):
        services.update_site(self.site_id, {"dimensions": Dimensions(10.12345, 10, 10, 10)})
        site = services.get_all_projects()[0].sites[0]
        self.assertAlmostEqual(site.land_area_sqft, 100.61725, places=8)

    def test_non_numeric_value_returns_false(self):
        self.assertFalse(services.update_site(self.site_id, {"land_cost_per_sqft": "abc"}))
        self.assertEqual(SiteRow.objects.get(pk=self.site_id).land_cost_per_sqft, Decimal("4500"))

    def test_update_unknown_ids(self):
        missing = "00000000-0000-0000-0000-000000000000"
        self.assertFalse(services.update_site(missing, {"status": "SOLD"}))
        self.assertFalse(services.update_project(missing, {"name": "X"}))
        self.assertFalse(services.delete_site("not-a-uuid"))

    def test_delete_project_cascades(self):
        PaymentRow.objects.create(site_id=self.site_id, amount=Decimal("100"), date=date(2024, 3, 1))
        self.assertTrue(services.delete_project(self.project_id))
        self.assertFalse(SiteRow.objects.exists())
        self.assertFalse(PaymentRow.objects.exists())

    @override_settings(STORE_CONFIGURED=False)
    def test_unconfigured_store_returns_sentinels(self):
        self.assertEqual(services.get_all_projects(), [])
        self.assertIsNone(services.create_project({"name": "X", "location": "Y"}))
        self.assertFalse(services.update_site(self.site_id, {"status": "SOLD"}))
        self.assertFalse(services.delete_project(self.project_id))
        self.assertEqual(ProjectRow.objects.count(), 1)


class WorkspaceTestCase(TestCase):

    def setUp(self):
        self.first = services.create_project({"name": "First", "location": "Mysore", "launch_date": date(2024, 1, 1)})
        self.second = services.create_project({"name": "Second", "location": "Hassan", "launch_date": date(2024, 2, 1)})
        self.site_id = services.create_site(self.first, {"number": "A-1", "dimensions": Dimensions(30, 30, 40, 40)})
        self.ws = Workspace().load()

    def test_first_project_selected_on_load(self):
        self.assertEqual(self.ws.selected_project_id, self.first)

    def test_select_project_resets_view_state(self):
        self.ws.select_site(self.site_id)
        self.ws.set_filters(query="A", status_filter="SOLD")
        self.ws.select_project(self.second)
        self.assertIsNone(self.ws.selected_site_id)
        self.assertEqual(self.ws.search_query, "")
        self.assertEqual(self.ws.status_filter, "ALL")

    def test_failed_update_keeps_state(self):
        self.ws.select_site(self.site_id)
        before = self.ws.projects
        with mock.patch("PROJECTS.workspace.services.update_site", return_value=False):
            self.assertFalse(self.ws.update_site(self.site_id, {"status": "SOLD"}))
        self.assertIs(self.ws.projects, before)
        self.assertEqual(self.ws.selected_site.status, "UNSOLD")
        self.assertEqual(self.ws.selected_site_id, self.site_id)

    def test_successful_update_reloads(self):
        self.assertTrue(self.ws.update_site(self.site_id, {"status": "SOLD"}))
        self.assertEqual(self.ws.find_site(self.site_id).status, "SOLD")

    def test_add_site_selects_it(self):
        new_id = self.ws.add_site({"number": "A-2", "dimensions": Dimensions(10, 10, 10, 10)})
        self.assertEqual(self.ws.selected_site_id, new_id)
        self.assertEqual(self.ws.selected_site.land_area_sqft, 100.0)

    def test_delete_site_needs_confirmation(self):
        self.assertFalse(self.ws.delete_site(self.site_id))
        self.assertTrue(SiteRow.objects.filter(pk=self.site_id).exists())
        self.assertTrue(self.ws.delete_site(self.site_id, confirmed=True))
        self.assertIsNone(self.ws.find_site(self.site_id))

    def test_summary_dropped_when_stored_selection_moved(self):
        narrator = mock.Mock()
        narrator.summarize.return_value = "Summary for First"
        result = self.ws.refresh_summary(narrator, current_selection=lambda: self.second)
        self.assertIsNone(result)
        self.assertIsNone(self.ws.ai_summary)

    def test_save_summary_keeps_stored_selection(self):
        session = {"workspace": {"selected_project_id": self.second, "search_query": "B"}}
        self.ws.ai_summary = "Summary"
        self.ws.summary_key = self.first
        self.ws.save_summary(session)
        self.assertEqual(session["workspace"]["selected_project_id"], self.second)
        self.assertEqual(session["workspace"]["search_query"], "B")
        self.assertEqual(session["workspace"]["ai_summary"], "Summary")

    def test_summary_for_current_project(self):
        narrator = mock.Mock()
        narrator.summarize.return_value = "All good"
        self.assertEqual(self.ws.refresh_summary(narrator), "All good")
        self.assertEqual(self.ws.summary_key, self.first)
        stats = narrator.summarize.call_args[0][0]
        self.assertEqual((stats.total, stats.unsold), (1, 1))

    def test_project_stats(self):
        stats = project_stats(self.ws.selected_project)
        self.assertEqual(stats.name, "First")
        self.assertEqual((stats.sold, stats.booked), (0, 0))


class SitePatchFormTestCase(SimpleTestCase):

    def test_posted_edge_merges_with_current_dimensions(self):
        form = SitePatchForm({"north": "50"}, site=make_site())
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.patch(), {"dimensions": Dimensions(50.0, 30, 40, 40)})

    def test_blank_number_rejected(self):
        form = SitePatchForm({"number": "  "}, site=make_site())
        self.assertFalse(form.is_valid())


class ProjectViewsTestCase(TestCase):

    def setUp(self):
        self.project_id = services.create_project({"name": "Green Valley", "location": "Mysore", "launch_date": date(2024, 1, 15)})
        self.site_id = services.create_site(self.project_id, {
            "number": "A-1",
            "dimensions": Dimensions(30, 30, 40, 40),
            "land_cost_per_sqft": 4500,
        })

    def test_dashboard(self):
        response = self.client.get(reverse("dashboard"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context["project"].id, self.project_id)
        self.assertEqual(response.context["counts"]["UNSOLD"], 1)
        self.assertContains(response, "Green Valley")

    def test_dashboard_filters(self):
        response = self.client.get(reverse("dashboard"), {"q": "zzz", "status": "ALL"})
        self.assertEqual(response.context["rows"], [])
        self.assertEqual(response.context["counts"]["UNSOLD"], 1)

    def test_create_project(self):
        response = self.client.post(reverse("project_create"), {
            "name": "Lake View",
            "location": "Hassan",
            "launch_date": "2024-06-01",
        })
        self.assertRedirects(response, reverse("dashboard"), fetch_redirect_response=False)
        created = ProjectRow.objects.get(name="Lake View")
        self.assertEqual(self.client.session["workspace"]["selected_project_id"], str(created.id))

    def test_create_project_requires_name(self):
        self.client.post(reverse("project_create"), {"name": " ", "location": "Hassan", "launch_date": "2024-06-01"})
        self.assertEqual(ProjectRow.objects.count(), 1)

    def test_site_delete_without_confirm(self):
        self.client.post(reverse("site_delete", args=[self.site_id]))
        self.assertTrue(SiteRow.objects.filter(pk=self.site_id).exists())
        self.client.post(reverse("site_delete", args=[self.site_id]), {"confirm": "yes"})
        self.assertFalse(SiteRow.objects.filter(pk=self.site_id).exists())

    def test_site_update_api(self):
        response = self.client.patch(
            reverse("site_update_api", args=[self.site_id]),
            data=json.dumps({"status": "SOLD", "customerName": "Ravi"}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["site"]["status"], "SOLD")
        self.assertEqual(body["site"]["landAreaSqFt"], 1200.0)

    def test_site_update_api_rejects_negative_dimensions(self):
        response = self.client.patch(
            reverse("site_update_api", args=[self.site_id]),
            data=json.dumps({"dimensions": {"north": -1, "south": 1, "east": 1, "west": 1}}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 400)

    def test_site_update_api_rejects_unknown_status(self):
        response = self.client.patch(
            reverse("site_update_api", args=[self.site_id]),
            data=json.dumps({"status": "BOGUS"}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(SiteRow.objects.get(pk=self.site_id).status, "UNSOLD")

    def test_site_update_api_rejects_malformed_fields(self):
        for body in ({"dimensions": 5}, {"number": 12}, {"constructionRatePerSqFt": -1}):
            with self.subTest(body=body):
                response = self.client.patch(
                    reverse("site_update_api", args=[self.site_id]),
                    data=json.dumps(body),
                    content_type="application/json",
                )
                self.assertEqual(response.status_code, 400)
        self.assertEqual(SiteRow.objects.get(pk=self.site_id).number, "A-1")

    def test_site_update_api_unknown_site(self):
        response = self.client.patch(
            reverse("site_update_api", args=["00000000-0000-0000-0000-000000000000"]),
            data=json.dumps({"status": "SOLD"}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 404)

    def test_site_edit_recomputes_area(self):
        self.client.post(reverse("site_edit", args=[self.site_id]), {
            "number": "A-1", "north": "30", "south": "30", "east": "50", "west": "50",
        })
        row = SiteRow.objects.get(pk=self.site_id)
        self.assertEqual(row.land_area_sqft, Decimal("1500"))
        self.assertEqual(row.dimensions["east"], 50)

    def test_export_csv(self):
        response = self.client.get(reverse("project_export", args=[self.project_id]), {"fields": ["identity", "area"]})
        self.assertEqual(response.status_code, 200)
        self.assertIn("Green_Valley_Report_", response["Content-Disposition"])
        self.assertEqual(
            response.content.decode(),
            'Site Number,Area (SqFt),Area (Cents)\n"A-1",1200,2.75',
        )

    def test_export_filename_uses_utc_date(self):
        late_evening_utc = datetime(2024, 5, 1, 20, 0, tzinfo=dt_timezone.utc)
        with mock.patch("PROJECTS.views.timezone") as tz:
            tz.now.return_value = late_evening_utc
            response = self.client.get(reverse("project_export", args=[self.project_id]))
        self.assertIn("Green_Valley_Report_2024-05-01.csv", response["Content-Disposition"])

    def test_export_unknown_project(self):
        response = self.client.get(reverse("project_export", args=["00000000-0000-0000-0000-000000000000"]))
        self.assertEqual(response.status_code, 404)

    def test_project_list_api(self):
        results = self.client.get(reverse("project_list_api")).json()["results"]
        self.assertEqual(results[0]["name"], "Green Valley")
        self.assertEqual(results[0]["sites"][0]["number"], "A-1")

    @override_settings(STORE_CONFIGURED=False)
    def test_store_missing(self):
        response = self.client.post(reverse("project_create"), {
            "name": "Lake View", "location": "Hassan", "launch_date": "2024-06-01",
        }, follow=True)
        self.assertContains(response, "Database connection is not configured")
        self.assertFalse(ProjectRow.objects.filter(name="Lake View").exists())
        self.assertEqual(self.client.get(reverse("project_export", args=[self.project_id])).status_code, 503)
