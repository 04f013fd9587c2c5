# reports/tests/test_analytics_api.py

from datetime import date, timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from reports.services.dashboard import DashboardService
from tracker.models import Staff, Reason, WfhEntry


class AnalyticsApiTests(TestCase):
    """
    June 2025 fixture (2025-06-01 is a Sunday):
      Schalk: Mon 02 Medical 8h, Tue 03 Medical (no hours), Wed 04 "Plumber" 6h
      Yvette: Mon 02 Family 10h, Sat 07 Medical (no hours)
    plus one May entry for Schalk that falls outside the window.
    """

    URL = "/api/reports/analytics"

    def setUp(self):
        self.client = APIClient()
        self.schalk = Staff.objects.create(full_name="Schalk Lotz")
        self.yvette = Staff.objects.create(full_name="Yvette Gottschalk")
        self.medical = Reason.objects.create(name="Medical")
        self.family = Reason.objects.create(name="Family")

        WfhEntry.objects.create(staff=self.schalk, reason=self.medical, date=date(2025, 5, 1), hours=8)
        WfhEntry.objects.create(staff=self.schalk, reason=self.medical, date=date(2025, 6, 2), hours=8)
        WfhEntry.objects.create(staff=self.schalk, reason=self.medical, date=date(2025, 6, 3))
        WfhEntry.objects.create(staff=self.schalk, free_text_reason="Plumber", date=date(2025, 6, 4), hours=6)
        WfhEntry.objects.create(staff=self.yvette, reason=self.family, date=date(2025, 6, 2), hours=10)
        WfhEntry.objects.create(staff=self.yvette, reason=self.medical, date=date(2025, 6, 7))

    def _get(self, **params):
        params.setdefault("startDate", "2025-06-01")
        params.setdefault("endDate", "2025-06-30")
        resp = self.client.get(self.URL, params)
        self.assertEqual(resp.status_code, 200)
        return resp.json()

    def test_summary_and_date_range(self):
        data = self._get()
        self.assertEqual(data["dateRange"], {"start": "2025-06-01", "end": "2025-06-30"})
        # Raw hours only: 8 + 6 + 10
        self.assertEqual(
            data["summary"],
            {"totalEntries": 5, "totalHours": 24, "averageHours": 8.0, "uniqueStaff": 2, "uniqueReasons": 3},
        )

    def test_staff_trends(self):
        data = self._get()
        schalk, yvette = data["staffTrends"]

        self.assertEqual(schalk["staff"]["fullName"], "Schalk Lotz")
        self.assertEqual(schalk["entries"], 3)
        self.assertEqual(schalk["totalHours"], 22)
        self.assertEqual(schalk["averageHoursPerDay"], 7.3)
        self.assertEqual(schalk["riskScore"], 30)
        self.assertEqual(schalk["riskLevel"], "low")

        self.assertEqual(yvette["staff"]["fullName"], "Yvette Gottschalk")
        self.assertEqual(yvette["entries"], 2)
        self.assertEqual(yvette["totalHours"], 18)
        self.assertEqual(yvette["averageHoursPerDay"], 9.0)
        self.assertEqual(yvette["riskScore"], 30)

    def test_reason_trends_include_free_text_bucket(self):
        data = self._get()
        trends = data["reasonTrends"]

        self.assertEqual(trends[0]["reason"], {"id": self.medical.id, "name": "Medical"})
        self.assertEqual(trends[0]["entries"], 3)
        self.assertEqual(trends[0]["percentage"], 60)

        by_name = {t["reason"]["name"]: t for t in trends}
        self.assertEqual(by_name["Family"]["entries"], 1)
        self.assertEqual(by_name["Free Text Reasons"]["reason"]["id"], "freetext")
        self.assertEqual(by_name["Free Text Reasons"]["totalHours"], 6)

        staff_total = sum(t["entries"] for t in data["staffTrends"])
        reason_total = sum(t["entries"] for t in trends)
        self.assertEqual(staff_total, data["summary"]["totalEntries"])
        self.assertEqual(reason_total, data["summary"]["totalEntries"])

    def test_day_of_week_and_monthly_trends(self):
        data = self._get()
        days = data["dayOfWeekTrends"]

        self.assertEqual([d["dayOfWeek"] for d in days], [1, 2, 3, 6])
        self.assertEqual([d["dayName"] for d in days], ["Monday", "Tuesday", "Wednesday", "Saturday"])
        monday = days[0]
        self.assertEqual(monday["count"], 2)
        self.assertEqual(monday["totalHours"], 18)
        self.assertEqual(monday["averageHours"], 9.0)

        self.assertEqual(
            data["monthlyTrends"],
            [{"month": "2025-06", "count": 5, "totalHours": 40, "uniqueStaff": 2}],
        )

    def test_insights(self):
        data = self._get()
        insights = data["insights"]

        self.assertEqual(
            [i["title"] for i in insights],
            ["Most Active WFH User", "Weekend WFH Activity", "Most Common WFH Reason"],
        )
        self.assertEqual(insights[0]["message"], "Schalk Lotz accounts for 60% of all WFH entries")
        self.assertEqual(insights[0]["severity"], "high")
        self.assertTrue(insights[1]["message"].startswith("1 WFH entries"))
        self.assertEqual(insights[2]["severity"], "medium")
        self.assertEqual(data["consecutiveStreaks"], [])

    def test_extended_streak_is_flagged(self):
        olan = Staff.objects.create(full_name="Olan Moodley")
        for offset in range(7):
            WfhEntry.objects.create(staff=olan, reason=self.family, date=date(2025, 6, 9) + timedelta(days=offset))

        data = self._get()

        self.assertEqual(
            data["consecutiveStreaks"],
            [{"staffId": olan.id, "staff": "Olan Moodley", "consecutiveDays": 7}],
        )
        extended = [i for i in data["insights"] if i["title"] == "Extended WFH Periods"]
        self.assertEqual(len(extended), 1)
        self.assertEqual(extended[0]["severity"], "medium")
        self.assertIn("7 consecutive", extended[0]["message"])

    def test_streaks_come_from_recent_entries_not_the_window(self):
        olan = Staff.objects.create(full_name="Olan Moodley")
        for offset in range(7):
            WfhEntry.objects.create(staff=olan, reason=self.family, date=date(2024, 3, 4) + timedelta(days=offset))

        data = self._get()

        self.assertEqual(data["summary"]["totalEntries"], 5)
        self.assertEqual(
            data["consecutiveStreaks"],
            [{"staffId": olan.id, "staff": "Olan Moodley", "consecutiveDays": 7}],
        )
        self.assertIn("Extended WFH Periods", [i["title"] for i in data["insights"]])

    def test_streaks_only_consider_last_hundred_created_entries(self):
        olan = Staff.objects.create(full_name="Olan Moodley")
        for offset in range(7):
            WfhEntry.objects.create(staff=olan, reason=self.family, date=date(2025, 6, 9) + timedelta(days=offset))

        # 100 newer entries on alternate days push the streak out of the lookback
        iggy = Staff.objects.create(full_name="Iggy Maboshego")
        WfhEntry.objects.bulk_create(
            WfhEntry(staff=iggy, reason=self.medical, date=date(2023, 1, 1) + timedelta(days=2 * n))
            for n in range(100)
        )

        data = self._get()

        self.assertEqual(data["summary"]["totalEntries"], 12)
        self.assertEqual(data["consecutiveStreaks"], [])
        self.assertNotIn("Extended WFH Periods", [i["title"] for i in data["insights"]])

    def test_trailing_slash_is_accepted(self):
        resp = self.client.get(self.URL + "/", {"startDate": "2025-06-01", "endDate": "2025-06-30"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["summary"]["totalEntries"], 5)

        self.assertEqual(self.client.get("/api/reports/dashboard/").status_code, 200)

    def test_empty_window(self):
        data = self._get(startDate="2024-01-01", endDate="2024-01-31")
        self.assertEqual(data["summary"]["totalEntries"], 0)
        self.assertEqual(data["summary"]["totalHours"], 0)
        self.assertEqual(data["staffTrends"], [])
        self.assertEqual(data["reasonTrends"], [])
        self.assertEqual(data["monthlyTrends"], [])
        self.assertEqual(data["insights"], [])

    def test_default_window_ends_today(self):
        resp = self.client.get(self.URL)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["dateRange"]["end"], timezone.localdate().isoformat())

    def test_malformed_date_is_400(self):
        resp = self.client.get(self.URL, {"startDate": "yesterday"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Validation failed")
        self.assertIn("startDate", resp.json()["details"])


class DashboardTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.staff = Staff.objects.create(full_name="Werner Cloete")
        Staff.objects.create(full_name="Monray Jacobs", active=False)
        self.reason = Reason.objects.create(name="Deliveries")

    def test_stats_count_this_month_from_first_of_month(self):
        WfhEntry.objects.create(staff=self.staff, reason=self.reason, date=date(2025, 5, 31), hours=4)
        WfhEntry.objects.create(staff=self.staff, reason=self.reason, date=date(2025, 6, 1))
        WfhEntry.objects.create(staff=self.staff, reason=self.reason, date=date(2025, 6, 20), hours=7.5)

        stats = DashboardService.get_stats(today=date(2025, 6, 20))

        self.assertEqual(stats["active_staff"], 1)
        self.assertEqual(stats["total_wfh_days"], 3)
        self.assertEqual(stats["this_month"], 2)
        self.assertEqual(stats["total_hours"], 11.5)
        self.assertEqual(len(stats["recent_entries"]), 3)

    def test_empty_database(self):
        stats = DashboardService.get_stats(today=date(2025, 6, 20))
        self.assertEqual(stats["total_wfh_days"], 0)
        self.assertEqual(stats["total_hours"], 0)
        self.assertEqual(stats["recent_entries"], [])

    def test_dashboard_api(self):
        for offset in range(7):
            WfhEntry.objects.create(
                staff=self.staff, reason=self.reason, date=date(2025, 6, 1) + timedelta(days=offset)
            )

        resp = self.client.get("/api/reports/dashboard")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(
            set(data), {"activeStaff", "totalWfhDays", "thisMonth", "totalHours", "recentEntries"}
        )
        self.assertEqual(data["activeStaff"], 1)
        self.assertEqual(data["totalWfhDays"], 7)
        self.assertEqual(len(data["recentEntries"]), 5)
        # newest created first
        self.assertEqual(data["recentEntries"][0]["date"], "2025-06-07")
