"""
dashboard.py
------------
Headline numbers for the dashboard page and GET /api/reports/dashboard.
"""

from django.db.models import Sum
from django.utils import timezone

from tracker.models import Staff, WfhEntry

RECENT_ENTRIES_LIMIT = 5


class DashboardService:
    """
    Collects the four dashboard cards plus the latest entries:
    - active staff
    - total WFH days (all time)
    - entries dated in the current month
    - total logged hours (entries without hours contribute nothing)
    """

    @staticmethod
    def get_stats(today=None):
        today = today or timezone.localdate()
        start_of_month = today.replace(day=1)

        total_hours = WfhEntry.objects.aggregate(total=Sum("hours"))["total"]

        return {
            "active_staff": Staff.objects.filter(active=True).count(),
            "total_wfh_days": WfhEntry.objects.count(),
            "this_month": WfhEntry.objects.filter(date__gte=start_of_month).count(),
            "total_hours": total_hours or 0,
            "recent_entries": DashboardService.get_recent_entries(),
        }

    @staticmethod
    def get_recent_entries(limit=RECENT_ENTRIES_LIMIT):
        return list(
            WfhEntry.objects.select_related("staff", "reason").order_by("-created_at", "-id")[:limit]
        )
