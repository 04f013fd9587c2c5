# reports/views.py

from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from tracker.serializers import WfhEntrySerializer

from .services.analytics import InvalidDateRange, build_analytics, resolve_date_range
from .services.dashboard import DashboardService


class AnalyticsView(APIView):
    """
    GET /api/reports/analytics?startDate=YYYY-MM-DD&endDate=YYYY-MM-DD

    Returns JSON with:
    - dateRange, summary (totals)
    - staffTrends: per staff counts, hours, riskScore / riskLevel
    - reasonTrends, dayOfWeekTrends, monthlyTrends
    - consecutiveStreaks: staff with more than 3 adjacent WFH days
    - insights: [{ "type", "title", "message", "severity" }, ...]

    Missing dates default to the trailing 3 months; malformed dates are a 400.
    """
    failure_message = "Failed to generate analytics"

    def get(self, request):
        try:
            start, end = resolve_date_range(
                request.query_params.get("startDate"),
                request.query_params.get("endDate"),
            )
        except InvalidDateRange as e:
            raise ValidationError({e.field: [str(e)]})

        return Response(build_analytics(start, end))


class DashboardView(APIView):
    """
    GET /api/reports/dashboard

    Returns the dashboard cards (activeStaff, totalWfhDays, thisMonth,
    totalHours) and the 5 most recently created entries.
    """
    failure_message = "Failed to load dashboard"

    def get(self, request):
        stats = DashboardService.get_stats()
        data = {
            "activeStaff": stats["active_staff"],
            "totalWfhDays": stats["total_wfh_days"],
            "thisMonth": stats["this_month"],
            "totalHours": stats["total_hours"],
            "recentEntries": WfhEntrySerializer(stats["recent_entries"], many=True).data,
        }
        return Response(data)
