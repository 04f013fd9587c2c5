# reports/urls.py
#
# Both /api/reports/analytics and /api/reports/analytics/ resolve, matching
# the optional trailing slash of the tracker router.

from django.urls import re_path
from .views import AnalyticsView, DashboardView

urlpatterns = [
    re_path(r"^analytics/?$", AnalyticsView.as_view(), name="reports-analytics"),
    re_path(r"^dashboard/?$", DashboardView.as_view(), name="reports-dashboard"),
]
