# wfh_tracker/urls.py
#
# Purpose:
# - Project URL router.
# - Separates server-rendered HTML pages from the JSON API.
# - Keeps DRF routers under /api/ to avoid collisions with HTML routes.
#
from django.contrib import admin
from django.urls import path, include

from reports.views_pages import DashboardPage, ReportsPage
from tracker.views_pages import EntryListPage, StaffListPage, ReasonListPage


urlpatterns = [
    # ==========
    # HTML pages
    # ==========
    path("", DashboardPage.as_view(), name="dashboard"),
    path("entries/", EntryListPage.as_view(), name="entries_page"),
    path("reports/", ReportsPage.as_view(), name="reports_page"),
    path("manage/staff/", StaffListPage.as_view(), name="staff_page"),
    path("manage/reasons/", ReasonListPage.as_view(), name="reasons_page"),

    # Django admin (create/edit staff, reasons, entries)
    path("admin/", admin.site.urls),

    # =====
    # API's
    # =====
    path("api/reports/", include("reports.urls")),
    path("api/", include("tracker.urls")),
]
