# tracker/urls.py
#
# Purpose:
# - Expose the REST API for staff, reasons and entries via a DRF router.
#
# Notes for developers:
# - Mounted under /api/ by wfh_tracker/urls.py.
# - HTML pages live in views_pages.py and are wired in wfh_tracker/urls.py.

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import StaffViewSet, ReasonViewSet, WfhEntryViewSet


class OptionalSlashRouter(DefaultRouter):
    """
    Accepts both /api/staff and /api/staff/ (no APPEND_SLASH redirect for POSTs).
    """
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.trailing_slash = "/?"


router = OptionalSlashRouter()
router.register(r"staff", StaffViewSet, basename="staff")
router.register(r"reasons", ReasonViewSet, basename="reason")
router.register(r"entries", WfhEntryViewSet, basename="entry")

urlpatterns = [
    path("", include(router.urls)),
]
