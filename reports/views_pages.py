# reports/views_pages.py
#
# HTML pages backed by the report services:
# - /          dashboard cards, recent entries and the quick-add form
# - /reports/  analytics (same payload as /api/reports/analytics)
#
import logging

from django.contrib import messages
from django.shortcuts import redirect
from django.utils import timezone
from django.views.generic import TemplateView

from tracker.forms import QuickAddEntryForm

from .services.analytics import InvalidDateRange, build_analytics, resolve_date_range
from .services.dashboard import DashboardService

logger = logging.getLogger(__name__)


class DashboardPage(TemplateView):
    template_name = "reports/dashboard.html"

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx["stats"] = DashboardService.get_stats()
        ctx.setdefault("form", QuickAddEntryForm(initial={"date": timezone.localdate()}))
        return ctx

    def post(self, request, *args, **kwargs):
        """
        Quick-add a WFH entry. Invalid input re-renders the page with form errors.
        """
        form = QuickAddEntryForm(request.POST)
        if not form.is_valid():
            return self.render_to_response(self.get_context_data(form=form))

        entry = form.save(commit=False)
        user = request.user
        entry.created_by = user.get_username() if user.is_authenticated else "system"
        entry.save()
        logger.info("Quick-added WFH entry %s for staff %s on %s", entry.pk, entry.staff_id, entry.date)
        messages.success(request, f"Added WFH entry for {entry.staff} on {entry.date:%d/%m/%Y}.")
        return redirect("dashboard")


class ReportsPage(TemplateView):
    """
    /reports/?startDate=&endDate= ; malformed dates fall back to the default window.
    """
    template_name = "reports/analytics.html"

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        params = self.request.GET
        try:
            start, end = resolve_date_range(params.get("startDate"), params.get("endDate"))
        except InvalidDateRange as e:
            ctx["date_error"] = str(e)
            start, end = resolve_date_range()
        ctx["analytics"] = build_analytics(start, end)
        ctx["start"], ctx["end"] = start, end
        return ctx
