# tracker/views_pages.py
#
# Server-rendered list pages: entries (with filters), staff and reasons.
# Editing happens through the JSON API and /admin/.
from django.db.models import Count
from django.views.generic import TemplateView

from .forms import EntryFilterForm
from .models import Staff, Reason, WfhEntry


class EntryListPage(TemplateView):
    """
    /entries/ : all entries, newest date first.
    Query params: ?staff=&reason=&date_from=&date_to=
    """
    template_name = "tracker/entries.html"

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        form = EntryFilterForm(self.request.GET or None)
        qs = WfhEntry.objects.select_related("staff", "reason").order_by("-date", "-created_at")
        ctx["filter_form"] = form
        ctx["entries"] = form.apply(qs) if form.is_bound else qs
        return ctx


class StaffListPage(TemplateView):
    template_name = "tracker/staff_list.html"

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx["staff_members"] = Staff.objects.annotate(entry_count=Count("entries")).order_by("full_name")
        return ctx


class ReasonListPage(TemplateView):
    template_name = "tracker/reason_list.html"

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx["reasons"] = Reason.objects.annotate(entry_count=Count("entries")).order_by("name")
        return ctx
