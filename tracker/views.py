# tracker/views.py
#
# Purpose:
# - CRUD APIs for Staff, Reasons and WFH entries.
# - Entry listing with staff / reason / date-range filters.
#
# Conventions:
# - JSON keys are camelCase (see serializers.py).
# - Deletes answer {"success": true} so every endpoint returns JSON.
# - Errors are shaped by wfh_tracker.exceptions.api_exception_handler; each
#   viewset only declares its messages.
# - Authentication is not enforced yet (DEFAULT_PERMISSION_CLASSES = AllowAny).
#
import logging

from django.db.models import Count
from django.utils.dateparse import parse_date
from rest_framework import status, viewsets
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from .models import Staff, Reason, WfhEntry
from .serializers import StaffSerializer, ReasonSerializer, WfhEntrySerializer

logger = logging.getLogger(__name__)


def parse_date_param(params, name):
    """
    Read an optional YYYY-MM-DD query parameter.
    Also accepts ISO datetimes; we trim to the date part.
    Raises ValidationError (400) for malformed values.
    """
    raw = (params.get(name) or "").strip()
    if not raw:
        return None
    if "T" in raw:
        raw = raw.split("T", 1)[0]
    elif " " in raw:
        raw = raw.split(" ", 1)[0]
    try:
        value = parse_date(raw)
    except ValueError:
        value = None
    if value is None:
        raise ValidationError({name: ["Invalid date format. Use YYYY-MM-DD."]})
    return value


def parse_id_param(params, name):
    raw = (params.get(name) or "").strip()
    if raw and not raw.isdigit():
        raise ValidationError({name: ["Must be a numeric id."]})
    return raw


class SuccessDestroyMixin:
    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        self.perform_destroy(instance)
        return Response({"success": True}, status=status.HTTP_200_OK)


# -------------------- ViewSets --------------------
class StaffViewSet(SuccessDestroyMixin, viewsets.ModelViewSet):
    """
    /api/staff/: staff members with their entry counts, ordered by name.
    """
    serializer_class = StaffSerializer
    not_found_message = "Staff member not found"
    failure_messages = {
        "list": "Failed to fetch staff",
        "retrieve": "Failed to fetch staff member",
        "create": "Failed to create staff member",
        "update": "Failed to update staff member",
        "partial_update": "Failed to update staff member",
        "destroy": "Failed to delete staff member",
    }

    def get_queryset(self):
        return Staff.objects.annotate(entry_count=Count("entries")).order_by("full_name")

    def perform_create(self, serializer):
        staff = serializer.save()
        logger.info("Created staff member %s (id=%s)", staff.full_name, staff.pk)


class ReasonViewSet(SuccessDestroyMixin, viewsets.ModelViewSet):
    """
    /api/reasons/: active reasons by default; ?includeAll=true lists inactive ones too.
    """
    serializer_class = ReasonSerializer
    not_found_message = "Reason not found"
    protected_message = "Reason is used by existing entries; deactivate it instead."
    failure_messages = {
        "list": "Failed to fetch reasons",
        "retrieve": "Failed to fetch reason",
        "create": "Failed to create reason",
        "update": "Failed to update reason",
        "partial_update": "Failed to update reason",
        "destroy": "Failed to delete reason",
    }

    def get_queryset(self):
        qs = Reason.objects.annotate(entry_count=Count("entries")).order_by("name")
        # Detail routes must find inactive reasons too (edit / reactivate)
        if self.action != "list":
            return qs
        include_all = (self.request.query_params.get("includeAll") or "").lower() == "true"
        if include_all:
            return qs
        return qs.filter(is_active=True)


class WfhEntryViewSet(SuccessDestroyMixin, viewsets.ModelViewSet):
    """
    Endpoints:
    - GET    /api/entries/?staffId=&reasonId=&dateFrom=&dateTo=   newest date first
    - POST   /api/entries/                                        create
    - PUT    /api/entries/{id}/                                   update
    - DELETE /api/entries/{id}/                                   delete

    Create/update require exactly one of reasonId / freeTextReason.
    """
    serializer_class = WfhEntrySerializer
    not_found_message = "Entry not found"
    failure_messages = {
        "list": "Failed to fetch entries",
        "retrieve": "Failed to fetch entry",
        "create": "Failed to create entry",
        "update": "Failed to update entry",
        "partial_update": "Failed to update entry",
        "destroy": "Failed to delete entry",
    }

    def get_queryset(self):
        qs = WfhEntry.objects.select_related("staff", "reason").order_by("-date", "-created_at")
        if self.action != "list":
            return qs

        params = self.request.query_params
        staff_id = parse_id_param(params, "staffId")
        reason_id = parse_id_param(params, "reasonId")
        date_from = parse_date_param(params, "dateFrom")
        date_to = parse_date_param(params, "dateTo")

        if staff_id:
            qs = qs.filter(staff_id=staff_id)
        if reason_id:
            qs = qs.filter(reason_id=reason_id)
        if date_from:
            qs = qs.filter(date__gte=date_from)
        if date_to:
            qs = qs.filter(date__lte=date_to)
        return qs

    def perform_create(self, serializer):
        user = getattr(self.request, "user", None)
        created_by = user.get_username() if user and user.is_authenticated else "system"
        entry = serializer.save(created_by=created_by)
        logger.info("Created WFH entry %s for staff %s on %s", entry.pk, entry.staff_id, entry.date)
