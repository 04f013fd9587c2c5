from rest_framework import serializers

from .models import Staff, Reason, WfhEntry
from .validators import reason_choice_error


class StaffSerializer(serializers.ModelSerializer):
    fullName = serializers.CharField(source="full_name", max_length=200)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    role = serializers.ChoiceField(choices=Staff.ROLE_CHOICES, required=False)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    entryCount = serializers.SerializerMethodField()

    class Meta:
        model = Staff
        fields = ["id", "fullName", "email", "active", "role", "createdAt", "entryCount"]
        # uniqueness is checked in validate_fullName so the error lands on the camelCase key
        validators = []

    def get_entryCount(self, obj):
        # list views annotate entry_count; single objects fall back to a COUNT
        count = getattr(obj, "entry_count", None)
        if count is None:
            count = obj.entries.count()
        return count

    def validate_fullName(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Full name is required")
        qs = Staff.objects.filter(full_name__iexact=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A staff member with this name already exists.")
        return value

    def validate_email(self, value):
        # "" from an empty form field means "no email"
        return value or None


class ReasonSerializer(serializers.ModelSerializer):
    name = serializers.CharField(max_length=100)
    isActive = serializers.BooleanField(source="is_active", required=False, default=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    entryCount = serializers.SerializerMethodField()

    class Meta:
        model = Reason
        fields = ["id", "name", "isActive", "createdAt", "entryCount"]
        validators = []

    def get_entryCount(self, obj):
        count = getattr(obj, "entry_count", None)
        if count is None:
            count = obj.entries.count()
        return count

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Reason name is required")
        qs = Reason.objects.filter(name__iexact=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A reason with this name already exists.")
        return value


class StaffSummarySerializer(serializers.ModelSerializer):
    fullName = serializers.CharField(source="full_name")

    class Meta:
        model = Staff
        fields = ["id", "fullName", "email", "active"]


class ReasonSummarySerializer(serializers.ModelSerializer):
    isActive = serializers.BooleanField(source="is_active")

    class Meta:
        model = Reason
        fields = ["id", "name", "isActive"]


class WfhEntrySerializer(serializers.ModelSerializer):
    # Writes take PKs; reads also include the nested staff/reason
    staffId = serializers.PrimaryKeyRelatedField(
        source="staff",
        queryset=Staff.objects.all(),
        error_messages={"required": "Staff member is required"},
    )
    reasonId = serializers.PrimaryKeyRelatedField(
        source="reason",
        queryset=Reason.objects.all(),
        allow_null=True,
        required=False,
    )
    freeTextReason = serializers.CharField(
        source="free_text_reason",
        max_length=255,
        allow_blank=True,
        required=False,
    )
    hours = serializers.FloatField(required=False, allow_null=True, min_value=0, max_value=24)
    notes = serializers.CharField(allow_blank=True, required=False)
    createdBy = serializers.CharField(source="created_by", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    staff = StaffSummarySerializer(read_only=True)
    reason = ReasonSummarySerializer(read_only=True)

    class Meta:
        model = WfhEntry
        fields = [
            "id",
            "staffId",
            "reasonId",
            "freeTextReason",
            "date",
            "hours",
            "notes",
            "createdBy",
            "createdAt",
            "staff",
            "reason",
        ]
        # (staff, date) uniqueness is reported on "date" in validate()
        validators = []

    def validate(self, attrs):
        instance = self.instance

        # PATCH may omit fields; fall back to the stored values
        def current(field, default=None):
            if field in attrs:
                return attrs[field]
            if instance is not None and self.partial:
                return getattr(instance, field)
            return default

        reason = current("reason")
        free_text = current("free_text_reason", "")
        message = reason_choice_error(reason, free_text)
        if message:
            raise serializers.ValidationError({"reasonId": message})

        # a full update replaces both reason inputs
        if instance is not None and not self.partial:
            attrs.setdefault("reason", None)
            attrs.setdefault("free_text_reason", "")

        staff = current("staff")
        date = current("date")
        if staff is not None and date is not None:
            qs = WfhEntry.objects.filter(staff=staff, date=date)
            if instance is not None:
                qs = qs.exclude(pk=instance.pk)
            if qs.exists():
                raise serializers.ValidationError(
                    {"date": "This staff member already has a WFH entry for this date."}
                )
        return attrs
