# tracker/models.py
#
# Purpose:
# - Core domain models for the WFH tracker.
#
# Design highlights:
# - Staff: identity of a team member; unique full_name so seeding can upsert by name.
# - Reason: catalogue of WFH reasons; "is_active" controls what forms offer.
# - WfhEntry:
#   • One staff member working from home on one date (unique per staff/date)
#   • Either a catalogue reason OR a free-text reason, never both/neither
#   • hours is optional; reporting treats a missing value as a standard 8h day
#
# Notes for developers:
# - The "exactly one reason" rule lives in WfhEntry.clean() so admin and forms
#   respect it. The API serializer applies the same rule via validators.py.
# - Deactivation (active / is_active) is the business-level "delete".
#   Reasons still referenced by entries cannot be deleted (PROTECT).
#

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from .validators import reason_choice_error


# -------------------------
# Staff member
# -------------------------
class Staff(models.Model):
    """
    A staff member who can log WFH days.
    """
    ROLE_USER = "USER"
    ROLE_ADMIN = "ADMIN"
    ROLE_CHOICES = [
        (ROLE_USER, "User"),
        (ROLE_ADMIN, "Admin"),
    ]

    full_name = models.CharField(max_length=200, unique=True)
    email = models.EmailField(null=True, blank=True)
    active = models.BooleanField(default=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_USER)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["full_name"]
        verbose_name_plural = "staff"

    def __str__(self):
        return self.full_name


# -------------------------
# WFH reason catalogue
# -------------------------
class Reason(models.Model):
    name = models.CharField(max_length=100, unique=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


# -------------------------
# WFH entry
# -------------------------
class WfhEntry(models.Model):
    """
    A single work-from-home day for one staff member.

    Rules:
    - (staff, date) is unique
    - exactly one of reason / free_text_reason is set (validated, not a DB constraint)
    - hours, when given, is between 0 and 24
    """
    staff = models.ForeignKey(Staff, on_delete=models.CASCADE, related_name="entries")
    reason = models.ForeignKey(
        Reason,
        on_delete=models.PROTECT,
        related_name="entries",
        null=True,
        blank=True,
    )
    free_text_reason = models.CharField(max_length=255, blank=True, default="")
    date = models.DateField()
    hours = models.FloatField(
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(24)],
    )
    notes = models.TextField(blank=True, default="")
    created_by = models.CharField(max_length=150, default="system")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        verbose_name = "WFH entry"
        verbose_name_plural = "WFH entries"
        constraints = [
            models.UniqueConstraint(fields=["staff", "date"], name="uniq_wfhentry_staff_date"),
        ]

    def __str__(self):
        return f"{self.staff.full_name} on {self.date}"

    @property
    def reason_label(self):
        if self.reason_id:
            return self.reason.name
        return self.free_text_reason

    def clean(self):
        """
        App-level rule shared by admin and the quick-add form:
        exactly one of reason / free_text_reason.
        """
        message = reason_choice_error(self.reason_id, self.free_text_reason)
        if message:
            raise ValidationError({"reason": message})
