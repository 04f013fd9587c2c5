from django.contrib import admin
from .models import Staff, Reason, WfhEntry

@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ("id", "full_name", "email", "role", "active", "created_at")
    list_filter = ("active", "role")
    search_fields = ("full_name", "email")
    list_editable = ("active",)

@admin.register(Reason)
class ReasonAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name",)
    list_editable = ("is_active",)

@admin.register(WfhEntry)
class WfhEntryAdmin(admin.ModelAdmin):
    list_display = ("id", "staff", "date", "reason", "free_text_reason", "hours", "created_by")
    list_filter = ("reason", "staff")
    search_fields = ("staff__full_name", "reason__name", "free_text_reason")
    date_hierarchy = "date"
