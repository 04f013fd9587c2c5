# tracker/forms.py
from django import forms

from .models import Staff, Reason, WfhEntry


class DateInput(forms.DateInput):
    input_type = "date"


class QuickAddEntryForm(forms.ModelForm):
    """
    Dashboard quick-add form. Only active staff and reasons are offered;
    the exactly-one-reason rule comes from WfhEntry.clean().
    """

    class Meta:
        model = WfhEntry
        fields = ["staff", "date", "reason", "free_text_reason", "hours", "notes"]
        widgets = {
            "date": DateInput(),
            "notes": forms.Textarea(attrs={"rows": 2}),
        }
        labels = {
            "free_text_reason": "Other reason",
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["staff"].queryset = Staff.objects.filter(active=True).order_by("full_name")
        self.fields["reason"].queryset = Reason.objects.filter(is_active=True).order_by("name")
        self.fields["reason"].required = False


class EntryFilterForm(forms.Form):
    staff = forms.ModelChoiceField(queryset=Staff.objects.order_by("full_name"), required=False)
    reason = forms.ModelChoiceField(queryset=Reason.objects.order_by("name"), required=False)
    date_from = forms.DateField(required=False, widget=DateInput())
    date_to = forms.DateField(required=False, widget=DateInput())

    def apply(self, queryset):
        if not self.is_valid():
            return queryset
        data = self.cleaned_data
        if data.get("staff"):
            queryset = queryset.filter(staff=data["staff"])
        if data.get("reason"):
            queryset = queryset.filter(reason=data["reason"])
        if data.get("date_from"):
            queryset = queryset.filter(date__gte=data["date_from"])
        if data.get("date_to"):
            queryset = queryset.filter(date__lte=data["date_to"])
        return queryset
