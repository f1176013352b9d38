# interview/forms.py
from django import forms

from jobs.models import Application


class InterviewSlotForm(forms.Form):
    """When and how long; shared by the JSON endpoint and the recruiter page."""
    scheduled_for = forms.DateTimeField(
        widget=forms.DateTimeInput(attrs={'type': 'datetime-local'}),
        help_text="ISO 8601 date and time",
    )
    duration = forms.IntegerField(required=False, min_value=1, help_text="Minutes (defaults to 60)")
    notes = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}), max_length=2000)


class ScheduleInterviewsForm(InterviewSlotForm):
    applications = forms.ModelMultipleChoiceField(
        queryset=Application.objects.select_related('candidate', 'job'),
        widget=forms.CheckboxSelectMultiple,
    )

    field_order = ['applications', 'scheduled_for', 'duration', 'notes']
