# jobs/forms.py
import os

from django import forms
from django.conf import settings


class ResumeUploadForm(forms.Form):
    """
    Step 1 of the apply flow, and the body of the resume-parser endpoint.
    Only PDF / Word documents under MAX_RESUME_BYTES are accepted.
    """
    file = forms.FileField()

    def clean_file(self):
        f = self.cleaned_data.get('file')
        if not f:
            return f
        ext = os.path.splitext(f.name.lower())[1]
        if ext not in settings.RESUME_ALLOWED_EXTENSIONS:
            raise forms.ValidationError("Only PDF and Word documents are allowed.")
        max_bytes = settings.MAX_RESUME_BYTES
        if f.size > max_bytes:
            raise forms.ValidationError(f"File size must be <= {max_bytes // (1024 * 1024)} MB.")
        return f


class ApplicationDetailsForm(forms.Form):
    # presence only; the reviewer may type anything into these
    name = forms.CharField(max_length=255, label="Full Name")
    email = forms.CharField(max_length=254, label="Email")
    phone = forms.CharField(max_length=64, required=False, label="Phone")
    skills = forms.CharField(widget=forms.Textarea(attrs={'rows': 3}), label="Skills")
    experience = forms.CharField(widget=forms.Textarea(attrs={'rows': 4}), label="Experience")
    cover_letter = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={
            'rows': 6,
            'placeholder': "Tell us why you're interested in this position and why you'd be a good fit.",
        }),
        label="Cover Letter (Optional)",
    )
