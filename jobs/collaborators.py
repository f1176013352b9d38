# jobs/collaborators.py
"""
Django-side implementations of the collaborators ApplicationIntake expects.
"""
from django.contrib import messages
from django.core.exceptions import ValidationError

from .forms import ResumeUploadForm
from .services import parse_resume, submit_application


class ServiceResumeParser:
    """Validates the upload the same way the API does, then runs the parser service."""

    def parse(self, file):
        form = ResumeUploadForm(files={'file': file})
        if not form.is_valid():
            raise ValidationError(form.errors['file'])
        return parse_resume(form.cleaned_data['file'])


class ServiceApplicationSubmitter:

    def submit(self, payload):
        return submit_application(
            job_id=payload.job_id,
            candidate_id=payload.candidate_id,
            resume_url=payload.resume_url,
            cover_letter=payload.cover_letter,
        )


class MessagesNotifier:
    """Toast-style notifications through django.contrib.messages."""

    def __init__(self, request):
        self.request = request

    def success(self, title, description=''):
        messages.success(self.request, f"{title}. {description}".strip() if description else title)

    def error(self, title, description=''):
        messages.error(self.request, f"{title}: {description}" if description else title)


class RedirectNavigator:
    """Remembers where the flow wants to go; the view turns it into a redirect."""

    def __init__(self):
        self.location = None

    def go(self, url):
        self.location = url
