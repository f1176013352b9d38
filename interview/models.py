# interview/models.py
import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from jobs.models import Application, Candidate


class Interview(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    application = models.ForeignKey(Application, on_delete=models.CASCADE, related_name='interviews')
    candidate = models.ForeignKey(Candidate, on_delete=models.CASCADE, related_name='interviews')
    scheduler = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='scheduled_interviews',
    )
    scheduled_for = models.DateTimeField()
    duration = models.PositiveIntegerField(default=60, validators=[MinValueValidator(1)], help_text='minutes')
    meeting_url = models.URLField(max_length=500)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['scheduled_for']

    def __str__(self):
        return f"{self.candidate.name} - {self.application.job.title} @ {self.scheduled_for:%Y-%m-%d %H:%M}"

    def to_dict(self, related=False):
        data = {
            'id': str(self.id),
            'applicationId': str(self.application_id),
            'candidateId': str(self.candidate_id),
            'userId': self.scheduler_id,
            'scheduledFor': self.scheduled_for.isoformat(),
            'duration': self.duration,
            'meetingUrl': self.meeting_url,
            'notes': self.notes,
            'createdAt': self.created_at.isoformat(),
        }
        if related:
            data['application'] = self.application.to_dict(include_job=True)
            data['candidate'] = self.candidate.to_dict()
            data['scheduler'] = {
                'id': self.scheduler.id,
                'username': self.scheduler.username,
                'name': self.scheduler.display_name(),
                'email': self.scheduler.email,
            }
        return data
