# jobs/models.py
import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone


EMPLOYMENT_TYPES = (
    ('Full-time', 'Full-time'),
    ('Part-time', 'Part-time'),
    ('Contract', 'Contract'),
    ('Internship', 'Internship'),
)


class Job(models.Model):
    posted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True,
        on_delete=models.SET_NULL, related_name='posted_jobs',
    )
    title = models.CharField(max_length=255)
    department = models.CharField(max_length=120, blank=True)
    location = models.CharField(max_length=255, blank=True)
    employment_type = models.CharField(max_length=32, choices=EMPLOYMENT_TYPES, default='Full-time')
    description = models.TextField()
    requirements = models.JSONField(default=list, blank=True)
    responsibilities = models.JSONField(default=list, blank=True)
    benefits = models.JSONField(default=list, blank=True)
    posted_date = models.DateField(default=timezone.localdate)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ['-posted_date', '-id']

    def __str__(self):
        return f"{self.title} ({self.department or '-'})"

    def to_dict(self, detail=False):
        data = {
            'id': self.id,
            'title': self.title,
            'department': self.department,
            'location': self.location,
            'type': self.employment_type,
            'description': self.description,
            'requirements': list(self.requirements or []),
            'postedDate': self.posted_date.isoformat(),
        }
        if detail:
            data['responsibilities'] = list(self.responsibilities or [])
            data['benefits'] = list(self.benefits or [])
        return data


class Candidate(models.Model):
    """
    A person applying for jobs. Rows are created (or refreshed, keyed by email)
    only by resume intake.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=64, blank=True)
    skills = models.JSONField(default=list, blank=True)
    experience = models.TextField(blank=True)
    education = models.JSONField(default=list, blank=True)
    resume_url = models.CharField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} <{self.email}>"

    def to_dict(self):
        return {
            'id': str(self.id),
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'skills': list(self.skills or []),
            'experience': self.experience,
            'resumeUrl': self.resume_url,
        }


STATUS_SUBMITTED = 'submitted'
STATUS_INTERVIEW_SCHEDULED = 'interview_scheduled'
STATUS_REJECTED = 'rejected'
STATUS_HIRED = 'hired'

APPLICATION_STATUS = (
    (STATUS_SUBMITTED, 'Submitted'),
    (STATUS_INTERVIEW_SCHEDULED, 'Interview Scheduled'),
    (STATUS_REJECTED, 'Rejected'),
    (STATUS_HIRED, 'Hired'),
)


class Application(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='applications')
    candidate = models.ForeignKey(Candidate, on_delete=models.CASCADE, related_name='applications')
    resume_url = models.CharField(max_length=500, blank=True)
    cover_letter = models.TextField(blank=True)
    status = models.CharField(max_length=32, choices=APPLICATION_STATUS, default=STATUS_SUBMITTED)
    applied_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-applied_at']

    def __str__(self):
        return f"{self.candidate.name} -> {self.job.title} ({self.get_status_display()})"

    def to_dict(self, include_job=False):
        data = {
            'id': str(self.id),
            'jobId': self.job_id,
            'candidateId': str(self.candidate_id),
            'resumeUrl': self.resume_url,
            'coverLetter': self.cover_letter,
            'status': self.get_status_display(),
            'appliedAt': self.applied_at.isoformat(),
        }
        if include_job:
            data['position'] = self.job.to_dict()
        return data
